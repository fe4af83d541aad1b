"""Initial schema: users, leads, activity_logs, company

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17 09:00:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

USER_ROLES = ('ADMIN', 'SALES', 'MARKETING')
LEAD_STATUSES = ('NEW', 'IN_PROGRESS', 'CLOSED')
QUOTATION_STATUSES = ('PENDING', 'SENT', 'ACCEPTED', 'REJECTED')
ACTIVITY_ACTIONS = ('CREATED', 'UPDATED')


def upgrade():
    user_role_enum = postgresql.ENUM(*USER_ROLES, name='userrole', create_type=False)
    user_role_enum.create(op.get_bind(), checkfirst=True)

    lead_status_enum = postgresql.ENUM(*LEAD_STATUSES, name='leadstatus', create_type=False)
    lead_status_enum.create(op.get_bind(), checkfirst=True)

    quotation_status_enum = postgresql.ENUM(*QUOTATION_STATUSES, name='quotationstatus', create_type=False)
    quotation_status_enum.create(op.get_bind(), checkfirst=True)

    activity_action_enum = postgresql.ENUM(*ACTIVITY_ACTIONS, name='activityaction', create_type=False)
    activity_action_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', user_role_enum, nullable=False, server_default='SALES'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text("(now() at time zone 'utc')")),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text("(now() at time zone 'utc')")),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'leads',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('rfq', sa.String(length=255), nullable=True),
        sa.Column('message_id', sa.String(length=255), nullable=False),
        sa.Column('thread_id', sa.String(length=255), nullable=False),
        sa.Column('marketing_user', sa.String(length=255), nullable=False),
        sa.Column('subject', sa.String(length=500), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('website', sa.String(length=500), nullable=True),
        sa.Column('thread_links', sa.JSON(), nullable=True),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('contact_no', sa.String(length=50), nullable=False),
        sa.Column('country', sa.String(length=100), nullable=False),
        sa.Column('status', lead_status_enum, nullable=False, server_default='NEW'),
        sa.Column('quotation_status', quotation_status_enum, nullable=False, server_default='PENDING'),
        sa.Column('form_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('form_filled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('deal_won', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('probable_customer', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('response_sheet', sa.Text(), nullable=True),
        sa.Column('followup', sa.Text(), nullable=True),
        sa.Column('remark', sa.Text(), nullable=True),
        sa.Column('review', sa.Text(), nullable=True),
        sa.Column('call_followup', sa.DateTime(), nullable=True),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_leads_email'), 'leads', ['email'], unique=False)
    op.create_index(op.f('ix_leads_country'), 'leads', ['country'], unique=False)
    op.create_index(op.f('ix_leads_status'), 'leads', ['status'], unique=False)
    op.create_index(op.f('ix_leads_created_at'), 'leads', ['created_at'], unique=False)

    op.create_table(
        'activity_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('lead_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('action', activity_action_enum, nullable=False),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['lead_id'], ['leads.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_activity_logs_lead_id'), 'activity_logs', ['lead_id'], unique=False)
    op.create_index(op.f('ix_activity_logs_user_id'), 'activity_logs', ['user_id'], unique=False)
    op.create_index(op.f('ix_activity_logs_timestamp'), 'activity_logs', ['timestamp'], unique=False)

    op.create_table(
        'company',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('logo', sa.Text(), nullable=True),
        sa.Column('primary_color', sa.String(length=20), nullable=False),
        sa.Column('accent_color', sa.String(length=20), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade():
    op.drop_table('company')

    op.drop_index(op.f('ix_activity_logs_timestamp'), table_name='activity_logs')
    op.drop_index(op.f('ix_activity_logs_user_id'), table_name='activity_logs')
    op.drop_index(op.f('ix_activity_logs_lead_id'), table_name='activity_logs')
    op.drop_table('activity_logs')

    op.drop_index(op.f('ix_leads_created_at'), table_name='leads')
    op.drop_index(op.f('ix_leads_status'), table_name='leads')
    op.drop_index(op.f('ix_leads_country'), table_name='leads')
    op.drop_index(op.f('ix_leads_email'), table_name='leads')
    op.drop_table('leads')

    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')

    # Drop enums
    for name, values in (
        ('activityaction', ACTIVITY_ACTIONS),
        ('quotationstatus', QUOTATION_STATUSES),
        ('leadstatus', LEAD_STATUSES),
        ('userrole', USER_ROLES),
    ):
        postgresql.ENUM(*values, name=name).drop(op.get_bind(), checkfirst=True)
