"""Shared pydantic configuration for API schemas."""

from datetime import datetime, timezone
from typing import Annotated, ClassVar, FrozenSet

from pydantic import BaseModel, ConfigDict, PlainSerializer, model_validator
from pydantic.alias_generators import to_camel


def _as_utc(value: datetime) -> datetime:
    # Stored values are naive UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, PlainSerializer(_as_utc, return_type=datetime)]


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase on the wire.

    Both spellings are accepted on input; responses are serialized by alias.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PartialUpdate(CamelModel):
    """Base for PATCH payloads.

    Every field is optional, but fields listed in ``NON_NULLABLE`` may not be
    sent as an explicit ``null``.
    """
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_nulls(self):
        for name in self.model_fields_set & self.NON_NULLABLE:
            if getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} may not be null")
        return self

    def changes(self) -> dict:
        """Submitted fields only, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)
