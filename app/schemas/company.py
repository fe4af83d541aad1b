from typing import ClassVar, FrozenSet, Optional

from pydantic import Field

from app.schemas.base import CamelModel, PartialUpdate

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class CompanyOut(CamelModel):
    name: str
    logo: Optional[str] = None
    primary_color: str
    accent_color: str


class CompanyUpdate(PartialUpdate):
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset({"name", "primary_color", "accent_color"})

    name: Optional[str] = Field(None, min_length=1)
    logo: Optional[str] = None
    primary_color: Optional[str] = Field(None, pattern=HEX_COLOR)
    accent_color: Optional[str] = Field(None, pattern=HEX_COLOR)
