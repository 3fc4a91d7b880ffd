"""Budget category definitions."""

from __future__ import annotations

from typing import Optional

from pydantic import ConfigDict
from sqlmodel import Field, SQLModel

from .enums import CategoryType


class Category(SQLModel):
    """Classifies budget items as expense, debt or subscription outflows."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = Field(min_length=1, max_length=50)
    type: CategoryType
    icon: Optional[str] = Field(default=None, max_length=32)
    color: Optional[str] = Field(default=None, max_length=7)

    def with_display(self, *, icon: Optional[str] = None, color: Optional[str] = None) -> "Category":
        """Return a copy with new display metadata; name and type never change."""

        data = self.model_dump()
        if icon is not None:
            data["icon"] = icon
        if color is not None:
            data["color"] = color
        return type(self).model_validate(data)
