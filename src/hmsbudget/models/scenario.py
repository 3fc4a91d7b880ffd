"""What-if scenarios expressed as sparse toggle overrides."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import ConfigDict, field_serializer, field_validator
from sqlmodel import Field, SQLModel


def item_key(item_id: Any) -> str:
    """Scenario maps are keyed by the string form of the item id."""
    return str(item_id)


class Scenario(SQLModel):
    """Named diff against the items' default ``is_active`` state.

    Items absent from ``item_states`` keep their default; keys for items that
    no longer exist are ignored at evaluation time. ``item_states`` is a
    read-only mapping; use :meth:`with_override` to derive a new scenario.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None)
    item_states: Mapping[str, bool] = Field(default_factory=dict)

    @field_validator("item_states", mode="before")
    @classmethod
    def _stringify_keys(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {item_key(key): state for key, state in value.items()}
        return value

    @field_validator("item_states", mode="after")
    @classmethod
    def _read_only(cls, value: Mapping[str, bool]) -> Mapping[str, bool]:
        return MappingProxyType(dict(value))

    @field_serializer("item_states")
    def _dump_states(self, value: Mapping[str, bool]) -> dict[str, bool]:
        return dict(value)

    def state_for(self, item_id: Any) -> Optional[bool]:
        return self.item_states.get(item_key(item_id))

    def with_override(self, item_id: Any, state: bool) -> "Scenario":
        states = dict(self.item_states)
        states[item_key(item_id)] = state
        return self._replace_states(states)

    def without_override(self, item_id: Any) -> "Scenario":
        states = dict(self.item_states)
        states.pop(item_key(item_id), None)
        return self._replace_states(states)

    def _replace_states(self, states: dict[str, bool]) -> "Scenario":
        data = self.model_dump()
        data["item_states"] = states
        return type(self).model_validate(data)
