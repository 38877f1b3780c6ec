"""Known event channels and the value-change payload.

Producers (collections, context holders) publish on these channels;
consumers (UI panels, loggers, persistence adapters) subscribe to them.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from pyctxstore._time import EpochMillis, now_ms

ValueT = TypeVar("ValueT")


class Channel(StrEnum):
    CONTEXT_CHANGED = "context.changed"
    COLLECTION_CHANGED = "collection.changed"
    ENTITY_CHANGED = "entity.changed"
    LOCK = "lock"


class ValueChange(BaseModel, Generic[ValueT]):
    """Structured change notification with contextual id and name."""

    model_config = ConfigDict(frozen=True)

    id: Any = Field(..., description="Identity of the changed entity")
    name: str = Field(..., description="Field or collection name that changed")
    value: ValueT
    type: str = Field(default="", description="Kind of change, e.g. 'add' or 'remove'")
    date: EpochMillis = Field(default_factory=now_ms)


def create_value_change(
    id: Any,
    name: str,
    value: ValueT,
    type: str | None = None,
    date: int | None = None,
) -> ValueChange[ValueT]:
    return ValueChange(
        id=id,
        name=name,
        value=value,
        type=type or "",
        date=now_ms() if date is None else date,
    )
