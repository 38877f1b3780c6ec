"""Base model for persisted settings records.

Settings records are written and read by external persistence and
transport collaborators that use camelCase keys, so every model here:

* maps camelCase keys to snake_case fields via ``alias_generator=to_camel``;
* accepts either spelling on input (``populate_by_name``);
* ignores unknown keys so older clients can read newer payloads;
* is frozen, because records end up inside immutable context cells.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SettingsModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_payload(self) -> dict[str, Any]:
        """Dump with camelCase keys for persistence collaborators."""
        return self.model_dump(mode="json", by_alias=True)
