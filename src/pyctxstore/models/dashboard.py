"""Dashboard layout records."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pyctxstore.collection import IdentityCollection
from pyctxstore.models._base import SettingsModel


class GridTileConfig(SettingsModel):
    """One tile on a dashboard screen grid."""

    id: str = ""
    name: str = ""
    value: str = ""
    index: int = 0
    typeid: int = 0
    width: str | None = None
    height: str | None = None
    color: str | None = None
    cols: int = 1
    rows: int = 1
    options: Any = Field(default=None, alias="config")


class DashboardScreenSetting(SettingsModel):
    id: str = ""
    name: str = ""
    tiles: tuple[GridTileConfig, ...] = Field(default_factory=tuple)

    def tile(self, tile_id: str) -> GridTileConfig | None:
        return IdentityCollection(list(self.tiles)).find_by_id(tile_id)


class DashboardSettings(SettingsModel):
    """Ordered screens of a user's dashboard.

    Frozen like every settings record; the ``with_*``/``without_*`` helpers
    return new settings objects.
    """

    screens: tuple[DashboardScreenSetting, ...] = Field(default_factory=tuple)

    @property
    def screen_names(self) -> list[str]:
        return [screen.name for screen in self.screens]

    def screen(self, screen_id: str) -> DashboardScreenSetting | None:
        return IdentityCollection(list(self.screens)).find_by_id(screen_id)

    def with_screen(self, screen: DashboardScreenSetting, index: int | None = None) -> DashboardSettings:
        screens = IdentityCollection(list(self.screens), name="screens")
        screens.add(screen, index)
        return self.model_copy(update={"screens": tuple(screens)})

    def without_screen(self, screen_id: str) -> DashboardSettings:
        screens = IdentityCollection(list(self.screens), name="screens")
        found = screens.find_by_id(screen_id)
        if found is None or not screens.remove(found):
            return self
        return self.model_copy(update={"screens": tuple(screens)})

    def with_screens_swapped(self, source_id: str, dest_id: str) -> DashboardSettings:
        """Swap two screens; raises ``RecordNotFoundError`` for unknown ids."""
        screens = IdentityCollection(list(self.screens), name="screens")
        screens.swap_by_id(source_id, dest_id)
        return self.model_copy(update={"screens": tuple(screens)})
