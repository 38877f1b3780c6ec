"""Concrete settings models and context stores."""

from pyctxstore.models._base import SettingsModel
from pyctxstore.models.dashboard import DashboardScreenSetting, DashboardSettings, GridTileConfig
from pyctxstore.models.user_config import HeaderTickersConfig, HeaderTickersIndexConfig, UserConfigContext

__all__ = [
    "DashboardScreenSetting",
    "DashboardSettings",
    "GridTileConfig",
    "HeaderTickersConfig",
    "HeaderTickersIndexConfig",
    "SettingsModel",
    "UserConfigContext",
]
