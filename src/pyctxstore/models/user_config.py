"""User configuration context.

The per-user chart and dashboard preferences, kept as a
:class:`~pyctxstore.state.context.ContextStore` so each preference carries
its own last-updated timestamp.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from pyctxstore.models._base import SettingsModel
from pyctxstore.models.dashboard import DashboardScreenSetting, DashboardSettings
from pyctxstore.state.cells import ContextValueCell
from pyctxstore.state.context import ContextStore, set_field, toggle_field


class HeaderTickersIndexConfig(SettingsModel):
    show_asset: bool = True
    show_crypto: bool = True


class HeaderTickersConfig(SettingsModel):
    tickers: tuple[str, ...] = Field(default_factory=tuple)


class UserConfigContext(ContextStore):
    """Closed set of user preferences, one cell each."""

    _DEFAULTS: ClassVar[dict[str, Any]] = {
        "custom_data": "",
        "use_minus_eight": True,
        "open_first_plot": True,
        "hide_tooltips": False,
        "hide_ticker_bar": False,
        "show_price_change_in_ticker_bar": False,
        "header_ticker_bar_index": HeaderTickersIndexConfig(),
        "header_ticker_bar_user": HeaderTickersConfig(),
        "chart_color_up": "#00FF00",
        "chart_color_down": "#FF0000",
        "dashboards": DashboardSettings(),
    }

    custom_data: ContextValueCell
    use_minus_eight: ContextValueCell
    open_first_plot: ContextValueCell
    hide_tooltips: ContextValueCell
    hide_ticker_bar: ContextValueCell
    show_price_change_in_ticker_bar: ContextValueCell
    header_ticker_bar_index: ContextValueCell
    header_ticker_bar_user: ContextValueCell
    chart_color_up: ContextValueCell
    chart_color_down: ContextValueCell
    dashboards: ContextValueCell

    def toggle_use_minus_eight(self, timestamp: Any = None) -> UserConfigContext:
        return toggle_field(self, "use_minus_eight", timestamp)

    def toggle_open_first_plot(self, timestamp: Any = None) -> UserConfigContext:
        return toggle_field(self, "open_first_plot", timestamp)

    def toggle_hide_tooltips(self, timestamp: Any = None) -> UserConfigContext:
        return toggle_field(self, "hide_tooltips", timestamp)

    def toggle_hide_ticker_bar(self, timestamp: Any = None) -> UserConfigContext:
        return toggle_field(self, "hide_ticker_bar", timestamp)

    def toggle_show_price_change_in_ticker_bar(self, timestamp: Any = None) -> UserConfigContext:
        return toggle_field(self, "show_price_change_in_ticker_bar", timestamp)

    def with_chart_colors(self, up: str, down: str, timestamp: Any = None) -> UserConfigContext:
        store = set_field(self, "chart_color_up", up, timestamp)
        return set_field(store, "chart_color_down", down, timestamp)

    def with_user_tickers(self, tickers: list[str], timestamp: Any = None) -> UserConfigContext:
        return set_field(self, "header_ticker_bar_user", HeaderTickersConfig(tickers=tuple(tickers)), timestamp)

    def with_dashboard_screen(
        self,
        screen: DashboardScreenSetting,
        index: int | None = None,
        timestamp: Any = None,
    ) -> UserConfigContext:
        dashboards: DashboardSettings = self.dashboards.value
        return set_field(self, "dashboards", dashboards.with_screen(screen, index), timestamp)

    def without_dashboard_screen(self, screen_id: str, timestamp: Any = None) -> UserConfigContext:
        dashboards: DashboardSettings = self.dashboards.value
        updated = dashboards.without_screen(screen_id)
        if updated is dashboards:
            return self
        return set_field(self, "dashboards", updated, timestamp)
