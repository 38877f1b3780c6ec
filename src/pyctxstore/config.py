"""Store configuration for pyctxstore."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyctxstore.exceptions import CtxStoreConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class StoreConfig:
    """Behaviour switches shared by collections, counters and buses.

    Parameters
    ----------
    count_remove_attempts : bool
        When ``True`` an :class:`~pyctxstore.collection.IdentityCollection`
        counts every ``remove`` call on its statistics counter, whether or
        not a record was removed.  When ``False`` only actual removals are
        counted.
    raise_handler_faults : bool
        When ``True`` an :class:`~pyctxstore.events.bus.EventBus` raises
        :class:`~pyctxstore.exceptions.HandlerFaultError` after running all
        handlers if any of them failed.  When ``False`` faults are only
        logged and returned.
    one_line_reports : bool
        Default rendering mode for
        :meth:`~pyctxstore.statistics.StatisticsCounter.report`.
    """

    count_remove_attempts: bool = True
    raise_handler_faults: bool = False
    one_line_reports: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> StoreConfig:
        """Create configuration from ``CTXSTORE_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        CtxStoreConfigError
            If an override names a field this class does not have.
        """
        env = os.environ

        _ENV_BOOL_MAP = {
            "CTXSTORE_COUNT_REMOVE_ATTEMPTS": ("count_remove_attempts", True),
            "CTXSTORE_RAISE_HANDLER_FAULTS": ("raise_handler_faults", False),
            "CTXSTORE_ONE_LINE_REPORTS": ("one_line_reports", False),
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, (field_name, default) in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), default)

        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise CtxStoreConfigError(f"Unknown StoreConfig option(s): {', '.join(unknown)}")

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
