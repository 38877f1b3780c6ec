"""Custom exception hierarchy for pyctxstore."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pyctxstore.events.bus import HandlerFault


class CtxStoreError(Exception):
    """Base exception for all pyctxstore errors."""


class CtxStoreConfigError(CtxStoreError):
    """Invalid or missing configuration."""


class RecordNotFoundError(CtxStoreError, LookupError):
    """A record required by the caller is not in the collection.

    Plain lookups such as ``find_by_id`` return ``None`` instead; this is
    only raised by the ``must_*`` helpers and by operations that cannot
    proceed without the record.
    """

    def __init__(self, message: str, *, identity: Any = None) -> None:
        self.identity = identity
        super().__init__(message)


class UnknownFieldError(CtxStoreError, KeyError):
    """An update names a cell the store does not declare."""

    def __init__(self, field: str, *, store: str = "") -> None:
        self.field = field
        self.store = store
        super().__init__(f"{store or 'ContextStore'} has no field {field!r}")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0])


class InvalidToggleTypeError(CtxStoreError, TypeError):
    """Toggle requested on a cell whose value is not a ``bool``."""

    def __init__(self, field: Any, value: Any) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Cannot toggle {field!r}: value {value!r} is {type(value).__name__}, not bool")


class HandlerFaultError(CtxStoreError):
    """One or more event handlers raised during ``emit``.

    Only raised when the bus is configured with ``raise_handler_faults``;
    every handler has already run by the time this propagates.
    """

    def __init__(self, channel: str, faults: Sequence[HandlerFault]) -> None:
        self.channel = channel
        self.faults = list(faults)
        super().__init__(f"{len(self.faults)} handler(s) failed on channel {channel!r}")
