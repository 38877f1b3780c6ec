"""Synchronous, channel-scoped publish/subscribe.

Handlers run in-line on the caller's turn, in subscription order.  A
handler that raises does not stop the remaining handlers: the failure is
recorded as a :class:`HandlerFault`, logged, passed to the optional
``on_fault`` callback and, when the bus is configured to do so, re-raised
as a single :class:`~pyctxstore.exceptions.HandlerFaultError` once every
handler has run.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pyctxstore.events.channels import Channel, ValueChange
from pyctxstore.exceptions import HandlerFaultError

if TYPE_CHECKING:
    from pyctxstore.config import StoreConfig

_logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT")

Handler = Callable[[Any], Any]


@dataclasses.dataclass(frozen=True)
class HandlerFault:
    """A handler that raised while a payload was being emitted."""

    channel: str
    handler: Handler
    error: Exception


def _key(channel: str) -> str:
    # StrEnum members stringify to their value.
    return str(channel)


class EventBus:
    """String-keyed map of handler lists.

    Not safe for uncoordinated concurrent mutation; a bus belongs to one
    logical owner.
    """

    def __init__(
        self,
        *,
        raise_handler_faults: bool = False,
        on_fault: Callable[[HandlerFault], None] | None = None,
    ) -> None:
        self._handlers: dict[str, list[Handler]] = {}
        self._raise_handler_faults = raise_handler_faults
        self._on_fault = on_fault

    @classmethod
    def from_config(
        cls,
        config: StoreConfig,
        *,
        on_fault: Callable[[HandlerFault], None] | None = None,
    ) -> EventBus:
        return cls(raise_handler_faults=config.raise_handler_faults, on_fault=on_fault)

    def on(self, channel: str, handler: Handler) -> None:
        """Register *handler*; the same handler may be registered twice."""
        self._handlers.setdefault(_key(channel), []).append(handler)

    def off(self, channel: str, handler: Handler) -> bool:
        """Unregister the earliest registration of *handler*.

        Returns ``False`` (and changes nothing) when it was not registered.
        """
        key = _key(channel)
        handlers = self._handlers.get(key)
        if not handlers:
            return False
        try:
            handlers.remove(handler)
        except ValueError:
            return False
        if not handlers:
            del self._handlers[key]
        return True

    def handlers(self, channel: str) -> list[Handler]:
        return list(self._handlers.get(_key(channel), []))

    def channels(self) -> list[str]:
        return list(self._handlers)

    def clear(self, channel: str | None = None) -> None:
        if channel is None:
            self._handlers.clear()
        else:
            self._handlers.pop(_key(channel), None)

    def emit(self, channel: str, payload: Any = None) -> int:
        """Call every handler registered for *channel* with *payload*.

        Handlers added or removed by a running handler take effect on the
        next ``emit``.  Returns the number of handlers invoked.
        """
        key = _key(channel)
        handlers = list(self._handlers.get(key, []))
        if not handlers:
            return 0

        faults: list[HandlerFault] = []
        for handler in handlers:
            try:
                handler(payload)
            except Exception as err:
                _logger.warning("Event handler %r failed on channel=%s", handler, key, exc_info=True)
                fault = HandlerFault(channel=key, handler=handler, error=err)
                faults.append(fault)
                self._report(fault)

        _logger.debug("Emitted channel=%s handlers=%d faults=%d", key, len(handlers), len(faults))
        if faults and self._raise_handler_faults:
            raise HandlerFaultError(key, faults)
        return len(handlers)

    def _report(self, fault: HandlerFault) -> None:
        if self._on_fault is None:
            return
        try:
            self._on_fault(fault)
        except Exception:
            _logger.debug("on_fault callback failed", exc_info=True)


class Signal(Generic[PayloadT]):
    """A single channel of an :class:`EventBus`.

    Signals are constructed and passed explicitly.  Without a *bus* the
    signal owns a private one.
    """

    def __init__(self, channel: str, bus: EventBus | None = None) -> None:
        self._channel = _key(channel)
        self._bus = bus if bus is not None else EventBus()

    @property
    def channel(self) -> str:
        return self._channel

    @property
    def bus(self) -> EventBus:
        return self._bus

    def on(self, handler: Callable[[PayloadT], Any]) -> None:
        self._bus.on(self._channel, handler)

    def off(self, handler: Callable[[PayloadT], Any]) -> bool:
        return self._bus.off(self._channel, handler)

    def emit(self, payload: PayloadT) -> int:
        return self._bus.emit(self._channel, payload)

    def __repr__(self) -> str:
        return f"Signal(channel={self._channel!r})"


def lock_signal(bus: EventBus | None = None) -> Signal[bool]:
    return Signal(Channel.LOCK, bus)


def entity_changed_signal(bus: EventBus | None = None) -> Signal[ValueChange[Any]]:
    return Signal(Channel.ENTITY_CHANGED, bus)


def context_changed_signal(bus: EventBus | None = None) -> Signal[ValueChange[Any]]:
    return Signal(Channel.CONTEXT_CHANGED, bus)


def collection_changed_signal(bus: EventBus | None = None) -> Signal[ValueChange[Any]]:
    return Signal(Channel.COLLECTION_CHANGED, bus)
