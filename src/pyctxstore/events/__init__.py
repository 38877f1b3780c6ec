"""Event layer.

Producers of context and collection changes publish here; consumers
subscribe without ever touching the store directly.
"""

from pyctxstore.events.bus import (
    EventBus,
    HandlerFault,
    Signal,
    collection_changed_signal,
    context_changed_signal,
    entity_changed_signal,
    lock_signal,
)
from pyctxstore.events.channels import Channel, ValueChange, create_value_change

__all__ = [
    "Channel",
    "EventBus",
    "HandlerFault",
    "Signal",
    "ValueChange",
    "collection_changed_signal",
    "context_changed_signal",
    "create_value_change",
    "entity_changed_signal",
    "lock_signal",
]
