"""pyctxstore - Observable in-process configuration and state store."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyctxstore")
except PackageNotFoundError:
    __version__ = "0+local"
from pyctxstore.collection import HasIdentity, IdentityCollection, identity_of
from pyctxstore.config import StoreConfig
from pyctxstore.events import (
    Channel,
    EventBus,
    HandlerFault,
    Signal,
    ValueChange,
    collection_changed_signal,
    context_changed_signal,
    create_value_change,
    entity_changed_signal,
    lock_signal,
)
from pyctxstore.exceptions import (
    CtxStoreConfigError,
    CtxStoreError,
    HandlerFaultError,
    InvalidToggleTypeError,
    RecordNotFoundError,
    UnknownFieldError,
)
from pyctxstore.state import (
    ContextHolder,
    ContextStore,
    ContextValueCell,
    apply_field_update,
    latest,
    merge_fields,
    set_field,
    set_value,
    toggle_boolean,
    toggle_field,
    with_field,
)
from pyctxstore.statistics import StatisticsCounter

__all__ = [
    "__version__",
    "Channel",
    "ContextHolder",
    "ContextStore",
    "ContextValueCell",
    "CtxStoreConfigError",
    "CtxStoreError",
    "EventBus",
    "HandlerFault",
    "HandlerFaultError",
    "HasIdentity",
    "IdentityCollection",
    "InvalidToggleTypeError",
    "RecordNotFoundError",
    "Signal",
    "StatisticsCounter",
    "StoreConfig",
    "UnknownFieldError",
    "ValueChange",
    "apply_field_update",
    "collection_changed_signal",
    "context_changed_signal",
    "create_value_change",
    "entity_changed_signal",
    "identity_of",
    "latest",
    "lock_signal",
    "merge_fields",
    "set_field",
    "set_value",
    "toggle_boolean",
    "toggle_field",
    "with_field",
]
