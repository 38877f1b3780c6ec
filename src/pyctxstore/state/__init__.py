"""Context state layer.

Timestamped cells, copy-on-write stores built from them, and the holder
that owns the current snapshot.
"""

from pyctxstore.state.cells import ContextValueCell, latest, set_value, toggle_boolean
from pyctxstore.state.context import (
    ContextStore,
    apply_field_update,
    merge_fields,
    set_field,
    toggle_field,
    with_field,
)
from pyctxstore.state.holder import ContextHolder

__all__ = [
    "ContextHolder",
    "ContextStore",
    "ContextValueCell",
    "apply_field_update",
    "latest",
    "merge_fields",
    "set_field",
    "set_value",
    "toggle_boolean",
    "toggle_field",
    "with_field",
]
