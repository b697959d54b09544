"""State/store layer.

The module store is the single shared mutable resource: it owns every live
module instance and is passed explicitly to whatever needs it.
"""

from pymodkit.state.events import StoreEvent, StoreEventKind
from pymodkit.state.store import ActionContext, ModuleStore

__all__ = ["ActionContext", "ModuleStore", "StoreEvent", "StoreEventKind"]
