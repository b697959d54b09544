"""pymodkit - compose namespaced state modules and keep them bound to views."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pymodkit")
except PackageNotFoundError:
    __version__ = "0+local"
from pymodkit._tokens import fresh_token
from pymodkit.compose import build_module, merge_section
from pymodkit.config import ModKitConfig
from pymodkit.exceptions import ModKitError, ModuleDefinitionError, ModuleRegistrationError
from pymodkit.lifecycle import Computed, LifecyclePhase, NavigationContext, Page, PageHooks, PageView, build_bindings
from pymodkit.models import (
    CollectionDescriptor,
    ComplexTypeDescriptor,
    ComposedModule,
    ModuleDefinition,
    Section,
    SectionKind,
)
from pymodkit.state import ActionContext, ModuleStore, StoreEvent, StoreEventKind

__all__ = [
    "__version__",
    "ActionContext",
    "CollectionDescriptor",
    "ComplexTypeDescriptor",
    "ComposedModule",
    "Computed",
    "LifecyclePhase",
    "ModKitConfig",
    "ModKitError",
    "ModuleDefinition",
    "ModuleDefinitionError",
    "ModuleRegistrationError",
    "ModuleStore",
    "NavigationContext",
    "Page",
    "PageHooks",
    "PageView",
    "Section",
    "SectionKind",
    "StoreEvent",
    "StoreEventKind",
    "build_bindings",
    "build_module",
    "fresh_token",
    "merge_section",
]
