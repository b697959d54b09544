"""View lifecycle synchronization and view bindings."""

from pymodkit.lifecycle.bindings import Computed, build_bindings
from pymodkit.lifecycle.page import LifecyclePhase, NavigationContext, Page, PageHooks, PageView

__all__ = ["Computed", "LifecyclePhase", "NavigationContext", "Page", "PageHooks", "PageView", "build_bindings"]
