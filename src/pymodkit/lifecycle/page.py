"""Keep one live module instance bound to the view that depends on it.

A :class:`Page` is the route-level definition: a module, the fixed name it
is registered under, and optional user hooks.  Each mounted view instance
gets its own :class:`PageView`, which drives the protocol through the view
host's hooks::

    page = Page(store, "jobs", definition=definition)
    view = page.view()
    await view.pre_fetch(NavigationContext(current_route=route))
    view.created()
    view.mounted()
    ...
    view.destroyed()

Whether a registered instance may be reused or released is decided by a
liveness probe: a fresh token is committed through the module's validation
mutation and read straight back.  A matching read-back means the instance
is registered and wired to this module's mutations.  Each view remembers
the last token it read back (its claim); on teardown the instance must
still carry that claim, otherwise another view has taken the module over
and it is left alone.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pymodkit._tokens import fresh_token
from pymodkit.compose.builder import build_module
from pymodkit.config import ModKitConfig
from pymodkit.lifecycle.bindings import build_bindings
from pymodkit.models.module import ComposedModule, ModuleDefinition
from pymodkit.state.store import ModuleStore

_logger = logging.getLogger(__name__)


class LifecyclePhase(StrEnum):
    UNBOUND = "unbound"
    PROBING = "probing"
    REUSING = "reusing"
    REGISTERING = "registering"
    INITIALIZING = "initializing"
    BOUND = "bound"
    UNBINDING = "unbinding"


@dataclass(frozen=True)
class NavigationContext:
    """What the router hands to ``pre_fetch``."""

    current_route: Any = None
    previous_route: Any = None
    redirect: Callable[..., Any] | None = None

    def as_payload(self) -> dict[str, Any]:
        """Payload of the ``initialize`` action."""
        return {"route": self.current_route, "from": self.previous_route, "next": self.redirect}


@dataclass(frozen=True)
class PageHooks:
    """Optional user hooks; each receives the :class:`PageView` first."""

    pre_fetch: Callable[..., Any] | None = None
    created: Callable[..., Any] | None = None
    mounted: Callable[..., Any] | None = None
    destroyed: Callable[..., Any] | None = None
    setup: Callable[..., Any] | None = None


class Page:
    """A module bound to a fixed name, plus the hooks of the views using it."""

    def __init__(
        self,
        store: ModuleStore,
        module_name: str,
        module: ComposedModule | None = None,
        *,
        definition: ModuleDefinition | None = None,
        hooks: PageHooks | None = None,
        config: ModKitConfig | None = None,
        token_factory: Callable[[], Any] = fresh_token,
    ) -> None:
        self.store = store
        self.module_name = module_name
        self.config = config or store.config
        if module is None:
            if definition is None:
                raise TypeError("Page needs a module or a definition")
            module = build_module(definition, config=self.config)
        self.module = module
        self.definition = definition
        self.hooks = hooks or PageHooks()
        self._token_factory = token_factory

    def path(self, key: str) -> str:
        return self.config.path(self.module_name, key)

    def view(self) -> PageView:
        return PageView(self)

    def probe(self, *, expected: Any = None) -> Any:
        """Run the liveness probe and return the token read back, or ``None``.

        With *expected*, the registered instance must still carry that token
        before a new one is written; a different value means another view
        has probed or re-registered it since.
        """
        field = self.config.validation_field
        path = self.path(field)
        if field not in self.module.mutations:
            return None
        if not (self.store.has_module(self.module_name) and self.store.has_mutation(path)):
            _logger.debug("Probe %s: module not registered", self.module_name)
            return None

        if expected is not None:
            current = self.store.state[self.module_name].get(field)
            if current != expected:
                _logger.debug("Probe %s: claimed by another view", self.module_name)
                return None

        token = self._token_factory()
        self.store.commit(path, token)
        if self.store.state[self.module_name].get(field) == token:
            _logger.debug("Probe %s: live", self.module_name)
            return token
        _logger.debug("Probe %s: stale instance", self.module_name)
        return None

    def clear_pending_fetch(self) -> None:
        state = self.store.state.get(self.module_name)
        pending = state.get(self.config.fetched_field) if state is not None else None
        cancel = getattr(pending, "cancel", None)
        if callable(cancel):
            cancel()
            self.store.commit(self.path(self.config.fetched_field), False)


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class PageView:
    """Lifecycle of one view instance of a :class:`Page`."""

    def __init__(self, page: Page) -> None:
        self.page = page
        self.phase = LifecyclePhase.UNBOUND
        self._claim: Any = None

    @property
    def claim(self) -> Any:
        """Last token this view wrote and read back, if any."""
        return self._claim

    async def pre_fetch(self, context: NavigationContext | None = None) -> None:
        """Reuse or register the module, then run ``initialize``.

        Exceptions from ``initialize`` or the user hook propagate; the fetch
        flag then stays unset.  A reused instance is handed back to the view
        that held it before, a freshly registered one is unregistered.
        """
        page = self.page
        context = context or NavigationContext()
        fetched_path = page.path(page.config.fetched_field)

        self.phase = LifecyclePhase.PROBING
        previous_claim = self._read_validation()
        token = page.probe()
        registered = token is None
        if registered:
            self.phase = LifecyclePhase.REGISTERING
            page.store.register_module(page.module_name, page.module)
            token = page.probe()
        else:
            self.phase = LifecyclePhase.REUSING
            _logger.debug("Reusing module %s", page.module_name)
        self._claim = token
        page.clear_pending_fetch()
        page.store.commit(fetched_path, False)

        self.phase = LifecyclePhase.INITIALIZING
        try:
            await page.store.dispatch(page.path("initialize"), context.as_payload())
            if page.hooks.pre_fetch is not None:
                await _maybe_await(page.hooks.pre_fetch(self, context))
        except Exception:
            _logger.debug("Initialize of module %s failed", page.module_name, exc_info=True)
            self._release(registered, previous_claim)
            raise
        page.store.commit(fetched_path, True)
        _logger.debug("Module %s initialized", page.module_name)

    def _read_validation(self) -> Any:
        state = self.page.store.state.get(self.page.module_name)
        return state.get(self.page.config.validation_field) if state is not None else None

    def _release(self, registered: bool, previous_claim: Any) -> None:
        """Undo this view's claim after a failed ``pre_fetch``."""
        page = self.page
        claim, self._claim = self._claim, None
        self.phase = LifecyclePhase.UNBOUND
        if claim is None or self._read_validation() != claim:
            _logger.debug("Module %s taken over during failed initialize", page.module_name)
            return
        if registered:
            page.store.unregister_module(page.module_name)
        else:
            page.store.commit(page.path(page.config.validation_field), previous_claim)

    def created(self) -> None:
        if self.page.hooks.created is not None:
            self.page.hooks.created(self)

    def mounted(self) -> None:
        page = self.page
        page.store.commit(page.path(page.config.fetched_field), False)
        self.phase = LifecyclePhase.BOUND
        if page.hooks.mounted is not None:
            page.hooks.mounted(self)

    def destroyed(self) -> None:
        page = self.page
        self.phase = LifecyclePhase.UNBINDING
        if page.hooks.destroyed is not None:
            page.hooks.destroyed(self)
        if self._claim is not None and page.probe(expected=self._claim) is not None:
            page.store.unregister_module(page.module_name)
        else:
            _logger.debug("Module %s left to its current owner", page.module_name)
        self._claim = None
        self.phase = LifecyclePhase.UNBOUND

    def setup(self) -> dict[str, Any]:
        """Bindings for the view, extended by the user ``setup`` hook."""
        page = self.page
        bindings: dict[str, Any] = {}
        if page.definition is not None:
            bindings = build_bindings(page.store, page.module_name, page.definition, page.config)
        if page.hooks.setup is not None:
            bindings.update(page.hooks.setup(self, bindings) or {})
        return bindings
