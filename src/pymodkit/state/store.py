"""In-memory registry of namespaced module instances.

This is the only component allowed to hold live module state.  Every write
goes through a registered mutation addressed by ``"{module}/{mutation}"``;
readers get read-only views.
"""

from __future__ import annotations

import copy
import inspect
import itertools
import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from pymodkit.config import DEFAULT_CONFIG, ModKitConfig
from pymodkit.exceptions import ModuleRegistrationError
from pymodkit.models.module import ComposedModule
from pymodkit.state.events import StoreEvent, StoreEventKind

_logger = logging.getLogger(__name__)

Subscriber = Callable[[StoreEvent], None]


@dataclass(slots=True)
class _ModuleInstance:
    name: str
    module: ComposedModule
    state: dict[str, Any]
    instance_id: int


class _LocalGetters(Mapping[str, Any]):
    """Getters of one instance, evaluated on every access."""

    def __init__(self, instance: _ModuleInstance) -> None:
        self._instance = instance

    def __getitem__(self, key: str) -> Any:
        getter = self._instance.module.getters[key]
        return getter(MappingProxyType(self._instance.state), self)

    def __iter__(self) -> Iterator[str]:
        return iter(self._instance.module.getters)

    def __len__(self) -> int:
        return len(self._instance.module.getters)


class _GetterView(Mapping[str, Any]):
    """Namespaced getters across all registered modules."""

    def __init__(self, store: ModuleStore) -> None:
        self._store = store

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        resolved = self._store._resolve(path)  # noqa: SLF001
        return resolved is not None and resolved[1] in resolved[0].module.getters

    def __getitem__(self, path: str) -> Any:
        resolved = self._store._resolve(path)  # noqa: SLF001
        if resolved is None or resolved[1] not in resolved[0].module.getters:
            raise KeyError(path)
        instance, key = resolved
        return _LocalGetters(instance)[key]

    def __iter__(self) -> Iterator[str]:
        config = self._store.config
        for name, instance in self._store._modules.items():  # noqa: SLF001
            for key in instance.module.getters:
                yield config.path(name, key)

    def __len__(self) -> int:
        return sum(len(i.module.getters) for i in self._store._modules.values())  # noqa: SLF001


@dataclass(slots=True)
class ActionContext:
    """What an action sees: its module's state, getters, commit and dispatch.

    ``commit``/``dispatch`` are local to the module unless ``root=True``;
    they address the module by name, so a late call reaches whichever
    instance is registered at that moment.
    """

    store: ModuleStore
    module_name: str

    @property
    def state(self) -> Mapping[str, Any]:
        return self.store.state.get(self.module_name, MappingProxyType({}))

    @property
    def getters(self) -> Mapping[str, Any]:
        instance = self.store._modules.get(self.module_name)  # noqa: SLF001
        if instance is None:
            return MappingProxyType({})
        return _LocalGetters(instance)

    @property
    def root_state(self) -> Mapping[str, Mapping[str, Any]]:
        return self.store.state

    def _path(self, name: str, root: bool) -> str:
        return name if root else self.store.config.path(self.module_name, name)

    def commit(self, name: str, payload: Any = None, *, root: bool = False) -> None:
        self.store.commit(self._path(name, root), payload)

    async def dispatch(self, name: str, payload: Any = None, *, root: bool = False) -> Any:
        return await self.store.dispatch(self._path(name, root), payload)


class ModuleStore:
    """Registry of module instances with namespaced commit/dispatch/getters.

    Registering a name that is already registered replaces the previous
    instance, so at most one instance exists per name.
    """

    def __init__(self, *, config: ModKitConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG
        self._modules: dict[str, _ModuleInstance] = {}
        self._subscribers: list[Subscriber] = []
        self._instance_ids = itertools.count(1)

    @property
    def config(self) -> ModKitConfig:
        return self._config

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def register_module(self, name: str, module: ComposedModule) -> int:
        """Register a fresh instance of *module* under *name*.

        Returns the store-assigned instance id.
        """
        if not name or self._config.separator in name:
            raise ModuleRegistrationError(f"invalid module name {name!r}", module_name=name)
        if not isinstance(module, ComposedModule):
            raise ModuleRegistrationError(
                f"expected a ComposedModule, got {type(module).__name__}",
                module_name=name,
            )

        state = module.state.materialize()
        if not module.state.is_factory:
            # Plain-value state would otherwise leak between registrations.
            state = copy.deepcopy(state)

        replaced = self._modules.get(name)
        instance = _ModuleInstance(name=name, module=module, state=state, instance_id=next(self._instance_ids))
        self._modules[name] = instance
        if replaced is not None:
            _logger.debug(
                "Module %s instance=%d replaced instance=%d",
                name,
                instance.instance_id,
                replaced.instance_id,
            )
            self._notify(StoreEvent(kind=StoreEventKind.UNREGISTER, module=name, instance_id=replaced.instance_id))
        else:
            _logger.debug("Module %s registered instance=%d", name, instance.instance_id)
        self._notify(StoreEvent(kind=StoreEventKind.REGISTER, module=name, instance_id=instance.instance_id))
        return instance.instance_id

    def unregister_module(self, name: str) -> bool:
        instance = self._modules.pop(name, None)
        if instance is None:
            _logger.debug("Module %s not registered; nothing to unregister", name)
            return False
        _logger.debug("Module %s unregistered instance=%d", name, instance.instance_id)
        self._notify(StoreEvent(kind=StoreEventKind.UNREGISTER, module=name, instance_id=instance.instance_id))
        return True

    def has_module(self, name: str) -> bool:
        return name in self._modules

    def instance_id(self, name: str) -> int | None:
        instance = self._modules.get(name)
        return instance.instance_id if instance is not None else None

    def module_names(self) -> list[str]:
        return list(self._modules)

    def _resolve(self, path: str) -> tuple[_ModuleInstance, str] | None:
        name, sep, key = path.partition(self._config.separator)
        if not sep:
            return None
        instance = self._modules.get(name)
        if instance is None:
            return None
        return instance, key

    def has_mutation(self, path: str) -> bool:
        resolved = self._resolve(path)
        return resolved is not None and resolved[1] in resolved[0].module.mutations

    def has_action(self, path: str) -> bool:
        resolved = self._resolve(path)
        return resolved is not None and resolved[1] in resolved[0].module.actions

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def state(self) -> Mapping[str, Mapping[str, Any]]:
        """Read-only view of every registered module's live state."""
        return MappingProxyType({name: MappingProxyType(i.state) for name, i in self._modules.items()})

    @property
    def getters(self) -> Mapping[str, Any]:
        return _GetterView(self)

    def snapshot(self, name: str) -> dict[str, Any]:
        """Deep copy of a module's state (``{}`` when not registered)."""
        instance = self._modules.get(name)
        if instance is None:
            return {}
        return copy.deepcopy(instance.state)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def commit(self, path: str, payload: Any = None) -> None:
        """Run a mutation synchronously.

        An unknown path (including one whose module has been unregistered)
        is logged and ignored.
        """
        resolved = self._resolve(path)
        mutation = resolved[0].module.mutations.get(resolved[1]) if resolved is not None else None
        if resolved is None or mutation is None:
            _logger.warning("Unknown mutation %s; commit ignored", path)
            return

        instance, key = resolved
        result = mutation(instance.state, payload)
        if inspect.iscoroutine(result):
            result.close()
            raise TypeError(f"mutation {path} must be synchronous")
        self._notify(
            StoreEvent(
                kind=StoreEventKind.COMMIT,
                module=instance.name,
                instance_id=instance.instance_id,
                mutation=key,
                payload=payload,
            )
        )

    async def dispatch(self, path: str, payload: Any = None) -> Any:
        """Run an action and return its (awaited) result.

        An unknown path is logged and resolves to ``None``.
        """
        resolved = self._resolve(path)
        action = resolved[0].module.actions.get(resolved[1]) if resolved is not None else None
        if resolved is None or action is None:
            _logger.warning("Unknown action %s; dispatch ignored", path)
            return None

        result = action(ActionContext(store=self, module_name=resolved[0].name), payload)
        if inspect.isawaitable(result):
            result = await result
        return result

    # ------------------------------------------------------------------
    # Subscribers
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call *callback* for every store event; returns an unsubscribe callable."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, event: StoreEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                _logger.debug("store subscriber failed", exc_info=True)
