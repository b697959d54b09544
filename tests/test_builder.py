"""Tests for module assembly."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from pymodkit.compose.builder import build_module
from pymodkit.config import ModKitConfig
from pymodkit.exceptions import ModuleDefinitionError
from pymodkit.models import CollectionDescriptor, ComplexTypeDescriptor, ModuleDefinition, SectionKind
from pymodkit.state.store import ModuleStore


class Address(BaseModel):
    city: str = "Utrecht"


class Profile(BaseModel):
    name: str = ""
    tags: list[str] = []
    address: Address = Address()


class TestModel:
    def test_state_defaults_and_field_mutations(self) -> None:
        module = build_module(ModuleDefinition(model=Profile))

        state = module.state.materialize()
        assert state["name"] == ""
        assert state["tags"] == []
        assert state["address"] == {"city": "Utrecht"}
        assert {"name", "tags", "address"} <= set(module.mutations)

    def test_field_mutation_assigns_verbatim(self) -> None:
        module = build_module(ModuleDefinition(model=Profile))
        state = module.state.materialize()
        module.mutations["name"](state, "ada")
        assert state["name"] == "ada"

    def test_state_is_a_factory_of_unaliased_copies(self) -> None:
        module = build_module(ModuleDefinition(model=Profile))
        assert module.state.kind is SectionKind.FACTORY

        first = module.state.materialize()
        second = module.state.materialize()
        first["tags"].append("x")
        assert second["tags"] == []

    def test_pairs_schema(self) -> None:
        module = build_module(ModuleDefinition(model=[("count", 0), ("label", "n/a")]))
        state = module.state.materialize()
        assert state["count"] == 0
        assert state["label"] == "n/a"
        assert "count" in module.mutations

    def test_model_field_without_default(self) -> None:
        class Strict(BaseModel):
            name: str

        with pytest.raises(ModuleDefinitionError) as err:
            build_module(ModuleDefinition(model=Strict))
        assert err.value.field == "name"


class TestHiddenFields:
    def test_injected_without_user_state(self) -> None:
        module = build_module(ModuleDefinition())
        assert module.state.kind is SectionKind.VALUE
        assert module.state.materialize() == {"@@": 0, "@fetched": False}
        assert {"@@", "@fetched"} <= set(module.mutations)

    def test_user_factory_stays_a_factory(self) -> None:
        module = build_module(ModuleDefinition(state=lambda: {"count": 1}))
        assert module.state.kind is SectionKind.FACTORY
        assert module.state.materialize() == {"count": 1, "@@": 0, "@fetched": False}

    def test_reserved_names_always_take_injected_defaults(self) -> None:
        module = build_module(ModuleDefinition(state={"@@": "stale", "@fetched": True, "count": 2}))
        assert module.state.materialize() == {"@@": 0, "@fetched": False, "count": 2}

    def test_configured_field_names(self) -> None:
        config = ModKitConfig(validation_field="_probe", fetched_field="_ready")
        module = build_module(ModuleDefinition(), config=config)
        assert module.state.materialize() == {"_probe": 0, "_ready": False}

    def test_model_field_clashing_with_reserved_name(self) -> None:
        with pytest.raises(ModuleDefinitionError):
            build_module(ModuleDefinition(model={"@@": 1}))


class TestAssembly:
    def test_all_fragments_merge(self) -> None:
        async def load(context: object, payload: object) -> None:
            return None

        module = build_module(
            ModuleDefinition(
                model=Profile,
                collections=[CollectionDescriptor(single="job", plural="jobs")],
                complex_types=[ComplexTypeDescriptor(name="filter", type={"text": ""})],
                state={"jobs": []},
                actions={"load": load},
                getters={"count": lambda state, getters: len(state["jobs"])},
            )
        )

        assert module.namespaced is True
        assert module.state.kind is SectionKind.FACTORY
        state = module.state.materialize()
        assert state["jobs"] == []
        assert state["name"] == ""
        assert state["@@"] == 0
        assert {"name", "saveOrUpdateJob", "deleteJob", "setTextOfFilter", "@@", "@fetched"} <= set(module.mutations)
        assert {"load", "saveOrUpdateJob", "setTextOfFilter", "initialize"} <= set(module.actions)
        assert set(module.getters) == {"count", "jobsIndex", "jobById", "textOfFilter"}

    def test_generated_members_override_user_members(self) -> None:
        def mine(state: dict, value: object) -> None:
            state["mine"] = value

        module = build_module(
            ModuleDefinition(model=[("name", "")], mutations={"name": mine, "other": mine})
        )
        assert module.mutations["name"] is not mine
        assert module.mutations["other"] is mine

    def test_default_initialize(self) -> None:
        module = build_module(ModuleDefinition())
        assert "initialize" in module.actions

    def test_definition_initialize_used_as_fallback(self) -> None:
        async def initialize(context: object, payload: object) -> str:
            return "fallback"

        module = build_module(ModuleDefinition(initialize=initialize))
        assert module.actions["initialize"] is initialize

    def test_user_initialize_action_wins(self) -> None:
        async def fallback(context: object, payload: object) -> None:
            return None

        async def mine(context: object, payload: object) -> None:
            return None

        module = build_module(ModuleDefinition(actions={"initialize": mine}, initialize=fallback))
        assert module.actions["initialize"] is mine

    def test_actions_factory_is_materialized(self) -> None:
        async def load(context: object, payload: object) -> None:
            return None

        module = build_module(ModuleDefinition(actions=lambda: {"load": load}))
        assert set(module.actions) == {"load", "initialize"}

    def test_bad_section(self) -> None:
        with pytest.raises(ModuleDefinitionError):
            build_module(ModuleDefinition(state=42))

    def test_registered_instances_do_not_share_state(self) -> None:
        module = build_module(ModuleDefinition(state={"items": []}, mutations={"add": lambda s, v: s["items"].append(v)}))
        first, second = ModuleStore(), ModuleStore()
        first.register_module("m", module)
        second.register_module("m", module)

        first.commit("m/add", 1)
        assert first.state["m"]["items"] == [1]
        assert second.state["m"]["items"] == []
