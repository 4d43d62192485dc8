import pytest

from conftest import StaticModule

from regcheck.services.registry import DuplicateNameError, ModuleRegistry, RegistryError, UnknownModuleError


def test_register_preserves_insertion_order():
    registry = ModuleRegistry()
    for name in ("c", "a", "b"):
        registry.register(name, StaticModule())
    assert registry.available_names() == ("c", "a", "b")
    assert registry.enabled_names() == ("c", "a", "b")
    assert len(registry) == 3
    assert "a" in registry


def test_replacement_keeps_position_and_enabled_flag():
    registry = ModuleRegistry()
    registry.register("a", StaticModule())
    registry.register("b", StaticModule())
    registry.set_enabled("a", False)

    replacement = StaticModule({"tag": "new"})
    registry.register("a", replacement)

    assert registry.available_names() == ("a", "b")
    assert registry.get("a").instance is replacement
    assert registry.is_enabled("a") is False


def test_register_without_overwrite_rejects_taken_name():
    registry = ModuleRegistry()
    original = StaticModule()
    registry.register("a", original)
    with pytest.raises(DuplicateNameError):
        registry.register("a", StaticModule(), overwrite=False)
    assert registry.get("a").instance is original


def test_register_can_start_disabled():
    registry = ModuleRegistry()
    registry.register("a", StaticModule(), enabled=False)
    assert registry.enabled_names() == ()
    assert registry.snapshot() == ()


def test_set_enabled_is_idempotent_and_ignores_unknown_names():
    registry = ModuleRegistry()
    registry.register("a", StaticModule())
    registry.set_enabled("a", False)
    registry.set_enabled("a", False)
    assert registry.enabled_names() == ()
    registry.set_enabled("missing", True)
    assert "missing" not in registry


def test_reconfigure_builds_fresh_instance_of_same_variant():
    registry = ModuleRegistry()
    original = StaticModule({"tag": "old"})
    registry.register("a", original, enabled=False)

    registry.reconfigure("a", {"tag": "new"})

    entry = registry.get("a")
    assert entry.instance is not original
    assert isinstance(entry.instance, StaticModule)
    assert entry.instance.config == {"tag": "new"}
    assert entry.enabled is False


def test_reconfigure_unknown_name_raises():
    registry = ModuleRegistry()
    with pytest.raises(UnknownModuleError) as excinfo:
        registry.reconfigure("ghost", {})
    assert isinstance(excinfo.value, KeyError)
    assert isinstance(excinfo.value, RegistryError)
    assert "ghost" in str(excinfo.value)


def test_snapshot_is_unaffected_by_later_changes():
    registry = ModuleRegistry()
    original = StaticModule()
    registry.register("a", original)
    registry.register("b", StaticModule())

    snapshot = registry.snapshot()
    registry.reconfigure("a", {"tag": "changed"})
    registry.set_enabled("b", False)

    assert [name for name, _ in snapshot] == ["a", "b"]
    assert snapshot[0][1] is original
