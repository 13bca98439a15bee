import pytest
from pydantic import ValidationError

from run_src.errors import RegistryError, UnknownTaskError
from run_src.models import Task
from run_src.registry import TaskRegistry


def _noop(args: list[str]) -> int:
    return 0


def test_registration_order_is_preserved():
    registry = TaskRegistry()
    for name in ["lint", "format:imports", "format", "test"]:
        registry.register(name, _noop)

    assert [task.name for task in registry] == ["lint", "format:imports", "format", "test"]
    assert len(registry) == 4


def test_lookup_is_exact_full_name():
    registry = TaskRegistry()
    registry.register("format:imports", _noop)

    assert registry.get("format:imports").name == "format:imports"
    assert "format" not in registry
    with pytest.raises(UnknownTaskError):
        registry.get("format")
    with pytest.raises(UnknownTaskError):
        registry.get("imports")


def test_internal_tasks_hidden_from_listing_but_invocable():
    registry = TaskRegistry()
    registry.register("lint", _noop)
    registry.register("_build_run_down", _noop)

    assert [task.name for task in registry.public_tasks()] == ["lint"]
    assert registry.get("_build_run_down").internal is True


def test_duplicate_registration_rejected():
    registry = TaskRegistry()
    registry.register("lint", _noop)

    with pytest.raises(RegistryError):
        registry.register("lint", _noop)


def test_frozen_registry_rejects_registration():
    registry = TaskRegistry()
    registry.register("lint", _noop)
    assert registry.freeze() is registry
    assert registry.frozen

    with pytest.raises(RegistryError):
        registry.register("format", _noop)


def test_unknown_task_error_status():
    with pytest.raises(UnknownTaskError) as exc_info:
        TaskRegistry().get("nope")
    assert exc_info.value.status == 127
    assert exc_info.value.name == "nope"


def test_task_model_is_immutable():
    task = Task(name="lint", handler=_noop, summary="Lint")

    with pytest.raises(ValidationError):
        task.name = "other"


def test_task_requires_callable_handler():
    with pytest.raises(ValidationError):
        Task(name="lint", handler="not callable")
