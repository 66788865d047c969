import numpy as np
import pytest

from mirror_render.instances import InstanceCreationError, ReflectionInstanceManager
from mirror_render.memory import MemoryInstancer, MemoryObject


def _setup():
    instancer = MemoryInstancer()
    source = MemoryObject("sphere", position=np.array([0.0, 5.0, 5.0]), rotation=np.array([0.0, 0.3, 0.0]))
    return instancer, source, ReflectionInstanceManager(instancer)


def _enabled_ids(manager):
    return sorted(pid for pid, h in manager.instances.items() if h.enabled)


def test_update_creates_one_instance_per_path():
    instancer, source, manager = _setup()
    paths = manager.update_instances(source, source.position, source.rotation, 2)
    assert len(paths) == 9
    assert len(instancer.created) == 9
    north = manager.instances["north"]
    assert north.name == "sphere_north"
    assert north.source is source
    assert np.allclose(north.position, [0.0, 5.0, 15.0])
    assert np.array_equal(north.scaling, [1.0, 1.0, -1.0])
    assert np.allclose(north.rotation, source.rotation)
    assert north.rotation is not source.rotation


def test_instances_are_reused_and_stale_ones_disabled():
    instancer, source, manager = _setup()
    manager.update_instances(source, source.position, source.rotation, 3)
    first = dict(manager.instances)
    manager.update_instances(source, source.position, source.rotation, 1)
    assert len(instancer.created) == 21
    assert manager.instances == first
    assert _enabled_ids(manager) == ["east", "north", "west"]
    manager.update_instances(source, source.position, source.rotation, 3)
    assert len(instancer.created) == 21
    assert len(_enabled_ids(manager)) == 21


def test_moving_the_source_updates_positions():
    instancer, source, manager = _setup()
    manager.update_instances(source, source.position, source.rotation, 1)
    manager.update_instances(source, np.array([2.0, 5.0, 1.0]), source.rotation, 1)
    assert np.allclose(manager.instances["east"].position, [18.0, 5.0, 1.0])


def test_hide_then_show_respects_bounce_limit():
    instancer, source, manager = _setup()
    manager.update_instances(source, source.position, source.rotation, 3)
    manager.hide_all()
    assert _enabled_ids(manager) == []
    manager.show_all(2)
    enabled = _enabled_ids(manager)
    assert len(enabled) == 9
    assert all(manager.paths[pid].bounce_count <= 2 for pid in enabled)
    assert sorted(manager.visible_path_ids(2)) == enabled


def test_show_all_keeps_paths_outside_current_set_hidden():
    instancer, source, manager = _setup()
    manager.update_instances(source, source.position, source.rotation, 3)
    manager.update_instances(source, source.position, source.rotation, 1)
    manager.show_all(5)
    assert _enabled_ids(manager) == ["east", "north", "west"]


def test_creation_failure_leaves_previous_state():
    instancer, source, manager = _setup()
    manager.update_instances(source, source.position, source.rotation, 1)
    before = dict(manager.instances)
    before_paths = dict(manager.paths)

    calls = {"n": 0}
    original = instancer.create_instance

    def flaky(src, name):
        calls["n"] += 1
        if calls["n"] > 2:
            raise RuntimeError("out of GPU memory")
        return original(src, name)

    instancer.create_instance = flaky
    with pytest.raises(InstanceCreationError):
        manager.update_instances(source, source.position, source.rotation, 2)

    assert manager.instances == before
    assert all(manager.paths[k] is v for k, v in before_paths.items()) and len(manager.paths) == 3
    assert _enabled_ids(manager) == ["east", "north", "west"]
    assert all(h.disposed for h in instancer.created[3:])


def test_programming_errors_from_the_renderer_propagate():
    instancer, source, manager = _setup()

    def broken(src, name):
        raise TypeError("bad call")

    instancer.create_instance = broken
    with pytest.raises(TypeError):
        manager.update_instances(source, source.position, source.rotation, 1)
    assert manager.instances == {}


def test_missing_source_geometry_is_an_error():
    instancer, source, manager = _setup()
    source.disposed = True
    with pytest.raises(InstanceCreationError):
        manager.update_instances(source, source.position, source.rotation, 1)
    assert manager.instances == {}


def test_dispose_is_idempotent():
    instancer, source, manager = _setup()
    manager.update_instances(source, source.position, source.rotation, 2)
    manager.dispose()
    manager.dispose()
    assert manager.instances == {} and manager.paths == {}
    assert instancer.live() == []
