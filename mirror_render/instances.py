"""Cache of renderable mirror-image instances keyed by reflection path id."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from mirror_core.geometry import Vector, WallPlane
from mirror_core.images import ReflectionPath, generate_paths
from mirror_render.protocols import Instancer

logger = logging.getLogger(__name__)


class InstanceCreationError(RuntimeError):
    """The renderer could not create an instance for a reflection path."""


class ReflectionInstanceManager:
    """Keeps one instance per path id ever seen and toggles them by bounce count.

    Instances are never recreated: a path that drops out of the current set
    is only disabled, so raising the bounce count again re-shows it.
    """

    def __init__(self, instancer: Instancer, walls: Optional[Sequence[WallPlane]] = None):
        self.instancer = instancer
        self.walls = list(walls) if walls is not None else None
        self.instances: Dict[str, Any] = {}
        self.paths: Dict[str, ReflectionPath] = {}

    def update_instances(
        self,
        source: Any,
        source_position: Vector,
        source_rotation: Vector,
        max_bounces: int,
    ) -> List[ReflectionPath]:
        paths = generate_paths(source_position, max_bounces, self.walls)
        self._create_missing(source, paths)

        for handle in self.instances.values():
            self.instancer.set_enabled(handle, False)

        rotation = np.asarray(source_rotation, dtype=float)
        for path in paths:
            handle = self.instances[path.id]
            self.instancer.set_position(handle, path.position.copy())
            self.instancer.set_rotation(handle, rotation.copy())
            self.instancer.set_scale(handle, path.scaling.copy())
            self.instancer.set_enabled(handle, True)

        self.paths = {p.id: p for p in paths}
        logger.debug("Updated %d reflection instances (%d cached)", len(paths), len(self.instances))
        return paths

    def _create_missing(self, source: Any, paths: Sequence[ReflectionPath]) -> None:
        source_name = getattr(source, "name", "source")
        created: Dict[str, Any] = {}
        for path in paths:
            if path.id in self.instances:
                continue
            try:
                handle = self.instancer.create_instance(source, f"{source_name}_{path.id}")
            except (RuntimeError, ValueError) as exc:
                self._discard(created)
                raise InstanceCreationError(f"Cannot create instance for path '{path.id}'") from exc
            if handle is None:
                self._discard(created)
                raise InstanceCreationError(f"Renderer returned no instance for path '{path.id}'")
            created[path.id] = handle
        self.instances.update(created)

    def _discard(self, handles: Dict[str, Any]) -> None:
        # roll back a partially applied update
        for handle in handles.values():
            self.instancer.dispose(handle)

    def hide_all(self) -> None:
        for handle in self.instances.values():
            self.instancer.set_enabled(handle, False)

    def show_all(self, max_bounces: int) -> None:
        for path_id, handle in self.instances.items():
            path = self.paths.get(path_id)
            self.instancer.set_enabled(handle, path is not None and path.bounce_count <= max_bounces)

    def visible_path_ids(self, max_bounces: int) -> List[str]:
        return [pid for pid, p in self.paths.items() if p.bounce_count <= max_bounces]

    def dispose(self) -> None:
        for handle in self.instances.values():
            self.instancer.dispose(handle)
        self.instances.clear()
        self.paths.clear()
