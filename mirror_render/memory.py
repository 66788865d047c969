"""In-memory renderer implementing the instancing and mirror-scene protocols.

It records transforms and render calls instead of drawing, which is enough
for the scenario runner and the tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from mirror_core.geometry import Vector


@dataclass(eq=False)
class MemoryObject:
    name: str
    position: Vector = field(default_factory=lambda: np.zeros(3))
    rotation: Vector = field(default_factory=lambda: np.zeros(3))
    scaling: Vector = field(default_factory=lambda: np.ones(3))
    enabled: bool = True
    visible: bool = True
    source: Optional["MemoryObject"] = None
    disposed: bool = False


@dataclass(eq=False)
class MemoryRenderTarget:
    name: str
    visible_set: List[Any] = field(default_factory=list)
    render_count: int = 0
    history: List[List[str]] = field(default_factory=list)


class MemoryInstancer:
    def __init__(self):
        self.created: List[MemoryObject] = []

    def create_instance(self, source: MemoryObject, name: str) -> MemoryObject:
        if source is None or source.disposed:
            raise ValueError("Source geometry is missing")
        inst = MemoryObject(name=name, source=source)
        self.created.append(inst)
        return inst

    def set_position(self, handle: MemoryObject, position: Vector) -> None:
        handle.position = np.asarray(position, dtype=float)

    def set_rotation(self, handle: MemoryObject, rotation: Vector) -> None:
        handle.rotation = np.asarray(rotation, dtype=float)

    def set_scale(self, handle: MemoryObject, scale: Vector) -> None:
        handle.scaling = np.asarray(scale, dtype=float)

    def set_enabled(self, handle: MemoryObject, enabled: bool) -> None:
        handle.enabled = bool(enabled)

    def dispose(self, handle: MemoryObject) -> None:
        handle.disposed = True
        handle.enabled = False

    def live(self) -> List[MemoryObject]:
        return [h for h in self.created if not h.disposed]


class MemoryMirrorScene:
    """Scene objects plus one render target per mirror object name."""

    def __init__(self, objects: Sequence[MemoryObject], mirror_names: Sequence[str]):
        self.objects = list(objects)
        self.targets: Dict[str, MemoryRenderTarget] = {n: MemoryRenderTarget(n) for n in mirror_names}

    def get_render_target(self, name: str) -> Optional[MemoryRenderTarget]:
        return self.targets.get(name)

    def get_visible_set(self, target: MemoryRenderTarget) -> List[Any]:
        return list(target.visible_set)

    def set_visible_set(self, target: MemoryRenderTarget, objects: Sequence[Any]) -> None:
        target.visible_set = list(objects)

    def force_render(self, target: MemoryRenderTarget) -> None:
        target.render_count += 1
        target.history.append([o.name for o in target.visible_set])

    def renderables(self) -> List[MemoryObject]:
        return [o for o in self.objects if o.visible and o.enabled and not o.disposed]
