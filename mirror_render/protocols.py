"""Renderer capabilities the reflection managers depend on."""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence

from mirror_core.geometry import Vector


class Instancer(Protocol):
    def create_instance(self, source: Any, name: str) -> Any:
        """Clone ``source`` under ``name``.

        Renderer failures surface as ``RuntimeError``; missing source
        geometry as ``ValueError``.
        """
        ...

    def set_position(self, handle: Any, position: Vector) -> None:
        ...

    def set_rotation(self, handle: Any, rotation: Vector) -> None:
        ...

    def set_scale(self, handle: Any, scale: Vector) -> None:
        ...

    def set_enabled(self, handle: Any, enabled: bool) -> None:
        ...

    def dispose(self, handle: Any) -> None:
        ...


class MirrorScene(Protocol):
    def get_render_target(self, name: str) -> Optional[Any]:
        ...

    def get_visible_set(self, target: Any) -> List[Any]:
        ...

    def set_visible_set(self, target: Any, objects: Sequence[Any]) -> None:
        ...

    def force_render(self, target: Any) -> None:
        ...

    def renderables(self) -> List[Any]:
        """Enabled, visible objects; each exposes a ``name`` attribute."""
        ...
