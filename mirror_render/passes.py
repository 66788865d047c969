"""Multi-pass render-list orchestration for nested mirror reflections.

Pass 1 hides every mirror wall from every mirror, so no mirror shows another
mirror before that mirror holds content. Each later pass lets a mirror see
the other mirrors, whose textures already carry the previous pass, which
builds reflections-of-reflections one level per pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from mirror_core.config import MAX_BOUNCES, MIN_BOUNCES, clamp_int
from mirror_core.walls import DEFAULT_MIRROR_WALLS, WALL_MESH_NAMES
from mirror_render.protocols import MirrorScene

logger = logging.getLogger(__name__)

UNINITIALIZED = 0

DEFAULT_MIRROR_NAMES = tuple(WALL_MESH_NAMES[w] for w in DEFAULT_MIRROR_WALLS)


class MissingRenderTargetError(RuntimeError):
    """A mirror wall has no render target in the scene."""


@dataclass(frozen=True)
class RenderPass:
    pass_number: int
    excluded: Dict[str, tuple]


class RenderPassOrchestrator:
    def __init__(
        self,
        scene: MirrorScene,
        max_bounces: int = 1,
        mirror_walls: Sequence[str] = DEFAULT_MIRROR_NAMES,
    ):
        self.scene = scene
        self.max_bounces = clamp_int(max_bounces, 0, MAX_BOUNCES)
        self.mirror_walls = tuple(mirror_walls)
        self.render_targets: Dict[str, Any] = {}
        self.original_visible_sets: Dict[str, List[Any]] = {}
        self.pass_states: Dict[str, int] = {}
        self.refresh_references()

    def refresh_references(self) -> None:
        """Re-scan the scene for mirror render targets and snapshot their visible sets.

        Previous references stay in place when any mirror lacks a target.
        """

        targets: Dict[str, Any] = {}
        for name in self.mirror_walls:
            target = self.scene.get_render_target(name)
            if target is None:
                raise MissingRenderTargetError(f"No render target for mirror '{name}'")
            targets[name] = target
        self.render_targets = targets
        self.original_visible_sets = {name: list(self.scene.get_visible_set(t)) for name, t in targets.items()}
        self.pass_states = {name: UNINITIALIZED for name in targets}

    def _filtered(self, exclude: Sequence[str]) -> List[Any]:
        return [obj for obj in self.scene.renderables() if obj.name not in exclude]

    def _execute_pass(self, pass_number: int) -> RenderPass:
        excluded: Dict[str, tuple] = {}
        for name, target in self.render_targets.items():
            exclude = self.mirror_walls if pass_number == 1 else (name,)
            self.scene.set_visible_set(target, self._filtered(exclude))
            self.pass_states[name] = pass_number
            excluded[name] = tuple(exclude)
        for target in self.render_targets.values():
            self.scene.force_render(target)
        return RenderPass(pass_number=pass_number, excluded=excluded)

    def execute_render_passes(self, max_bounces: Optional[int] = None) -> List[RenderPass]:
        n = self.max_bounces if max_bounces is None else max_bounces
        if n < 1:
            return []
        n = min(n, MAX_BOUNCES)
        passes = [self._execute_pass(k) for k in range(1, n + 1)]
        logger.debug("Executed %d render passes over %d mirrors", len(passes), len(self.render_targets))
        return passes

    def set_bounce_count(self, bounces: int) -> List[RenderPass]:
        self.max_bounces = clamp_int(bounces, MIN_BOUNCES, MAX_BOUNCES)
        return self.execute_render_passes()

    def get_bounce_count(self) -> int:
        return self.max_bounces

    def pass_state(self, name: str) -> int:
        return self.pass_states.get(name, UNINITIALIZED)

    def reset(self) -> None:
        for name, target in self.render_targets.items():
            self.scene.set_visible_set(target, list(self.original_visible_sets[name]))
            self.pass_states[name] = UNINITIALIZED

    def dispose(self) -> None:
        self.render_targets.clear()
        self.original_visible_sets.clear()
        self.pass_states.clear()
