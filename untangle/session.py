from __future__ import annotations

import logging
import math
import random
import threading
from typing import Any, Callable, Dict, Optional, Tuple

from .constants import DRAG_MARGIN
from .generator import generate_level
from .graph import Level, Node, NodeId
from .tracker import CheckResult, CrossingTracker

logger = logging.getLogger(__name__)


def clamp_position(node: Node, x: float, y: float, width: float, height: float) -> Tuple[float, float]:
    """Keep a dragged node fully inside the viewport, `DRAG_MARGIN` from the border."""
    cx = max(DRAG_MARGIN, min(x, width - node.width - DRAG_MARGIN))
    cy = max(DRAG_MARGIN, min(y, height - node.height - DRAG_MARGIN))
    return cx, cy


class PuzzleSession:
    """Owns the node/edge state of the level being played.

    Levels are replaced wholesale on start/reset/next; only node positions
    change in between, and every position change is followed by one
    synchronous recheck.
    """

    def __init__(
        self,
        level: int,
        width: float,
        height: float,
        *,
        rng: Optional[random.Random] = None,
        on_solved: Optional[Callable[["PuzzleSession"], None]] = None,
        lock_when_solved: bool = True,
    ) -> None:
        self.width = float(width)
        self.height = float(height)
        self.rng = rng or random.Random()
        self.on_solved = on_solved
        self.lock_when_solved = lock_when_solved
        # Serializes moves and level swaps; the HTTP layer calls in from a threadpool.
        self._lock = threading.RLock()

        self.level: Level = Level(number=level, width=self.width, height=self.height)
        self._nodes_by_id: Dict[NodeId, Node] = {}
        self._tracker = CrossingTracker([])
        self.last_result = CheckResult(edges=[], solved=False)
        self.start(level)

    @property
    def number(self) -> int:
        return self.level.number

    @property
    def solved(self) -> bool:
        return self._tracker.solved

    def start(self, level: Optional[int] = None) -> CheckResult:
        with self._lock:
            number = self.level.number if level is None else level
            new_level = generate_level(number, self.width, self.height, rng=self.rng)

            self.level = new_level
            self._nodes_by_id = {n.id: n for n in new_level.nodes}
            self._tracker = CrossingTracker(new_level.edges)
            return self._recheck()

    def reset(self) -> CheckResult:
        return self.start()

    def next_level(self) -> CheckResult:
        with self._lock:
            return self.start(self.level.number + 1)

    def resize(self, width: float, height: float) -> None:
        """Record a new viewport.

        Drags are clamped to it immediately; generation picks it up on the
        next start, reset or level advance.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Viewport must be positive (got {width}x{height})")
        with self._lock:
            self.width = float(width)
            self.height = float(height)

    def move_node(self, node_id: NodeId, x: float, y: float) -> CheckResult:
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Node position must be finite (got x={x!r}, y={y!r})")
        with self._lock:
            try:
                node = self._nodes_by_id[node_id]
            except KeyError as e:
                raise KeyError(f"Unknown node: {node_id!r}") from e

            if self.lock_when_solved and self.solved:
                logger.debug("Ignoring move of %s: level already solved", node_id)
                return CheckResult(edges=self._tracker.edges, solved=True)

            node.x, node.y = clamp_position(node, x, y, self.width, self.height)
            return self._recheck()

    def _recheck(self) -> CheckResult:
        result = self._tracker.update(self.level.nodes)
        self.level.edges = result.edges
        self.last_result = result
        if result.just_solved and self.on_solved is not None:
            self.on_solved(self)
        return result

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            payload = self.level.to_payload()
            payload["solved"] = self.solved
            payload["crossings"] = self.last_result.crossing_count
            return payload
