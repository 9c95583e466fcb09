from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

from .geometry import segments_intersect
from .graph import Edge, Node, NodeId

logger = logging.getLogger(__name__)

PositionKey = Tuple[Tuple[NodeId, float, float], ...]


def recheck(nodes: Sequence[Node], edges: Sequence[Edge]) -> Tuple[List[Edge], bool]:
    """Recompute `is_intersecting` for every edge from current node positions.

    Pairs of edges sharing a node are never tested. Returns fresh Edge
    instances (same ids and endpoints) and whether no pair crosses.
    """

    node_map: Dict[NodeId, Node] = {n.id: n for n in nodes}
    flags = [False] * len(edges)

    for i in range(len(edges)):
        a = edges[i]
        a1 = node_map[a.source_id].center()
        a2 = node_map[a.target_id].center()
        for j in range(i + 1, len(edges)):
            b = edges[j]
            if a.shares_node(b):
                continue
            b1 = node_map[b.source_id].center()
            b2 = node_map[b.target_id].center()
            if segments_intersect(a1, a2, b1, b2):
                flags[i] = True
                flags[j] = True

    updated = [replace(e, is_intersecting=flag) for e, flag in zip(edges, flags)]
    return updated, not any(flags)


@dataclass(frozen=True)
class CheckResult:
    edges: List[Edge]
    solved: bool
    just_solved: bool = False
    just_unsolved: bool = False

    @property
    def crossing_count(self) -> int:
        return sum(1 for e in self.edges if e.is_intersecting)


class CrossingTracker:
    """Derived crossing state for one level's fixed edge set.

    Results are cached per position vector, so re-checking an unchanged
    layout is free. The stored solved flag only changes when a recheck
    disagrees with it; `just_solved` / `just_unsolved` mark those transitions.
    """

    def __init__(self, edges: Sequence[Edge]) -> None:
        self._edges: List[Edge] = [replace(e, is_intersecting=False) for e in edges]
        self._solved = False
        self._cache_key: Optional[PositionKey] = None
        self._cached_edges: List[Edge] = list(self._edges)

    @property
    def solved(self) -> bool:
        return self._solved

    @property
    def edges(self) -> List[Edge]:
        return list(self._cached_edges)

    def update(self, nodes: Sequence[Node]) -> CheckResult:
        key: PositionKey = tuple((n.id, float(n.x), float(n.y)) for n in nodes)
        if key == self._cache_key:
            return CheckResult(edges=list(self._cached_edges), solved=self._solved)

        edges, solved = recheck(nodes, self._edges)
        self._cache_key = key
        self._cached_edges = edges

        just_solved = solved and not self._solved
        just_unsolved = self._solved and not solved
        if just_solved or just_unsolved:
            self._solved = solved
            logger.info("Puzzle %s", "solved" if solved else "tangled again")

        return CheckResult(
            edges=list(edges),
            solved=solved,
            just_solved=just_solved,
            just_unsolved=just_unsolved,
        )
