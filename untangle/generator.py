from __future__ import annotations

import logging
import math
import random
from typing import List, Optional, Set, Tuple

from .constants import (
    CANVAS_PADDING,
    FUNCTION_NAMES,
    MAX_CHORD_ATTEMPTS,
    NODE_HEIGHT,
    NODE_WIDTH,
    SEED_RADIUS_MARGIN,
)
from .geometry import Point, segments_intersect
from .graph import Edge, Level, Node, NodeType

logger = logging.getLogger(__name__)

_TYPE_CYCLE: Tuple[NodeType, ...] = ("function", "class", "variable")


def node_count_for_level(level: int) -> int:
    return 4 + level


def target_edge_count(level: int) -> int:
    return level * 2 + node_count_for_level(level)


def circular_layout(count: int, width: float, height: float) -> List[Point]:
    """Evenly spaced points on a circle centred in the viewport.

    Any set of pairwise non-crossing chords between these points is a
    crossing-free drawing, which is what makes every generated level solvable.
    """

    cx = width / 2.0
    cy = height / 2.0
    radius = min(width, height) / 2.0 - CANVAS_PADDING - SEED_RADIUS_MARGIN

    out: List[Point] = []
    for i in range(count):
        theta = 2.0 * math.pi * float(i) / float(count)
        out.append(Point(cx + radius * math.cos(theta), cy + radius * math.sin(theta)))
    return out


def scramble_layout(nodes: List[Node], width: float, height: float, rng: random.Random) -> None:
    """Move every node to a uniform random spot inside the padded viewport."""
    span_x = width - NODE_WIDTH - CANVAS_PADDING * 2
    span_y = height - NODE_HEIGHT - CANVAS_PADDING * 2
    for node in nodes:
        node.x = CANVAS_PADDING + rng.random() * span_x
        node.y = CANVAS_PADDING + rng.random() * span_y


def _edge_key(i: int, j: int) -> Tuple[int, int]:
    return (i, j) if i < j else (j, i)


def _is_adjacent(i: int, j: int, n: int) -> bool:
    return abs(i - j) == 1 or {i, j} == {0, n - 1}


def _build_topology(level: int, seed: List[Point], rng: random.Random) -> List[Tuple[int, int]]:
    n = len(seed)
    pairs: List[Tuple[int, int]] = []
    seen: Set[Tuple[int, int]] = set()

    # Hamiltonian cycle around the circle.
    for i in range(n):
        j = (i + 1) % n
        pairs.append((i, j))
        seen.add(_edge_key(i, j))

    target = target_edge_count(level)
    attempts = 0
    while len(pairs) < target and attempts < MAX_CHORD_ATTEMPTS:
        attempts += 1
        i = rng.randrange(n)
        j = rng.randrange(n)
        if i == j or _is_adjacent(i, j, n):
            continue
        if _edge_key(i, j) in seen:
            continue

        crosses = False
        for u, v in pairs:
            if u in (i, j) or v in (i, j):
                continue
            if segments_intersect(seed[i], seed[j], seed[u], seed[v]):
                crosses = True
                break
        if crosses:
            continue

        pairs.append((i, j))
        seen.add(_edge_key(i, j))

    if len(pairs) < target:
        logger.debug(
            "Level %d: chord budget exhausted after %d attempts (%d/%d edges)",
            level,
            attempts,
            len(pairs),
            target,
        )
    return pairs


def generate_level(
    level: int,
    width: float,
    height: float,
    *,
    rng: Optional[random.Random] = None,
) -> Level:
    """Build a solvable level for difficulty `level` and scramble it.

    1. `4 + level` nodes are seeded on a circle.
    2. A cycle through all nodes is added, then random chords that do not
       cross any existing edge on the seed circle, up to `level*2 + nodes`
       edges or `MAX_CHORD_ATTEMPTS` tries, whichever comes first.
    3. Node positions are replaced with uniform random ones.

    Running out of attempts only yields a sparser level; it is not an error.
    """

    if level < 1:
        raise ValueError(f"Level must be a positive integer (got {level!r})")
    rng = rng or random.Random()

    n = node_count_for_level(level)
    seed = circular_layout(n, width, height)

    nodes: List[Node] = []
    for i, p in enumerate(seed):
        nodes.append(
            Node(
                id=f"node-{i}",
                label=FUNCTION_NAMES[i % len(FUNCTION_NAMES)],
                type=_TYPE_CYCLE[i % len(_TYPE_CYCLE)],
                x=p.x,
                y=p.y,
                width=NODE_WIDTH,
                height=NODE_HEIGHT,
            )
        )

    edges = [
        Edge(id=f"edge-{i}-{j}", source_id=nodes[i].id, target_id=nodes[j].id)
        for i, j in _build_topology(level, seed, rng)
    ]

    scramble_layout(nodes, width, height, rng)

    logger.info("Generated level %d: nodes=%d, edges=%d", level, len(nodes), len(edges))
    return Level(number=level, width=width, height=height, nodes=nodes, edges=edges)


def apply_seed_layout(level: Level) -> None:
    """Put a level's nodes back on the seed circle, a crossing-free arrangement."""
    seed = circular_layout(len(level.nodes), level.width, level.height)
    for node, p in zip(level.nodes, seed):
        node.x = p.x
        node.y = p.y
