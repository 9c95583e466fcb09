from __future__ import annotations

import math
from typing import NamedTuple

# Parameter margin at both ends of a segment; crossings closer than this to an
# endpoint count as touching, not crossing. The margin is relative to segment
# length, so on a seed circle with roughly 100 or more nodes a real chord
# crossing can fall inside it and go unreported.
EPSILON = 0.001


class Point(NamedTuple):
    x: float
    y: float


def segments_intersect(p1: Point, p2: Point, p3: Point, p4: Point) -> bool:
    """Return True iff segment p1-p2 properly crosses segment p3-p4.

    The crossing must lie strictly inside both segments (outside an
    `EPSILON` margin at each end), so two edges that meet at a shared node
    never count. Parallel and collinear segments (zero determinant) always
    return False, even when they overlap.
    """

    det = (p2.x - p1.x) * (p4.y - p3.y) - (p4.x - p3.x) * (p2.y - p1.y)
    if det == 0:
        return False

    lam = ((p4.y - p3.y) * (p4.x - p1.x) + (p3.x - p4.x) * (p4.y - p1.y)) / det
    gamma = ((p1.y - p2.y) * (p4.x - p1.x) + (p2.x - p1.x) * (p4.y - p1.y)) / det

    return (EPSILON < lam < 1 - EPSILON) and (EPSILON < gamma < 1 - EPSILON)


def distance(p1: Point, p2: Point) -> float:
    return math.hypot(p2.x - p1.x, p2.y - p1.y)
