from .generator import apply_seed_layout, circular_layout, generate_level
from .geometry import Point, segments_intersect
from .graph import Edge, Level, Node
from .session import PuzzleSession
from .store import LevelStore
from .tracker import CheckResult, CrossingTracker, recheck

__all__ = [
    "CheckResult",
    "CrossingTracker",
    "Edge",
    "Level",
    "LevelStore",
    "Node",
    "Point",
    "PuzzleSession",
    "apply_seed_layout",
    "circular_layout",
    "generate_level",
    "recheck",
    "segments_intersect",
]
