from __future__ import annotations

import argparse
import json
import random
from typing import Optional, Sequence

from .generator import apply_seed_layout, generate_level
from .logging_config import configure_logging
from .tracker import recheck
from .viz import write_plotly_html


def _add_level_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--level", type=int, default=1, help="Difficulty index (>= 1)")
    p.add_argument("--width", type=int, default=1280, help="Viewport width in pixels")
    p.add_argument("--height", type=int, default=800, help="Viewport height in pixels")
    p.add_argument("--seed", type=int, default=None, help="Random seed for reproducible levels")
    p.add_argument("--solved", action="store_true", help="Place nodes on the crossing-free seed circle")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="untangle", description="Planar graph untangling puzzle generator")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: $LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_gen = sub.add_parser("generate", help="Print a generated level as JSON")
    _add_level_args(p_gen)

    p_viz = sub.add_parser("visualize", help="Render a generated level to an HTML file")
    _add_level_args(p_viz)
    p_viz.add_argument("--out", type=str, default="out/level.html", help="Output HTML path")

    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(args.log_level)

    if args.level < 1:
        parser.error("--level must be >= 1")

    rng = random.Random(args.seed)
    level = generate_level(args.level, args.width, args.height, rng=rng)
    if args.solved:
        apply_seed_layout(level)
    level.edges, solved = recheck(level.nodes, level.edges)

    if args.cmd == "generate":
        payload = level.to_payload()
        payload["solved"] = solved
        print(json.dumps(payload, indent=2))
        return 0

    if args.cmd == "visualize":
        out = write_plotly_html(level, out_path=args.out, solved=solved)
        crossing = sum(1 for e in level.edges if e.is_intersecting)
        print(f"Level {level.number}: nodes={len(level.nodes)}, edges={len(level.edges)}, crossing_edges={crossing}")
        print(f"Wrote level visualization: {out}")
        return 0

    raise AssertionError("unreachable")
