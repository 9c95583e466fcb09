from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..constants import COLORS, TYPE_COLORS
from ..graph import Level, Node, NodeId


def _edge_color(is_intersecting: bool, solved: bool) -> str:
    if solved:
        return COLORS["line_solved"]
    if is_intersecting:
        return COLORS["line_intersect"]
    return COLORS["line_normal"]


def build_plotly_figure(
    level: Level,
    *,
    solved: bool = False,
    title: Optional[str] = None,
):
    import plotly.graph_objects as go

    nodes: Dict[NodeId, Node] = level.node_map()
    traces = []

    # One trace per stroke style.
    groups: Dict[Tuple[str, int], Tuple[List[Optional[float]], List[Optional[float]]]] = {}
    for edge in level.edges:
        pu = nodes[edge.source_id].center()
        pv = nodes[edge.target_id].center()
        stroke = (_edge_color(edge.is_intersecting, solved), 3 if edge.is_intersecting else 2)
        xs, ys = groups.setdefault(stroke, ([], []))
        xs += [pu.x, pv.x, None]
        ys += [pu.y, pv.y, None]

    for (color, width), (xs, ys) in groups.items():
        traces.append(
            go.Scatter(
                x=xs,
                y=ys,
                mode="lines",
                line=dict(width=width, color=color),
                hoverinfo="none",
                showlegend=False,
            )
        )

    nx, ny, ntext, ncolor = [], [], [], []
    for node in level.nodes:
        c = node.center()
        nx.append(c.x)
        ny.append(c.y)
        ntext.append(f"{node.label}<br>id={node.id}<br>type={node.type}")
        ncolor.append(TYPE_COLORS.get(node.type, COLORS["node_border"]))

    traces.append(
        go.Scatter(
            x=nx,
            y=ny,
            mode="markers+text",
            marker=dict(size=18, symbol="square", color=ncolor, line=dict(width=1, color=COLORS["node_border"])),
            text=[n.label for n in level.nodes],
            textposition="top center",
            textfont=dict(color=COLORS["text"], family="monospace"),
            hovertext=ntext,
            hoverinfo="text",
            name="nodes",
        )
    )

    crossings = sum(1 for e in level.edges if e.is_intersecting)
    status = "COMPILED" if solved else f"ERROR ({crossings} crossing edges)"
    fig = go.Figure(data=traces)
    fig.update_layout(
        title=title or f"Level {level.number}: {status}",
        plot_bgcolor=COLORS["bg"],
        paper_bgcolor=COLORS["bg"],
        font=dict(color=COLORS["text"]),
        xaxis=dict(visible=False, range=[0, level.width]),
        # Screen coordinates: y grows downward.
        yaxis=dict(visible=False, range=[level.height, 0], scaleanchor="x", scaleratio=1),
        margin=dict(l=0, r=0, t=40, b=0),
    )
    return fig


def write_plotly_html(
    level: Level,
    *,
    out_path: str | Path,
    solved: bool = False,
    title: Optional[str] = None,
) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fig = build_plotly_figure(level, solved=solved, title=title)
    fig.write_html(str(out_path), include_plotlyjs="cdn", full_html=True)
    return out_path
