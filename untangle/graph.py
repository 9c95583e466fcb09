from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Literal, Set

from .geometry import Point

NodeId = str
EdgeId = str
NodeType = Literal["function", "class", "variable", "interface"]

NODE_TYPES = ("function", "class", "variable", "interface")


@dataclass
class Node:
    """A draggable block. Only `x`/`y` change during play."""

    id: NodeId
    label: str
    type: NodeType
    x: float
    y: float
    width: float
    height: float

    def center(self) -> Point:
        return Point(self.x + self.width / 2.0, self.y + self.height / 2.0)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "type": self.type,
            "x": float(self.x),
            "y": float(self.y),
            "width": float(self.width),
            "height": float(self.height),
        }


@dataclass(frozen=True)
class Edge:
    """Undirected connection between two nodes, referenced by id.

    `is_intersecting` is derived state: the tracker produces new Edge
    instances instead of flipping the flag.
    """

    id: EdgeId
    source_id: NodeId
    target_id: NodeId
    is_intersecting: bool = False

    def key(self) -> FrozenSet[NodeId]:
        return frozenset((self.source_id, self.target_id))

    def shares_node(self, other: "Edge") -> bool:
        return bool(self.key() & other.key())

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sourceId": self.source_id,
            "targetId": self.target_id,
            "isIntersecting": self.is_intersecting,
        }


@dataclass
class Level:
    """One generated puzzle: a fixed edge topology plus current node positions."""

    number: int
    width: float
    height: float
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def node_map(self) -> Dict[NodeId, Node]:
        return {n.id: n for n in self.nodes}

    def require_node(self, node_id: NodeId) -> Node:
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise KeyError(f"Unknown node: {node_id!r}")

    def validate(self) -> None:
        ids: Set[NodeId] = set()
        for node in self.nodes:
            if node.id in ids:
                raise ValueError(f"Duplicate node id: {node.id!r}")
            if node.type not in NODE_TYPES:
                raise ValueError(f"Unknown node type {node.type!r} on {node.id!r}")
            ids.add(node.id)

        seen: Set[FrozenSet[NodeId]] = set()
        for edge in self.edges:
            if edge.source_id == edge.target_id:
                raise ValueError(f"Self-loop on edge {edge.id!r}")
            for endpoint in (edge.source_id, edge.target_id):
                if endpoint not in ids:
                    raise ValueError(f"Edge {edge.id!r} references unknown node {endpoint!r}")
            key = edge.key()
            if key in seen:
                raise ValueError(f"Duplicate edge between {edge.source_id!r} and {edge.target_id!r}")
            seen.add(key)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "level": self.number,
            "width": self.width,
            "height": self.height,
            "nodes": [n.to_payload() for n in self.nodes],
            "edges": [e.to_payload() for e in self.edges],
        }

    def to_networkx(self):
        """Convert to a networkx.Graph for ad-hoc experimentation."""
        import networkx as nx

        g = nx.Graph()
        for node in self.nodes:
            g.add_node(node.id, pos=(node.x, node.y), label=node.label, type=node.type)
        g.add_edges_from((e.source_id, e.target_id) for e in self.edges)
        return g
