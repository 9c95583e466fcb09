"""Shared fixtures for untangle tests."""

import random

import pytest

from untangle.graph import Edge, Node


def make_node(node_id, x, y, width=0.0, height=0.0):
    return Node(id=node_id, label=node_id, type="function", x=x, y=y, width=width, height=height)


def make_edge(u, v):
    return Edge(id=f"{u}-{v}", source_id=u, target_id=v)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def unit_square():
    """Corners of a unit square: a=(0,0), b=(1,0), c=(1,1), d=(0,1)."""
    return [
        make_node("a", 0.0, 0.0),
        make_node("b", 1.0, 0.0),
        make_node("c", 1.0, 1.0),
        make_node("d", 0.0, 1.0),
    ]


@pytest.fixture
def square_sides():
    return [make_edge("a", "b"), make_edge("b", "c"), make_edge("c", "d"), make_edge("d", "a")]


@pytest.fixture
def square_diagonals():
    return [make_edge("a", "c"), make_edge("b", "d")]
