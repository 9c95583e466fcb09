"""Tests for crossing detection and the solved flag."""

import pytest

from untangle import tracker as tracker_module
from untangle.tracker import CrossingTracker, recheck

from .conftest import make_edge, make_node


class TestRecheck:
    def test_square_sides_are_solved(self, unit_square, square_sides):
        edges, solved = recheck(unit_square, square_sides)
        assert solved is True
        assert all(e.is_intersecting is False for e in edges)

    def test_square_diagonals_cross(self, unit_square, square_sides, square_diagonals):
        edges, solved = recheck(unit_square, square_sides + square_diagonals)
        flags = {e.id: e.is_intersecting for e in edges}

        assert solved is False
        assert flags["a-c"] is True
        assert flags["b-d"] is True
        for side in square_sides:
            assert flags[side.id] is False

    def test_uses_node_centres(self):
        # Top-left corners only touch at (1,1); the centres cross there.
        nodes = [
            make_node("a", -1.0, -1.0, width=2.0, height=2.0),
            make_node("c", 1.0, 1.0, width=2.0, height=2.0),
            make_node("b", 2.0, 0.0),
            make_node("d", 0.0, 2.0),
        ]
        edges, solved = recheck(nodes, [make_edge("a", "c"), make_edge("b", "d")])
        assert solved is False

    def test_preserves_topology_and_does_not_mutate_input(self, unit_square, square_sides, square_diagonals):
        original = square_sides + square_diagonals
        edges, _ = recheck(unit_square, original)

        assert [(e.id, e.source_id, e.target_id) for e in edges] == [
            (e.id, e.source_id, e.target_id) for e in original
        ]
        assert all(e.is_intersecting is False for e in original)

    def test_stale_flags_are_cleared(self, unit_square, square_sides):
        stale = [e.__class__(e.id, e.source_id, e.target_id, True) for e in square_sides]
        edges, solved = recheck(unit_square, stale)
        assert solved is True
        assert not any(e.is_intersecting for e in edges)

    def test_shared_endpoint_pairs_are_never_tested(self, unit_square, monkeypatch):
        calls = []

        def always_cross(*args):
            calls.append(args)
            return True

        monkeypatch.setattr(tracker_module, "segments_intersect", always_cross)
        star = [make_edge("a", "b"), make_edge("a", "c"), make_edge("a", "d")]

        edges, solved = recheck(unit_square, star)

        assert solved is True
        assert calls == []
        assert not any(e.is_intersecting for e in edges)

    def test_unknown_node_raises(self, unit_square):
        with pytest.raises(KeyError):
            recheck(unit_square, [make_edge("a", "zzz"), make_edge("b", "c")])

    def test_empty_edge_list_is_solved(self, unit_square):
        assert recheck(unit_square, []) == ([], True)


class TestCrossingTracker:
    @pytest.fixture
    def crossed(self, unit_square, square_diagonals):
        nodes = {n.id: n for n in unit_square}
        return nodes, CrossingTracker(square_diagonals)

    def test_initial_crossing_state(self, crossed):
        nodes, t = crossed
        result = t.update(list(nodes.values()))
        assert result.solved is False
        assert result.just_solved is False
        assert result.just_unsolved is False
        assert result.crossing_count == 2
        assert t.solved is False

    def test_solved_transition_fires_once(self, crossed):
        nodes, t = crossed
        t.update(list(nodes.values()))

        nodes["d"].x, nodes["d"].y = 2.0, -1.0
        first = t.update(list(nodes.values()))
        assert first.solved is True
        assert first.just_solved is True
        assert first.crossing_count == 0

        again = t.update(list(nodes.values()))
        assert again.solved is True
        assert again.just_solved is False

        nodes["d"].x = 3.0
        still = t.update(list(nodes.values()))
        assert still.solved is True
        assert still.just_solved is False

    def test_unsolved_transition(self, crossed):
        nodes, t = crossed
        nodes["d"].x, nodes["d"].y = 2.0, -1.0
        assert t.update(list(nodes.values())).just_solved is True

        nodes["d"].x, nodes["d"].y = 0.0, 1.0
        result = t.update(list(nodes.values()))
        assert result.solved is False
        assert result.just_unsolved is True
        assert t.solved is False

    def test_unchanged_positions_hit_the_cache(self, crossed, monkeypatch):
        nodes, t = crossed
        calls = []
        real = tracker_module.recheck

        def counting(n, e):
            calls.append(1)
            return real(n, e)

        monkeypatch.setattr(tracker_module, "recheck", counting)

        t.update(list(nodes.values()))
        t.update(list(nodes.values()))
        assert len(calls) == 1

        nodes["a"].x = 0.5
        t.update(list(nodes.values()))
        assert len(calls) == 2

    def test_edges_property_reflects_last_update(self, crossed):
        nodes, t = crossed
        t.update(list(nodes.values()))
        assert all(e.is_intersecting for e in t.edges)


class TestLevelValidate:
    def _level(self, nodes, edges):
        from untangle.graph import Level

        return Level(number=1, width=100, height=100, nodes=nodes, edges=edges)

    def test_rejects_dangling_endpoint(self, unit_square):
        with pytest.raises(ValueError, match="unknown node"):
            self._level(unit_square, [make_edge("a", "q")]).validate()

    def test_rejects_reversed_duplicate(self, unit_square):
        edges = [make_edge("a", "b"), make_edge("b", "a")]
        with pytest.raises(ValueError, match="Duplicate edge"):
            self._level(unit_square, edges).validate()

    def test_rejects_self_loop(self, unit_square):
        with pytest.raises(ValueError, match="Self-loop"):
            self._level(unit_square, [make_edge("a", "a")]).validate()

    def test_require_node(self, unit_square):
        lvl = self._level(unit_square, [])
        assert lvl.require_node("c").x == 1.0
        with pytest.raises(KeyError, match="Unknown node"):
            lvl.require_node("zzz")
