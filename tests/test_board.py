"""
Tests for chakra.board — topology, coordinates, areas and initial setup.
"""

from __future__ import annotations

from collections import deque

import pytest

from chakra.board import (
    ARM_EDGES,
    BOARD_CENTER,
    BOTTOM,
    LEFT,
    RIGHT,
    SUPPORTED_PLAYER_COUNTS,
    TOP,
    Piece,
    display_board,
    empty_state,
    generate,
    initial_state,
    midpoint,
    quarter_turn,
)
from chakra.players import build_players


def is_connected(board) -> bool:
    start = next(iter(board))
    seen = {start}
    queue = deque([start])
    while queue:
        node = queue.popleft()
        for n in board.neighbors(node):
            if n not in seen:
                seen.add(n)
                queue.append(n)
    return len(seen) == len(board)


# ===================================================================
# Graph invariants (every player count)
# ===================================================================

@pytest.mark.parametrize("player_count", SUPPORTED_PLAYER_COUNTS)
class TestGraphInvariants:

    def test_connected(self, player_count):
        assert is_connected(generate(player_count))

    def test_adjacency_symmetric(self, player_count):
        board = generate(player_count)
        for a in board:
            for b in board.neighbors(a):
                assert a in board.neighbors(b), f"{a}->{b} has no reverse edge"

    def test_no_self_loops_or_duplicates(self, player_count):
        board = generate(player_count)
        for a in board:
            nbrs = board.neighbors(a)
            assert a not in nbrs
            assert len(nbrs) == len(set(nbrs))

    def test_edges_listed_once(self, player_count):
        board = generate(player_count)
        degree_sum = sum(len(board.neighbors(n)) for n in board)
        assert len(board.edges()) * 2 == degree_sum

    def test_deterministic_and_cached(self, player_count):
        assert generate(player_count) is generate(player_count)

    def test_nodes_are_read_only(self, player_count):
        board = generate(player_count)
        with pytest.raises(TypeError):
            board.nodes["X1"] = board["G" if player_count == 2 else "I1"]


# ===================================================================
# Node counts and areas
# ===================================================================

class TestNodeCounts:

    def test_two_player(self):
        assert len(generate(2)) == 13

    def test_three_player(self):
        assert len(generate(3)) == 24

    def test_four_player(self):
        assert len(generate(4)) == 32

    def test_edge_counts(self):
        assert len(generate(2).edges()) == 20
        assert len(generate(3).edges()) == 39
        assert len(generate(4).edges()) == 52


class TestAreas:

    def test_two_player_areas(self):
        board = generate(2)
        assert board.area_nodes(TOP) == ["T1", "T2", "T3", "T4", "T5", "T6"]
        assert board.area_nodes(BOTTOM) == ["B1", "B2", "B3", "B4", "B5", "B6"]
        assert board["G"].area is None

    def test_three_player_arms_include_outer_node(self):
        board = generate(3)
        for area in (TOP, RIGHT, BOTTOM):
            assert board.area_nodes(area) == [f"{area}{i}" for i in (7, 1, 2, 3, 4, 6, 5)]
        assert board.area_nodes(LEFT) == []

    def test_three_player_junctions(self):
        board = generate(3)
        for name in ("I1", "I2", "I3"):
            assert board[name].area is None

    def test_four_player_arms(self):
        board = generate(4)
        for area in (TOP, RIGHT, BOTTOM, LEFT):
            assert sorted(board.area_nodes(area)) == [f"{area}{i}" for i in range(1, 8)]
        for name in ("I1", "I2", "I3", "I4"):
            assert board[name].area is None


# ===================================================================
# Two-player geometry
# ===================================================================

class TestTwoPlayerBoard:

    def test_center_neighbors(self):
        board = generate(2)
        assert sorted(board.neighbors("G")) == ["B4", "B5", "B6", "T4", "T5", "T6"]

    def test_cluster_edges(self):
        board = generate(2)
        assert sorted(board.neighbors("T2")) == ["T1", "T3", "T5"]
        assert sorted(board.neighbors("T5")) == ["G", "T2", "T4", "T6"]
        assert not board.is_adjacent("T1", "T3")

    def test_positions(self):
        board = generate(2)
        assert board.position("T1") == (220.0, 200.0)
        assert board.position("B5") == (300.0, 350.0)
        assert board.position("G") == BOARD_CENTER

    def test_mirror_symmetry(self):
        board = generate(2)
        for i in range(1, 7):
            tx, ty = board.position(f"T{i}")
            bx, by = board.position(f"B{i}")
            assert tx == bx
            assert ty + by == 600.0


# ===================================================================
# Three-player geometry
# ===================================================================

class TestThreePlayerBoard:

    def test_node_five_is_midpoint(self):
        board = generate(3)
        for area in (TOP, RIGHT, BOTTOM):
            assert board.position(f"{area}5") == midpoint(
                board.position(f"{area}4"), board.position(f"{area}6")
            )

    def test_top_five_value(self):
        assert generate(3).position("T5") == pytest.approx((300.0, 173.04))

    def test_outer_nodes_are_junction_midpoints(self):
        board = generate(3)
        assert board.position("B7") == (235.0, 337.5)
        assert board.position("T7") == (300.0, 225.0)
        assert board.position("R7") == (365.0, 337.5)

    def test_outer_triangle(self):
        board = generate(3)
        for a, b in (("T7", "B7"), ("T7", "R7"), ("B7", "R7")):
            assert board.is_adjacent(a, b)

    def test_outer_node_neighbors(self):
        board = generate(3)
        assert sorted(board.neighbors("T7")) == ["B7", "I2", "I3", "R7", "T4", "T5", "T6"]

    def test_junction_neighbors(self):
        board = generate(3)
        assert sorted(board.neighbors("I1")) == ["B7", "R7"]
        assert sorted(board.neighbors("I2")) == ["B7", "T7"]
        assert sorted(board.neighbors("I3")) == ["R7", "T7"]


# ===================================================================
# Four-player geometry
# ===================================================================

class TestFourPlayerBoard:

    def test_template_arm(self):
        board = generate(4)
        assert board.position("T1") == (220.0, 50.0)
        assert board.position("T7") == (300.0, 130.0)

    def test_rotated_outer_nodes(self):
        board = generate(4)
        assert board.position("R7") == (470.0, 300.0)
        assert board.position("B7") == (300.0, 470.0)
        assert board.position("L7") == (130.0, 300.0)

    def test_rotated_arm_nodes(self):
        board = generate(4)
        assert board.position("R1") == (550.0, 220.0)
        assert board.position("B1") == (380.0, 550.0)
        assert board.position("L1") == (50.0, 380.0)

    def test_arms_are_congruent(self):
        """Every arm has the same internal edges as the template."""
        board = generate(4)
        for area in (TOP, RIGHT, BOTTOM, LEFT):
            for i, j in ARM_EDGES:
                assert board.is_adjacent(f"{area}{i}", f"{area}{j}")

    def test_ring(self):
        board = generate(4)
        assert sorted(board.neighbors("I1")) == ["L7", "T7"]
        assert sorted(board.neighbors("I3")) == ["B7", "R7"]
        for a, b in (("T7", "R7"), ("R7", "B7"), ("B7", "L7"), ("L7", "T7")):
            assert board.is_adjacent(a, b)
        assert not board.is_adjacent("T7", "B7")


# ===================================================================
# Geometry helpers
# ===================================================================

class TestGeometryHelpers:

    def test_midpoint(self):
        assert midpoint((0, 0), (10, 4)) == (5.0, 2.0)

    def test_quarter_turn_full_circle(self):
        pts = {"a": (220.0, 50.0), "b": (300.0, 130.0)}
        assert quarter_turn(pts, 4) == pts

    def test_quarter_turn_matches_right_arm(self):
        assert quarter_turn({"x": (220, 50)}, 1)["x"] == (550.0, 220.0)


# ===================================================================
# Initial state and display
# ===================================================================

class TestInitialState:

    @pytest.mark.parametrize("player_count", SUPPORTED_PLAYER_COUNTS)
    def test_home_areas_filled(self, player_count):
        board = generate(player_count)
        players = build_players(player_count, 1)
        state = initial_state(board, players)
        for p in players:
            for node in board.area_nodes(p.area):
                assert state[node] == Piece(p.id, p.color)
        home = {n for p in players for n in board.area_nodes(p.area)}
        for node in board:
            if node not in home:
                assert state[node] is None

    @pytest.mark.parametrize("player_count,pieces", [(2, 12), (3, 21), (4, 28)])
    def test_piece_total(self, player_count, pieces):
        board = generate(player_count)
        state = initial_state(board, build_players(player_count, 1))
        assert sum(1 for p in state.values() if p is not None) == pieces

    def test_empty_state(self):
        board = generate(2)
        state = empty_state(board)
        assert set(state) == set(board)
        assert all(v is None for v in state.values())

    def test_fresh_state_each_call(self):
        board = generate(2)
        players = build_players(2, 2)
        a = initial_state(board, players)
        b = initial_state(board, players)
        a["T1"] = None
        assert b["T1"] is not None


class TestDisplay:

    def test_display_contains_nodes(self):
        board = generate(2)
        text = display_board(board, initial_state(board, build_players(2, 2)))
        assert "T1:0" in text
        assert "B6:1" in text
        assert "G:." in text

    def test_display_area_order(self):
        board = generate(4)
        text = display_board(board, empty_state(board))
        assert text.index("T |") < text.index("R |") < text.index("B |") < text.index("L |")
        assert text.index("L |") < text.index("* |")
