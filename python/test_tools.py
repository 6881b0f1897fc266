"""
Tests for the special tools and their generation policies.
"""

import random
from collections import Counter

import pytest

from cube_types import AlreadyLockedError, CubeKind, ImmovableTargetError, Letter, Location
from grid_parser import parse_grid
from tools import (
    ALL_TOOLS,
    COLUMN_STAMP,
    CROSS_STAMP,
    FIXER,
    FLIPPER,
    ROW_STAMP,
    TargetShape,
    ToolKind,
    random_tool,
    random_tool_or_none,
    tool_for,
    tool_named,
)


def uniform_grid(cell: str = "SA", size: int = 8) -> str:
    return "|".join([" ".join([cell] * size)] * size)


# =============================================================================
# Tool Values
# =============================================================================


class TestToolValues:
    def test_five_distinct_tools(self) -> None:
        assert len(ALL_TOOLS) == 5
        assert {t.kind for t in ALL_TOOLS} == set(ToolKind)

    def test_shapes(self) -> None:
        assert CROSS_STAMP.shape == TargetShape.CELL
        assert ROW_STAMP.shape == TargetShape.ROW
        assert COLUMN_STAMP.shape == TargetShape.COLUMN
        assert FLIPPER.shape == TargetShape.CELL
        assert FIXER.shape == TargetShape.CELL

    def test_lookup(self) -> None:
        assert tool_for(ToolKind.FLIP) is FLIPPER
        assert tool_named("cross") is CROSS_STAMP
        assert tool_named("BoxFixer") is FIXER
        assert tool_named("hammer") is None

    def test_str_is_name(self) -> None:
        assert str(ROW_STAMP) == "MassRowStamp"


# =============================================================================
# Stamping Tools
# =============================================================================


class TestCrossStamp:
    def test_center_and_neighbors(self) -> None:
        grid = parse_grid(uniform_grid())
        assert grid.count_label(Letter.A) == 64

        CROSS_STAMP.apply(grid, Location(3, 3), Letter.B)

        assert grid.count_label(Letter.B) == 5
        assert grid.count_label(Letter.A) == 59
        for r, c in [(3, 3), (2, 3), (4, 3), (3, 2), (3, 4)]:
            assert grid.cube_at(r, c).top == Letter.B

    def test_corner_skips_outside_neighbors(self) -> None:
        grid = parse_grid(uniform_grid())
        CROSS_STAMP.apply(grid, Location(0, 0), Letter.C)
        assert grid.count_label(Letter.C) == 3

    def test_edge_skips_outside_neighbor(self) -> None:
        grid = parse_grid(uniform_grid())
        CROSS_STAMP.apply(grid, Location(7, 4), Letter.C)
        assert grid.count_label(Letter.C) == 4

    def test_immutable_cubes_keep_their_top(self) -> None:
        grid = parse_grid("SA SA SA|SA IA SA|SA SA SA")
        CROSS_STAMP.apply(grid, Location(1, 1), Letter.D)
        assert grid.cube_at(1, 1).top == Letter.A
        assert grid.count_label(Letter.D) == 4

    def test_out_of_range_center(self) -> None:
        grid = parse_grid(uniform_grid())
        with pytest.raises(ValueError):
            CROSS_STAMP.apply(grid, Location(8, 0), Letter.B)

    def test_wrong_target_shape(self) -> None:
        grid = parse_grid(uniform_grid())
        with pytest.raises(ValueError):
            CROSS_STAMP.apply(grid, 3, Letter.B)


class TestRowAndColumnStamp:
    def test_row(self) -> None:
        grid = parse_grid(uniform_grid())
        ROW_STAMP.apply(grid, 2, Letter.E)
        assert grid.count_label(Letter.E) == 8
        assert all(grid.cube_at(2, c).top == Letter.E for c in range(8))

    def test_column(self) -> None:
        grid = parse_grid(uniform_grid())
        COLUMN_STAMP.apply(grid, 7, Letter.F)
        assert grid.count_label(Letter.F) == 8
        assert all(grid.cube_at(r, 7).top == Letter.F for r in range(8))

    def test_row_stamps_locked_but_not_immutable(self) -> None:
        grid = parse_grid("SA LA IA|SA SA SA|SA SA SA")
        ROW_STAMP.apply(grid, 0, Letter.H)
        assert [grid.cube_at(0, c).top for c in range(3)] == [Letter.H, Letter.H, Letter.A]

    @pytest.mark.parametrize("index", [-1, 8])
    def test_index_out_of_range(self, index: int) -> None:
        grid = parse_grid(uniform_grid())
        with pytest.raises(ValueError):
            ROW_STAMP.apply(grid, index, Letter.B)
        with pytest.raises(ValueError):
            COLUMN_STAMP.apply(grid, index, Letter.B)

    def test_location_is_not_an_index(self) -> None:
        grid = parse_grid(uniform_grid())
        with pytest.raises(ValueError):
            ROW_STAMP.apply(grid, Location(1, 1), Letter.B)


# =============================================================================
# Flip and Lock
# =============================================================================


class TestFlipper:
    def test_flip(self) -> None:
        grid = parse_grid("SABCDEF SA|SA SA")
        FLIPPER.apply(grid, Location(0, 0), Letter.H)
        assert grid.cube_at(0, 0).top == Letter.B
        assert grid.cube_at(0, 0).bottom == Letter.A

    def test_flip_locked_raises(self) -> None:
        grid = parse_grid("LABCDEF SA|SA SA")
        with pytest.raises(ImmovableTargetError) as exc_info:
            FLIPPER.apply(grid, Location(0, 0), Letter.H)
        assert exc_info.value.action == "flip"
        assert exc_info.value.location == Location(0, 0)
        assert grid.cube_at(0, 0).top == Letter.A


class TestFixer:
    def test_lock_in_place(self) -> None:
        grid = parse_grid("SABCDEF:row SA|SA SA")
        cube = grid.cube_at(0, 0)
        FIXER.apply(grid, Location(0, 0), Letter.H)
        assert grid.cube_at(0, 0) is cube
        assert cube.kind == CubeKind.LOCKED
        assert cube.tool is None
        assert cube.opened
        assert "".join(str(s) for s in cube.surfaces) == "ABCDEF"

    def test_lock_immutable_surface(self) -> None:
        grid = parse_grid("IA SA|SA SA")
        FIXER.apply(grid, Location(0, 0), Letter.H)
        assert grid.cube_at(0, 0).kind == CubeKind.LOCKED

    def test_lock_locked_raises(self) -> None:
        grid = parse_grid("LA SA|SA SA")
        with pytest.raises(AlreadyLockedError) as exc_info:
            FIXER.apply(grid, Location(0, 0), Letter.H)
        assert "R1-C1" in str(exc_info.value)


# =============================================================================
# Generation Policies
# =============================================================================


class TestGeneration:
    def test_random_tool_is_uniform(self) -> None:
        rng = random.Random(11)
        counts = Counter(random_tool(rng).kind for _ in range(10000))
        assert set(counts) == set(ToolKind)
        for count in counts.values():
            assert abs(count / 10000 - 0.20) < 0.02

    def test_random_tool_or_none(self) -> None:
        rng = random.Random(5)
        counts = Counter(
            t.kind if t is not None else None
            for t in (random_tool_or_none(rng) for _ in range(20000))
        )
        assert abs(counts[None] / 20000 - 0.25) < 0.02
        for kind in ToolKind:
            assert abs(counts[kind] / 20000 - 0.15) < 0.02

    def test_never_empty(self) -> None:
        rng = random.Random(0)
        assert all(random_tool_or_none(rng, 0.0) is not None for _ in range(200))
