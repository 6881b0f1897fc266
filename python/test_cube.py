"""
Tests for the Cube model: rolling, flipping, stamping, opening, locking.
"""

import random
from collections import Counter

import pytest

from cube import ROLL_CYCLES, Cube, random_surfaces
from cube_types import CubeKind, Direction, Face, InvalidDirectionError, Letter
from tools import FLIPPER, ROW_STAMP


def letters(text: str) -> list[Letter]:
    return [Letter(ch) for ch in text]


def faces(cube: Cube) -> str:
    return "".join(str(s) for s in cube.surfaces)


# =============================================================================
# Construction
# =============================================================================


class TestCubeCreation:
    """Tests for creating cubes."""

    def test_standard_cube_defaults(self) -> None:
        cube = Cube(letters("ABCDEF"))
        assert cube.kind == CubeKind.STANDARD
        assert cube.top == Letter.A
        assert cube.bottom == Letter.B
        assert cube.face(Face.RIGHT) == Letter.F
        assert not cube.opened
        assert not cube.rolled_this_turn
        assert cube.tool is None

    def test_wrong_number_of_surfaces(self) -> None:
        with pytest.raises(ValueError):
            Cube(letters("ABC"))

    def test_locked_cube_is_opened_and_empty(self) -> None:
        """A locked cube never holds a tool, even if given one."""
        cube = Cube(letters("ABCDEF"), kind=CubeKind.LOCKED, tool=FLIPPER)
        assert cube.tool is None
        assert cube.opened
        assert not cube.can_roll

    def test_surfaces_are_copied(self) -> None:
        source = letters("ABCDEF")
        cube = Cube(source)
        cube.stamp_top(Letter.H)
        assert source[0] == Letter.A

    def test_type_identifiers(self) -> None:
        assert Cube(letters("AAAAAA")).type_identifier == "R"
        assert Cube(letters("AAAAAA"), kind=CubeKind.IMMUTABLE_SURFACE).type_identifier == "U"
        assert Cube(letters("AAAAAA"), kind=CubeKind.LOCKED).type_identifier == "X"

    def test_str_shows_kind_top_and_status(self) -> None:
        cube = Cube(letters("CBADEF"))
        assert str(cube) == "| R-C-M |"
        cube.open()
        assert str(cube) == "| R-C-O |"


class TestRandomSurfaces:
    """Tests for generation-time face letters."""

    def test_no_letter_more_than_twice(self) -> None:
        rng = random.Random(7)
        for _ in range(500):
            surfaces = random_surfaces(rng)
            assert len(surfaces) == 6
            assert max(Counter(surfaces).values()) <= 2

    def test_single_repeat_limit(self) -> None:
        rng = random.Random(3)
        for _ in range(100):
            assert len(set(random_surfaces(rng, max_repeats=1))) == 6

    def test_generate_uses_kind_and_tool(self) -> None:
        cube = Cube.generate(CubeKind.IMMUTABLE_SURFACE, random.Random(1), ROW_STAMP)
        assert cube.kind == CubeKind.IMMUTABLE_SURFACE
        assert cube.tool is ROW_STAMP
        assert max(Counter(cube.surfaces).values()) <= 2


# =============================================================================
# Rolling
# =============================================================================


class TestRoll:
    """Tests for the four roll permutations."""

    @pytest.mark.parametrize(
        "direction, expected",
        [
            # Top Bottom Front Back Left Right
            (Direction.RIGHT, "EFCDBA"),
            (Direction.LEFT, "FECDAB"),
            (Direction.DOWN, "CDBAEF"),
            (Direction.UP, "DCABEF"),
        ],
    )
    def test_single_roll(self, direction: Direction, expected: str) -> None:
        cube = Cube(letters("ABCDEF"))
        assert cube.roll(direction) is True
        assert faces(cube) == expected
        assert cube.rolled_this_turn

    def test_roll_right_cycle(self) -> None:
        """Rolling right moves Left to Top, Top to Right, Right to Bottom, Bottom to Left."""
        cube = Cube(letters("ABCDEF"))
        cube.roll(Direction.RIGHT)
        assert cube.face(Face.TOP) == Letter.E
        assert cube.face(Face.RIGHT) == Letter.A
        assert cube.face(Face.BOTTOM) == Letter.F
        assert cube.face(Face.LEFT) == Letter.B
        # Axis faces untouched
        assert cube.face(Face.FRONT) == Letter.C
        assert cube.face(Face.BACK) == Letter.D

    @pytest.mark.parametrize("direction", list(Direction))
    @pytest.mark.parametrize("kind", [CubeKind.STANDARD, CubeKind.IMMUTABLE_SURFACE])
    def test_four_rolls_restore_faces(self, direction: Direction, kind: CubeKind) -> None:
        cube = Cube(letters("ABCDEF"), kind=kind)
        for _ in range(4):
            cube.roll(direction)
        assert faces(cube) == "ABCDEF"

    @pytest.mark.parametrize("direction", list(Direction))
    def test_opposite_roll_undoes(self, direction: Direction) -> None:
        cube = Cube(letters("ABCDEF"))
        cube.roll(direction)
        cube.roll(direction.opposite)
        assert faces(cube) == "ABCDEF"

    def test_cycles_cover_top_and_bottom(self) -> None:
        for cycle in ROLL_CYCLES.values():
            assert Face.TOP in cycle
            assert Face.BOTTOM in cycle
            assert len(set(cycle)) == 4

    def test_locked_cube_does_not_roll(self) -> None:
        cube = Cube(letters("ABCDEF"), kind=CubeKind.LOCKED)
        assert cube.roll(Direction.RIGHT) is False
        assert faces(cube) == "ABCDEF"
        assert not cube.rolled_this_turn

    def test_roll_without_direction(self) -> None:
        cube = Cube(letters("ABCDEF"))
        with pytest.raises(InvalidDirectionError):
            cube.roll(None)
        with pytest.raises(ValueError):
            cube.roll("right")  # type: ignore[arg-type]
        assert faces(cube) == "ABCDEF"

    def test_reset_turn_flags(self) -> None:
        cube = Cube(letters("ABCDEF"))
        cube.roll(Direction.UP)
        cube.reset_turn_flags()
        assert not cube.rolled_this_turn


# =============================================================================
# Flip, Stamp, Open, Lock
# =============================================================================


class TestFlip:
    def test_flip_swaps_top_and_bottom(self) -> None:
        cube = Cube(letters("ABCDEF"))
        cube.flip()
        assert faces(cube) == "BACDEF"

    def test_flip_is_its_own_inverse(self) -> None:
        cube = Cube(letters("ABCDEF"), kind=CubeKind.IMMUTABLE_SURFACE)
        cube.flip()
        cube.flip()
        assert faces(cube) == "ABCDEF"

    def test_locked_cube_does_not_flip(self) -> None:
        cube = Cube(letters("ABCDEF"), kind=CubeKind.LOCKED)
        cube.flip()
        assert faces(cube) == "ABCDEF"


class TestStamp:
    def test_stamp_standard(self) -> None:
        cube = Cube(letters("ABCDEF"))
        cube.stamp_top(Letter.H)
        assert faces(cube) == "HBCDEF"

    def test_stamp_immutable_surface_never_changes(self) -> None:
        cube = Cube(letters("ABCDEF"), kind=CubeKind.IMMUTABLE_SURFACE)
        for letter in Letter:
            cube.stamp_top(letter)
        assert cube.top == Letter.A

    def test_stamp_locked_applies(self) -> None:
        """Locking blocks movement, not labeling."""
        cube = Cube(letters("ABCDEF"), kind=CubeKind.LOCKED)
        cube.stamp_top(Letter.G)
        assert cube.top == Letter.G


class TestOpen:
    def test_open_returns_tool_once(self) -> None:
        cube = Cube(letters("ABCDEF"), tool=FLIPPER)
        assert cube.open() is FLIPPER
        assert cube.opened
        assert cube.is_empty
        assert cube.open() is None

    def test_open_empty_cube(self) -> None:
        cube = Cube(letters("ABCDEF"))
        assert cube.open() is None
        assert cube.opened
        assert cube.open() is None
        assert cube.opened

    def test_open_locked_cube(self) -> None:
        cube = Cube(letters("ABCDEF"), kind=CubeKind.LOCKED)
        assert cube.open() is None
        assert cube.opened


class TestLock:
    def test_lock_keeps_faces_and_drops_tool(self) -> None:
        cube = Cube(letters("ABCDEF"), tool=ROW_STAMP)
        cube.roll(Direction.DOWN)
        before = faces(cube)
        cube.lock()
        assert cube.kind == CubeKind.LOCKED
        assert faces(cube) == before
        assert cube.tool is None
        assert cube.opened
        assert not cube.can_roll


class TestRenderCube:
    def test_unfolded_layout(self) -> None:
        cube = Cube(letters("ABCDEF"))
        lines = cube.render_cube().split("\n")
        assert lines[1] == "| D |"
        assert lines[3] == "| E | A | F |"
        assert lines[5] == "| C |"
        assert lines[7] == "| B |"
