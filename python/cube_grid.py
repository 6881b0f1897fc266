"""
Square grid of cubes with edge topology and chained ("domino") rolling.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterator

from ascii_render import render_grid
from cube import Cube
from cube_types import CubeKind, Direction, GameRules, Letter, Location
from tools import random_tool, random_tool_or_none

logger = logging.getLogger(__name__)


@dataclass
class RollResult:
    """Outcome of a chained roll."""

    start: Location
    direction: Direction
    rolled: list[Location] = field(default_factory=list)
    blocked_by: Location | None = None  # Locked cube that stopped the chain

    @property
    def stopped_by_locked(self) -> bool:
        return self.blocked_by is not None


class CubeGrid:
    """
    A size x size grid of cubes, addressed by zero-based (row, col).

    Each cell owns exactly one Cube for the life of the grid. Locking a cube
    rewrites it in place rather than swapping in a new object.
    """

    def __init__(
        self,
        cells: list[list[Cube]] | None = None,
        *,
        rules: GameRules | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.rules = rules or GameRules()
        self.rng = rng or random.Random()

        if cells is None:
            self.size = self.rules.grid_size
            self.cells: list[list[Cube]] = []
            self.populate()
            return

        size = len(cells)
        mismatched = [(i, len(row)) for i, row in enumerate(cells) if len(row) != size]
        if size == 0 or mismatched:
            error_msg = f"Grid must be square and non-empty, got {size} rows\n"
            for row_idx, actual_cols in mismatched:
                error_msg += f"    Row {row_idx}: {actual_cols} columns\n"
            raise ValueError(error_msg)
        self.size = size
        self.cells = [list(row) for row in cells]

    # =========================================================================
    # Population
    # =========================================================================

    def _generate_cube(self) -> Cube:
        rules = self.rules
        roll = self.rng.random()
        if roll < rules.standard_probability:
            tool = random_tool_or_none(self.rng, rules.empty_tool_probability)
            return Cube.generate(CubeKind.STANDARD, self.rng, tool, rules.max_letter_repeats)
        if roll < rules.standard_probability + rules.immutable_probability:
            tool = random_tool(self.rng)
            return Cube.generate(
                CubeKind.IMMUTABLE_SURFACE, self.rng, tool, rules.max_letter_repeats
            )
        return Cube.generate(CubeKind.LOCKED, self.rng, None, rules.max_letter_repeats)

    def populate(self) -> None:
        """Fill every cell with a freshly generated cube."""
        self.cells = [[self._generate_cube() for _ in range(self.size)] for _ in range(self.size)]

        counts = {kind: 0 for kind in CubeKind}
        for cube in self.cubes():
            counts[cube.kind] += 1
        logger.info(
            "populate: size=%d standard=%d immutable=%d locked=%d",
            self.size,
            counts[CubeKind.STANDARD],
            counts[CubeKind.IMMUTABLE_SURFACE],
            counts[CubeKind.LOCKED],
        )

    # =========================================================================
    # Access
    # =========================================================================

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def cube_at(self, row: int, col: int) -> Cube:
        if not self.in_bounds(row, col):
            raise IndexError(f"({row}, {col}) is outside the {self.size}x{self.size} grid")
        return self.cells[row][col]

    def cube_at_location(self, location: Location) -> Cube:
        return self.cube_at(location.row, location.col)

    def locations(self) -> Iterator[Location]:
        for row in range(self.size):
            for col in range(self.size):
                yield Location(row, col)

    def cubes(self) -> Iterator[Cube]:
        for row in self.cells:
            yield from row

    # =========================================================================
    # Topology
    # =========================================================================

    def is_edge(self, row: int, col: int) -> bool:
        last = self.size - 1
        return self.in_bounds(row, col) and (row in (0, last) or col in (0, last))

    def is_corner(self, row: int, col: int) -> bool:
        last = self.size - 1
        return self.in_bounds(row, col) and row in (0, last) and col in (0, last)

    def available_directions(self, row: int, col: int) -> list[Direction]:
        """
        Directions a roll may start in from this cell, pointing into the grid.

        Corners give two (horizontal first), other edge cells one, and
        interior cells none.
        """
        if not self.is_edge(row, col):
            return []

        last = self.size - 1
        horizontal: Direction | None = None
        vertical: Direction | None = None
        if col == 0:
            horizontal = Direction.RIGHT
        elif col == last:
            horizontal = Direction.LEFT
        if row == 0:
            vertical = Direction.DOWN
        elif row == last:
            vertical = Direction.UP

        if self.is_corner(row, col):
            return [d for d in (horizontal, vertical) if d is not None]
        # A non-corner edge cell rolls away from the edge it sits on
        if row in (0, last):
            return [vertical] if vertical is not None else []
        return [horizontal] if horizontal is not None else []

    # =========================================================================
    # Rolling
    # =========================================================================

    def propagate_roll(self, start_row: int, start_col: int, direction: Direction) -> RollResult:
        """
        Roll every movable cube from the start cell onward in the given direction.

        The chain stops at the grid boundary or at the first locked cube, which
        is not rolled. Each step moves one cell toward the boundary, so at most
        size cubes are visited.
        """
        result = RollResult(Location(start_row, start_col), direction)
        location = result.start

        while self.in_bounds(location.row, location.col):
            cube = self.cells[location.row][location.col]
            if not cube.can_roll:
                result.blocked_by = location
                break
            cube.roll(direction)
            result.rolled.append(location)
            location = location.step(direction)

        logger.info(
            "propagate_roll: start=%s direction=%s rolled=%d blocked_by=%s",
            result.start,
            direction.value,
            len(result.rolled),
            result.blocked_by,
        )
        return result

    def reset_turn_flags(self) -> None:
        for cube in self.cubes():
            cube.reset_turn_flags()

    # =========================================================================
    # Mutation Helpers
    # =========================================================================

    def stamp_top(self, row: int, col: int, letter: Letter) -> bool:
        """Stamp one cube. Out-of-range coordinates are ignored (returns False)."""
        if not self.in_bounds(row, col):
            return False
        self.cells[row][col].stamp_top(letter)
        return True

    def lock_cube(self, row: int, col: int) -> None:
        self.cube_at(row, col).lock()

    # =========================================================================
    # Queries
    # =========================================================================

    def count_label(self, letter: Letter) -> int:
        """Number of cubes whose top shows the given letter."""
        return sum(1 for cube in self.cubes() if cube.top == letter)

    def all_edges_locked(self) -> bool:
        """True when no edge cube can start a roll."""
        return all(
            self.cells[loc.row][loc.col].kind == CubeKind.LOCKED
            for loc in self.locations()
            if self.is_edge(loc.row, loc.col)
        )

    def render(self) -> str:
        return render_grid(self)
