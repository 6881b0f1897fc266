"""
Special tools found inside cubes.

A tool is a shared, stateless value. Its ``kind`` selects the effect and its
``shape`` tells the caller what kind of target to supply: a Location for
cell-shaped tools, a row or column index otherwise.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Union

from cube_types import AlreadyLockedError, CubeKind, ImmovableTargetError, Letter, Location

if TYPE_CHECKING:
    from cube_grid import CubeGrid

logger = logging.getLogger(__name__)


class ToolKind(Enum):
    """The five tool effects."""

    CROSS_STAMP = "cross"
    ROW_STAMP = "row"
    COLUMN_STAMP = "column"
    FLIP = "flip"
    LOCK = "lock"


class TargetShape(Enum):
    """What a tool is aimed at."""

    CELL = "cell"
    ROW = "row"
    COLUMN = "column"


ToolTarget = Union[Location, int]


@dataclass(frozen=True)
class SpecialTool:
    """A tool effect with its display name and description."""

    kind: ToolKind
    name: str
    description: str

    @property
    def shape(self) -> TargetShape:
        match self.kind:
            case ToolKind.ROW_STAMP:
                return TargetShape.ROW
            case ToolKind.COLUMN_STAMP:
                return TargetShape.COLUMN
            case _:
                return TargetShape.CELL

    def apply(self, grid: CubeGrid, target: ToolTarget, letter: Letter) -> None:
        """
        Apply this tool to the grid.

        Args:
            grid: The grid to mutate
            target: A Location for cell-shaped tools, an index for row/column tools
            letter: The letter stamping tools write (ignored by flip and lock)

        Raises:
            ImmovableTargetError: flipping a locked cube
            AlreadyLockedError: locking a locked cube
            ValueError: a target of the wrong shape or out of range
        """
        match self.kind:
            case ToolKind.CROSS_STAMP:
                stamp_cross(grid, _cell_target(grid, target), letter)
            case ToolKind.ROW_STAMP:
                stamp_row(grid, _index_target(grid, target, "row"), letter)
            case ToolKind.COLUMN_STAMP:
                stamp_column(grid, _index_target(grid, target, "column"), letter)
            case ToolKind.FLIP:
                flip_cube(grid, _cell_target(grid, target))
            case ToolKind.LOCK:
                lock_cube(grid, _cell_target(grid, target))
            case _:
                raise ValueError(f"Unknown tool kind: {self.kind}")

    def __str__(self) -> str:
        return self.name


CROSS_STAMP = SpecialTool(
    ToolKind.CROSS_STAMP,
    "PlusShapeStamp",
    "Re-stamps 5 boxes (in a plus shape) to the target letter",
)
ROW_STAMP = SpecialTool(
    ToolKind.ROW_STAMP,
    "MassRowStamp",
    "Re-stamps all boxes in an entire row to the target letter",
)
COLUMN_STAMP = SpecialTool(
    ToolKind.COLUMN_STAMP,
    "MassColumnStamp",
    "Re-stamps all boxes in an entire column to the target letter",
)
FLIPPER = SpecialTool(
    ToolKind.FLIP,
    "BoxFlipper",
    "Flips a box upside down (swaps top and bottom sides)",
)
FIXER = SpecialTool(
    ToolKind.LOCK,
    "BoxFixer",
    "Replaces a box with an identical FixedBox copy",
)

ALL_TOOLS: tuple[SpecialTool, ...] = (CROSS_STAMP, ROW_STAMP, COLUMN_STAMP, FLIPPER, FIXER)


def tool_for(kind: ToolKind) -> SpecialTool:
    for tool in ALL_TOOLS:
        if tool.kind == kind:
            return tool
    raise ValueError(f"No tool for kind: {kind}")


def tool_named(text: str) -> SpecialTool | None:
    """Look up a tool by kind value ("cross") or display name ("BoxFlipper")."""
    key = text.strip().lower()
    for tool in ALL_TOOLS:
        if key in (tool.kind.value, tool.name.lower()):
            return tool
    return None


# =============================================================================
# Generation Policies
# =============================================================================


def random_tool(rng: random.Random) -> SpecialTool:
    """Pick one of the five tools with equal probability."""
    return rng.choice(ALL_TOOLS)


def random_tool_or_none(
    rng: random.Random, empty_probability: float = 0.25
) -> SpecialTool | None:
    """No tool with empty_probability, otherwise a uniformly chosen tool."""
    if rng.random() < empty_probability:
        return None
    return random_tool(rng)


# =============================================================================
# Effects
# =============================================================================


def _cell_target(grid: CubeGrid, target: ToolTarget) -> Location:
    if not isinstance(target, Location):
        raise ValueError(f"Expected a cell location, got {target!r}")
    if not grid.in_bounds(target.row, target.col):
        raise ValueError(f"Location {target} is outside the {grid.size}x{grid.size} grid")
    return target


def _index_target(grid: CubeGrid, target: ToolTarget, axis: str) -> int:
    if isinstance(target, bool) or not isinstance(target, int):
        raise ValueError(f"Expected a {axis} index, got {target!r}")
    if not 0 <= target < grid.size:
        raise ValueError(
            f"Invalid {axis} index: {target} (valid range: 0-{grid.size - 1})"
        )
    return target


def stamp_cross(grid: CubeGrid, center: Location, letter: Letter) -> None:
    """Stamp the center cube and its four neighbors. Neighbors off the grid are skipped."""
    grid.stamp_top(center.row, center.col, letter)
    grid.stamp_top(center.row - 1, center.col, letter)
    grid.stamp_top(center.row + 1, center.col, letter)
    grid.stamp_top(center.row, center.col - 1, letter)
    grid.stamp_top(center.row, center.col + 1, letter)
    logger.debug("stamp_cross: center=%s letter=%s", center, letter)


def stamp_row(grid: CubeGrid, row: int, letter: Letter) -> None:
    for col in range(grid.size):
        grid.stamp_top(row, col, letter)
    logger.debug("stamp_row: row=%d letter=%s", row, letter)


def stamp_column(grid: CubeGrid, col: int, letter: Letter) -> None:
    for row in range(grid.size):
        grid.stamp_top(row, col, letter)
    logger.debug("stamp_column: col=%d letter=%s", col, letter)


def flip_cube(grid: CubeGrid, location: Location) -> None:
    cube = grid.cube_at(location.row, location.col)
    if cube.kind == CubeKind.LOCKED:
        raise ImmovableTargetError(location, "flip")
    cube.flip()
    logger.debug("flip_cube: %s", location)


def lock_cube(grid: CubeGrid, location: Location) -> None:
    cube = grid.cube_at(location.row, location.col)
    if cube.kind == CubeKind.LOCKED:
        raise AlreadyLockedError(location)
    grid.lock_cube(location.row, location.col)
    logger.debug("lock_cube: %s", location)
