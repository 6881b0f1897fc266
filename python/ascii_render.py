"""
ASCII rendering for the cube grid.

Provides two views:
1. Grid table - one ``| K-L-S |`` cell per cube (kind tag, top letter, opened status)
2. Unfolded cube - the six faces of a single cube laid out as a cross
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from cube_types import CubeKind, Face, Letter, Location

if TYPE_CHECKING:
    from cube import Cube
    from cube_grid import CubeGrid

logger = logging.getLogger(__name__)

CELL_WIDTH = 10  # "| R-A-M |" plus one space
ROW_LABEL_WIDTH = 4

# Color per cube kind for the kind tag
KIND_COLORS: dict[CubeKind, Callable[[str], str]] = {
    CubeKind.STANDARD: chalk.cyan,
    CubeKind.IMMUTABLE_SURFACE: chalk.yellow,
    CubeKind.LOCKED: chalk.red,
}


def _plain(text: str) -> str:
    return text


# =============================================================================
# Grid Table
# =============================================================================


def render_cell(
    cube: Cube,
    highlight: Letter | None = None,
    color: bool = False,
    selected: bool = False,
) -> str:
    """Render one cube as ``| K-L-S |``."""
    status = "O" if cube.opened else "M"
    tag = cube.type_identifier
    top = str(cube.top)

    if color:
        tag = KIND_COLORS.get(cube.kind, _plain)(tag)
        if highlight is not None and cube.top == highlight:
            top = chalk.greenBright(top)
        if cube.rolled_this_turn:
            status = chalk.magenta(status)

    cell = f"| {tag}-{top}-{status} |"
    if selected:
        cell = chalk.blueBright(cell) if color else f"[{cell[1:-1]}]"
    return cell


def render_grid(
    grid: CubeGrid,
    highlight: Letter | None = None,
    color: bool = False,
    selected: Location | None = None,
) -> str:
    """
    Render the grid as a table with C1.. column headers and R1.. row labels.

    Args:
        grid: The grid to render
        highlight: Top letter to emphasize (only when color is on)
        color: Use ANSI colors via simple_chalk
        selected: Optional location to mark

    Returns:
        Multi-line string, no trailing newline
    """
    size = grid.size
    rule = "-" * (ROW_LABEL_WIDTH + CELL_WIDTH * size)
    lines = [" " * ROW_LABEL_WIDTH + "".join(f"C{c + 1}".center(CELL_WIDTH) for c in range(size)).rstrip()]
    lines.append(rule)

    for r in range(size):
        cells = [
            render_cell(
                grid.cube_at(r, c),
                highlight=highlight,
                color=color,
                selected=selected == Location(r, c),
            )
            for c in range(size)
        ]
        lines.append(f"R{r + 1}".ljust(ROW_LABEL_WIDTH) + " ".join(cells))
        lines.append(rule)

    logger.debug("render_grid: size=%d color=%s", size, color)
    return "\n".join(lines)


# =============================================================================
# Unfolded Cube
# =============================================================================


def render_cube(cube: Cube) -> str:
    """
    Render all six faces of a cube as an unfolded cross.

    Layout::

        -----
        | B |          B = back
        -------------
        | L | T | R |  L = left, T = top, R = right
        -------------
        | F |          F = front
        -----
        | D |          D = bottom
        -----
    """
    s = cube.surfaces
    return "\n".join(
        [
            "-----",
            f"| {s[Face.BACK]} |",
            "-------------",
            f"| {s[Face.LEFT]} | {s[Face.TOP]} | {s[Face.RIGHT]} |",
            "-------------",
            f"| {s[Face.FRONT]} |",
            "-----",
            f"| {s[Face.BOTTOM]} |",
            "-----",
        ]
    )
