"""
Parsing utilities for the cube grid puzzle.

Provides:
1. Player input parsing (locations, rows, columns, menu choices) - returns None on bad input
2. Grid definitions in a standard format (space separated cells with faces and tools)
3. Grid definitions in a concise format (one kind character per cell)
"""

from __future__ import annotations

import re

from cube import Cube
from cube_grid import CubeGrid
from cube_types import CubeKind, Face, GameRules, Letter, Location
from tools import tool_named

__all__ = [
    "parse_location",
    "parse_row",
    "parse_column",
    "parse_choice",
    "parse_yes_no",
    "parse_grid",
    "parse_grid_concise",
]

DEFAULT_FACES = "ABCDEF"

KIND_CODES: dict[str, CubeKind] = {
    "S": CubeKind.STANDARD,
    "I": CubeKind.IMMUTABLE_SURFACE,
    "L": CubeKind.LOCKED,
}

_LOCATION_RE = re.compile(r"^R?\s*(\d+)\s*[-,\s]?\s*C?\s*(\d+)$")
_ROW_RE = re.compile(r"^R?\s*(\d+)$")
_COLUMN_RE = re.compile(r"^C?\s*(\d+)$")


# =============================================================================
# Player Input
# =============================================================================


def parse_location(text: str | None, size: int = 8) -> Location | None:
    """
    Parse a 1-based location such as "R1-C2", "r1c2", "1-2", "1 2" or "1,2".

    Returns a zero-based Location, or None if the text is malformed or the
    location falls outside a size x size grid.
    """
    if not text:
        return None
    match = _LOCATION_RE.match(text.strip().upper())
    if match is None:
        return None
    row, col = int(match.group(1)) - 1, int(match.group(2)) - 1
    if 0 <= row < size and 0 <= col < size:
        return Location(row, col)
    return None


def _parse_index(text: str | None, pattern: re.Pattern[str], size: int) -> int | None:
    if not text:
        return None
    match = pattern.match(text.strip().upper())
    if match is None:
        return None
    index = int(match.group(1)) - 1
    return index if 0 <= index < size else None


def parse_row(text: str | None, size: int = 8) -> int | None:
    """Parse "R3" or "3" into a zero-based row index."""
    return _parse_index(text, _ROW_RE, size)


def parse_column(text: str | None, size: int = 8) -> int | None:
    """Parse "C5" or "5" into a zero-based column index."""
    return _parse_index(text, _COLUMN_RE, size)


def parse_choice(text: str | None, count: int = 2) -> int | None:
    """Parse a 1-based menu choice into a zero-based index."""
    if not text or not text.strip().isdigit():
        return None
    choice = int(text.strip())
    return choice - 1 if 1 <= choice <= count else None


def parse_yes_no(text: str | None) -> bool | None:
    """Parse "[1] Yes or [2] No" answers; also accepts y/yes/n/no."""
    if not text:
        return None
    answer = text.strip().lower()
    if answer in ("1", "y", "yes"):
        return True
    if answer in ("2", "n", "no"):
        return False
    return None


# =============================================================================
# Grid Definitions
# =============================================================================


def parse_cube(cell_str: str) -> Cube:
    """
    Parse one cell of the standard grid format.

    Format: <kind>[<faces>][:<tool>]
    - kind: S (standard), I (immutable surface), L (locked)
    - faces: nothing (faces ABCDEF), one letter (all six faces), or six letters
      in Top, Bottom, Front, Back, Left, Right order
    - tool: cross, row, column, flip or lock (by kind value or tool name)

    Examples: "S", "SA", "SABCDEF", "IH:flip", "LAAAAAA"
    """
    body, _, tool_str = cell_str.partition(":")
    if not body or body[0] not in KIND_CODES:
        raise ValueError(f"Unknown cube kind in '{cell_str}'")
    kind = KIND_CODES[body[0]]

    face_str = body[1:] or DEFAULT_FACES
    if len(face_str) == 1:
        face_str = face_str * len(Face)
    if len(face_str) != len(Face):
        raise ValueError(f"Expected 0, 1 or {len(Face)} face letters in '{cell_str}'")

    surfaces: list[Letter] = []
    for ch in face_str:
        letter = Letter.from_string(ch)
        if letter is None:
            raise ValueError(f"Invalid face letter '{ch}' in '{cell_str}'")
        surfaces.append(letter)

    tool = None
    if tool_str:
        tool = tool_named(tool_str)
        if tool is None:
            raise ValueError(f"Unknown tool '{tool_str}' in '{cell_str}'")
        if kind == CubeKind.LOCKED:
            raise ValueError(f"A locked cube cannot hold a tool: '{cell_str}'")

    return Cube(surfaces, kind=kind, tool=tool)


def parse_grid(definition: str, rules: GameRules | None = None) -> CubeGrid:
    """
    Parse a grid from the standard string format.

    Format:
    - Rows separated by |
    - Cells separated by whitespace, each parsed by parse_cube
    - The grid must be square

    Example:
        "SA:cross SA|LA IB:flip"
        Creates a 2x2 grid: two standard cubes showing A (the first holds a
        PlusShapeStamp), a locked cube showing A and an immutable-surface cube
        showing B holding a BoxFlipper.

    Args:
        definition: The grid definition string
        rules: Rules for the created grid

    Returns:
        CubeGrid holding the parsed cubes
    """
    row_strings = [row.strip() for row in definition.strip().split("|")]
    rows: list[list[Cube]] = []

    for row_idx, row_str in enumerate(row_strings):
        cubes: list[Cube] = []
        for col_idx, cell_str in enumerate(row_str.split()):
            try:
                cubes.append(parse_cube(cell_str))
            except ValueError as exc:
                error_msg = (
                    f"Invalid cell string: '{cell_str}'\n"
                    f"  Row {row_idx}: \"{row_str}\"\n"
                    f"  Position: column {col_idx}\n"
                    f"  Reason: {exc}\n"
                    f"  Valid formats:\n"
                    f"    - Kind only (S, I, L): faces ABCDEF\n"
                    f"    - Kind + one letter (e.g., 'SA'): all faces that letter\n"
                    f"    - Kind + six letters (e.g., 'SABCDEF'): Top Bottom Front Back Left Right\n"
                    f"    - ':tool' suffix (e.g., 'SA:cross'): cross, row, column, flip, lock"
                )
                raise ValueError(error_msg) from exc
        rows.append(cubes)

    size = len(rows)
    mismatched = [(i, len(row)) for i, row in enumerate(rows) if len(row) != size]
    if mismatched:
        error_msg = (
            f"Grid is not square\n"
            f"  Expected: {size} cells per row (one per row)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} cells - \"{row_strings[row_idx]}\"\n"
        raise ValueError(error_msg)

    return CubeGrid(rows, rules=rules)


def parse_grid_concise(definition: str, rules: GameRules | None = None) -> CubeGrid:
    """
    Parse a grid where each character is one cube kind (S, I or L).

    All cubes get faces ABCDEF and no tool. Rows separated by |.

    Example:
        "SSL|SSS|ISS"
    """
    rows: list[list[Cube]] = []
    for row_idx, row_str in enumerate(definition.strip().split("|")):
        cubes: list[Cube] = []
        for col_idx, char in enumerate(row_str.strip()):
            if char not in KIND_CODES:
                raise ValueError(
                    f"Invalid character '{char}'\n"
                    f"  Row {row_idx}, column {col_idx}\n"
                    f"  Valid characters: S (standard), I (immutable surface), L (locked)"
                )
            cubes.append(parse_cube(char))
        rows.append(cubes)
    return CubeGrid(rows, rules=rules)
