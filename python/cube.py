"""
A single cube ("box") with six lettered faces.

Behavior differences between cube kinds are small, so one class carries a
``kind`` tag instead of a subclass per kind:

- STANDARD: rolls, flips and takes stamps.
- IMMUTABLE_SURFACE: rolls and flips, but stamping the top is a silent no-op.
- LOCKED: never rolls or flips, still takes stamps, never holds a tool and is
  opened from the start.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ascii_render import render_cube
from cube_types import CubeKind, Direction, Face, InvalidDirectionError, Letter

if TYPE_CHECKING:
    from tools import SpecialTool


# Each cycle lists faces in the order a letter travels: cycle[i] -> cycle[i + 1]
ROLL_CYCLES: dict[Direction, tuple[Face, Face, Face, Face]] = {
    Direction.RIGHT: (Face.LEFT, Face.TOP, Face.RIGHT, Face.BOTTOM),
    Direction.LEFT: (Face.RIGHT, Face.TOP, Face.LEFT, Face.BOTTOM),
    Direction.DOWN: (Face.FRONT, Face.TOP, Face.BACK, Face.BOTTOM),
    Direction.UP: (Face.BACK, Face.TOP, Face.FRONT, Face.BOTTOM),
}


def random_surfaces(rng: random.Random, max_repeats: int = 2) -> list[Letter]:
    """Draw six face letters with no letter used more than max_repeats times."""
    pool = [letter for letter in Letter for _ in range(max_repeats)]
    return rng.sample(pool, len(Face))


@dataclass
class Cube:
    """A cube on the grid."""

    surfaces: list[Letter]
    kind: CubeKind = CubeKind.STANDARD
    tool: SpecialTool | None = None
    opened: bool = False
    rolled_this_turn: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.surfaces) != len(Face):
            raise ValueError(f"A cube needs {len(Face)} surfaces, got {len(self.surfaces)}")
        self.surfaces = list(self.surfaces)
        if self.kind == CubeKind.LOCKED:
            self.tool = None
            self.opened = True

    @classmethod
    def generate(
        cls,
        kind: CubeKind,
        rng: random.Random,
        tool: SpecialTool | None = None,
        max_repeats: int = 2,
    ) -> Cube:
        """Create a cube of the given kind with freshly drawn surfaces."""
        return cls(random_surfaces(rng, max_repeats), kind=kind, tool=tool)

    @property
    def top(self) -> Letter:
        return self.surfaces[Face.TOP]

    @property
    def bottom(self) -> Letter:
        return self.surfaces[Face.BOTTOM]

    def face(self, face: Face) -> Letter:
        return self.surfaces[face]

    @property
    def can_roll(self) -> bool:
        return self.kind != CubeKind.LOCKED

    @property
    def is_empty(self) -> bool:
        return self.tool is None

    @property
    def type_identifier(self) -> str:
        return self.kind.value

    def roll(self, direction: Direction | None) -> bool:
        """
        Tip the cube over one edge in the given direction.

        Four faces move one step along the direction's cycle; the two faces on
        the rolling axis stay put. Returns False (and changes nothing) for a
        locked cube.
        """
        if not isinstance(direction, Direction):
            raise InvalidDirectionError(f"Direction cannot be {direction!r}")
        if not self.can_roll:
            return False

        cycle = ROLL_CYCLES[direction]
        moved = [self.surfaces[f] for f in cycle]
        for i, letter in enumerate(moved):
            self.surfaces[cycle[(i + 1) % len(cycle)]] = letter
        self.rolled_this_turn = True
        return True

    def flip(self) -> None:
        """Turn the cube upside down (swap top and bottom)."""
        if self.kind == CubeKind.LOCKED:
            return
        self.surfaces[Face.TOP], self.surfaces[Face.BOTTOM] = (
            self.surfaces[Face.BOTTOM],
            self.surfaces[Face.TOP],
        )

    def stamp_top(self, letter: Letter) -> None:
        if self.kind == CubeKind.IMMUTABLE_SURFACE:
            return
        self.surfaces[Face.TOP] = letter

    def open(self) -> SpecialTool | None:
        """Take the tool out of the cube. The cube stays opened afterwards."""
        self.opened = True
        tool, self.tool = self.tool, None
        return tool

    def lock(self) -> None:
        """Turn this cube into a locked cube with the same faces and no tool."""
        self.kind = CubeKind.LOCKED
        self.tool = None
        self.opened = True

    def reset_turn_flags(self) -> None:
        self.rolled_this_turn = False

    def render_cube(self) -> str:
        return render_cube(self)

    def __str__(self) -> str:
        status = "O" if self.opened else "M"
        return f"| {self.type_identifier}-{self.top}-{status} |"
