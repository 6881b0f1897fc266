"""
Shared type definitions for the cube grid puzzle.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, IntEnum


class Letter(Enum):
    """A letter that can be stamped on a cube face."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"

    @classmethod
    def random(cls, rng: random.Random) -> Letter:
        return rng.choice(list(cls))

    @classmethod
    def from_string(cls, text: str | None) -> Letter | None:
        """Case-insensitive lookup. Returns None for anything that is not A-H."""
        if not text:
            return None
        try:
            return cls(text.strip().upper())
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


class Direction(Enum):
    """Cardinal direction for rolling."""

    UP = "up"  # decreasing row
    DOWN = "down"  # increasing row
    LEFT = "left"  # decreasing col
    RIGHT = "right"  # increasing col

    @property
    def delta(self) -> tuple[int, int]:
        """(row_delta, col_delta) for one step in this direction."""
        return _DELTAS[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @property
    def is_horizontal(self) -> bool:
        return self in (Direction.LEFT, Direction.RIGHT)

    @property
    def is_vertical(self) -> bool:
        return self in (Direction.UP, Direction.DOWN)


_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}

_DISPLAY_NAMES = {
    Direction.UP: "upwards",
    Direction.DOWN: "downwards",
    Direction.LEFT: "left",
    Direction.RIGHT: "right",
}

_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Face(IntEnum):
    """Index of each face in a cube's surface list."""

    TOP = 0
    BOTTOM = 1
    FRONT = 2
    BACK = 3
    LEFT = 4
    RIGHT = 5


class CubeKind(Enum):
    """Capability variant of a cube. The value is the tag shown in the grid."""

    STANDARD = "R"  # rolls, flips, takes stamps
    IMMUTABLE_SURFACE = "U"  # rolls and flips, ignores stamps
    LOCKED = "X"  # never moves, never holds a tool


@dataclass(frozen=True)
class Location:
    """A zero-based cell position in the grid."""

    row: int
    col: int

    def step(self, direction: Direction) -> Location:
        dr, dc = direction.delta
        return Location(self.row + dr, self.col + dc)

    def __str__(self) -> str:
        return f"R{self.row + 1}-C{self.col + 1}"


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class GameRules:
    """Tunables governing grid generation and the turn loop."""

    grid_size: int = 8
    max_turns: int = 5
    standard_probability: float = 0.85
    immutable_probability: float = 0.10
    locked_probability: float = 0.05
    empty_tool_probability: float = 0.25
    max_letter_repeats: int = 2
    require_rolled_to_open: bool = True

    def __post_init__(self) -> None:
        if self.grid_size < 1:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        if self.max_turns < 1:
            raise ValueError(f"max_turns must be positive, got {self.max_turns}")
        # The letter pool must hold at least six letters
        if self.max_letter_repeats * len(Letter) < 6:
            raise ValueError(
                f"max_letter_repeats={self.max_letter_repeats} cannot fill six faces"
            )

        kind_probabilities = (
            self.standard_probability,
            self.immutable_probability,
            self.locked_probability,
        )
        for p in (*kind_probabilities, self.empty_tool_probability):
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"Probability out of range [0, 1]: {p}")
        if abs(sum(kind_probabilities) - 1.0) > 1e-9:
            raise ValueError(
                "Cube kind probabilities must sum to 1, got "
                f"{self.standard_probability} + {self.immutable_probability} + "
                f"{self.locked_probability}"
            )


# =============================================================================
# Turn-forfeiting errors
# =============================================================================


class TurnForfeitedError(Exception):
    """Base for errors that end the current turn early. Never fatal to the game."""

    def __init__(self, message: str, location: Location | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.message} [Location: {self.location}]"


class EmptyTargetError(TurnForfeitedError):
    """The opened cube held no tool."""

    def __init__(self, location: Location | None = None) -> None:
        super().__init__("BOX IS EMPTY! Continuing to the next turn...", location)


class ImmovableTargetError(TurnForfeitedError):
    """A roll or flip was attempted on a locked cube."""

    def __init__(self, location: Location | None = None, action: str = "roll") -> None:
        if action == "flip":
            message = "Cannot flip a FixedBox! Continuing to the next turn..."
        else:
            message = "HOWEVER, IT IS FIXED BOX AND CANNOT BE MOVED. Continuing to the next turn..."
        super().__init__(message, location)
        self.action = action


class AlreadyLockedError(TurnForfeitedError):
    """A lock was attempted on a cube that is already locked."""

    def __init__(self, location: Location | None = None) -> None:
        super().__init__(
            "The selected box is already a FixedBox and cannot be fixed again. "
            "Continuing to the next turn...",
            location,
        )


class InvalidDirectionError(ValueError):
    """A roll was requested without a valid direction."""
