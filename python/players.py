"""
Non-interactive players that drive BoxPuzzle.play_turn.
"""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cube_types import Direction, Location
from tools import SpecialTool, TargetShape, ToolTarget

if TYPE_CHECKING:
    from box_puzzle import BoxPuzzle


@dataclass(frozen=True)
class TurnScript:
    """The choices for one scripted turn."""

    roll: Location
    open: Location | None = None
    target: ToolTarget | None = None
    direction: Direction | None = None


class ScriptedPlayer:
    """Replays a fixed list of turns. Raises IndexError when the script runs out."""

    def __init__(self, turns: list[TurnScript]) -> None:
        self.turns = deque(turns)
        self.current: TurnScript | None = None

    def choose_roll_location(self, game: BoxPuzzle) -> Location:
        if not self.turns:
            raise IndexError(f"Script has no choices left for turn {game.turn_number}")
        self.current = self.turns.popleft()
        return self.current.roll

    def choose_direction(self, location: Location, options: list[Direction]) -> Direction:
        assert self.current is not None
        return self.current.direction if self.current.direction is not None else options[0]

    def choose_open_location(self, game: BoxPuzzle) -> Location:
        assert self.current is not None
        if self.current.open is not None:
            return self.current.open
        # Default to the cube the roll started from
        return self.current.roll

    def choose_tool_target(self, game: BoxPuzzle, tool: SpecialTool) -> ToolTarget:
        assert self.current is not None
        if self.current.target is None:
            raise ValueError(f"Script has no target for {tool.name} on turn {game.turn_number}")
        return self.current.target


class RandomPlayer:
    """Makes uniformly random legal choices."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def choose_roll_location(self, game: BoxPuzzle) -> Location:
        grid = game.grid
        edges = [loc for loc in grid.locations() if grid.is_edge(loc.row, loc.col)]
        return self.rng.choice(edges)

    def choose_direction(self, location: Location, options: list[Direction]) -> Direction:
        return self.rng.choice(options)

    def choose_open_location(self, game: BoxPuzzle) -> Location:
        candidates = [loc for loc in game.grid.locations() if game.can_open(loc)]
        return self.rng.choice(candidates)

    def choose_tool_target(self, game: BoxPuzzle, tool: SpecialTool) -> ToolTarget:
        size = game.grid.size
        if tool.shape == TargetShape.CELL:
            return Location(self.rng.randrange(size), self.rng.randrange(size))
        return self.rng.randrange(size)
