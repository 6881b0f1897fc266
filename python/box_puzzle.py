"""
Turn engine for the cube grid puzzle.

Each turn has two stages:
1. Roll: pick an edge cube; it and every cube behind it roll until a locked
   cube or the far edge.
2. Open and use: open a cube rolled this turn and apply the tool inside.

Any turn-forfeiting error (empty cube, immovable cube, already locked cube)
ends the turn early. Whatever already happened in the turn is kept.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from cube_grid import CubeGrid, RollResult
from cube_types import (
    CubeKind,
    Direction,
    EmptyTargetError,
    GameRules,
    ImmovableTargetError,
    Letter,
    Location,
    TurnForfeitedError,
)
from tools import SpecialTool, ToolTarget

logger = logging.getLogger(__name__)


class TurnPhase(Enum):
    """Where the game is within the turn protocol."""

    NOT_STARTED = "not_started"
    AWAITING_ROLL = "awaiting_roll"
    AWAITING_TOOL_USE = "awaiting_tool_use"
    TURN_COMPLETE = "turn_complete"
    GAME_OVER = "game_over"


class Player(Protocol):
    """Supplies the choices a turn needs. Implemented by front ends and scripts."""

    def choose_roll_location(self, game: BoxPuzzle) -> Location: ...

    def choose_direction(self, location: Location, options: list[Direction]) -> Direction: ...

    def choose_open_location(self, game: BoxPuzzle) -> Location: ...

    def choose_tool_target(self, game: BoxPuzzle, tool: SpecialTool) -> ToolTarget: ...


@dataclass
class TurnReport:
    """What happened during one turn."""

    turn: int
    roll: RollResult | None = None
    opened: Location | None = None
    tool: SpecialTool | None = None
    target: ToolTarget | None = None
    forfeit: TurnForfeitedError | None = None
    game_over: bool = False

    @property
    def completed(self) -> bool:
        return self.forfeit is None and not self.game_over


@dataclass
class GameResult:
    """Final state of a finished game."""

    target_letter: Letter
    turns_played: int
    succeeded: bool
    score: int
    reports: list[TurnReport] = field(default_factory=list)


class BoxPuzzle:
    """
    Owns the grid, the target letter and the turn counter.

    Stages can be driven one call at a time (roll, open_cube, use_tool) or a
    whole turn at once through play_turn with a Player.
    """

    def __init__(
        self,
        grid: CubeGrid | None = None,
        target_letter: Letter | None = None,
        rules: GameRules | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.rules = rules or (grid.rules if grid is not None else GameRules())
        self.rng = rng or random.Random()
        self.grid = grid if grid is not None else CubeGrid(rules=self.rules, rng=self.rng)
        self.target_letter = (
            target_letter if target_letter is not None else Letter.random(self.rng)
        )
        self.turn_number = 0
        self.phase = TurnPhase.NOT_STARTED
        self.succeeded: bool | None = None
        self.pending_tool: SpecialTool | None = None
        self.reports: list[TurnReport] = []

    @property
    def finished(self) -> bool:
        return self.phase == TurnPhase.GAME_OVER

    @property
    def max_turns(self) -> int:
        return self.rules.max_turns

    def _require_phase(self, *phases: TurnPhase) -> None:
        if self.phase not in phases:
            expected = " or ".join(p.value for p in phases)
            raise RuntimeError(f"Expected phase {expected}, game is in {self.phase.value}")

    def _set_phase(self, phase: TurnPhase) -> None:
        logger.debug("turn %d: %s -> %s", self.turn_number, self.phase.value, phase.value)
        self.phase = phase

    # =========================================================================
    # Turn Protocol
    # =========================================================================

    def start_turn(self) -> bool:
        """
        Begin the next turn.

        Returns False (and ends the game as failed) when every edge cube is
        locked, since no roll could be made.
        """
        self._require_phase(TurnPhase.NOT_STARTED, TurnPhase.TURN_COMPLETE)
        self.turn_number += 1
        self.pending_tool = None
        self.grid.reset_turn_flags()

        if self.grid.all_edges_locked():
            logger.info("turn %d: all edge cubes are locked, game failed", self.turn_number)
            self._finish(succeeded=False)
            return False

        self._set_phase(TurnPhase.AWAITING_ROLL)
        return True

    def roll(self, location: Location, direction: Direction | None = None) -> RollResult:
        """
        Stage 1: roll the cubes from an edge cube inward.

        Args:
            location: An edge cell
            direction: Required at corners, optional (but checked) elsewhere

        Raises:
            ImmovableTargetError: the edge cube is locked; the turn is over
            ValueError: not an edge cell, or a missing/unavailable direction
        """
        self._require_phase(TurnPhase.AWAITING_ROLL)
        if not self.grid.is_edge(location.row, location.col):
            raise ValueError(f"{location} is not on any of the edges")

        cube = self.grid.cube_at_location(location)
        if cube.kind == CubeKind.LOCKED:
            self._complete_turn()
            raise ImmovableTargetError(location, "roll")

        options = self.grid.available_directions(location.row, location.col)
        if direction is None:
            if len(options) != 1:
                raise ValueError(
                    f"{location} is a corner; choose one of "
                    + ", ".join(d.display_name for d in options)
                )
            direction = options[0]
        elif direction not in options:
            raise ValueError(f"{location} cannot roll {direction.display_name}")

        result = self.grid.propagate_roll(location.row, location.col, direction)
        self._set_phase(TurnPhase.AWAITING_TOOL_USE)
        return result

    def can_open(self, location: Location) -> bool:
        """Whether the cube at location is an acceptable stage 2 choice."""
        if not self.grid.in_bounds(location.row, location.col):
            return False
        if not self.rules.require_rolled_to_open:
            return True
        return self.grid.cube_at_location(location).rolled_this_turn

    def open_cube(self, location: Location) -> SpecialTool:
        """
        Stage 2a: open a cube and take its tool.

        Raises:
            EmptyTargetError: nothing inside; the turn is over
            ValueError: the cube was not rolled during stage 1
        """
        self._require_phase(TurnPhase.AWAITING_TOOL_USE)
        if self.pending_tool is not None:
            raise RuntimeError(f"A {self.pending_tool.name} is waiting to be used")
        if not self.can_open(location):
            raise ValueError(f"The cube at {location} was not rolled during the first stage")

        tool = self.grid.cube_at_location(location).open()
        if tool is None:
            self._complete_turn()
            raise EmptyTargetError(location)

        logger.info("turn %d: opened %s, found %s", self.turn_number, location, tool.name)
        self.pending_tool = tool
        return tool

    def use_tool(self, target: ToolTarget) -> SpecialTool:
        """
        Stage 2b: apply the tool taken out in open_cube.

        Tool errors end the turn and propagate. ValueError (a malformed target)
        leaves the tool pending so the caller can retry.
        """
        self._require_phase(TurnPhase.AWAITING_TOOL_USE)
        tool = self.pending_tool
        if tool is None:
            raise RuntimeError("No tool has been taken out of a cube this turn")

        try:
            tool.apply(self.grid, target, self.target_letter)
        except TurnForfeitedError:
            self._complete_turn()
            raise

        logger.info("turn %d: applied %s at %s", self.turn_number, tool.name, target)
        self._complete_turn()
        return tool

    def _complete_turn(self) -> None:
        self.pending_tool = None
        if self.turn_number >= self.max_turns:
            self._finish(succeeded=True)
        else:
            self._set_phase(TurnPhase.TURN_COMPLETE)

    def _finish(self, succeeded: bool) -> None:
        self.succeeded = succeeded
        self._set_phase(TurnPhase.GAME_OVER)
        logger.info(
            "game over after turn %d: succeeded=%s score=%d",
            self.turn_number,
            succeeded,
            self.score(),
        )

    # =========================================================================
    # Driving With a Player
    # =========================================================================

    def play_turn(self, player: Player) -> TurnReport:
        """Run one whole turn. Turn-forfeiting errors are recorded, not raised."""
        if not self.start_turn():
            report = TurnReport(self.turn_number, game_over=True)
            self.reports.append(report)
            return report

        report = TurnReport(self.turn_number)
        try:
            location = player.choose_roll_location(self)
            options = self.grid.available_directions(location.row, location.col)
            direction = None
            if len(options) > 1 and self.grid.cube_at_location(location).can_roll:
                direction = player.choose_direction(location, options)
            report.roll = self.roll(location, direction)

            report.opened = player.choose_open_location(self)
            report.tool = self.open_cube(report.opened)
            report.target = player.choose_tool_target(self, report.tool)
            self.use_tool(report.target)
        except TurnForfeitedError as exc:
            logger.info("turn %d forfeited: %s", self.turn_number, exc)
            report.forfeit = exc

        self.reports.append(report)
        return report

    def play(self, player: Player) -> GameResult:
        """Play turns until the game is over."""
        while not self.finished:
            self.play_turn(player)
        return self.result()

    def result(self) -> GameResult:
        if not self.finished:
            raise RuntimeError("The game is still in progress")
        return GameResult(
            target_letter=self.target_letter,
            turns_played=self.turn_number,
            succeeded=bool(self.succeeded),
            score=self.score(),
            reports=list(self.reports),
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def score(self) -> int:
        return self.grid.count_label(self.target_letter)

    def view_cube(self, location: Location) -> str:
        return self.grid.cube_at_location(location).render_cube()
