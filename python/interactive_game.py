"""
Interactive console game for the cube grid puzzle.
Shows the grid in a panel and prompts for each choice of the turn.
"""

import logging
import random
import sys

import readchar
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_grid
from box_puzzle import BoxPuzzle, GameResult
from cube_types import Direction, GameRules, Location
from grid_parser import (
    parse_column,
    parse_grid,
    parse_location,
    parse_row,
)
from tools import SpecialTool, TargetShape, ToolTarget

logger = logging.getLogger(__name__)


class InteractiveGame:
    """Console front end. Implements the Player protocol for BoxPuzzle."""

    def __init__(self, game: BoxPuzzle, console: Console | None = None) -> None:
        self.game = game
        self.console = console or Console()
        self.status_message = "Ready"

    def generate_display(self, selected: Location | None = None) -> Panel:
        """Generate the current display with grid and status."""
        game = self.game
        status = Text()
        status.append("Target letter: ", style="bold")
        status.append(f"{game.target_letter}", style="bold green")
        status.append("   Turn: ", style="bold")
        status.append(f"{game.turn_number}/{game.max_turns}\n\n")

        grid_text = render_grid(game.grid, highlight=game.target_letter, color=True, selected=selected)
        status.append(Text.from_ansi(grid_text))
        status.append("\n\n")
        status.append("Legend: ", style="bold cyan")
        status.append("R regular  U unchanging  X fixed  |  M unopened  O opened\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Box Top Side Matching Puzzle", border_style="green")

    def show(self, selected: Location | None = None) -> None:
        self.console.print(self.generate_display(selected))

    # =========================================================================
    # Prompts
    # =========================================================================

    def ask_location(self, prompt: str) -> Location:
        while True:
            text = self.console.input(f"{prompt} ")
            location = parse_location(text, self.game.grid.size)
            if location is not None:
                return location
            self.console.print("[red]INCORRECT INPUT:[/red] Invalid location format (e.g. R1-C2). Please try again.")

    def ask_key(self, prompt: str, keys: dict[str, object]) -> object:
        """Read single key presses until one of keys is pressed."""
        self.console.print(prompt, end=" ")
        while True:
            key = readchar.readkey()
            if key.lower() in keys:
                self.console.print(key)
                return keys[key.lower()]
            if key in (readchar.key.CTRL_C, readchar.key.CTRL_D):
                raise KeyboardInterrupt

    def offer_cube_viewing(self) -> None:
        wants = self.ask_key(
            "---> Do you want to view all surfaces of a box? [1] Yes or [2] No?",
            {"1": True, "y": True, "2": False, "n": False},
        )
        if not wants:
            self.console.print("Continuing to the first stage...")
            return
        location = self.ask_location("Please enter the location of the box you want to view:")
        self.console.print(self.game.view_cube(location))

    # =========================================================================
    # Player Protocol
    # =========================================================================

    def choose_roll_location(self, game: BoxPuzzle) -> Location:
        self.offer_cube_viewing()
        self.console.print(f"\n---> TURN {game.turn_number} - FIRST STAGE:")
        while True:
            location = self.ask_location("Please enter the location of the edge box you want to roll:")
            if game.grid.is_edge(location.row, location.col):
                return location
            self.console.print("[red]INCORRECT INPUT:[/red] The chosen box is not on any of the edges.")

    def choose_direction(self, location: Location, options: list[Direction]) -> Direction:
        first, second = options
        return self.ask_key(
            f"The chosen box can be rolled to either [1] {first.display_name} or [2] {second.display_name}:",
            {"1": first, "2": second},
        )  # type: ignore[return-value]

    def choose_open_location(self, game: BoxPuzzle) -> Location:
        self.show()
        self.console.print(f"\n---> TURN {game.turn_number} - SECOND STAGE:")
        while True:
            location = self.ask_location("Please enter the location of the box you want to open:")
            if game.can_open(location):
                return location
            self.console.print(
                "[red]INCORRECT INPUT:[/red] The chosen box was not rolled during the first stage."
            )

    def choose_tool_target(self, game: BoxPuzzle, tool: SpecialTool) -> ToolTarget:
        self.console.print(f"It contains a SpecialTool --> [bold]{tool.name}[/bold] ({tool.description})")
        size = game.grid.size
        match tool.shape:
            case TargetShape.ROW:
                while True:
                    row = parse_row(self.console.input("Please enter the row to stamp (e.g., R3 or 3): "), size)
                    if row is not None:
                        return row
                    self.console.print("[red]INCORRECT INPUT:[/red] Invalid row. Please try again.")
            case TargetShape.COLUMN:
                while True:
                    col = parse_column(
                        self.console.input("Please enter the column to stamp (e.g., C5 or 5): "), size
                    )
                    if col is not None:
                        return col
                    self.console.print("[red]INCORRECT INPUT:[/red] Invalid column. Please try again.")
            case _:
                return self.ask_location("Please enter the location of the box to use this SpecialTool:")

    # =========================================================================
    # Game Loop
    # =========================================================================

    def run(self) -> GameResult:
        """Play the game to the end, showing the grid after every turn."""
        game = self.game
        self.console.print(
            "Welcome to Box Top Side Matching Puzzle App. "
            f"A {game.grid.size}x{game.grid.size} box grid is being generated."
        )
        self.console.print(
            f'Your goal is to maximize the letter "{game.target_letter}" on the top sides of the boxes.'
        )
        self.show()

        try:
            while not game.finished:
                report = game.play_turn(self)
                if report.game_over:
                    self.status_message = "No moves can be made (all edge boxes are fixed)."
                elif report.forfeit is not None:
                    self.status_message = f"✗ {report.forfeit}"
                elif report.tool is not None:
                    self.status_message = f"✓ {report.tool.name} used on {report.target}"
                self.show()
        except KeyboardInterrupt:
            self.console.print("\nInterrupted by user")
            raise

        result = game.result()
        self.console.print("\n******** GAME OVER ********")
        self.console.print(
            f'THE TOTAL NUMBER OF TARGET LETTER "{result.target_letter}" IN THE BOX GRID --> {result.score}'
        )
        if result.succeeded:
            self.console.print("[bold green]The game has been SUCCESSFULLY completed![/bold green]")
        else:
            self.console.print("[bold red]The game has FAILED - no more moves can be made.[/bold red]")
        return result


LAYOUTS = dict(
    # Interior cubes are locked, so side rolls stop after the edge cube
    ring="SA:cross SA:row SA:column SA:flip SA:lock SA:cross SA:row SA:column|"
    + "|".join(["SB:row LB LB LB LB LB LB SB:column"] * 6)
    + "|SC:flip SC:lock SC:cross SC:row SC:column SC:flip SC:lock SC:cross",
)


def parse_args(argv: list[str]) -> dict[str, str]:
    """Collect key=value options and bare flags from argv."""
    options: dict[str, str] = {}
    for arg in argv:
        key, _, value = arg.partition("=")
        options[key] = value
    return options


def main(argv: list[str] | None = None) -> None:
    """Run the interactive game."""
    options = parse_args(sys.argv[1:] if argv is None else argv)

    level = logging.INFO if "debug" in options else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    rules = GameRules(max_turns=int(options["turns"])) if options.get("turns") else GameRules()
    rng = random.Random(int(options["seed"])) if options.get("seed") else random.Random()

    grid = parse_grid(LAYOUTS[options["layout"]], rules=rules) if options.get("layout") else None
    game = BoxPuzzle(grid=grid, rules=rules, rng=rng)
    logger.info("starting game: target=%s turns=%d", game.target_letter, rules.max_turns)

    try:
        InteractiveGame(game).run()
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
