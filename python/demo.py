"""
Demonstration scripts for the cube grid puzzle.
"""

import random
import sys

from box_puzzle import BoxPuzzle
from cube_types import Direction, Letter, Location
from grid_parser import parse_grid
from players import RandomPlayer


def roll_demo() -> None:
    """Demonstrate the domino roll with before/after grids."""
    print("=" * 60)
    print("Roll Demo: a chain of cubes stopped by a locked cube")
    print("=" * 60)
    print()

    grid = parse_grid(
        "SABCDEF SABCDEF LA SABCDEF|"
        "SA SA SA SA|"
        "SA SA SA SA|"
        "SA SA SA SA"
    )
    print("BEFORE:")
    print(grid.render())
    print()

    print("Operation: propagate_roll(R1-C1, right)")
    print("Expected: R1-C1 and R1-C2 roll, the locked cube at R1-C3 stops the chain")
    print()
    result = grid.propagate_roll(0, 0, Direction.RIGHT)

    print("AFTER:")
    print(grid.render())
    print(f"Rolled: {', '.join(str(loc) for loc in result.rolled)}")
    print(f"Blocked by: {result.blocked_by}")
    print()
    print("Faces of R1-C1 after rolling right:")
    print(grid.cube_at(0, 0).render_cube())


def tool_demo() -> None:
    """Demonstrate the stamping tools."""
    print("=" * 60)
    print("Tool Demo: PlusShapeStamp in the middle of an all-A grid")
    print("=" * 60)
    print()

    game = BoxPuzzle(grid=parse_grid("|".join([" ".join(["SA:cross"] * 5)] * 5)), target_letter=Letter.B)
    game.start_turn()
    game.roll(Location(2, 0))
    tool = game.open_cube(Location(2, 0))
    print(f"Opened R3-C1 and found {tool.name}: {tool.description}")
    game.use_tool(Location(2, 2))
    print(game.grid.render())
    print(f"Cubes showing {game.target_letter}: {game.score()}")


def random_game_demo(seed: int | None = None) -> None:
    """Play a full game with random choices."""
    rng = random.Random(seed)
    game = BoxPuzzle(rng=rng)

    print("=" * 60)
    print(f"Random Game Demo: target letter {game.target_letter}")
    print("=" * 60)
    print()
    print(game.grid.render())

    result = game.play(RandomPlayer(rng))
    for report in result.reports:
        print()
        print(f"=====> TURN {report.turn}:")
        if report.game_over:
            print("No moves can be made (all edge boxes are fixed).")
            continue
        if report.roll is not None:
            print(
                f"Rolled {len(report.roll.rolled)} cube(s) {report.roll.direction.display_name} "
                f"from {report.roll.start}"
            )
        if report.tool is not None:
            print(f"Opened {report.opened}: {report.tool.name} used on {report.target}")
        if report.forfeit is not None:
            print(report.forfeit)

    print()
    print("******** GAME OVER ********")
    print(game.grid.render())
    print(f'THE TOTAL NUMBER OF TARGET LETTER "{result.target_letter}" IN THE BOX GRID --> {result.score}')


if __name__ == "__main__":
    roll_demo()
    print()
    tool_demo()
    print()
    random_game_demo(int(sys.argv[1]) if len(sys.argv) > 1 else None)
