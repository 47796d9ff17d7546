import argparse
import logging
import random
from typing import List, Tuple

from nonogram_engine.board import PlayerBoard, solution_to_marks
from nonogram_engine.config import get_config
from nonogram_engine.evaluator import mismatched_cells
from nonogram_engine.hints import format_hints
from nonogram_engine.models import Action, GamePhase, NonogramError
from nonogram_engine.persistence import JsonFileStore, MemoryStore
from nonogram_engine.session import SessionController

Move = Tuple[int, int, Action]

ACTION_CODES = {"f": Action.FILL, "x": Action.CROSS}


def parse_moves(text: str) -> List[Move]:
    """
    "f:0,1 x:2,3" -> [(0, 1, FILL), (2, 3, CROSS)]
    f = fill, x = cross; coordinates are 0-based row,col.
    """
    moves: List[Move] = []
    for token in text.split():
        code, _, coords = token.partition(":")
        action = ACTION_CODES.get(code.lower())
        if action is None or not coords:
            raise ValueError(f"Bad move '{token}', expected f:ROW,COL or x:ROW,COL")
        try:
            r, c = (int(v) for v in coords.split(","))
        except ValueError:
            raise ValueError(f"Bad coordinates in move '{token}'") from None
        moves.append((r, c, action))
    return moves


def print_grid(marks):
    board = PlayerBoard(len(marks))
    board.marks = [row[:] for row in marks]
    print(board.pretty())


def main():
    p = argparse.ArgumentParser(description="Play a nonogram from the command line.")
    p.add_argument("--difficulty", default=None, help="easy | medium | hard")
    p.add_argument("--scheme", default=None, help="scheme id or label, e.g. scheme3 or 'Scheme 3'")
    p.add_argument("--random", action="store_true", help="Pick a random difficulty and scheme")
    p.add_argument("--seed", type=int, default=None, help="Seed for --random")
    p.add_argument("--moves", default="", help="Moves to play, e.g. 'f:0,1 x:2,3'")
    p.add_argument("--load", action="store_true", help="Continue the last saved game before playing moves")
    p.add_argument("--save", action="store_true", help="Save the game after playing moves")
    p.add_argument("--store", default=None, help="Path of the JSON save file")
    p.add_argument("--solution", action="store_true", help="Print the solution")
    p.add_argument("--dark-mode", action="store_true", help="Toggle the saved theme")
    p.add_argument("--env", default=None, help="development | production | testing")
    args = p.parse_args()

    config = get_config(args.env)
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    store_path = args.store or config.STORE_PATH
    store = JsonFileStore(store_path) if store_path else MemoryStore()
    ctl = SessionController(store=store, config=config, rng=random.Random(args.seed))

    if args.load:
        if not ctl.load_game():
            print("No saved game loaded; starting fresh.")
    if args.random:
        ctl.randomize()
    else:
        if args.difficulty:
            ctl.select_difficulty(args.difficulty)
        if args.scheme:
            ctl.select_scheme(args.scheme)

    st = ctl.state
    print(f"\nPUZZLE: {st.difficulty.label} / {st.scheme_id} ({st.size}x{st.size})\n")
    print(format_hints(ctl.hints))
    print()

    print("RUN REPORT")
    print("=" * 60)

    # 1) MOVES
    moves = parse_moves(args.moves)
    print("MOVES")
    print("-" * 60)
    if not moves:
        print("No moves given.")
    for (r, c, action) in moves:
        try:
            res = ctl.apply(r, c, action)
        except NonogramError as e:
            print(f"  {action.value} ({r}, {c}): rejected: {e}")
            continue
        status = res.mark.name if res.changed else "ignored"
        print(f"  {action.value} ({r}, {c}) -> {status}")
    print("-" * 60)

    # 2) BOARD
    print("BOARD")
    print("-" * 60)
    print_grid(ctl.display_grid())
    print("-" * 60)

    # 3) STATUS
    print("STATUS")
    print("-" * 60)
    print(f"Phase: {ctl.phase.value}")
    print(f"Time: {ctl.elapsed_text()}")
    if ctl.phase == GamePhase.WON:
        print(config.WIN_MESSAGE)
    else:
        wrong = mismatched_cells(st.board, st.solution)
        print(f"Cells still differing from the solution: {len(wrong)}")
    print("-" * 60)

    # 4) SOLUTION (optional)
    if args.solution:
        print("SOLUTION")
        print("-" * 60)
        print_grid(solution_to_marks(st.solution))
        print("-" * 60)

    if args.save:
        snap = ctl.save_game()
        print(f"Saved {snap.difficulty.value}/{snap.scheme_id} ({ctl.elapsed_text()}).")
    if args.dark_mode:
        print(f"Theme: {ctl.toggle_theme()}")

    print("=" * 60)
    print()


if __name__ == "__main__":
    main()
