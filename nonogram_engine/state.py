from __future__ import annotations
from typing import Callable, List, Optional

from nonogram_engine.board import PlayerBoard, solution_to_marks
from nonogram_engine.clock import ElapsedClock
from nonogram_engine.evaluator import check_win
from nonogram_engine.hints import compute_hints
from nonogram_engine.models import CellMark, Difficulty, GamePhase, HintSet, SolutionGrid


class GameState:
    """
    One round of play:
    - the selected puzzle (difficulty, scheme id, solution, hints)
    - the player's marks
    - phase IDLE -> ACTIVE -> WON, and the round clock
    - revealed: the display currently mirrors the solution
    """

    def __init__(
        self,
        difficulty: Difficulty,
        scheme_id: str,
        solution: SolutionGrid,
        now_ms: Optional[Callable[[], int]] = None,
    ):
        self.difficulty = difficulty
        self.scheme_id = scheme_id
        self.solution = solution
        self.hints: HintSet = compute_hints(solution)
        self.board = PlayerBoard(len(solution))
        self.clock = ElapsedClock(now_ms)
        self.phase = GamePhase.IDLE
        self.revealed = False

    @property
    def size(self) -> int:
        return self.board.size

    def activate(self, offset_ms: int = 0) -> None:
        self.phase = GamePhase.ACTIVE
        self.clock.start(offset_ms)

    def is_solved(self) -> bool:
        return check_win(self.board, self.solution)

    def mark_won(self) -> None:
        self.phase = GamePhase.WON
        self.clock.stop()

    def reset(self) -> None:
        self.board.clear()
        self.clock.reset()
        self.phase = GamePhase.IDLE
        self.revealed = False

    def display_grid(self) -> List[List[CellMark]]:
        if self.revealed:
            return solution_to_marks(self.solution)
        return [row[:] for row in self.board.marks]
