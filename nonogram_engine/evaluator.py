from __future__ import annotations
from typing import List

from nonogram_engine.board import PlayerBoard
from nonogram_engine.models import CellMark, RC, SolutionGrid


def mismatched_cells(board: PlayerBoard, solution: SolutionGrid) -> List[RC]:
    """
    Cells where "is Filled" disagrees with the solution.
    Crossed and Empty both count as "not filled".
    """
    if board.size != len(solution):
        raise ValueError(f"Board is {board.size}x{board.size} but solution is {len(solution)}x{len(solution)}.")
    out: List[RC] = []
    for r in range(board.size):
        for c in range(board.size):
            if (board.marks[r][c] == CellMark.FILLED) != solution[r][c]:
                out.append((r, c))
    return out


def check_win(board: PlayerBoard, solution: SolutionGrid) -> bool:
    if board.size != len(solution):
        return False
    for r in range(board.size):
        for c in range(board.size):
            if (board.marks[r][c] == CellMark.FILLED) != solution[r][c]:
                return False
    return True
