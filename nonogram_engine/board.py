from __future__ import annotations
from typing import Iterable, List, Sequence

from nonogram_engine.models import (
    CellMark,
    MalformedPuzzleError,
    OutOfBoundsError,
    SolutionGrid,
)

FILLED_CHARS = "#1Xx"
EMPTY_CHARS = ".0-"


def parse_rows(rows: Sequence[str]) -> SolutionGrid:
    """
    Parse a text-authored solution grid, one string per row.
    '#' (or 1/X) is a filled cell, '.' (or 0/-) is empty; whitespace is ignored.
    The result must be square and non-empty.
    """
    grid: List[tuple] = []
    for r, raw in enumerate(rows):
        line = "".join(ch for ch in raw if not ch.isspace())
        cells = []
        for ch in line:
            if ch in FILLED_CHARS:
                cells.append(True)
            elif ch in EMPTY_CHARS:
                cells.append(False)
            else:
                raise MalformedPuzzleError(f"Invalid char '{ch}' in row {r+1}.")
        grid.append(tuple(cells))
    return validate_solution(grid)


def validate_solution(grid: Iterable[Sequence[bool]]) -> SolutionGrid:
    rows = [tuple(bool(v) for v in row) for row in grid]
    n = len(rows)
    if n == 0:
        raise MalformedPuzzleError("Solution grid is empty.")
    for r, row in enumerate(rows):
        if len(row) != n:
            raise MalformedPuzzleError(
                f"Solution grid must be square: row {r+1} has {len(row)} cells, expected {n}."
            )
    return tuple(rows)


def solution_to_marks(solution: SolutionGrid) -> List[List[CellMark]]:
    return [[CellMark.FILLED if v else CellMark.EMPTY for v in row] for row in solution]


class PlayerBoard:
    """
    The player's N x N grid of marks:
    - marks[r][c] is EMPTY / FILLED / CROSSED
    - FILLED and CROSSED are mutually exclusive by construction
    """

    def __init__(self, size: int):
        if size < 1:
            raise ValueError(f"Board size must be at least 1, got {size}")
        self.size = size
        self.marks: List[List[CellMark]] = [[CellMark.EMPTY] * size for _ in range(size)]

    @staticmethod
    def from_codes(codes: Sequence[Sequence[int]]) -> "PlayerBoard":
        b = PlayerBoard(len(codes))
        for r, row in enumerate(codes):
            if len(row) != b.size:
                raise ValueError(f"Row {r+1} has {len(row)} cells, expected {b.size}.")
            for c, code in enumerate(row):
                b.marks[r][c] = CellMark(code)
        return b

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.size and 0 <= c < self.size

    def check_bounds(self, r: int, c: int) -> None:
        if not self.in_bounds(r, c):
            raise OutOfBoundsError(f"Cell ({r}, {c}) is outside the {self.size}x{self.size} grid.")

    def toggle_fill(self, r: int, c: int) -> CellMark:
        """Filled <-> Empty; a crossed cell becomes Filled."""
        self.check_bounds(r, c)
        cur = self.marks[r][c]
        self.marks[r][c] = CellMark.EMPTY if cur == CellMark.FILLED else CellMark.FILLED
        return self.marks[r][c]

    def toggle_cross(self, r: int, c: int) -> CellMark:
        """Crossed <-> Empty; a filled cell becomes Crossed."""
        self.check_bounds(r, c)
        cur = self.marks[r][c]
        self.marks[r][c] = CellMark.EMPTY if cur == CellMark.CROSSED else CellMark.CROSSED
        return self.marks[r][c]

    def clear(self) -> None:
        for row in self.marks:
            for c in range(self.size):
                row[c] = CellMark.EMPTY

    def is_blank(self) -> bool:
        return all(m == CellMark.EMPTY for row in self.marks for m in row)

    def to_codes(self) -> List[List[int]]:
        return [[int(m) for m in row] for row in self.marks]

    def pretty(self) -> str:
        symbols = {CellMark.EMPTY: ".", CellMark.FILLED: "#", CellMark.CROSSED: "x"}
        lines = []
        for r in range(self.size):
            if r and r % 5 == 0:
                lines.append("-" * (2 * self.size + 2 * ((self.size - 1) // 5) - 1))
            row = []
            for c in range(self.size):
                if c and c % 5 == 0:
                    row.append("|")
                row.append(symbols[self.marks[r][c]])
            lines.append(" ".join(row))
        return "\n".join(lines)
