from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

RC = Tuple[int, int]  # (row, col)
SolutionGrid = Tuple[Tuple[bool, ...], ...]


class CellMark(int, Enum):
    EMPTY = 0
    FILLED = 1
    CROSSED = 2


class Action(str, Enum):
    FILL = "FILL"
    CROSS = "CROSS"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def grid_size(self) -> int:
        return GRID_SIZES[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @staticmethod
    def parse(text: str) -> "Difficulty":
        """Accepts the stored value ("easy") or the display label ("Easy")."""
        key = "".join(str(text).split()).lower()
        try:
            return Difficulty(key)
        except ValueError:
            raise NotFoundError(f"Unknown difficulty '{text}'.") from None


GRID_SIZES = {
    Difficulty.EASY: 5,
    Difficulty.MEDIUM: 10,
    Difficulty.HARD: 15,
}


class GamePhase(str, Enum):
    IDLE = "IDLE"
    ACTIVE = "ACTIVE"
    WON = "WON"


class GameEvent(str, Enum):
    FILL = "FILL"
    CROSS = "CROSS"
    CLEAR = "CLEAR"
    WIN = "WIN"
    RESET = "RESET"
    NEW_PUZZLE = "NEW_PUZZLE"
    REVEAL = "REVEAL"
    SAVE = "SAVE"
    LOAD = "LOAD"
    THEME = "THEME"


@dataclass(frozen=True)
class HintSet:
    row_hints: Tuple[Tuple[int, ...], ...]
    col_hints: Tuple[Tuple[int, ...], ...]


@dataclass(frozen=True)
class MoveResult:
    cell: RC
    mark: CellMark
    changed: bool
    event: Optional[GameEvent] = None
    is_win: bool = False


@dataclass(frozen=True)
class SessionSnapshot:
    difficulty: Optional[Difficulty]
    scheme_id: Optional[str]
    grid_size: Optional[int]
    cells: Optional[List[List[int]]]
    elapsed_ms: int = 0


# ------------------ errors ------------------
class NonogramError(Exception):
    pass


class OutOfBoundsError(NonogramError, IndexError):
    pass


class NotFoundError(NonogramError, LookupError):
    pass


class MalformedPuzzleError(NonogramError, ValueError):
    pass


class CorruptSnapshotError(NonogramError, ValueError):
    pass
