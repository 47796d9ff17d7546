from __future__ import annotations

from typing import Iterable, List, Sequence

from nonogram_engine.models import HintSet, SolutionGrid


# ------------------ run-length hints ------------------
def line_hint(cells: Iterable[bool]) -> List[int]:
    """
    Lengths of the runs of filled cells, in order.
    An empty line is [0], never [].
    """
    hints: List[int] = []
    count = 0
    for filled in cells:
        if filled:
            count += 1
        elif count > 0:
            hints.append(count)
            count = 0
    if count > 0:
        hints.append(count)
    return hints or [0]


def compute_hints(grid: SolutionGrid) -> HintSet:
    n = len(grid)
    row_hints = tuple(tuple(line_hint(row)) for row in grid)
    col_hints = tuple(tuple(line_hint(grid[r][c] for r in range(n))) for c in range(n))
    return HintSet(row_hints=row_hints, col_hints=col_hints)


def hints_to_dict(hints: HintSet) -> dict:
    return {
        "rows": [list(h) for h in hints.row_hints],
        "cols": [list(h) for h in hints.col_hints],
    }


def format_hints(hints: HintSet) -> str:
    """Plain-text hint panel: one line per row, then one per column."""
    width = len(str(len(hints.row_hints)))

    def block(title: str, lines: Sequence[Sequence[int]]) -> List[str]:
        out = [title]
        for i, h in enumerate(lines):
            out.append(f"  {i+1:>{width}}: {' '.join(str(n) for n in h)}")
        return out

    return "\n".join(block("ROWS", hints.row_hints) + block("COLUMNS", hints.col_hints))
