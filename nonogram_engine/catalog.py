from __future__ import annotations
import logging
import re
from typing import Dict, List, Mapping, Optional, Sequence

from nonogram_engine.board import parse_rows
from nonogram_engine.models import (
    Difficulty,
    MalformedPuzzleError,
    NotFoundError,
    SolutionGrid,
)

logger = logging.getLogger(__name__)

_LABEL_RE = re.compile(r"^([a-z]+)(\d+)$")


# ------------------ reference puzzles ------------------
EASY_SCHEMES: Dict[str, List[str]] = {
    "scheme1": [
        ".#.#.",
        "###..",
        ".##..",
        "#.#.#",
        "..#..",
    ],
    "scheme2": [
        "#.#.#",
        ".#.#.",
        "#.#.#",
        ".#.#.",
        "#.#.#",
    ],
    "scheme3": [
        "..#..",
        ".###.",
        "##.##",
        ".###.",
        "..#..",
    ],
    "scheme4": [
        "##.##",
        "#...#",
        "..#..",
        "#...#",
        "##.##",
    ],
    "scheme5": [
        ".###.",
        "#...#",
        "#.#.#",
        "#...#",
        ".###.",
    ],
}

MEDIUM_SCHEMES: Dict[str, List[str]] = {
    "scheme1": [
        "..#####...",
        ".#.....#..",
        "#.......#.",
        "#...##..#.",
        "#..#..#.#.",
        "#..#..#.#.",
        "#...##..#.",
        "#.......#.",
        ".#.....#..",
        "..#####...",
    ],
    "scheme2": [
        "#.#.#.#.#.",
        ".#.#.#.#.#",
        "#.#.#.#.#.",
        ".#.#.#.#.#",
        "#.#.#.#.#.",
        ".#.#.#.#.#",
        "#.#.#.#.#.",
        ".#.#.#.#.#",
        "#.#.#.#.#.",
        ".#.#.#.#.#",
    ],
    "scheme3": [
        "...###....",
        "..#####...",
        ".#######..",
        "###...###.",
        "##.....##.",
        "##.....##.",
        "###...###.",
        ".#######..",
        "..#####...",
        "...###....",
    ],
    "scheme4": [
        "##########",
        "#........#",
        "#.######.#",
        "#.#....#.#",
        "#.#.##.#.#",
        "#.#.##.#.#",
        "#.#....#.#",
        "#.######.#",
        "#........#",
        "##########",
    ],
    "scheme5": [
        ".###..###.",
        "#...##...#",
        "#.#.##.#.#",
        "#...##...#",
        ".###..###.",
        ".###..###.",
        "#...##...#",
        "#.#.##.#.#",
        "#...##...#",
        ".###..###.",
    ],
}

HARD_SCHEMES: Dict[str, List[str]] = {
    "scheme1": [
        "...########....",
        "..##########...",
        ".##........##..",
        "##..######..##.",
        "##.#......#.##.",
        "##.#.####.#.##.",
        "##.#.#..#.#.##.",
        "##.#.#..#.#.##.",
        "##.#.####.#.##.",
        "##.#......#.##.",
        "##..######..##.",
        ".##........##..",
        "..##########...",
        "...########....",
        "...............",
    ],
    "scheme2": [
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
    ],
    "scheme3": [
        "....#######....",
        "...#########...",
        "..##.......##..",
        ".##..#####..##.",
        "##..#.....#..##",
        "##.#..###..#.##",
        "#.#..#...##.#.#",
        "#.#.#...#.#.#.#",
        "#.#..#...##.#.#",
        "##.#..###..#.##",
        ".##.#.....#.##.",
        "..##.#####.##..",
        "...#########...",
        "....#######....",
        "...............",
    ],
    "scheme4": [
        "###############",
        "#.............#",
        "#.###########.#",
        "#.#.........#.#",
        "#.#.#######.#.#",
        "#.#.#.....#.#.#",
        "#.#.#.###.#.#.#",
        "#.#.#.#.#.#.#.#",
        "#.#.#.###.#.#.#",
        "#.#.#.....#.#.#",
        "#.#.#######.#.#",
        "#.#.........#.#",
        "#.###########.#",
        "#.............#",
        "###############",
    ],
    "scheme5": [
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
        "#.#.#.#.#.#.#.#",
        ".#.#.#.#.#.#.#.",
    ],
}

REFERENCE_SCHEMES: Dict[Difficulty, Dict[str, List[str]]] = {
    Difficulty.EASY: EASY_SCHEMES,
    Difficulty.MEDIUM: MEDIUM_SCHEMES,
    Difficulty.HARD: HARD_SCHEMES,
}


# ------------------ label helpers ------------------
def scheme_label(scheme_id: str) -> str:
    """'scheme3' -> 'Scheme 3'"""
    m = _LABEL_RE.match(scheme_id)
    if not m:
        return scheme_id.capitalize()
    word, num = m.groups()
    return f"{word.capitalize()} {num}"


def scheme_id_from_label(label: str) -> str:
    """'Scheme 3' -> 'scheme3'"""
    return "".join(str(label).split()).lower()


class PuzzleCatalog:
    """
    Read-only library of solution grids:
    - one grid size per difficulty
    - scheme ids keep their authoring order
    Every grid is parsed and shape-checked on construction.
    """

    def __init__(
        self,
        schemes: Mapping[Difficulty, Mapping[str, Sequence[str]]],
        sizes: Optional[Mapping[Difficulty, int]] = None,
    ):
        self._grids: Dict[Difficulty, Dict[str, SolutionGrid]] = {}
        self._sizes: Dict[Difficulty, int] = {}

        for difficulty, by_id in schemes.items():
            if not by_id:
                raise MalformedPuzzleError(f"Difficulty '{difficulty.value}' has no schemes.")
            expected = sizes[difficulty] if sizes is not None else difficulty.grid_size
            grids: Dict[str, SolutionGrid] = {}
            for scheme_id, rows in by_id.items():
                try:
                    grid = parse_rows(rows)
                except MalformedPuzzleError as e:
                    raise MalformedPuzzleError(f"{difficulty.value}/{scheme_id}: {e}") from e
                if len(grid) != expected:
                    raise MalformedPuzzleError(
                        f"{difficulty.value}/{scheme_id}: expected {expected}x{expected}, "
                        f"got {len(grid)}x{len(grid)}."
                    )
                grids[scheme_id] = grid
            self._grids[difficulty] = grids
            self._sizes[difficulty] = expected

        logger.debug(
            "Catalog loaded: %s",
            ", ".join(f"{d.value}={len(g)}" for d, g in self._grids.items()),
        )

    def difficulties(self) -> List[Difficulty]:
        return list(self._grids)

    def _tier(self, difficulty: Difficulty) -> Dict[str, SolutionGrid]:
        try:
            return self._grids[difficulty]
        except KeyError:
            raise NotFoundError(f"Difficulty '{difficulty}' is not in the catalog.") from None

    def grid_size(self, difficulty: Difficulty) -> int:
        self._tier(difficulty)
        return self._sizes[difficulty]

    def list_scheme_ids(self, difficulty: Difficulty) -> List[str]:
        return list(self._tier(difficulty))

    def first_scheme_id(self, difficulty: Difficulty) -> str:
        return self.list_scheme_ids(difficulty)[0]

    def get_scheme(self, difficulty: Difficulty, scheme_id: str) -> SolutionGrid:
        tier = self._tier(difficulty)
        if scheme_id not in tier:
            raise NotFoundError(f"Scheme '{scheme_id}' not found for difficulty '{difficulty.value}'.")
        return tier[scheme_id]

    def has_scheme(self, difficulty: Difficulty, scheme_id: str) -> bool:
        return difficulty in self._grids and scheme_id in self._grids[difficulty]

    def describe(self) -> List[dict]:
        return [
            {
                "difficulty": d.value,
                "label": d.label,
                "grid_size": self._sizes[d],
                "schemes": [{"id": s, "label": scheme_label(s)} for s in self._grids[d]],
            }
            for d in self._grids
        ]


DEFAULT_CATALOG = PuzzleCatalog(REFERENCE_SCHEMES)
