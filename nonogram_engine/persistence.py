from __future__ import annotations
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterator, MutableMapping, Optional, Union

from nonogram_engine.board import PlayerBoard
from nonogram_engine.catalog import DEFAULT_CATALOG, PuzzleCatalog
from nonogram_engine.models import (
    CorruptSnapshotError,
    Difficulty,
    NotFoundError,
    SessionSnapshot,
)
from nonogram_engine.state import GameState

logger = logging.getLogger(__name__)

# Store keys
KEY_GRID = "gameState"
KEY_DIFFICULTY = "gameDiff"
KEY_CATALOG = "gameScheme"
KEY_SCHEME_ID = "gameSchemeKey"
KEY_SIZE = "gameSize"
KEY_ELAPSED = "gameElapsed"
KEY_THEME = "theme"

SNAPSHOT_KEYS = (KEY_GRID, KEY_DIFFICULTY, KEY_CATALOG, KEY_SCHEME_ID, KEY_SIZE, KEY_ELAPSED)
REQUIRED_KEYS = (KEY_GRID, KEY_DIFFICULTY, KEY_SCHEME_ID, KEY_SIZE)

THEMES = ("light", "dark")


# ------------------ key-value stores ------------------
class MemoryStore(MutableMapping):
    """Process-local string store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def set(self, key: str, value: str) -> None:
        self[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(MemoryStore):
    """
    String store persisted as one JSON object on disk.
    Every write rewrites the file (temp file + os.replace).
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(self._read())

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable store %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store %s: top-level value is not an object", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=self.path.name, suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise

    def __setitem__(self, key: str, value: str) -> None:
        super().__setitem__(key, value)
        self._flush()

    def __delitem__(self, key: str) -> None:
        super().__delitem__(key)
        self._flush()

    def remove(self, key: str) -> None:
        if key in self._data:
            del self[key]


# ------------------ snapshot <-> state ------------------
def save(state) -> SessionSnapshot:
    """Capture a GameState (anything with difficulty/scheme_id/board/clock)."""
    return SessionSnapshot(
        difficulty=state.difficulty,
        scheme_id=state.scheme_id,
        grid_size=state.board.size,
        cells=state.board.to_codes(),
        elapsed_ms=state.clock.elapsed_ms(),
    )


def validate_snapshot(snapshot: SessionSnapshot, catalog: PuzzleCatalog = DEFAULT_CATALOG) -> PlayerBoard:
    """
    Check a snapshot against the catalog and return the decoded board.
    Raises CorruptSnapshotError on any inconsistency.
    """
    missing = [
        name
        for name in ("difficulty", "scheme_id", "grid_size", "cells")
        if getattr(snapshot, name) is None
    ]
    if missing:
        raise CorruptSnapshotError(f"Snapshot is missing {', '.join(missing)}.")

    try:
        solution = catalog.get_scheme(snapshot.difficulty, snapshot.scheme_id)
    except NotFoundError as e:
        raise CorruptSnapshotError(str(e)) from e

    if snapshot.grid_size != len(solution):
        raise CorruptSnapshotError(
            f"Snapshot grid size {snapshot.grid_size} does not match "
            f"{snapshot.difficulty.value}/{snapshot.scheme_id} ({len(solution)}x{len(solution)})."
        )

    cells = snapshot.cells
    if len(cells) != snapshot.grid_size or any(len(row) != snapshot.grid_size for row in cells):
        raise CorruptSnapshotError(f"Snapshot cells are not {snapshot.grid_size}x{snapshot.grid_size}.")

    try:
        board = PlayerBoard.from_codes(cells)
    except (ValueError, TypeError) as e:
        raise CorruptSnapshotError(f"Snapshot has an invalid cell code: {e}") from e

    if not isinstance(snapshot.elapsed_ms, int) or snapshot.elapsed_ms < 0:
        raise CorruptSnapshotError(f"Snapshot elapsed time {snapshot.elapsed_ms!r} is invalid.")

    return board


def load(snapshot: SessionSnapshot, catalog: PuzzleCatalog = DEFAULT_CATALOG, now_ms=None):
    """Rebuild a GameState; ACTIVE with a resumed clock when elapsed > 0, else IDLE."""
    board = validate_snapshot(snapshot, catalog)
    solution = catalog.get_scheme(snapshot.difficulty, snapshot.scheme_id)
    state = GameState(snapshot.difficulty, snapshot.scheme_id, solution, now_ms=now_ms)
    state.board = board
    if snapshot.elapsed_ms > 0:
        state.activate(offset_ms=snapshot.elapsed_ms)
    return state


# ------------------ snapshot <-> store ------------------
def snapshot_to_store(snapshot: SessionSnapshot) -> Dict[str, str]:
    return {
        KEY_GRID: json.dumps(snapshot.cells),
        KEY_DIFFICULTY: json.dumps(snapshot.difficulty.value),
        KEY_CATALOG: json.dumps(snapshot.difficulty.value),
        KEY_SCHEME_ID: json.dumps(snapshot.scheme_id),
        KEY_SIZE: json.dumps(snapshot.grid_size),
        KEY_ELAPSED: str(int(snapshot.elapsed_ms)),
    }


def write_snapshot(store: MutableMapping, snapshot: SessionSnapshot) -> None:
    for key, value in snapshot_to_store(snapshot).items():
        store[key] = value


def snapshot_from_store(store: MutableMapping) -> Optional[SessionSnapshot]:
    """
    None when any required key is absent.
    Raises CorruptSnapshotError when values are present but unreadable.
    """
    if any(store.get(k) in (None, "") for k in REQUIRED_KEYS):
        return None

    try:
        cells = json.loads(store[KEY_GRID])
        diff_raw = json.loads(store[KEY_DIFFICULTY])
        scheme_id = json.loads(store[KEY_SCHEME_ID])
        size = json.loads(store[KEY_SIZE])
        catalog_ref = json.loads(store[KEY_CATALOG]) if store.get(KEY_CATALOG) else None
    except (TypeError, ValueError) as e:
        raise CorruptSnapshotError(f"Saved game is not valid JSON: {e}") from e

    try:
        difficulty = Difficulty(diff_raw)
    except ValueError:
        raise CorruptSnapshotError(f"Saved difficulty {diff_raw!r} is unknown.") from None

    if catalog_ref is not None and catalog_ref != difficulty.value:
        raise CorruptSnapshotError(
            f"Saved catalog reference {catalog_ref!r} does not match difficulty '{difficulty.value}'."
        )
    if not isinstance(scheme_id, str):
        raise CorruptSnapshotError(f"Saved scheme id {scheme_id!r} is not a string.")
    if not isinstance(size, int) or isinstance(size, bool):
        raise CorruptSnapshotError(f"Saved grid size {size!r} is not an integer.")
    if not isinstance(cells, list) or not all(isinstance(row, list) for row in cells):
        raise CorruptSnapshotError("Saved grid is not a list of rows.")

    elapsed_raw = store.get(KEY_ELAPSED) or "0"
    try:
        elapsed = int(elapsed_raw)
    except ValueError:
        raise CorruptSnapshotError(f"Saved elapsed time {elapsed_raw!r} is not an integer.") from None

    return SessionSnapshot(
        difficulty=difficulty,
        scheme_id=scheme_id,
        grid_size=size,
        cells=cells,
        elapsed_ms=elapsed,
    )


def clear_snapshot(store: MutableMapping) -> None:
    for key in SNAPSHOT_KEYS:
        store.pop(key, None)


# ------------------ theme ------------------
def load_theme(store: MutableMapping) -> str:
    theme = store.get(KEY_THEME)
    return theme if theme in THEMES else "light"


def save_theme(store: MutableMapping, theme: str) -> None:
    if theme not in THEMES:
        raise ValueError(f"Theme must be one of {THEMES}, got {theme!r}")
    store[KEY_THEME] = theme
