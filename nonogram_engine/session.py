from __future__ import annotations
import logging
import random
from typing import Callable, List, MutableMapping, Optional, Tuple, Union

from nonogram_engine import persistence
from nonogram_engine.catalog import DEFAULT_CATALOG, PuzzleCatalog, scheme_id_from_label
from nonogram_engine.clock import format_time
from nonogram_engine.config import Config
from nonogram_engine.models import (
    Action,
    CellMark,
    CorruptSnapshotError,
    Difficulty,
    GameEvent,
    GamePhase,
    HintSet,
    MoveResult,
    OutOfBoundsError,
    SessionSnapshot,
)
from nonogram_engine.persistence import MemoryStore
from nonogram_engine.state import GameState

logger = logging.getLogger(__name__)

Listener = Callable[[GameEvent, "SessionController"], None]


class SessionController:
    """
    Owns the single live GameState and drives every transition:
    select difficulty/scheme, random puzzle, cell toggles + win check,
    reset, reveal, save/load, theme.
    Listeners are told about each event (render, sound); nothing flows back.
    """

    def __init__(
        self,
        catalog: PuzzleCatalog = DEFAULT_CATALOG,
        store: Optional[MutableMapping] = None,
        config=Config,
        rng: Optional[random.Random] = None,
        now_ms: Optional[Callable[[], int]] = None,
    ):
        self.catalog = catalog
        self.store = store if store is not None else MemoryStore()
        self.strict_bounds = bool(config.STRICT_BOUNDS)
        self.rng = rng or random.Random()
        self._now_ms = now_ms
        self._listeners: List[Listener] = []

        difficulty = Difficulty.parse(config.DEFAULT_DIFFICULTY)
        self.state = self._new_state(difficulty, catalog.first_scheme_id(difficulty))

    # ---------- listeners ----------
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: GameEvent) -> None:
        for listener in list(self._listeners):
            listener(event, self)

    # ---------- read access ----------
    @property
    def difficulty(self) -> Difficulty:
        return self.state.difficulty

    @property
    def scheme_id(self) -> str:
        return self.state.scheme_id

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def hints(self) -> HintSet:
        return self.state.hints

    def display_grid(self) -> List[List[CellMark]]:
        return self.state.display_grid()

    def elapsed_ms(self) -> int:
        return self.state.clock.elapsed_ms()

    def elapsed_text(self) -> str:
        return format_time(self.elapsed_ms())

    # ---------- puzzle selection ----------
    def _new_state(self, difficulty: Difficulty, scheme_id: str) -> GameState:
        solution = self.catalog.get_scheme(difficulty, scheme_id)
        return GameState(difficulty, scheme_id, solution, now_ms=self._now_ms)

    def _start_puzzle(self, difficulty: Difficulty, scheme_id: str) -> None:
        self.state = self._new_state(difficulty, scheme_id)
        logger.info("New puzzle %s/%s (%dx%d)", difficulty.value, scheme_id, self.state.size, self.state.size)
        self._emit(GameEvent.NEW_PUZZLE)

    def select_difficulty(self, difficulty: Union[Difficulty, str]) -> None:
        if not isinstance(difficulty, Difficulty):
            difficulty = Difficulty.parse(difficulty)
        self._start_puzzle(difficulty, self.catalog.first_scheme_id(difficulty))

    def select_scheme(self, scheme_id: str) -> None:
        """Accepts an id ('scheme2') or a display label ('Scheme 2')."""
        scheme_id = scheme_id_from_label(scheme_id)
        self.catalog.get_scheme(self.difficulty, scheme_id)
        self._start_puzzle(self.difficulty, scheme_id)

    def randomize(self) -> Tuple[Difficulty, str]:
        difficulty = self.rng.choice(self.catalog.difficulties())
        scheme_id = self.rng.choice(self.catalog.list_scheme_ids(difficulty))
        self._start_puzzle(difficulty, scheme_id)
        return difficulty, scheme_id

    # ---------- cell interaction ----------
    def toggle_fill(self, row: int, col: int) -> MoveResult:
        return self._interact(row, col, Action.FILL)

    def toggle_cross(self, row: int, col: int) -> MoveResult:
        return self._interact(row, col, Action.CROSS)

    def apply(self, row: int, col: int, action: Union[Action, str]) -> MoveResult:
        if not isinstance(action, Action):
            try:
                action = Action(str(action).upper())
            except ValueError:
                raise ValueError(f"Unknown action '{action}', expected FILL or CROSS") from None
        return self._interact(row, col, action)

    def _interact(self, row: int, col: int, action: Action) -> MoveResult:
        st = self.state
        if not st.board.in_bounds(row, col):
            if self.strict_bounds:
                raise OutOfBoundsError(f"Cell ({row}, {col}) is outside the {st.size}x{st.size} grid.")
            logger.warning("Ignoring %s at (%s, %s): outside %dx%d grid", action.value, row, col, st.size, st.size)
            return MoveResult(cell=(row, col), mark=CellMark.EMPTY, changed=False)

        if st.phase == GamePhase.WON or st.revealed:
            logger.debug("Ignoring %s at (%d, %d): board is locked", action.value, row, col)
            return MoveResult(
                cell=(row, col),
                mark=st.board.marks[row][col],
                changed=False,
                is_win=st.phase == GamePhase.WON,
            )

        if st.phase == GamePhase.IDLE:
            st.activate()

        if action == Action.FILL:
            mark = st.board.toggle_fill(row, col)
        else:
            mark = st.board.toggle_cross(row, col)

        if mark == CellMark.EMPTY:
            event = GameEvent.CLEAR
        elif mark == CellMark.FILLED:
            event = GameEvent.FILL
        else:
            event = GameEvent.CROSS
        logger.debug("%s (%d, %d) -> %s", action.value, row, col, mark.name)
        self._emit(event)

        won = self.check_win()
        return MoveResult(cell=(row, col), mark=mark, changed=True, event=event, is_win=won)

    def check_win(self) -> bool:
        st = self.state
        if st.phase == GamePhase.WON:
            return True
        if not st.is_solved():
            return False
        st.mark_won()
        logger.info("Solved %s/%s in %s", st.difficulty.value, st.scheme_id, format_time(st.clock.elapsed_ms()))
        self._emit(GameEvent.WIN)
        return True

    # ---------- round control ----------
    def reset(self) -> None:
        self.state.reset()
        logger.info("Reset %s/%s", self.difficulty.value, self.scheme_id)
        self._emit(GameEvent.RESET)

    def reveal_solution(self) -> List[List[CellMark]]:
        """Show the solution without touching the player's marks or the clock."""
        self.state.revealed = True
        logger.info("Revealed solution for %s/%s", self.difficulty.value, self.scheme_id)
        self._emit(GameEvent.REVEAL)
        return self.state.display_grid()

    # ---------- persistence ----------
    def save_game(self) -> SessionSnapshot:
        snapshot = persistence.save(self.state)
        persistence.write_snapshot(self.store, snapshot)
        logger.info(
            "Saved %s/%s at %s", snapshot.difficulty.value, snapshot.scheme_id, format_time(snapshot.elapsed_ms)
        )
        self._emit(GameEvent.SAVE)
        return snapshot

    def load_game(self) -> bool:
        """
        Restore the saved game. Returns False when there is nothing usable:
        - no snapshot in the store: current round untouched
        - corrupt snapshot: discarded, current puzzle reset to a fresh IDLE round
        A restored board that already matches its solution comes back WON with
        the clock frozen at the saved time.
        """
        try:
            snapshot = persistence.snapshot_from_store(self.store)
            if snapshot is None:
                logger.info("No saved game to load")
                return False
            state = persistence.load(snapshot, self.catalog, now_ms=self._now_ms)
        except CorruptSnapshotError as e:
            logger.warning("Discarding corrupt saved game: %s", e)
            persistence.clear_snapshot(self.store)
            self.reset()
            return False

        self.state = state
        logger.info(
            "Loaded %s/%s (%s, %s)", state.difficulty.value, state.scheme_id, state.phase.value, self.elapsed_text()
        )
        self._emit(GameEvent.LOAD)
        self.check_win()
        return True

    # ---------- theme ----------
    def theme(self) -> str:
        return persistence.load_theme(self.store)

    def toggle_theme(self) -> str:
        theme = "light" if self.theme() == "dark" else "dark"
        persistence.save_theme(self.store, theme)
        self._emit(GameEvent.THEME)
        return theme
