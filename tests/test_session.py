# tests/test_session.py
import random

import pytest

from nonogram_engine.catalog import DEFAULT_CATALOG, PuzzleCatalog
from nonogram_engine.config import ProductionConfig, TestingConfig
from nonogram_engine.hints import compute_hints
from nonogram_engine.models import (
    CellMark,
    Difficulty,
    GameEvent,
    GamePhase,
    NotFoundError,
    OutOfBoundsError,
)
from nonogram_engine.session import SessionController


def test_starts_idle_on_first_easy_scheme(controller):
    assert controller.difficulty is Difficulty.EASY
    assert controller.scheme_id == "scheme1"
    assert controller.phase == GamePhase.IDLE
    assert controller.state.board.is_blank()
    assert controller.elapsed_ms() == 0


def test_first_toggle_activates_and_starts_clock(controller, clock):
    res = controller.toggle_fill(2, 2)
    assert res.changed and res.mark == CellMark.FILLED and res.event == GameEvent.FILL
    assert controller.phase == GamePhase.ACTIVE
    clock.advance(2_500)
    assert controller.elapsed_text() == "0:02"


def test_toggle_events(controller):
    events = []
    controller.subscribe(lambda ev, ctl: events.append(ev))
    controller.toggle_cross(0, 0)
    controller.toggle_fill(0, 0)
    controller.toggle_fill(0, 0)
    assert events == [GameEvent.CROSS, GameEvent.FILL, GameEvent.CLEAR]
    assert controller.state.board.marks[0][0] == CellMark.EMPTY


def test_apply_dispatches_actions(controller):
    assert controller.apply(1, 1, "cross").mark == CellMark.CROSSED
    assert controller.apply(1, 1, "FILL").mark == CellMark.FILLED
    with pytest.raises(ValueError):
        controller.apply(1, 1, "paint")


def test_out_of_bounds_strict(controller):
    with pytest.raises(OutOfBoundsError):
        controller.toggle_fill(5, 0)
    assert controller.phase == GamePhase.IDLE


def test_out_of_bounds_ignored_in_production(clock):
    ctl = SessionController(config=ProductionConfig, now_ms=clock)
    res = ctl.toggle_cross(-1, 3)
    assert not res.changed
    assert ctl.phase == GamePhase.IDLE


def test_win_detection_stops_clock(controller, clock, solve):
    events = []
    controller.subscribe(lambda ev, ctl: events.append(ev))
    controller.toggle_cross(0, 0)  # crossed on an empty solution cell is fine
    clock.advance(10_000)
    solve(controller)
    assert controller.phase == GamePhase.WON
    assert events[-1] == GameEvent.WIN
    frozen = controller.elapsed_ms()
    assert frozen == 10_000
    clock.advance(5_000)
    assert controller.elapsed_ms() == frozen


def test_board_locked_after_win(controller, solve):
    solve(controller)
    res = controller.toggle_fill(0, 0)
    assert not res.changed and res.is_win
    assert controller.check_win()


def test_last_move_reports_win(controller):
    solution = controller.state.solution
    cells = [(r, c) for r, row in enumerate(solution) for c, v in enumerate(row) if v]
    for r, c in cells[:-1]:
        assert not controller.toggle_fill(r, c).is_win
    assert controller.toggle_fill(*cells[-1]).is_win


def test_two_by_two_win_rule(clock):
    cat = PuzzleCatalog({Difficulty.EASY: {"diag": ["#.", ".#"]}}, sizes={Difficulty.EASY: 2})
    ctl = SessionController(catalog=cat, config=TestingConfig, now_ms=clock)
    ctl.toggle_fill(0, 0)
    ctl.toggle_cross(0, 1)
    assert not ctl.check_win()
    ctl.toggle_fill(1, 1)
    assert ctl.check_win()


def test_reset_keeps_puzzle(controller, clock):
    controller.select_difficulty("medium")
    controller.select_scheme("Scheme 4")
    controller.toggle_fill(0, 0)
    clock.advance(3_000)
    controller.reset()
    assert controller.difficulty is Difficulty.MEDIUM
    assert controller.scheme_id == "scheme4"
    assert controller.phase == GamePhase.IDLE
    assert controller.state.board.is_blank()
    assert controller.elapsed_ms() == 0


def test_select_difficulty_picks_first_scheme(controller):
    controller.select_scheme("scheme3")
    controller.toggle_fill(0, 0)
    controller.select_difficulty(Difficulty.HARD)
    assert controller.scheme_id == "scheme1"
    assert controller.state.size == 15
    assert controller.state.board.is_blank()
    assert controller.phase == GamePhase.IDLE
    assert controller.hints == compute_hints(DEFAULT_CATALOG.get_scheme(Difficulty.HARD, "scheme1"))


def test_select_unknown_scheme_keeps_state(controller):
    controller.toggle_fill(0, 1)
    with pytest.raises(NotFoundError):
        controller.select_scheme("scheme42")
    assert controller.state.board.marks[0][1] == CellMark.FILLED


def test_randomize_gives_blank_matching_puzzle(clock):
    ctl = SessionController(config=TestingConfig, rng=random.Random(3), now_ms=clock)
    seen = set()
    for _ in range(30):
        ctl.toggle_fill(0, 0)
        difficulty, scheme_id = ctl.randomize()
        seen.add(difficulty)
        n = difficulty.grid_size
        assert ctl.state.size == n
        assert ctl.state.board.is_blank()
        assert ctl.phase == GamePhase.IDLE
        assert ctl.hints == compute_hints(DEFAULT_CATALOG.get_scheme(difficulty, scheme_id))
    assert seen == set(Difficulty)


def test_reveal_leaves_marks_and_clock(controller, clock):
    controller.toggle_cross(0, 0)
    clock.advance(1_000)
    shown = controller.reveal_solution()
    solution = controller.state.solution
    assert shown == [[CellMark.FILLED if v else CellMark.EMPTY for v in row] for row in solution]
    assert controller.state.board.marks[0][0] == CellMark.CROSSED
    assert controller.phase == GamePhase.ACTIVE
    clock.advance(1_000)
    assert controller.elapsed_ms() == 2_000

    # input is blocked until the reset that follows a reveal
    assert not controller.toggle_fill(1, 1).changed
    controller.reset()
    assert not controller.state.revealed
    assert controller.display_grid() == controller.state.board.marks


def test_theme_toggle(controller, store):
    assert controller.theme() == "light"
    assert controller.toggle_theme() == "dark"
    assert store["theme"] == "dark"
    assert controller.toggle_theme() == "light"
