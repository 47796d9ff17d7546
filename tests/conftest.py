# tests/conftest.py
import random
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so "nonogram_engine" and "flask_api" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from nonogram_engine.config import TestingConfig  # noqa: E402
from nonogram_engine.persistence import MemoryStore  # noqa: E402
from nonogram_engine.session import SessionController  # noqa: E402


class FakeClock:
    """Manual millisecond time source."""

    def __init__(self, start=1_000_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def controller(clock, store):
    return SessionController(store=store, config=TestingConfig, rng=random.Random(7), now_ms=clock)


@pytest.fixture
def solve():
    """Fill exactly the solution cells of the current puzzle."""

    def _solve(ctl):
        for r, row in enumerate(ctl.state.solution):
            for c, v in enumerate(row):
                if v:
                    ctl.toggle_fill(r, c)

    return _solve
