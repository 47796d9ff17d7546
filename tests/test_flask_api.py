# tests/test_flask_api.py
import random

import pytest

from flask_api import create_app
from nonogram_engine.persistence import MemoryStore


@pytest.fixture
def client(clock):
    app = create_app("testing", store=MemoryStore(), rng=random.Random(1), now_ms=clock)
    return app.test_client()


def _solution_cells(client):
    app_ctl = client.application.extensions["nonogram"]
    return [(r, c) for r, row in enumerate(app_ctl.state.solution) for c, v in enumerate(row) if v]


def test_health_and_catalog(client):
    assert client.get("/health").get_json() == {"ok": True}
    tiers = client.get("/catalog").get_json()["difficulties"]
    assert [t["difficulty"] for t in tiers] == ["easy", "medium", "hard"]
    assert [t["grid_size"] for t in tiers] == [5, 10, 15]


def test_initial_state(client):
    st = client.get("/state").get_json()["state"]
    assert st["difficulty"] == "easy"
    assert st["scheme_label"] == "Scheme 1"
    assert st["grid"] == [[0] * 5 for _ in range(5)]
    assert st["hints"]["rows"][0] == [1, 1]
    assert st["phase"] == "IDLE"
    assert st["elapsed_text"] == "0:00"


def test_cell_and_win(client, clock):
    cells = _solution_cells(client)
    body = client.post("/cell", json={"row": 0, "col": 0, "action": "CROSS"}).get_json()
    assert body["move"]["mark"] == 2
    assert body["state"]["phase"] == "ACTIVE"

    clock.advance(4_000)
    for r, c in cells:
        body = client.post("/cell", json={"row": r, "col": c, "action": "FILL"}).get_json()
    assert body["move"]["is_win"]
    assert body["state"]["phase"] == "WON"
    assert body["state"]["message"] == "You won!"
    assert body["state"]["elapsed_text"] == "0:04"


def test_cell_errors(client):
    r = client.post("/cell", json={"row": 9, "col": 0})
    assert r.status_code == 400
    assert "outside" in r.get_json()["error"]

    r = client.post("/cell", json={"col": 0})
    assert r.status_code == 400

    r = client.post("/cell", json={"row": 0, "col": 0, "action": "PAINT"})
    assert r.status_code == 400

    r = client.post("/cell", json=[0, 0])
    assert r.status_code == 400
    assert "JSON object" in r.get_json()["error"]

    r = client.post("/difficulty", json="hard")
    assert r.status_code == 400


def test_cell_rejects_non_integer_coordinates(client):
    for row, col in [(0.9, 1.7), (True, 0), ("1.5", 0), ("", 0)]:
        r = client.post("/cell", json={"row": row, "col": col, "action": "FILL"})
        assert r.status_code == 400
        assert "integer" in r.get_json()["error"]

    st = client.get("/state").get_json()["state"]
    assert st["phase"] == "IDLE"
    assert st["grid"] == [[0] * 5 for _ in range(5)]

    body = client.post("/cell", json={"row": "2", "col": "3", "action": "FILL"}).get_json()
    assert body["move"]["row"] == 2 and body["move"]["col"] == 3
    assert body["state"]["grid"][2][3] == 1


def test_selection_routes(client):
    st = client.post("/difficulty", json={"difficulty": "Hard"}).get_json()["state"]
    assert st["grid_size"] == 15 and st["scheme_id"] == "scheme1"

    st = client.post("/scheme", json={"scheme": "Scheme 3"}).get_json()["state"]
    assert st["scheme_id"] == "scheme3"

    r = client.post("/scheme", json={"scheme": "scheme8"})
    assert r.status_code == 404
    r = client.post("/difficulty", json={"difficulty": "nightmare"})
    assert r.status_code == 404
    r = client.post("/difficulty", json={})
    assert r.status_code == 400


def test_random_reset_and_solution(client):
    st = client.post("/random").get_json()["state"]
    n = st["grid_size"]
    assert st["grid"] == [[0] * n for _ in range(n)]

    client.post("/cell", json={"row": 0, "col": 0, "action": "FILL"})
    body = client.post("/solution").get_json()
    assert body["reset_after_ms"] == 5000
    assert body["state"]["revealed"]
    filled = sum(v == 1 for row in body["state"]["grid"] for v in row)
    assert filled == len(_solution_cells(client))

    st = client.post("/reset").get_json()["state"]
    assert not st["revealed"]
    assert st["phase"] == "IDLE"
    assert st["grid"] == [[0] * n for _ in range(n)]


def test_save_load_and_theme(client, clock):
    client.post("/difficulty", json={"difficulty": "medium"})
    client.post("/cell", json={"row": 1, "col": 1, "action": "FILL"})
    clock.advance(12_000)
    assert client.post("/save").get_json()["saved"]

    client.post("/random")
    body = client.post("/load").get_json()
    assert body["loaded"]
    st = body["state"]
    assert st["difficulty"] == "medium"
    assert st["grid"][1][1] == 1
    assert st["elapsed_ms"] == 12_000
    assert st["phase"] == "ACTIVE"

    assert client.post("/theme").get_json()["state"]["theme"] == "dark"


def test_load_without_save(client):
    assert client.post("/load").get_json()["loaded"] is False
