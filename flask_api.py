from __future__ import annotations

import logging

from flask import Flask, request, jsonify
from flask_cors import CORS

from nonogram_engine.catalog import DEFAULT_CATALOG, scheme_label
from nonogram_engine.config import get_config
from nonogram_engine.hints import hints_to_dict
from nonogram_engine.models import GamePhase, NonogramError, NotFoundError
from nonogram_engine.persistence import JsonFileStore, MemoryStore
from nonogram_engine.session import SessionController

logger = logging.getLogger(__name__)


def _configure_logging(app: Flask, level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.logger.setLevel(level)
    logging.getLogger().setLevel(level)
    logging.getLogger("werkzeug").setLevel(level)
    logging.getLogger("nonogram_engine").setLevel(level)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("JSON object body required")
    return data


def _int_field(data: dict, name: str) -> int:
    v = data.get(name)
    if v is None:
        raise ValueError(f"'{name}' is required and must be an integer")
    if isinstance(v, int) and not isinstance(v, bool):
        return v
    if isinstance(v, str) and v.strip().lstrip("-").isdigit():
        return int(v)
    raise ValueError(f"'{name}' must be an integer, got {v!r}")


def _text_field(data: dict, name: str) -> str:
    v = data.get(name)
    if v is None or str(v).strip() == "":
        raise ValueError(f"'{name}' is required")
    return str(v)


def _state_json(ctl: SessionController, config) -> dict:
    st = ctl.state
    won = st.phase == GamePhase.WON
    return {
        "difficulty": st.difficulty.value,
        "difficulty_label": st.difficulty.label,
        "scheme_id": st.scheme_id,
        "scheme_label": scheme_label(st.scheme_id),
        "grid_size": st.size,
        "grid": [[int(m) for m in row] for row in ctl.display_grid()],
        "hints": hints_to_dict(st.hints),
        "phase": st.phase.value,
        "is_win": won,
        "revealed": st.revealed,
        "elapsed_ms": ctl.elapsed_ms(),
        "elapsed_text": ctl.elapsed_text(),
        "theme": ctl.theme(),
        "message": config.WIN_MESSAGE if won else "",
    }


def create_app(config_name=None, store=None, rng=None, now_ms=None) -> Flask:
    config = get_config(config_name)

    app = Flask(__name__)
    app.config.from_object(config)
    CORS(app)
    _configure_logging(app, config.LOG_LEVEL)

    if store is None:
        store = JsonFileStore(config.STORE_PATH) if config.STORE_PATH else MemoryStore()
    ctl = SessionController(DEFAULT_CATALOG, store=store, config=config, rng=rng, now_ms=now_ms)
    app.extensions["nonogram"] = ctl

    def state_response(**extra):
        payload = {"state": _state_json(ctl, config)}
        payload.update(extra)
        return jsonify(payload)

    # ---------- errors ----------
    @app.errorhandler(NotFoundError)
    def not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(NonogramError)
    def engine_error(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(ValueError)
    def bad_request(e):
        return jsonify({"error": str(e)}), 400

    # ---------- routes ----------
    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    @app.get("/catalog")
    def catalog():
        return jsonify({"difficulties": DEFAULT_CATALOG.describe()})

    @app.get("/state")
    def state():
        return state_response(timer_tick_ms=config.TIMER_TICK_MS)

    @app.post("/difficulty")
    def difficulty():
        data = _json_body()
        ctl.select_difficulty(_text_field(data, "difficulty"))
        return state_response()

    @app.post("/scheme")
    def scheme():
        data = _json_body()
        ctl.select_scheme(_text_field(data, "scheme"))
        return state_response()

    @app.post("/cell")
    def cell():
        data = _json_body()
        row = _int_field(data, "row")
        col = _int_field(data, "col")
        res = ctl.apply(row, col, data.get("action", "FILL"))
        return state_response(move={
            "row": row,
            "col": col,
            "mark": int(res.mark),
            "changed": res.changed,
            "event": res.event.value if res.event else None,
            "is_win": res.is_win,
        })

    @app.post("/reset")
    def reset():
        ctl.reset()
        return state_response()

    @app.post("/random")
    def random_game():
        ctl.randomize()
        return state_response()

    @app.post("/solution")
    def solution():
        ctl.reveal_solution()
        return state_response(reset_after_ms=config.REVEAL_RESET_DELAY_MS)

    @app.post("/save")
    def save():
        ctl.save_game()
        return state_response(saved=True)

    @app.post("/load")
    def load():
        loaded = ctl.load_game()
        return state_response(loaded=loaded)

    @app.post("/theme")
    def theme():
        ctl.toggle_theme()
        return state_response()

    logger.info("Nonogram API ready (%s)", config.__name__)
    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=8000, debug=app.config.get("DEBUG", False), threaded=False)
