# nonogram_engine/config.py
import os


class Config:
    # Key-value store for saved games; unset means in-memory only
    STORE_PATH = os.environ.get("NONOGRAM_STORE_PATH") or None
    LOG_LEVEL = os.environ.get("NONOGRAM_LOG_LEVEL", "INFO").upper()

    # Out-of-range cell input: raise (True) or log and ignore (False)
    STRICT_BOUNDS = True

    # Presentation policy, reported to clients
    REVEAL_RESET_DELAY_MS = 5000
    TIMER_TICK_MS = 100

    DEFAULT_DIFFICULTY = "easy"
    WIN_MESSAGE = "You won!"


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get("NONOGRAM_LOG_LEVEL", "DEBUG").upper()


class ProductionConfig(Config):
    DEBUG = False
    STRICT_BOUNDS = False


class TestingConfig(Config):
    TESTING = True
    STORE_PATH = None


CONFIGS = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(name=None):
    name = (name or os.environ.get("NONOGRAM_ENV") or "development").lower()
    try:
        return CONFIGS[name]
    except KeyError:
        raise ValueError(f"Unknown config '{name}', expected one of {sorted(CONFIGS)}") from None
