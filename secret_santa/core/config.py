import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    log_level: str
    log_path: str
    attempt_timeout_ms: int
    search_timeout_s: float
    seed: Optional[int]


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from None


def load_settings() -> Settings:
    log_level = os.getenv("LOG_LEVEL", "INFO")
    log_path = os.getenv("LOG_PATH", "logs/secret_santa.log")
    attempt_timeout_ms = _int_env("SANTA_ATTEMPT_TIMEOUT_MS", 100)
    search_timeout_s = _int_env("SANTA_SEARCH_TIMEOUT_S", 60)
    seed = _int_env("SANTA_SEED", None)

    if attempt_timeout_ms <= 0:
        raise ValueError("SANTA_ATTEMPT_TIMEOUT_MS must be positive.")
    if search_timeout_s <= 0:
        raise ValueError("SANTA_SEARCH_TIMEOUT_S must be positive.")

    return Settings(
        log_level=log_level,
        log_path=log_path,
        attempt_timeout_ms=attempt_timeout_ms,
        search_timeout_s=float(search_timeout_s),
        seed=seed,
    )
