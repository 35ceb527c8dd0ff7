"""Session timing/randomness configuration and logging setup."""

from __future__ import annotations

import json
import logging
import os
import random
import sys
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

import structlog

logger = structlog.get_logger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[1]
CONFIG_DIR = REPO_ROOT / "res" / "config"
CONFIG_FILE = CONFIG_DIR / "session.json"
CONFIG_ENV = "QUIZDECK_CONFIG"
SEED_ENV = "QUIZDECK_SEED"


@dataclass(frozen=True)
class SessionConfig:
    wrong_pair_cooldown: float = 0.8
    clock_interval: float = 0.1
    flip_delay: float = 0.15
    distractor_count: int = 3
    seed: Optional[int] = None
    environment: str = "development"

    def __post_init__(self) -> None:
        if self.wrong_pair_cooldown <= 0:
            raise ValueError("wrong_pair_cooldown must be positive")
        if self.clock_interval <= 0:
            raise ValueError("clock_interval must be positive")
        if self.flip_delay < 0:
            raise ValueError("flip_delay must not be negative")
        if self.distractor_count < 1:
            raise ValueError("distractor_count must be at least 1")

    def make_rng(self) -> random.Random:
        """Seeded generator when ``seed`` is set, an unseeded one otherwise."""

        if self.seed is None:
            return random.Random()
        return random.Random(self.seed)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "SessionConfig":
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {key: value for key, value in payload.items() if key in known}
        for key in ("wrong_pair_cooldown", "clock_interval", "flip_delay"):
            if key in values:
                values[key] = float(values[key])
        if "distractor_count" in values:
            values["distractor_count"] = int(values["distractor_count"])
        if values.get("seed") is not None:
            values["seed"] = int(values["seed"])
        return cls(**values)


_CONFIG_CACHE: Dict[str, SessionConfig] = {}


def _load_config_file(path: Path) -> SessionConfig:
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, Mapping):
        raise ValueError(f"Session config in {path} must be a JSON object")
    return SessionConfig.from_mapping(payload)


def load_config(path: Optional[str] = None) -> SessionConfig:
    """Load the session configuration.

    An explicit *path* (argument or ``QUIZDECK_CONFIG``) must exist.  When
    neither is given the default file is optional and the built-in values
    apply.  ``QUIZDECK_SEED`` overrides the seed from the file.
    """

    explicit = path or os.getenv(CONFIG_ENV)
    config_path = Path(explicit) if explicit else CONFIG_FILE
    key = str(config_path)

    if key not in _CONFIG_CACHE:
        if config_path.exists():
            _CONFIG_CACHE[key] = _load_config_file(config_path)
        elif explicit:
            raise FileNotFoundError(f"Session config not found: {config_path}")
        else:
            logger.debug("session_config_defaults", path=key)
            _CONFIG_CACHE[key] = SessionConfig()
    config = _CONFIG_CACHE[key]

    seed = os.getenv(SEED_ENV)
    if seed not in (None, ""):
        config = replace(config, seed=int(seed))
    return config


def clear_config_cache() -> None:
    _CONFIG_CACHE.clear()


def configure_logging(environment: str = "development") -> None:
    """Configure structured logging with structlog."""
    use_json = environment == "production"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if environment == "development" else logging.INFO,
    )

    processors: List[Callable[..., Any]] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


__all__ = [
    "CONFIG_FILE",
    "SessionConfig",
    "clear_config_cache",
    "configure_logging",
    "load_config",
]
