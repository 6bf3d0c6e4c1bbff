"""Runtime settings read from the environment (and a local .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_REMOTE_URL = "http://catan.local"


@dataclass(frozen=True)
class Settings:
    """
    Client and web shell configuration.

    Attributes:
        remote_url: Base URL of the board controller
        poll_interval: Seconds between snapshot polls
        host: Interface the web shell binds to
        port: Port the web shell listens on
        log_level: Root log level name
        log_json: Emit JSON log lines
        history_limit: Frames the web view keeps for /api/history
    """

    remote_url: str = DEFAULT_REMOTE_URL
    poll_interval: float = 1.0
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    log_json: bool = False
    history_limit: int = 300

    def __post_init__(self):
        if self.poll_interval <= 0:
            raise ValueError(f"Poll interval must be positive: {self.poll_interval}")
        if self.history_limit < 1:
            raise ValueError(f"History limit must be at least 1: {self.history_limit}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            remote_url=env.get("HEXBOARD_REMOTE_URL", DEFAULT_REMOTE_URL),
            poll_interval=float(env.get("HEXBOARD_POLL_INTERVAL", "1.0")),
            host=env.get("HEXBOARD_HOST", "127.0.0.1"),
            port=int(env.get("HEXBOARD_PORT", "8000")),
            log_level=env.get("HEXBOARD_LOG_LEVEL", "INFO"),
            log_json=_parse_bool(env.get("HEXBOARD_LOG_JSON", "0")),
            history_limit=int(env.get("HEXBOARD_HISTORY_LIMIT", "300")),
        )


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")
