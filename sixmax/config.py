"""
Server configuration.

Values come from environment variables; anything unset falls back to the
defaults below. `run.py` may still override host/port from the command line.
"""

from __future__ import annotations
from dataclasses import dataclass
import os

from sixmax.core.rules import DEFAULT_STARTING_STACK


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    default_stack: float = DEFAULT_STARTING_STACK
    max_hands: int = 1000  # in-memory hands kept before the oldest is evicted

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            host=os.getenv("SIXMAX_HOST", cls.host),
            port=int(os.getenv("SIXMAX_PORT", str(cls.port))),
            log_level=os.getenv("SIXMAX_LOG_LEVEL", cls.log_level).upper(),
            default_stack=float(os.getenv("SIXMAX_DEFAULT_STACK", str(cls.default_stack))),
            max_hands=int(os.getenv("SIXMAX_MAX_HANDS", str(cls.max_hands))),
        )


def get_settings() -> Settings:
    return Settings.from_env()
