"""Configuration for the escape room server."""

import os
from dataclasses import dataclass
from pathlib import Path

from .session import SessionOptions


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in ("true", "1", "yes")


@dataclass
class Config:
    """Application configuration."""

    host: str = "localhost"
    port: int = 1965
    certfile: Path | None = None
    keyfile: Path | None = None
    log_level: str = "INFO"
    log_file: Path | None = None
    json_logs: bool = False
    hash_fingerprints: bool = True
    # Seconds between solving the last question and the key appearing
    reveal_delay: float = 0.0
    # Seconds between opening the door and entering the next room
    door_delay: float = 0.0
    seed: int | None = None

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from ESCAPEROOM_* environment variables."""
        certfile = os.getenv("ESCAPEROOM_CERTFILE")
        keyfile = os.getenv("ESCAPEROOM_KEYFILE")
        log_file = os.getenv("ESCAPEROOM_LOG_FILE")
        seed = os.getenv("ESCAPEROOM_SEED")

        return cls(
            host=os.getenv("ESCAPEROOM_HOST", cls.host),
            port=int(os.getenv("ESCAPEROOM_PORT", str(cls.port))),
            certfile=Path(certfile) if certfile else None,
            keyfile=Path(keyfile) if keyfile else None,
            log_level=os.getenv("ESCAPEROOM_LOG_LEVEL", cls.log_level),
            log_file=Path(log_file) if log_file else None,
            json_logs=_env_flag("ESCAPEROOM_JSON_LOGS", False),
            hash_fingerprints=_env_flag("ESCAPEROOM_HASH_FINGERPRINTS", True),
            reveal_delay=float(os.getenv("ESCAPEROOM_REVEAL_DELAY", str(cls.reveal_delay))),
            door_delay=float(os.getenv("ESCAPEROOM_DOOR_DELAY", str(cls.door_delay))),
            seed=int(seed) if seed else None,
        )

    def session_options(self) -> SessionOptions:
        return SessionOptions(
            reveal_delay=self.reveal_delay,
            door_delay=self.door_delay,
            seed=self.seed,
        )
