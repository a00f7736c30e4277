"""
Taskboard - Configuration Settings
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

DEFAULT_CORS_ORIGINS = ["https://task-management00.web.app"]


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.environ.get(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class DatabaseSettings:
    """Database configuration."""
    path: Path = field(default_factory=lambda: Path("data/taskboard.sqlite3"))
    wal_mode: bool = True
    busy_timeout_ms: int = 5000


@dataclass
class ServerSettings:
    """HTTP / channel server configuration."""
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    broadcast_timeout_s: float = 5.0


@dataclass
class LoggingSettings:
    """Logging configuration."""
    level: str = "INFO"
    json_logs: bool = True
    log_file: str = ""


@dataclass
class Settings:
    """Main settings container."""
    app_env: str = "production"
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    server: ServerSettings = field(default_factory=ServerSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @property
    def debug(self) -> bool:
        return self.app_env.lower() in ("development", "dev")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (call after load_dotenv)."""
        app_env = os.environ.get("APP_ENV", "production")
        debug = app_env.lower() in ("development", "dev")

        return cls(
            app_env=app_env,
            database=DatabaseSettings(
                path=Path(os.environ.get("DATABASE_PATH", "data/taskboard.sqlite3")),
                busy_timeout_ms=int(os.environ.get("DB_BUSY_TIMEOUT_MS", 5000)),
            ),
            server=ServerSettings(
                host=os.environ.get("HOST", "0.0.0.0"),
                port=int(os.environ.get("PORT", 5000)),
                cors_origins=_env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
                broadcast_timeout_s=float(os.environ.get("BROADCAST_TIMEOUT_S", 5.0)),
            ),
            logging=LoggingSettings(
                level=os.environ.get("LOG_LEVEL", "DEBUG" if debug else "INFO"),
                json_logs=not debug,
                log_file=os.environ.get("LOG_FILE", ""),
            ),
        )


# Global settings instance
settings = Settings.from_env()
