import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import InvalidInputError


def load_env() -> None:
    """Load .env from project root if present."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path)


def _int_setting(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidInputError(f"{name} must be an integer, got {raw!r}")


@dataclass
class Settings:
    db_path: Path = Path("data/mentorapp.db")
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    page_size: int = 50
    id_max_attempts: int = 100

    @classmethod
    def from_env(cls) -> "Settings":
        """Read MENTORAPP_* variables; call load_env() first to pick up .env."""
        return cls(
            db_path=Path(os.getenv("MENTORAPP_DB_PATH", "data/mentorapp.db")),
            log_level=os.getenv("MENTORAPP_LOG_LEVEL", "INFO"),
            log_dir=Path(os.getenv("MENTORAPP_LOG_DIR", "logs")),
            page_size=_int_setting("MENTORAPP_PAGE_SIZE", 50),
            id_max_attempts=_int_setting("MENTORAPP_ID_MAX_ATTEMPTS", 100),
        )
