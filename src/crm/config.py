"""Settings read from the environment (after loading .env, when present)."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./crm.db"

_REPO_ROOT = Path(__file__).resolve().parent.parent.parent


def load_env_file() -> Path | None:
    """Load .env from repo root or current dir. Returns the file used, if any."""
    for path in (_REPO_ROOT / ".env", Path.cwd() / ".env"):
        if path.exists():
            load_dotenv(path)
            return path
    return None


def _flag(value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = "INFO"
    # Description cap, no past due dates, due date required once closed.
    strict_project_validation: bool = False
    create_schema: bool = True
    db_echo: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            database_url=(env.get("DATABASE_URL") or DEFAULT_DATABASE_URL).strip(),
            log_level=(env.get("CRM_LOG_LEVEL") or "INFO").strip().upper(),
            strict_project_validation=_flag(env.get("CRM_STRICT_PROJECT_VALIDATION"), False),
            create_schema=_flag(env.get("CRM_CREATE_SCHEMA"), True),
            db_echo=_flag(env.get("DB_ECHO"), False),
        )
