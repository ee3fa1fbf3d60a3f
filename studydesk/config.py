from pathlib import Path
import re
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_DB_PATH = "sqlite+aiosqlite:///./data/studydesk.db"

_URL_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_WINDOWS_DRIVE_PATH_RE = re.compile(r"^[a-zA-Z]:[\\\\/]")


def _looks_like_sqlalchemy_url(value: str) -> bool:
    value = value.strip()
    if _WINDOWS_DRIVE_PATH_RE.match(value):
        return False
    return _URL_SCHEME_RE.match(value) is not None


def _sqlite_aiosqlite_url_from_path(value: str) -> str:
    value = value.strip()
    if value == ":memory:":
        return "sqlite+aiosqlite:///:memory:"

    path = Path(value).expanduser()
    path_posix = path.as_posix()

    # Windows absolute paths need: sqlite+aiosqlite:///C:/...
    if path.drive:
        return f"sqlite+aiosqlite:///{path_posix}"

    # Unix absolute paths need: sqlite+aiosqlite:////abs/path.db
    if path.is_absolute():
        return f"sqlite+aiosqlite:////{path_posix.lstrip('/')}"

    return f"sqlite+aiosqlite:///{path_posix}"


def normalize_db_path(value: str) -> str:
    """
    Normalize DB_PATH into a SQLAlchemy URL.

    - Values that already look like a SQLAlchemy URL are kept as-is.
    - Filesystem paths are converted to a sqlite+aiosqlite URL.
    """
    value = (value or "").strip()
    if not value:
        return DEFAULT_DB_PATH
    if _looks_like_sqlalchemy_url(value):
        return value
    return _sqlite_aiosqlite_url_from_path(value)


class Settings(BaseSettings):
    DB_PATH: str = DEFAULT_DB_PATH

    GRAPH_API_URL: str
    GRAPH_API_KEY: Optional[str] = None
    ROOT_FOLDER_ID: str
    GRAPH_TIMEOUT_SECONDS: float = 10.0
    # The remote listing is paginated; subjects beyond this many subfolders are invisible to matching.
    SUBFOLDER_PAGE_SIZE: int = 100
    TZ: str = "UTC"

    @field_validator("TZ")
    @classmethod
    def validate_timezone(cls, value: str):
        try:
            ZoneInfo(value)
        except ZoneInfoNotFoundError as exc:
            raise ValueError(f"TZ must be a valid IANA timezone, got '{value}'") from exc
        return value

    @field_validator("GRAPH_TIMEOUT_SECONDS", "SUBFOLDER_PAGE_SIZE")
    @classmethod
    def validate_positive(cls, value, info):
        if value <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return value

    @field_validator("GRAPH_API_URL", "ROOT_FOLDER_ID")
    @classmethod
    def validate_not_blank(cls, value: str, info):
        value = (value or "").strip()
        if not value:
            raise ValueError(f"{info.field_name} must not be empty")
        return value

    @field_validator("DB_PATH", mode="before")
    @classmethod
    def normalize_db_path_value(cls, value):
        if value is None:
            return DEFAULT_DB_PATH
        return normalize_db_path(str(value))

    class Config:
        env_file = BASE_DIR / ".env"
        env_file_encoding = "utf-8"

settings = Settings()
