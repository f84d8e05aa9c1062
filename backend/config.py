# Settings read from the environment (and .env for local runs)
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()

SEED_FILE_NAME = "patients.json"
# Where a regular (non-editable) install puts the bundled dataset
INSTALLED_DATA_DIR = Path("share") / "patients-heart-rate-api"

# Local dev frontends; FRONTEND_URL adds the deployed one
LOCAL_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5174",
]


def find_seed_file(here: Optional[Path] = None, prefix: Optional[str] = None) -> Path:
    """
    Locate the bundled dataset: data/ next to the sources first, then the
    installed copy under <prefix>/share. Falls back to the source path.
    """
    here = here or Path(__file__).resolve().parent
    source_copy = here / "data" / SEED_FILE_NAME
    installed_copy = Path(prefix or sys.prefix) / INSTALLED_DATA_DIR / SEED_FILE_NAME
    for candidate in (source_copy, installed_copy):
        if candidate.is_file():
            return candidate
    return source_copy


DEFAULT_SEED_FILE = find_seed_file()


class Settings(BaseModel):
    """Service settings, validated once at startup."""

    model_config = ConfigDict(frozen=True)

    seed_file: Path = Field(default=DEFAULT_SEED_FILE, description="JSON dataset loaded at startup")
    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    frontend_url: Optional[str] = Field(default=None, description="Extra CORS origin")
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    allowed_origins: List[str] = Field(default_factory=lambda: list(LOCAL_ORIGINS))


def get_settings() -> Settings:
    """Build settings from the current environment. Raises ValidationError on bad values."""
    frontend_url = os.environ.get("FRONTEND_URL", "") or None
    origins = list(LOCAL_ORIGINS)
    if frontend_url:
        origins.append(frontend_url)

    return Settings(
        seed_file=os.environ.get("SEED_FILE", "") or DEFAULT_SEED_FILE,
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        frontend_url=frontend_url,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=os.environ.get("PORT", "8000"),
        allowed_origins=origins,
    )
