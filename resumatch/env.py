import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_DB_PATH = "data/resumatch.db"
DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"
DEFAULT_GROQ_BASE_URL = "https://api.groq.com/openai/v1"


def load_env(env_path: Optional[Path] = None) -> bool:
    """Load .env from the working directory if present.

    Values already set in the environment win over the file.
    """
    env_path = env_path or Path.cwd() / ".env"
    if not env_path.exists():
        return False
    return load_dotenv(dotenv_path=env_path, override=False)


def db_path(override: Optional[str] = None) -> Path:
    return Path(override or os.getenv("RESUMATCH_DB") or DEFAULT_DB_PATH)


def log_level(override: Optional[str] = None) -> str:
    return (override or os.getenv("RESUMATCH_LOG_LEVEL") or "INFO").upper()


def groq_settings(api_key: Optional[str] = None, model: Optional[str] = None) -> dict:
    """Connection settings for the extraction service (flags over env over defaults)."""
    return {
        "api_key": api_key or os.getenv("GROQ_API_KEY"),
        "model": model or os.getenv("GROQ_MODEL") or DEFAULT_GROQ_MODEL,
        "base_url": os.getenv("GROQ_BASE_URL") or DEFAULT_GROQ_BASE_URL,
    }
