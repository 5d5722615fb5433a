# Fichier: langobridge_admin/core/config.py
from pydantic_settings import BaseSettings
from typing import Optional, List
from pydantic import AnyHttpUrl, ValidationError, field_validator
import sys

class Settings(BaseSettings):
    # --- Supabase (record store + auth) ---
    SUPABASE_URL: AnyHttpUrl
    SUPABASE_ANON_KEY: str
    SUPABASE_STORAGE_BUCKET: str = "resources"
    RECORD_PAGE_SIZE: int = 1000
    RECORD_STORE_TIMEOUT_S: int = 30

    # --- Enrichment providers ---
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = 0.7
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-1.5-flash"

    # Fixed pause between two records of a bulk enhancement batch
    OPENAI_BATCH_DELAY_MS: int = 500
    GEMINI_BATCH_DELAY_MS: int = 1000

    # --- Image hosting ---
    IMGBB_API_KEY: Optional[str] = None

    # --- Local key-value persistence ---
    LOCAL_STORE_PATH: str = ".langobridge/local_store.json"

    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:8080",
        "http://127.0.0.1:5173",
    ]

    ENVIRONMENT: str = "development"

    class Config:
        env_file = ".env"

    @field_validator("SUPABASE_URL", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        """Drop trailing slashes so REST paths can be appended verbatim.

        Dashboard copies of the project URL frequently end with ``/`` and
        ``AnyHttpUrl`` would otherwise keep it, producing ``//rest/v1`` paths.
        """

        if not isinstance(value, str):
            return value
        return value.strip().rstrip("/")

    @property
    def supabase_base_url(self) -> str:
        return str(self.SUPABASE_URL).rstrip("/")


def _log_settings_validation_error(exc: ValidationError) -> None:
    """Pretty-print missing or invalid environment variables.

    When the Settings model fails to instantiate (typically a missing
    ``SUPABASE_URL`` on a fresh deployment), Pydantic raises a ValidationError
    during module import. We log the structured error payload so the offending
    variable shows up in server logs before re-raising the exception.
    """

    header = "Configuration error while loading environment variables:"
    print(header, file=sys.stderr)

    details = exc.errors()
    if details:
        for error in details:
            location = ".".join(str(part) for part in error.get("loc", ()))
            message = error.get("msg", "Unknown validation error")
            type_name = error.get("type")
            hint_parts = [message]
            if type_name:
                hint_parts.append(f"(type={type_name})")
            hint = " ".join(hint_parts)
            print(f"  - {location}: {hint}", file=sys.stderr)
    else:
        print(exc, file=sys.stderr)


try:
    settings = Settings()
except ValidationError as exc:  # pragma: no cover - exercised at runtime
    _log_settings_validation_error(exc)
    raise
