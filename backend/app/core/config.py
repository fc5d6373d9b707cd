from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "Portfolio Chat Backend"
    API_V1_STR: str = "/api/v1"

    # CORS
    ALLOWED_ORIGINS: str = "*"
    ENVIRONMENT: str = "development"

    # Supabase (read-only content store)
    SUPABASE_URL: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
    )
    SUPABASE_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
    )

    # Gemini
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-1.5-flash-latest"
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1"
    GEMINI_MODEL_PRIORITY: str = (
        "gemini-1.5-flash-002,gemini-1.5-flash-latest,gemini-1.5-flash,"
        "gemini-1.5-pro-latest,gemini-1.5-pro"
    )
    GEMINI_HTTP_TIMEOUT_SECONDS: float = 20.0
    GEMINI_RATE_LIMIT_BACKOFF_SECONDS: float = 1.5

    # Persona
    OWNER_NAME: str = Field(
        default="Vidya",
        validation_alias=AliasChoices("OWNER_NAME", "NEXT_PUBLIC_OWNER_NAME"),
    )

    # Chat context
    CHAT_FETCH_LIMIT: int = 12
    CHAT_CONTEXT_MAX_ITEMS: int = 8
    CHAT_CONTEXT_CAPS_JSON: str = "{}"  # e.g. {"skills": 12}
    CHAT_TABLE_ALIASES_JSON: str = "{}"  # e.g. {"projects": ["portfolio_projects"]}
    CHAT_REQUEST_TIMEOUT_SECONDS: float = 25.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    DEBUG_LOG_FILE: str = "chat_debug.log"
    CHAT_DEBUG_LOG_ENABLED: bool = False

    # Load backend-local .env regardless of current working directory.
    # Ignore unrelated env vars (e.g. NEXT_*) so frontend settings don't crash the backend.
    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

settings = Settings()
