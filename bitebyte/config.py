#config.py
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application Settings
    APP_NAME: str = "BiteByte API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = int(os.environ.get("PORT", 8000))

    # CORS Settings (comma-separated)
    ALLOWED_ORIGINS: str = "*"

    # Upload Settings
    MAX_FILE_SIZE: int = 10 * 1024 * 1024  # 10MB
    REQUEST_SIZE_OVERHEAD: int = 1024 * 1024  # multipart framing
    GZIP_MIN_SIZE: int = 500  # bytes

    # History
    HISTORY_LIMIT: int = 20

    # Analysis model
    ANALYSIS_PROVIDER: str = "gemini"
    ANALYSIS_MODEL: Optional[str] = None
    ANALYSIS_PROMPT_TEMPLATE: Optional[str] = None
    DEFAULT_ANALYSIS_TYPE: str = "food"
    GEMINI_API_KEY: str = ""
    OPENAI_API_KEY: str = ""

    # Object storage (Vercel Blob)
    BLOB_READ_WRITE_TOKEN: str = ""
    BLOB_API_URL: str = "https://blob.vercel-storage.com"
    BLOB_API_VERSION: str = "7"
    BLOB_KEY_PREFIX: str = "screenshots"
    BLOB_URL_HOST_SUFFIX: str = "blob.vercel-storage.com"

    # Camera
    CAMERA_FRONT_INDEX: int = 0
    CAMERA_BACK_INDEX: int = 1
    CAMERA_FRAME_WIDTH: int = 1920
    CAMERA_FRAME_HEIGHT: int = 1080
    CAMERA_JPEG_QUALITY: int = 92

    # UI sessions
    UI_SESSION_COOKIE: str = "bitebyte_session"
    UI_MAX_SESSIONS: int = 100

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

    @property
    def max_request_size(self) -> int:
        return self.MAX_FILE_SIZE + self.REQUEST_SIZE_OVERHEAD


DEFAULT_MODELS = {
    "gemini": "gemini-2.5-flash",
    "openai": "gpt-4o",
}


@dataclass(frozen=True)
class ModelConfig:
    provider: str
    model_id: str
    prompt_template: Optional[str] = None


def resolve_model_config(s: Settings) -> ModelConfig:
    """Resolve {provider, model_id, prompt_template} once at startup."""
    provider = (s.ANALYSIS_PROVIDER or "").strip().lower()
    if provider not in DEFAULT_MODELS:
        raise ValueError(f"Unsupported ANALYSIS_PROVIDER '{s.ANALYSIS_PROVIDER}' (expected one of {', '.join(DEFAULT_MODELS)})")
    model_id = (s.ANALYSIS_MODEL or "").strip() or DEFAULT_MODELS[provider]
    template = s.ANALYSIS_PROMPT_TEMPLATE.strip() if s.ANALYSIS_PROMPT_TEMPLATE else None
    return ModelConfig(provider=provider, model_id=model_id, prompt_template=template or None)


@lru_cache()
def get_settings() -> Settings:
    s = Settings()
    if s.HISTORY_LIMIT < 1:
        raise ValueError("HISTORY_LIMIT must be at least 1")
    return s


settings: Settings = get_settings()
