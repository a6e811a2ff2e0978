import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .services.transport import RetryPolicy

# load .env on startup
load_dotenv()


class Settings(BaseModel):
    gemini_api_key: str | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(
        default="gemini-2.5-flash-preview-09-2025", alias="GEMINI_MODEL"
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    max_retries: int = Field(default=5, ge=0, alias="GEMINI_MAX_RETRIES")
    initial_backoff_ms: int = Field(default=1000, gt=0, alias="GEMINI_INITIAL_BACKOFF_MS")
    backoff_multiplier: float = Field(default=2.0, gt=1, alias="GEMINI_BACKOFF_MULTIPLIER")
    max_backoff_ms: int | None = Field(default=None, gt=0, alias="GEMINI_MAX_BACKOFF_MS")
    max_retry_time_ms: int | None = Field(default=None, gt=0, alias="GEMINI_MAX_RETRY_TIME_MS")
    request_timeout_s: float = Field(default=60.0, gt=0, alias="GEMINI_REQUEST_TIMEOUT_S")
    total_timeout_s: float | None = Field(default=None, gt=0, alias="GEMINI_TOTAL_TIMEOUT_S")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_env(cls):
        keys = [
            "GEMINI_API_KEY",
            "GEMINI_MODEL",
            "GEMINI_BASE_URL",
            "GEMINI_MAX_RETRIES",
            "GEMINI_INITIAL_BACKOFF_MS",
            "GEMINI_BACKOFF_MULTIPLIER",
            "GEMINI_MAX_BACKOFF_MS",
            "GEMINI_MAX_RETRY_TIME_MS",
            "GEMINI_REQUEST_TIMEOUT_S",
            "GEMINI_TOTAL_TIMEOUT_S",
        ]
        # unset or empty variables fall back to the field defaults
        data = {key: os.getenv(key) for key in keys if os.getenv(key)}
        return cls.model_validate(data)

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            initial_backoff_ms=self.initial_backoff_ms,
            backoff_multiplier=self.backoff_multiplier,
            max_backoff_ms=self.max_backoff_ms,
            max_total_ms=self.max_retry_time_ms,
        )


settings = Settings.from_env()
