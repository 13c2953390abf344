"""
Configuration management for the resume tailoring pipeline.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class TailorConfig(BaseModel):
    """Configuration for resume extraction and tailoring."""

    # API Keys
    google_api_key: Optional[str] = Field(default=None)
    openai_api_key: Optional[str] = Field(default=None)

    # LLM
    model: str = Field(default="gemini-2.0-flash")
    temperature: float = Field(default=0.2)
    request_timeout_seconds: float = Field(default=60.0, gt=0, le=60.0)

    # Uploads
    max_upload_bytes: int = Field(default=DEFAULT_MAX_UPLOAD_BYTES, gt=0)

    @classmethod
    def from_env(cls, **overrides) -> "TailorConfig":
        """Create configuration from environment variables (and .env)."""
        load_dotenv()

        config_dict = {
            "google_api_key": os.getenv("GOOGLE_API_KEY") or None,
            "openai_api_key": os.getenv("OPENAI_API_KEY") or None,
            "model": os.getenv("MODEL", "gemini-2.0-flash"),
            "temperature": float(os.getenv("TEMPERATURE", "0.2")),
            "request_timeout_seconds": float(
                os.getenv("REQUEST_TIMEOUT_SECONDS", "60")
            ),
            "max_upload_bytes": int(
                os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))
            ),
        }
        if overrides:
            clean_overrides = {k: v for k, v in overrides.items() if v is not None}
            config_dict.update(clean_overrides)

        return cls(**config_dict)

    @property
    def provider(self) -> str:
        """Provider name derived from the model name ('google' or 'openai')."""
        if "gemini" in self.model.lower():
            return "google"
        return "openai"

    @property
    def api_key(self) -> Optional[str]:
        """API key for the configured provider."""
        if self.provider == "openai":
            return self.openai_api_key
        return self.google_api_key

    @property
    def api_key_env_var(self) -> str:
        return "OPENAI_API_KEY" if self.provider == "openai" else "GOOGLE_API_KEY"
