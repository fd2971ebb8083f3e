"""
Configuration settings for the qa-curator service.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Cloud Backend (Gemini)
    # ========================================
    gemini_api_key: str = Field(
        default="",
        description="Google Generative AI (Gemini) API key",
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash-preview-05-20",
        description="Gemini model used for cloud curation",
    )
    gemini_api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/models",
        description="Base URL for the Gemini generateContent endpoint",
    )

    # ========================================
    # Local Backend (Ollama-compatible)
    # ========================================
    local_generate_url: str = Field(
        default="http://localhost:11434/api/generate",
        description="Generate endpoint of the local model server",
    )
    local_model: str = Field(
        default="phi3:mini",
        description="Preferred local model (replaced by the first listed model if absent)",
    )

    # ========================================
    # Curation Defaults
    # ========================================
    default_backend: Literal["cloud", "local"] = Field(
        default="cloud",
        description="Backend used when none is selected",
    )
    default_domain: str = Field(
        default="medicine",
        description="Domain profile used when none is selected",
    )
    min_text_length: int = Field(
        default=100,
        description="Minimum source length in text mode",
    )
    min_query_length: int = Field(
        default=5,
        description="Minimum source length in web-query mode",
    )

    # ========================================
    # Transport
    # ========================================
    request_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Maximum attempts per generation request",
    )
    request_timeout_seconds: float = Field(
        default=120.0,
        description="Timeout for a single generation request",
    )
    health_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout for local health probe and model listing",
    )

    # ========================================
    # Output & Service
    # ========================================
    export_dir: str = Field(
        default="exports",
        description="Directory where the CLI writes dataset exports",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level for loguru sinks",
    )
    api_host: str = Field(default="127.0.0.1", description="HTTP surface host")
    api_port: int = Field(default=8100, description="HTTP surface port")

    def has_cloud_configured(self) -> bool:
        """Check if a cloud API key is available."""
        return bool(self.gemini_api_key)

    def get_cloud_url(self) -> str:
        """Full generateContent URL for the configured Gemini model."""
        return f"{self.gemini_api_base.rstrip('/')}/{self.gemini_model}:generateContent"

    def get_min_source_length(self, input_mode: str) -> int:
        """Minimum source length gate for an input mode."""
        if input_mode == "web-query":
            return self.min_query_length
        return self.min_text_length


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
