"""Configuration management for insolvency document extraction."""
import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.rate_limit import RetryPolicy


class Settings(BaseSettings):
    """Centralized configuration for the extraction service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore"
    )

    # API Configuration
    gemini_api_key: str = Field(..., description="Gemini API key for document processing")
    use_vertex_ai: bool = Field(
        default=False,
        validation_alias="GOOGLE_GENAI_USE_VERTEXAI",
        description="Use Vertex AI instead of standard Gemini API"
    )
    google_cloud_project: str = Field(default="not-set", description="Google Cloud project for Vertex AI")
    google_cloud_location: str = Field(default="not-set", description="Google Cloud location for Vertex AI")

    # Model Configuration
    extraction_model: str = Field(default="gemini-2.5-pro", description="Vision model for field extraction")
    max_output_tokens: int = Field(default=8192, description="Output token limit per extraction")

    # Processing Configuration
    quota_limit: int = Field(default=5, description="API concurrency limit")
    max_images_per_document: int = Field(default=20, description="Maximum page images sent for one document")
    max_image_size_mb: float = Field(default=20.0, description="Maximum size of a single page image")

    # Retry Configuration
    retry_max_attempts: int = Field(default=3, description="Maximum attempts per model call")
    retry_base_delay: float = Field(default=2.0, description="Base delay for exponential backoff")
    retry_max_delay: float = Field(default=10.0, description="Maximum delay between retries")
    retry_jitter_range: float = Field(default=3.0, description="Jitter range for retry delays")

    # Debug Configuration
    debug_responses: bool = Field(default=False, description="Save raw model responses for debugging")
    responses_directory: Path | None = Field(default=None, description="Where raw responses are saved")

    @field_validator("gemini_api_key")
    @classmethod
    def api_key_must_not_be_empty(cls, v):
        """Ensure API key is provided."""
        if not v or v.strip() == "":
            raise ValueError("GEMINI_API_KEY must be provided")
        return v

    @field_validator("use_vertex_ai", "debug_responses", mode="before")
    @classmethod
    def parse_flag(cls, v):
        """Parse boolean flags given as "1"/"true" strings."""
        if isinstance(v, str):
            return v.strip() == "1" or v.strip().lower() == "true"
        return v

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings instance from environment variables."""
        return cls(gemini_api_key=os.getenv("GEMINI_API_KEY", ""))

    @property
    def api_client_kwargs(self) -> dict:
        """Keyword arguments for ``google.genai.Client``."""
        if self.use_vertex_ai:
            return {
                "vertexai": True,
                "project": self.google_cloud_project,
                "location": self.google_cloud_location,
            }
        return {"api_key": self.gemini_api_key}

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.retry_max_attempts,
            base_delay=self.retry_base_delay,
            max_delay=self.retry_max_delay,
            jitter_range=self.retry_jitter_range
        )
