"""Environment-based configuration for RecognizeFace."""

from __future__ import annotations

from enum import StrEnum

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class UnrecognizedFacePolicy(StrEnum):
    """What the pipeline does when a face gets no identification result."""

    ABORT = "abort"
    SKIP = "skip"


class Settings(BaseSettings):
    """Application settings loaded from RECOGNIZEFACE_* environment variables.

    The Face API key and person group also fall back to the bare
    FACE_API_KEY / PERSON_GROUP_ID variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="RECOGNIZEFACE_",
        case_sensitive=False,
        populate_by_name=True,
    )

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080

    # Inbound authentication (None = disabled)
    api_key: str | None = None

    # Face API
    face_api_key: str = Field(
        validation_alias=AliasChoices("RECOGNIZEFACE_FACE_API_KEY", "FACE_API_KEY", "face_api_key"),
    )
    person_group_id: str = Field(
        validation_alias=AliasChoices("RECOGNIZEFACE_PERSON_GROUP_ID", "PERSON_GROUP_ID", "person_group_id"),
    )
    face_api_endpoint: str = "https://api.projectoxford.ai/face/v1.0"
    request_timeout: float = Field(default=10.0, gt=0)

    # Identification
    max_candidates: int = Field(default=1, ge=1)
    confidence_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    unrecognized_face_policy: UnrecognizedFacePolicy = UnrecognizedFacePolicy.ABORT

    # Input limits
    max_file_size: int = Field(default=6_291_456, ge=1)


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]
