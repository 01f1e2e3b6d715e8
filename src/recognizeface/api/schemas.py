"""Pydantic schemas for the Face API wire formats and the RecognizeFace API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    """Immutable record populated from camelCase Face API payloads."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ---------------------------------------------------------------------------
# Face API: detect
# ---------------------------------------------------------------------------


class FaceRectangle(_WireModel):
    """Pixel bounding box of a detected face."""

    top: int
    left: int
    width: int
    height: int


class DetectedFace(_WireModel):
    """A face returned by the detect endpoint."""

    face_id: str = Field(alias="faceId")
    face_rectangle: FaceRectangle | None = Field(default=None, alias="faceRectangle")


# ---------------------------------------------------------------------------
# Face API: identify
# ---------------------------------------------------------------------------


class IdentifyRequest(_WireModel):
    """Request body for the identify endpoint."""

    person_group_id: str = Field(alias="personGroupId")
    face_ids: list[str] = Field(alias="faceIds")
    max_num_of_candidates_returned: int = Field(alias="maxNumOfCandidatesReturned", ge=1)
    confidence_threshold: float = Field(alias="confidenceThreshold", ge=0.0, le=1.0)


class IdentificationCandidate(_WireModel):
    """A provider-ranked guess at the person a face belongs to."""

    person_id: str = Field(alias="personId")
    confidence: float = Field(ge=0.0, le=1.0)


class IdentificationResult(_WireModel):
    """Identification candidates for one face, highest confidence first."""

    face_id: str = Field(alias="faceId")
    candidates: list[IdentificationCandidate] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Face API: person lookup
# ---------------------------------------------------------------------------


class PersonRecord(_WireModel):
    """A person of a person group. The default instance is the empty record."""

    person_id: str = Field(default="", alias="personId")
    name: str = ""
    persisted_face_ids: frozenset[str] = Field(default_factory=frozenset, alias="persistedFaceIds")
    user_data: Any = Field(default=None, alias="userData")


# ---------------------------------------------------------------------------
# RecognizeFace API
# ---------------------------------------------------------------------------


class ResolvedPerson(_WireModel):
    """A recognized person as returned to the caller."""

    name: str = Field(alias="Name")


class ErrorPayload(_WireModel):
    """Domain error reported with a 200 status."""

    error: str = Field(alias="Error")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    person_group_id: str
    endpoint: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
