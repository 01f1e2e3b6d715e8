"""API route definitions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from recognizeface.api.middleware import verify_api_key
from recognizeface.api.schemas import ErrorPayload, ErrorResponse, HealthResponse, ResolvedPerson
from recognizeface.pipeline import OutcomeKind

if TYPE_CHECKING:
    from recognizeface.config import Settings
    from recognizeface.pipeline import FacePipeline, PipelineOutcome

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", dependencies=[Depends(verify_api_key)])


def _get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def _get_pipeline(request: Request) -> FacePipeline:
    pipeline: FacePipeline = request.app.state.pipeline
    return pipeline


def render_outcome(outcome: PipelineOutcome) -> JSONResponse:
    """Map a pipeline outcome to a 200 JSON response."""
    if outcome.kind is OutcomeKind.SUCCESS:
        content: object = [person.model_dump(by_alias=True) for person in outcome.people]
    else:
        content = ErrorPayload(error=outcome.error_message or "").model_dump(by_alias=True)
    return JSONResponse(status_code=status.HTTP_200_OK, content=content)


@router.post(
    "/recognize-face",
    response_model=list[ResolvedPerson] | ErrorPayload,
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Empty request body"},
        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE: {"model": ErrorResponse},
    },
    summary="Recognize the people in an image",
)
async def recognize_face(request: Request) -> Response:
    """Detect and identify the faces in the raw image sent as request body."""
    settings = _get_settings(request)
    image = await request.body()

    if not image:
        logger.info("Rejecting request with empty body")
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    if len(image) > settings.max_file_size:
        return JSONResponse(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content={"detail": f"Image exceeds {settings.max_file_size} bytes"},
        )

    outcome = await _get_pipeline(request).run(image)
    logger.info("Recognition finished: %s (%d people)", outcome.kind, len(outcome.people))
    return render_outcome(outcome)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(request: Request) -> HealthResponse:
    """Return service health status."""
    settings = _get_settings(request)
    return HealthResponse(
        status="ok",
        person_group_id=settings.person_group_id,
        endpoint=settings.face_api_endpoint,
    )
