"""Face detection through the Face API detect endpoint."""

from __future__ import annotations

from typing import Protocol

from pydantic import TypeAdapter

from recognizeface.api.schemas import DetectedFace
from recognizeface.providers.client import FaceApiClient, ProviderResult

_DETECTED_FACES = TypeAdapter(list[DetectedFace])


class FaceDetector(Protocol):
    """Protocol for face detection providers."""

    async def detect_faces(self, image: bytes) -> ProviderResult[list[DetectedFace]]:
        """Detect faces in raw image bytes.

        Returns:
            Detected faces in provider order; an empty list means the image
            holds no face.
        """
        ...


class HttpFaceDetector(FaceApiClient):
    """Posts the raw image to ``/detect`` and returns the detected faces."""

    provider_name = "detect"

    async def detect_faces(self, image: bytes) -> ProviderResult[list[DetectedFace]]:
        self._logger.info("Face detection started (%d bytes)", len(image))
        result = await self._request(
            "POST",
            "detect",
            _DETECTED_FACES,
            params={"returnFaceId": "true", "returnFaceLandmarks": "false"},
            headers={"Content-Type": "application/octet-stream"},
            content=image,
        )
        if result.ok:
            self._logger.info("Number of faces detected: %d", len(result.unwrap_or([])))
        self._logger.info("Face detection finished")
        return result
