"""Face identification against a person group."""

from __future__ import annotations

from typing import Protocol

from pydantic import TypeAdapter

from recognizeface.api.schemas import IdentificationResult, IdentifyRequest
from recognizeface.providers.client import FaceApiClient, ProviderResult

_IDENTIFICATION_RESULTS = TypeAdapter(list[IdentificationResult])


class FaceIdentifier(Protocol):
    """Protocol for face identification providers."""

    async def identify(self, face_id: str) -> ProviderResult[list[IdentificationResult]]:
        """Identify one detected face within the configured person group."""
        ...


class HttpFaceIdentifier(FaceApiClient):
    """Posts a single face id to ``/identify``."""

    provider_name = "identify"

    def build_request(self, face_id: str) -> IdentifyRequest:
        return IdentifyRequest(
            person_group_id=self._settings.person_group_id,
            face_ids=[face_id],
            max_num_of_candidates_returned=self._settings.max_candidates,
            confidence_threshold=self._settings.confidence_threshold,
        )

    async def identify(self, face_id: str) -> ProviderResult[list[IdentificationResult]]:
        self._logger.info("Face identification started for face %s", face_id)
        payload = self.build_request(face_id).model_dump(by_alias=True)
        result = await self._request("POST", "identify", _IDENTIFICATION_RESULTS, json=payload)
        if result.ok:
            self._logger.info("Identification returned %d result(s)", len(result.unwrap_or([])))
        self._logger.info("Face identification finished")
        return result
