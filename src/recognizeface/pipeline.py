"""Detection -> identification -> person lookup pipeline.

Architecture:
    image bytes -> FaceDetector -> (per face) FaceIdentifier
                -> (per top candidate) PersonDirectory -> PipelineOutcome

Calls are strictly sequential. Provider failures are degraded to empty
results here, so a failed detect call reads as "no face detected".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, TypeVar

from recognizeface.api.schemas import PersonRecord, ResolvedPerson
from recognizeface.config import UnrecognizedFacePolicy

if TYPE_CHECKING:
    from recognizeface.providers.client import ProviderResult
    from recognizeface.providers.face_detector import FaceDetector
    from recognizeface.providers.face_identifier import FaceIdentifier
    from recognizeface.providers.person_directory import PersonDirectory

T = TypeVar("T")


class OutcomeKind(StrEnum):
    NO_FACES_DETECTED = "no_faces_detected"
    NO_FACES_RECOGNIZED = "no_faces_recognized"
    ONLY_UNKNOWN_PERSONS = "only_unknown_persons"
    SUCCESS = "success"


ERROR_MESSAGES: dict[OutcomeKind, str] = {
    OutcomeKind.NO_FACES_DETECTED: "No face detected.",
    OutcomeKind.NO_FACES_RECOGNIZED: "No face recognized.",
    OutcomeKind.ONLY_UNKNOWN_PERSONS: "Only unknow person identified.",
}


@dataclass(frozen=True)
class PipelineOutcome:
    """Tagged result of one pipeline run. ``people`` is only set on SUCCESS."""

    kind: OutcomeKind
    people: tuple[ResolvedPerson, ...] = field(default=())

    @classmethod
    def success(cls, people: list[ResolvedPerson]) -> PipelineOutcome:
        return cls(OutcomeKind.SUCCESS, tuple(people))

    @property
    def error_message(self) -> str | None:
        return ERROR_MESSAGES.get(self.kind)


class FacePipeline:
    """Sequences the three Face API clients for one image."""

    def __init__(
        self,
        detector: FaceDetector,
        identifier: FaceIdentifier,
        directory: PersonDirectory,
        policy: UnrecognizedFacePolicy = UnrecognizedFacePolicy.ABORT,
        logger: logging.Logger | None = None,
    ) -> None:
        self._detector = detector
        self._identifier = identifier
        self._directory = directory
        self._policy = policy
        self._logger = logger or logging.getLogger(__name__)

    async def run(self, image: bytes) -> PipelineOutcome:
        faces = self._degrade(await self._detector.detect_faces(image), [])
        if not faces:
            return PipelineOutcome(OutcomeKind.NO_FACES_DETECTED)

        people: list[ResolvedPerson] = []
        for face in faces:
            results = self._degrade(await self._identifier.identify(face.face_id), [])
            if not results:
                if self._policy is UnrecognizedFacePolicy.ABORT:
                    self._logger.info("Face %s not recognized, aborting", face.face_id)
                    return PipelineOutcome(OutcomeKind.NO_FACES_RECOGNIZED)
                self._logger.info("Face %s not recognized, skipping", face.face_id)
                continue

            candidates = results[0].candidates
            if not candidates:
                self._logger.info("Face %s has no candidate above threshold", face.face_id)
                continue

            # Provider ranking is trusted: the first candidate is the match.
            record = self._degrade(await self._directory.get_person(candidates[0].person_id), PersonRecord())
            people.append(ResolvedPerson(name=record.name))

        if not people:
            return PipelineOutcome(OutcomeKind.ONLY_UNKNOWN_PERSONS)
        return PipelineOutcome.success(people)

    def _degrade(self, result: ProviderResult[T], empty: T) -> T:
        if result.failure is not None:
            self._logger.warning(
                "Degrading %s failure (status=%s) to an empty result",
                result.failure.provider,
                result.failure.status_code,
            )
        return result.unwrap_or(empty)
