"""Tests for the detection/identification pipeline."""

from __future__ import annotations

from recognizeface.api.schemas import (
    DetectedFace,
    FaceRectangle,
    IdentificationCandidate,
    IdentificationResult,
    PersonRecord,
    ResolvedPerson,
)
from recognizeface.config import UnrecognizedFacePolicy
from recognizeface.pipeline import FacePipeline, OutcomeKind, PipelineOutcome
from recognizeface.providers.client import ProviderFailure, ProviderResult

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _face(face_id: str) -> DetectedFace:
    return DetectedFace(face_id=face_id, face_rectangle=FaceRectangle(top=1, left=2, width=30, height=40))


def _identified(face_id: str, *person_ids: str) -> ProviderResult[list[IdentificationResult]]:
    candidates = [IdentificationCandidate(person_id=pid, confidence=0.9) for pid in person_ids]
    return ProviderResult.succeeded([IdentificationResult(face_id=face_id, candidates=candidates)])


def _failed(provider: str, status_code: int = 500) -> ProviderResult:  # type: ignore[type-arg]
    return ProviderResult.failed(ProviderFailure(provider, status_code, "Internal Server Error"))


class StubDetector:
    def __init__(self, result: ProviderResult[list[DetectedFace]]) -> None:
        self.result = result
        self.calls: list[bytes] = []

    async def detect_faces(self, image: bytes) -> ProviderResult[list[DetectedFace]]:
        self.calls.append(image)
        return self.result


class StubIdentifier:
    def __init__(self, results: dict[str, ProviderResult[list[IdentificationResult]]]) -> None:
        self.results = results
        self.calls: list[str] = []

    async def identify(self, face_id: str) -> ProviderResult[list[IdentificationResult]]:
        self.calls.append(face_id)
        return self.results.get(face_id, ProviderResult.succeeded([]))


class StubDirectory:
    def __init__(self, names: dict[str, str]) -> None:
        self.names = names
        self.calls: list[str] = []

    async def get_person(self, person_id: str) -> ProviderResult[PersonRecord]:
        self.calls.append(person_id)
        if person_id not in self.names:
            return _failed("person", 404)
        return ProviderResult.succeeded(PersonRecord(person_id=person_id, name=self.names[person_id]))


def _pipeline(
    faces: list[DetectedFace] | ProviderResult[list[DetectedFace]],
    identifications: dict[str, ProviderResult[list[IdentificationResult]]] | None = None,
    names: dict[str, str] | None = None,
    policy: UnrecognizedFacePolicy = UnrecognizedFacePolicy.ABORT,
) -> tuple[FacePipeline, StubDetector, StubIdentifier, StubDirectory]:
    detected = faces if isinstance(faces, ProviderResult) else ProviderResult.succeeded(faces)
    detector = StubDetector(detected)
    identifier = StubIdentifier(identifications or {})
    directory = StubDirectory(names or {})
    return FacePipeline(detector, identifier, directory, policy=policy), detector, identifier, directory


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


class TestDetection:
    async def test_no_faces_detected(self) -> None:
        pipeline, detector, identifier, _ = _pipeline([])
        outcome = await pipeline.run(b"image")
        assert outcome.kind is OutcomeKind.NO_FACES_DETECTED
        assert outcome.error_message == "No face detected."
        assert detector.calls == [b"image"]
        assert identifier.calls == []

    async def test_detect_failure_degrades_to_no_faces(self) -> None:
        pipeline, _, identifier, _ = _pipeline(_failed("detect", 503))
        outcome = await pipeline.run(b"image")
        assert outcome.kind is OutcomeKind.NO_FACES_DETECTED
        assert identifier.calls == []


# ---------------------------------------------------------------------------
# Identification
# ---------------------------------------------------------------------------


class TestIdentification:
    async def test_single_face_resolved(self) -> None:
        pipeline, _, _, directory = _pipeline(
            [_face("f1")],
            {"f1": _identified("f1", "p1")},
            {"p1": "Alice"},
        )
        outcome = await pipeline.run(b"image")
        assert outcome == PipelineOutcome.success([ResolvedPerson(name="Alice")])
        assert directory.calls == ["p1"]

    async def test_unrecognized_first_face_short_circuits(self) -> None:
        pipeline, _, identifier, directory = _pipeline(
            [_face("f1"), _face("f2"), _face("f3")],
            {"f2": _identified("f2", "p2"), "f3": _identified("f3", "p3")},
            {"p2": "Bob", "p3": "Carol"},
        )
        outcome = await pipeline.run(b"image")
        assert outcome.kind is OutcomeKind.NO_FACES_RECOGNIZED
        assert outcome.error_message == "No face recognized."
        assert identifier.calls == ["f1"]
        assert directory.calls == []

    async def test_unrecognized_later_face_discards_earlier_matches(self) -> None:
        pipeline, _, identifier, _ = _pipeline(
            [_face("f1"), _face("f2"), _face("f3")],
            {"f1": _identified("f1", "p1"), "f3": _identified("f3", "p3")},
            {"p1": "Alice", "p3": "Carol"},
        )
        outcome = await pipeline.run(b"image")
        assert outcome.kind is OutcomeKind.NO_FACES_RECOGNIZED
        assert outcome.people == ()
        assert identifier.calls == ["f1", "f2"]

    async def test_identify_failure_counts_as_unrecognized(self) -> None:
        pipeline, _, _, _ = _pipeline([_face("f1")], {"f1": _failed("identify", 429)})
        outcome = await pipeline.run(b"image")
        assert outcome.kind is OutcomeKind.NO_FACES_RECOGNIZED

    async def test_skip_policy_continues_past_unrecognized_face(self) -> None:
        pipeline, _, identifier, _ = _pipeline(
            [_face("f1"), _face("f2")],
            {"f2": _identified("f2", "p2")},
            {"p2": "Bob"},
            policy=UnrecognizedFacePolicy.SKIP,
        )
        outcome = await pipeline.run(b"image")
        assert outcome == PipelineOutcome.success([ResolvedPerson(name="Bob")])
        assert identifier.calls == ["f1", "f2"]

    async def test_empty_candidates_skip_face_without_short_circuit(self) -> None:
        pipeline, _, identifier, directory = _pipeline(
            [_face("f1"), _face("f2")],
            {"f1": _identified("f1"), "f2": _identified("f2", "p2")},
            {"p2": "Bob"},
        )
        outcome = await pipeline.run(b"image")
        assert outcome == PipelineOutcome.success([ResolvedPerson(name="Bob")])
        assert identifier.calls == ["f1", "f2"]
        assert directory.calls == ["p2"]

    async def test_all_candidates_empty_gives_only_unknown(self) -> None:
        pipeline, _, _, directory = _pipeline(
            [_face("f1"), _face("f2")],
            {"f1": _identified("f1"), "f2": _identified("f2")},
        )
        outcome = await pipeline.run(b"image")
        assert outcome.kind is OutcomeKind.ONLY_UNKNOWN_PERSONS
        assert outcome.error_message == "Only unknow person identified."
        assert directory.calls == []


# ---------------------------------------------------------------------------
# Person resolution
# ---------------------------------------------------------------------------


class TestPersonResolution:
    async def test_people_kept_in_detection_order(self) -> None:
        pipeline, _, _, _ = _pipeline(
            [_face("f1"), _face("f2"), _face("f3")],
            {
                "f1": _identified("f1", "p3"),
                "f2": _identified("f2", "p1"),
                "f3": _identified("f3", "p2"),
            },
            {"p1": "Alice", "p2": "Bob", "p3": "Carol"},
        )
        outcome = await pipeline.run(b"image")
        assert outcome.kind is OutcomeKind.SUCCESS
        assert [p.name for p in outcome.people] == ["Carol", "Alice", "Bob"]
        assert outcome.error_message is None

    async def test_only_first_candidate_is_looked_up(self) -> None:
        pipeline, _, _, directory = _pipeline(
            [_face("f1")],
            {"f1": _identified("f1", "p1", "p2")},
            {"p1": "Alice", "p2": "Bob"},
        )
        outcome = await pipeline.run(b"image")
        assert [p.name for p in outcome.people] == ["Alice"]
        assert directory.calls == ["p1"]

    async def test_only_first_identification_result_is_used(self) -> None:
        results = ProviderResult.succeeded(
            [
                IdentificationResult(face_id="f1", candidates=[]),
                IdentificationResult(
                    face_id="f1",
                    candidates=[IdentificationCandidate(person_id="p1", confidence=0.8)],
                ),
            ]
        )
        pipeline, _, _, directory = _pipeline([_face("f1")], {"f1": results}, {"p1": "Alice"})
        outcome = await pipeline.run(b"image")
        assert outcome.kind is OutcomeKind.ONLY_UNKNOWN_PERSONS
        assert directory.calls == []

    async def test_person_lookup_failure_yields_empty_name(self) -> None:
        pipeline, _, _, directory = _pipeline([_face("f1")], {"f1": _identified("f1", "ghost")})
        outcome = await pipeline.run(b"image")
        assert outcome == PipelineOutcome.success([ResolvedPerson(name="")])
        assert directory.calls == ["ghost"]
