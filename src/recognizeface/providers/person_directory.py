"""Person lookup within the configured person group."""

from __future__ import annotations

from typing import Protocol
from urllib.parse import quote

from pydantic import TypeAdapter

from recognizeface.api.schemas import PersonRecord
from recognizeface.providers.client import FaceApiClient, ProviderResult

_PERSON_RECORD = TypeAdapter(PersonRecord)


class PersonDirectory(Protocol):
    """Protocol for person lookup providers."""

    async def get_person(self, person_id: str) -> ProviderResult[PersonRecord]:
        """Fetch a person record by id."""
        ...


class HttpPersonDirectory(FaceApiClient):
    provider_name = "person"

    async def get_person(self, person_id: str) -> ProviderResult[PersonRecord]:
        self._logger.info("Person lookup started for %s", person_id)
        group = quote(self._settings.person_group_id, safe="")
        path = f"persongroups/{group}/persons/{quote(person_id, safe='')}"
        result = await self._request("GET", path, _PERSON_RECORD)
        if result.ok:
            self._logger.info("Person name: %s", result.unwrap_or(PersonRecord()).name)
        self._logger.info("Person lookup finished")
        return result
