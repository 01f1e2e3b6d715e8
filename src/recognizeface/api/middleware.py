"""Middleware: API key authentication for inbound requests.

Callers present the key either as 'Authorization: Bearer <key>' or in the
'x-functions-key' header used by serverless function hosts.
"""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

if TYPE_CHECKING:
    from recognizeface.config import Settings

FUNCTION_KEY_HEADER = "x-functions-key"

_bearer_scheme = HTTPBearer(auto_error=False)
_function_key_scheme = APIKeyHeader(name=FUNCTION_KEY_HEADER, auto_error=False)


def _presented_key(credentials: HTTPAuthorizationCredentials | None, function_key: str | None) -> str | None:
    if credentials is not None:
        return credentials.credentials
    return function_key


async def verify_api_key(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    function_key: Annotated[str | None, Depends(_function_key_scheme)],
) -> None:
    """Reject the request unless it carries RECOGNIZEFACE_API_KEY, when one is set."""
    settings: Settings = request.app.state.settings
    if settings.api_key is None:
        return

    presented = _presented_key(credentials, function_key)
    if presented is None or not secrets.compare_digest(presented.encode(), settings.api_key.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
            headers={"WWW-Authenticate": "Bearer"},
        )
