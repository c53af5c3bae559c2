"""Middleware: API key authentication.

The mobile client sends its key either as ``Authorization: Bearer <key>`` or
as an ``X-API-Key`` header; the bearer token wins when both are present.
"""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

if TYPE_CHECKING:
    from landx.config import Settings

_bearer_scheme = HTTPBearer(auto_error=False)
_header_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)


def _get_settings_from_request(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def _presented_key(credentials: HTTPAuthorizationCredentials | None, header_key: str | None) -> str | None:
    if credentials is not None:
        return credentials.credentials
    return header_key


async def verify_api_key(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    header_key: Annotated[str | None, Depends(_header_scheme)],
) -> None:
    """Check the presented key against the configured API key.

    If no API key is configured (LANDX_API_KEY not set), all requests pass.
    """
    settings = _get_settings_from_request(request)
    if settings.api_key is None:
        return

    presented = _presented_key(credentials, header_key)
    if presented is None or not secrets.compare_digest(presented.encode(), settings.api_key.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
            headers={"WWW-Authenticate": "Bearer"},
        )
