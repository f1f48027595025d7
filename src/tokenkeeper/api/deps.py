"""
tokenkeeper.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide the token service dependency, failing with 403 when it is unconfigured.
- Encapsulate app.state access patterns.
"""

from __future__ import annotations

from fastapi import HTTPException, Request
from starlette.status import HTTP_403_FORBIDDEN

from tokenkeeper.auth.errors import ConfigurationError
from tokenkeeper.auth.service import TokenService


def token_service_dep(request: Request) -> TokenService:
    # The service is built once in `tokenkeeper.api.app.create_app`.
    service: TokenService | None = request.app.state.token_service  # type: ignore[attr-defined]
    if service is None:
        error: ConfigurationError = request.app.state.token_service_error  # type: ignore[attr-defined]
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail=str(error))
    return service
