"""
tokenkeeper.api.routers.tokens

Token issuance, renewal and validation endpoints.

Responsibilities:
- Translate HTTP requests into `TokenService` calls.
- Map core failures (`AuthenticationFailed`, `ConfigurationError`, `TokenInvalid`)
  to 403 responses.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_403_FORBIDDEN

from tokenkeeper.api.deps import token_service_dep
from tokenkeeper.auth.errors import AuthenticationFailed, ConfigurationError
from tokenkeeper.auth.jwt import Rejected
from tokenkeeper.auth.service import Fresh, TokenService
from tokenkeeper.observability.logging import get_logger

router = APIRouter(prefix="/v1/token", tags=["token"])

log = get_logger(__name__)


class TokenPayload(BaseModel):
    # OpenAPI only; handlers return the service payload dict unchanged.
    token: str
    member: dict[str, Any] | None = None


class LoginRequest(BaseModel):
    identifier: str = Field(min_length=1, max_length=256)
    password: str = Field(min_length=1, repr=False)
    include_member: bool = True


class TokenRequest(BaseModel):
    token: str = Field(min_length=1)


class RenewResponse(BaseModel):
    token: str
    renewed: bool


class CheckResponse(BaseModel):
    valid: bool


@router.post("", response_model=None, responses={200: {"model": TokenPayload}})
def issue_by_basic_auth(
    include_member: bool = True,
    authorization: str | None = Header(default=None),
    service: TokenService = Depends(token_service_dep),
) -> dict[str, Any]:
    try:
        payload = service.issue_from_basic_auth(authorization, include_profile_data=include_member)
    except (AuthenticationFailed, ConfigurationError) as e:
        log.warning("auth_failed", error=str(e), kind=getattr(e, "kind", None))
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail=str(e)) from e

    log.info("token_issued", method="basic_auth", include_member=include_member)
    return payload


@router.post("/login", response_model=None, responses={200: {"model": TokenPayload}})
def issue_by_credentials(
    body: LoginRequest,
    service: TokenService = Depends(token_service_dep),
) -> dict[str, Any]:
    try:
        payload = service.issue_from_credentials(
            body.identifier,
            body.password,
            include_profile_data=body.include_member,
        )
    except (AuthenticationFailed, ConfigurationError) as e:
        log.warning("auth_failed", error=str(e), kind=getattr(e, "kind", None))
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail=str(e)) from e

    log.info("token_issued", method="credentials", include_member=body.include_member)
    return payload


@router.post("/renew", response_model=RenewResponse)
def renew_token(
    body: TokenRequest,
    service: TokenService = Depends(token_service_dep),
) -> RenewResponse:
    result = service.renew_result(body.token)
    if isinstance(result, Rejected):
        log.warning("token_rejected", reason=result.reason.value)
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail=result.message)

    renewed = not isinstance(result, Fresh)
    if renewed:
        log.info("token_renewed")
    return RenewResponse(token=result.token, renewed=renewed)


@router.post("/check", response_model=CheckResponse)
def check_token(
    body: TokenRequest,
    service: TokenService = Depends(token_service_dep),
) -> CheckResponse:
    return CheckResponse(valid=service.check(body.token))


# --- Module Notes -----------------------------------------------------------
# Handlers are sync: argon2 verification is CPU-bound, and FastAPI
# runs sync handlers in its threadpool.
