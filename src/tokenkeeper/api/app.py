"""
tokenkeeper.api.app

FastAPI app factory for the token service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Compose the credential resolver and the `TokenService` instance.
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from fastapi import FastAPI

from tokenkeeper import __version__
from tokenkeeper.api.routers.health import router as health_router
from tokenkeeper.api.routers.tokens import router as tokens_router
from tokenkeeper.auth.errors import ConfigurationError
from tokenkeeper.auth.resolver import CredentialResolver, MemberDirectory
from tokenkeeper.auth.service import Clock, TokenService, utc_now
from tokenkeeper.observability.logging import configure_logging, get_logger
from tokenkeeper.observability.middleware import RequestContextMiddleware
from tokenkeeper.settings import Settings

log = get_logger(__name__)


def build_resolver(settings: Settings) -> MemberDirectory:
    if settings.members_file is not None:
        return MemberDirectory.from_json_file(
            settings.members_file,
            identifier_field=settings.member_identifier_field,
        )
    return MemberDirectory(identifier_field=settings.member_identifier_field)


def create_app(
    *,
    settings: Settings,
    resolver: CredentialResolver | None = None,
    clock: Clock = utc_now,
) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    app = FastAPI(
        title="tokenkeeper",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
    )

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(tokens_router)

    app.state.token_service = None
    app.state.token_service_error = None
    try:
        app.state.token_service = TokenService(
            settings=settings,
            resolver=resolver if resolver is not None else build_resolver(settings),
            clock=clock,
        )
    except ConfigurationError as e:
        # Keep serving so token endpoints can answer 403 with the reason.
        app.state.token_service_error = e
        log.warning("token_service_unconfigured", error=str(e))

    return app


# --- Module Notes -----------------------------------------------------------
# Business logic stays in `tokenkeeper.auth`; this module only wires it to HTTP.
