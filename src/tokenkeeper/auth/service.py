"""
tokenkeeper.auth.service

Token lifecycle service.

Responsibilities:
- Issue tokens from an authenticated principal (directly, by credentials, or
  by HTTP Basic auth).
- Validate tokens and renew them once the renewal threshold has passed,
  preserving `iat`, `jti` and custom claims.
- Hold the optional process-wide instance (`get_instance` / `reset_instance`).
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from tokenkeeper.auth.claims import build_claims, expiration_claim
from tokenkeeper.auth.errors import AuthenticationFailed, ConfigurationError
from tokenkeeper.auth.jwt import JwtConfig, Rejected, decode_and_validate, sign
from tokenkeeper.auth.models import Principal
from tokenkeeper.auth.resolver import CredentialResolver
from tokenkeeper.settings import Settings, get_settings

GENERIC_AUTH_FAILURE = "Invalid credentials"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class Fresh:
    """Token renewed too recently; the input is handed back untouched."""

    token: str


@dataclass(frozen=True, slots=True)
class Renewed:
    token: str
    claims: dict[str, Any]


RenewResult = Fresh | Renewed | Rejected


class TokenService:
    def __init__(
        self,
        *,
        settings: Settings,
        resolver: CredentialResolver | None = None,
        clock: Clock = utc_now,
    ) -> None:
        # Fail at construction, not at first use.
        if not settings.jwt_secret:
            raise ConfigurationError('No "secret" config found.')

        self._settings = settings
        self._resolver = resolver
        self._clock = clock
        self._jwt = JwtConfig(alg=settings.jwt_alg, secret=settings.jwt_secret)

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_claims(self) -> dict[str, Any]:
        return build_claims(settings=self._settings, now=self._clock())

    def issue_from_principal(
        self,
        principal: Principal,
        *,
        include_profile_data: bool = True,
        custom_claims: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        # Standard claims are merged last and win on key collision.
        claims = {**(custom_claims or {}), **self.get_claims()}
        payload: dict[str, Any] = {"token": sign(cfg=self._jwt, claims=claims)}

        if include_profile_data:
            payload["member"] = {
                key: principal.get(attr)
                for key, attr in self._settings.included_member_fields.items()
            }
        return payload

    def issue_from_credentials(
        self,
        identifier: str,
        password: str,
        *,
        include_profile_data: bool = True,
        custom_claims: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        resolver = self._require_resolver()
        with self._masked_auth_failures():
            principal = resolver.resolve_by_identifier_and_password(identifier, password)
        return self._issue_for_member(principal, include_profile_data, custom_claims)

    def issue_from_basic_auth(
        self,
        authorization: str | None,
        *,
        include_profile_data: bool = True,
        custom_claims: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        resolver = self._require_resolver()
        with self._masked_auth_failures():
            principal = resolver.resolve_by_basic_auth(authorization)
        return self._issue_for_member(principal, include_profile_data, custom_claims)

    def renew_result(self, token: str) -> RenewResult:
        now = self._clock()
        result = decode_and_validate(cfg=self._jwt, token=token, now=now)
        if isinstance(result, Rejected):
            return result

        claims = result.claims
        idle_minutes = abs(int(now.timestamp()) - claims["rat"]) // 60
        if idle_minutes < self._settings.renew_threshold_in_minutes:
            return Fresh(token)

        claims["exp"] = expiration_claim(settings=self._settings, now=now)
        claims["rat"] = int(now.timestamp())
        return Renewed(token=sign(cfg=self._jwt, claims=claims), claims=claims)

    def renew(self, token: str) -> str:
        result = self.renew_result(token)
        if isinstance(result, Rejected):
            result.raise_error()
        return result.token

    def check(self, token: str) -> bool:
        return decode_and_validate(cfg=self._jwt, token=token, now=self._clock()).ok

    def _issue_for_member(
        self,
        principal: Principal,
        include_profile_data: bool,
        custom_claims: Mapping[str, Any] | None,
    ) -> dict[str, Any]:
        claims = {"memberId": principal.id, **(custom_claims or {})}
        return self.issue_from_principal(
            principal,
            include_profile_data=include_profile_data,
            custom_claims=claims,
        )

    def _require_resolver(self) -> CredentialResolver:
        if self._resolver is None:
            raise ConfigurationError("No credential resolver configured.")
        return self._resolver

    @contextmanager
    def _masked_auth_failures(self) -> Iterator[None]:
        try:
            yield
        except AuthenticationFailed as e:
            if e.reveals_identity and not self._settings.disclose_auth_failure_reason:
                raise AuthenticationFailed(GENERIC_AUTH_FAILURE, kind=e.kind) from e
            raise


_instance: TokenService | None = None
_instance_lock = threading.Lock()


def get_instance(
    *,
    settings: Settings | None = None,
    resolver: CredentialResolver | None = None,
) -> TokenService:
    """
    Process-wide service, built on first call.

    Arguments only apply to the call that constructs the instance. Hosts that
    own a composition root should construct `TokenService` directly instead.
    """

    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = TokenService(settings=settings or get_settings(), resolver=resolver)
        return _instance


def reset_instance() -> None:
    global _instance
    with _instance_lock:
        _instance = None


# --- Module Notes -----------------------------------------------------------
# The service keeps no per-token state; every method reads only immutable
# settings, so one instance is safe to share across threads.
