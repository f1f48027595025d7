"""
tokenkeeper.auth.jwt

JWT signing and validation helpers.

Responsibilities:
- Sign claim sets with the single configured HMAC algorithm.
- Decode and validate tokens (signature, required claims, expiry) into a result
  value instead of raising, so callers can branch without exception control flow.

Note:
- The accepted algorithm always comes from `JwtConfig`, never from the token header.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, NoReturn

import jwt
from jwt import InvalidAlgorithmError, InvalidSignatureError, InvalidTokenError

from tokenkeeper.auth.errors import TokenInvalid, TokenRejection

REQUIRED_CLAIMS = ["exp", "iat", "rat", "jti"]
_TIMESTAMP_CLAIMS = ("exp", "iat", "rat")


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    secret: str


@dataclass(frozen=True, slots=True)
class Verified:
    claims: dict[str, Any]

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> dict[str, Any]:
        return self.claims


@dataclass(frozen=True, slots=True)
class Rejected:
    reason: TokenRejection
    message: str

    @property
    def ok(self) -> bool:
        return False

    def raise_error(self) -> NoReturn:
        raise TokenInvalid(self.message, reason=self.reason)

    def unwrap(self) -> NoReturn:
        self.raise_error()


VerificationResult = Verified | Rejected


def sign(*, cfg: JwtConfig, claims: dict[str, Any]) -> str:
    return jwt.encode(claims, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str, now: datetime) -> VerificationResult:
    try:
        # Only the signature and required claims are checked here; expiry is
        # checked below against the caller's clock. aud/iss/sub are opaque
        # custom claims to this service.
        claims = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            options={
                "require": REQUIRED_CLAIMS,
                "verify_exp": False,
                "verify_iat": False,
                "verify_nbf": False,
                "verify_aud": False,
                "verify_iss": False,
                "verify_sub": False,
            },
        )
    except InvalidSignatureError as e:
        return Rejected(TokenRejection.bad_signature, str(e))
    except InvalidAlgorithmError as e:
        return Rejected(TokenRejection.disallowed_algorithm, str(e))
    except InvalidTokenError as e:
        # Structural problems: bad segments, non-JSON payload, missing claims.
        return Rejected(TokenRejection.malformed, str(e))

    for name in _TIMESTAMP_CLAIMS:
        value = claims[name]
        if isinstance(value, bool) or not isinstance(value, int):
            return Rejected(TokenRejection.malformed, f"Claim '{name}' must be an integer timestamp")

    if claims["exp"] <= int(now.timestamp()):
        return Rejected(TokenRejection.expired, "Signature has expired")

    return Verified(claims)


def verify(*, cfg: JwtConfig, token: str, now: datetime) -> dict[str, Any]:
    return decode_and_validate(cfg=cfg, token=token, now=now).unwrap()


# --- Module Notes -----------------------------------------------------------
# `exp <= now` counts as expired, matching PyJWT's own rule with zero leeway.
