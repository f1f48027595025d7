"""
tokenkeeper.auth.claims

Standard claim set construction.

Responsibilities:
- Build the registered claims (iss/exp/iat/jti) plus the `rat` (renewed-at) claim.
- Compute expiry from the configured lifetime.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Any

from tokenkeeper.settings import Settings

STANDARD_CLAIMS = ("iss", "exp", "iat", "rat", "jti")


def issuer_claim(settings: Settings) -> str:
    return settings.jwt_issuer or settings.base_url


def expiration_claim(*, settings: Settings, now: datetime) -> int:
    return int((now + timedelta(days=settings.lifetime_in_days)).timestamp())


def build_claims(*, settings: Settings, now: datetime) -> dict[str, Any]:
    """
    Fresh standard claims for one signing event.

    Each call draws a new `jti`; never reuse the result for a second token.
    """

    issued_at = int(now.timestamp())
    return {
        "iss": issuer_claim(settings),
        "exp": expiration_claim(settings=settings, now=now),
        "iat": issued_at,
        "rat": issued_at,
        "jti": str(uuid.uuid4()),
    }
