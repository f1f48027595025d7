"""
tokenkeeper.auth.errors

Typed failures raised by the token core.

Responsibilities:
- Separate configuration, credential, and token failures so the host layer can
  translate each into a transport response.
"""

from __future__ import annotations

from enum import StrEnum


class TokenKeeperError(Exception):
    pass


class ConfigurationError(TokenKeeperError):
    """
    Raised eagerly when the service is built without a usable secret.
    """


class AuthFailureKind(StrEnum):
    missing_credentials = "missing_credentials"
    malformed_credentials = "malformed_credentials"
    unknown_identifier = "unknown_identifier"
    wrong_password = "wrong_password"


class AuthenticationFailed(TokenKeeperError):
    def __init__(self, message: str, *, kind: AuthFailureKind) -> None:
        super().__init__(message)
        self.kind = kind

    @property
    def reveals_identity(self) -> bool:
        # These two kinds tell a caller whether an identifier exists.
        return self.kind in (AuthFailureKind.unknown_identifier, AuthFailureKind.wrong_password)


class TokenRejection(StrEnum):
    malformed = "malformed"
    bad_signature = "bad_signature"
    disallowed_algorithm = "disallowed_algorithm"
    expired = "expired"


class TokenInvalid(TokenKeeperError):
    def __init__(self, message: str, *, reason: TokenRejection) -> None:
        super().__init__(message)
        self.reason = reason
