"""
tokenkeeper.auth.resolver

Credential resolution boundary.

Responsibilities:
- Define the `CredentialResolver` protocol the token service depends on.
- Parse HTTP Basic `Authorization` headers into credentials.
- Provide an in-memory member directory with argon2id password hashes.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from tokenkeeper.auth.errors import AuthenticationFailed, AuthFailureKind
from tokenkeeper.auth.models import Principal


@dataclass(frozen=True, slots=True)
class BasicCredentials:
    identifier: str
    password: str = field(repr=False)


def parse_basic_authorization(authorization: str | None) -> BasicCredentials:
    if not authorization:
        raise AuthenticationFailed(
            "Please enter a username and password.",
            kind=AuthFailureKind.missing_credentials,
        )

    scheme, _, encoded = authorization.partition(" ")
    if scheme.lower() != "basic" or not encoded.strip():
        raise AuthenticationFailed(
            "Authorization header must use the Basic scheme.",
            kind=AuthFailureKind.malformed_credentials,
        )

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise AuthenticationFailed(
            "Basic credentials are not valid base64.",
            kind=AuthFailureKind.malformed_credentials,
        ) from e

    identifier, sep, password = decoded.partition(":")
    if not sep or not identifier:
        raise AuthenticationFailed(
            "Basic credentials must be 'identifier:password'.",
            kind=AuthFailureKind.malformed_credentials,
        )
    return BasicCredentials(identifier=identifier, password=password)


class CredentialResolver(Protocol):
    def resolve_by_basic_auth(self, authorization: str | None) -> Principal: ...

    def resolve_by_identifier_and_password(self, identifier: str, password: str) -> Principal: ...


@dataclass(frozen=True, slots=True)
class MemberRecord:
    id: int | str
    password_hash: str = field(repr=False)
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def to_principal(self) -> Principal:
        return Principal(id=self.id, attributes=self.attributes)


class MemberDirectory:
    """
    Small in-process user store implementing `CredentialResolver`.

    Lookups key on `identifier_field` (an attribute such as "email"). Unknown
    identifiers still pay for one hash verification so response timing does not
    reveal whether the identifier exists.
    """

    def __init__(
        self,
        *,
        identifier_field: str = "email",
        hasher: PasswordHasher | None = None,
    ) -> None:
        self._identifier_field = identifier_field
        self._hasher = hasher or PasswordHasher()
        self._members: dict[str, MemberRecord] = {}
        self._dummy_hash = self._hasher.hash("tokenkeeper-dummy-password")

    @property
    def identifier_field(self) -> str:
        return self._identifier_field

    def __len__(self) -> int:
        return len(self._members)

    def hash_password(self, password: str) -> str:
        return self._hasher.hash(password)

    def add_member(
        self,
        *,
        id: int | str,
        attributes: Mapping[str, Any],
        password: str | None = None,
        password_hash: str | None = None,
    ) -> MemberRecord:
        if (password is None) == (password_hash is None):
            raise ValueError("exactly one of password or password_hash is required")

        identifier = attributes.get(self._identifier_field)
        if not identifier:
            raise ValueError(f"member {id!r} has no '{self._identifier_field}' attribute")

        record = MemberRecord(
            id=id,
            password_hash=password_hash if password_hash is not None else self.hash_password(password),
            attributes=dict(attributes),
        )
        self._members[self._normalize(str(identifier))] = record
        return record

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        *,
        identifier_field: str = "email",
        hasher: PasswordHasher | None = None,
    ) -> MemberDirectory:
        directory = cls(identifier_field=identifier_field, hasher=hasher)
        for raw in records:
            data = dict(raw)
            member_id = data.pop("id")
            password = data.pop("password", None)
            password_hash = data.pop("password_hash", None)
            directory.add_member(
                id=member_id,
                attributes=data,
                password=password,
                password_hash=password_hash,
            )
        return directory

    @classmethod
    def from_json_file(cls, path: Path, *, identifier_field: str = "email") -> MemberDirectory:
        # Expected shape: [{"id": 1, "email": "...", "password_hash": "$argon2id$..."}, ...]
        records = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(records, list):
            raise ValueError(f"{path} must contain a JSON list of member records")
        return cls.from_records(records, identifier_field=identifier_field)

    def resolve_by_basic_auth(self, authorization: str | None) -> Principal:
        creds = parse_basic_authorization(authorization)
        return self.resolve_by_identifier_and_password(creds.identifier, creds.password)

    def resolve_by_identifier_and_password(self, identifier: str, password: str) -> Principal:
        record = self._members.get(self._normalize(identifier))
        if record is None:
            self._verify(self._dummy_hash, password)
            raise AuthenticationFailed(
                f"No member found with {self._identifier_field} '{identifier}'.",
                kind=AuthFailureKind.unknown_identifier,
            )
        if not self._verify(record.password_hash, password):
            raise AuthenticationFailed(
                "The provided password is incorrect.",
                kind=AuthFailureKind.wrong_password,
            )
        return record.to_principal()

    def _verify(self, password_hash: str, password: str) -> bool:
        try:
            return self._hasher.verify(password_hash, password)
        except (InvalidHashError, VerificationError):
            return False

    @staticmethod
    def _normalize(identifier: str) -> str:
        return identifier.strip().lower()


# --- Module Notes -----------------------------------------------------------
# Production deployments typically replace `MemberDirectory` with a resolver
# backed by an external identity store; the token service only sees the protocol.
