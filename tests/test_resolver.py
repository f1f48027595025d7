from __future__ import annotations

import base64
import json
from pathlib import Path

import pytest
from argon2 import PasswordHasher

from tests.conftest import MEMBER_EMAIL, MEMBER_PASSWORD
from tokenkeeper.auth.errors import AuthenticationFailed, AuthFailureKind
from tokenkeeper.auth.resolver import MemberDirectory, parse_basic_authorization


def _basic(raw: str) -> str:
    return "Basic " + base64.b64encode(raw.encode()).decode()


def test_parse_basic_authorization() -> None:
    creds = parse_basic_authorization(_basic("user@x.y:pa:ss"))

    assert creds.identifier == "user@x.y"
    assert creds.password == "pa:ss"
    assert "pa:ss" not in repr(creds)


@pytest.mark.parametrize(
    "header,kind",
    [
        (None, AuthFailureKind.missing_credentials),
        ("", AuthFailureKind.missing_credentials),
        ("Bearer abc", AuthFailureKind.malformed_credentials),
        ("Basic", AuthFailureKind.malformed_credentials),
        ("Basic !!!not-base64", AuthFailureKind.malformed_credentials),
        (_basic("no-colon"), AuthFailureKind.malformed_credentials),
        (_basic(":password-only"), AuthFailureKind.malformed_credentials),
    ],
)
def test_parse_basic_authorization_failures(header: str | None, kind: AuthFailureKind) -> None:
    with pytest.raises(AuthenticationFailed) as exc:
        parse_basic_authorization(header)
    assert exc.value.kind is kind


def test_resolve_member(directory: MemberDirectory) -> None:
    principal = directory.resolve_by_identifier_and_password(MEMBER_EMAIL.upper(), MEMBER_PASSWORD)

    assert principal.id == 1
    assert principal.get("first_name") == "Test"


def test_resolve_by_basic_auth(directory: MemberDirectory) -> None:
    principal = directory.resolve_by_basic_auth(_basic(f"{MEMBER_EMAIL}:{MEMBER_PASSWORD}"))

    assert principal.get("email") == MEMBER_EMAIL


def test_unknown_and_wrong_password_are_distinguished_internally(directory: MemberDirectory) -> None:
    with pytest.raises(AuthenticationFailed) as unknown:
        directory.resolve_by_identifier_and_password("nobody@test.test", MEMBER_PASSWORD)
    with pytest.raises(AuthenticationFailed) as wrong:
        directory.resolve_by_identifier_and_password(MEMBER_EMAIL, "nope")

    assert unknown.value.kind is AuthFailureKind.unknown_identifier
    assert wrong.value.kind is AuthFailureKind.wrong_password
    assert unknown.value.reveals_identity and wrong.value.reveals_identity


def test_add_member_requires_identifier() -> None:
    directory = MemberDirectory(hasher=PasswordHasher(time_cost=1, memory_cost=8, parallelism=1))

    with pytest.raises(ValueError):
        directory.add_member(id=1, password="x", attributes={"first_name": "No Email"})
    with pytest.raises(ValueError):
        directory.add_member(id=1, attributes={"email": "a@b.c"})


def test_from_json_file_with_hashes(tmp_path: Path) -> None:
    hasher = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)
    path = tmp_path / "members.json"
    path.write_text(
        json.dumps(
            [{"id": 5, "username": "ada", "password_hash": hasher.hash("secret"), "surname": "L"}]
        ),
        encoding="utf-8",
    )

    directory = MemberDirectory.from_json_file(path, identifier_field="username")

    assert len(directory) == 1
    assert directory.resolve_by_identifier_and_password("ada", "secret").get("surname") == "L"


def test_from_json_file_rejects_non_list(tmp_path: Path) -> None:
    path = tmp_path / "members.json"
    path.write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError):
        MemberDirectory.from_json_file(path)
