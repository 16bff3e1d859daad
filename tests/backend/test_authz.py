from __future__ import annotations

from types import SimpleNamespace

import pytest
from firebase_functions.https_fn import FunctionsErrorCode

from admin_logic.authz import Authorizer, Caller
from admin_logic.errors import ErrorCode

from conftest import make_caller


@pytest.fixture
def authorizer() -> Authorizer:
    return Authorizer(["Boss@Example.com", " ops@example.com ", ""])


def test_allowlist_is_lowercased_and_stripped(authorizer):
    assert authorizer.admin_emails == frozenset({"boss@example.com", "ops@example.com"})


@pytest.mark.parametrize("email", ["boss@example.com", "BOSS@EXAMPLE.COM", "Boss@Example.Com"])
def test_allowlist_membership_ignores_case(authorizer, email):
    assert authorizer.is_allowlisted(email)
    assert authorizer.is_admin(make_caller("u1", email))


@pytest.mark.parametrize(
    "admin, email, expected",
    [
        (True, "nobody@example.com", True),
        (True, None, True),
        (None, "boss@example.com", True),
        (False, "boss@example.com", True),
        (None, "nobody@example.com", False),
        (False, None, False),
        ("true", "nobody@example.com", False),
        (1, "nobody@example.com", False),
    ],
)
def test_is_admin_truth_table(authorizer, admin, email, expected):
    assert authorizer.is_admin(make_caller("u1", email, admin=admin)) is expected


def test_absent_caller_is_never_admin(authorizer):
    assert authorizer.is_admin(None) is False


def test_gate_rejects_absent_caller_as_unauthenticated(authorizer):
    result = authorizer.gate(None)
    assert result is not None
    assert result.failure.kind == FunctionsErrorCode.UNAUTHENTICATED
    assert result.failure.code == ErrorCode.ERR_UNAUTHENTICATED


def test_gate_rejects_non_admin_as_permission_denied(authorizer):
    result = authorizer.gate(make_caller("u1", "nobody@example.com"), "Admin privilege required.")
    assert result.failure.kind == FunctionsErrorCode.PERMISSION_DENIED
    assert result.failure.message == "Admin privilege required."


def test_gate_lets_admin_through(authorizer):
    assert authorizer.gate(make_caller("u1", "nobody@example.com", admin=True)) is None


def test_caller_from_auth_lowercases_email():
    auth = SimpleNamespace(uid="u1", token={"email": "Foo@Bar.com", "admin": True})
    caller = Caller.from_auth(auth)
    assert caller.uid == "u1"
    assert caller.email == "foo@bar.com"
    assert caller.has_admin_claim


def test_caller_from_auth_without_email():
    caller = Caller.from_auth(SimpleNamespace(uid="u1", token={}))
    assert caller.email is None
    assert not caller.has_admin_claim


def test_caller_from_missing_auth_is_none():
    assert Caller.from_auth(None) is None
    assert Caller.from_auth(SimpleNamespace(uid="", token={})) is None
