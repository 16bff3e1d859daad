from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from admin_logic.authz import Caller
from admin_logic.config import AdminConfig
from admin_logic.service import AdminService

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
ALLOWLISTED = "boss@example.com"


class FakeIdentity:
    """In-memory Firebase Auth: email -> uid plus per-uid custom claims."""

    def __init__(self, users: Optional[Dict[str, str]] = None):
        self.users = dict(users or {})
        self.claims: Dict[str, Dict[str, Any]] = {uid: {} for uid in self.users.values()}
        self.calls: List[tuple] = []
        self.fail_set_claim = False

    def get_uid_by_email(self, email: str) -> str:
        self.calls.append(("get_uid_by_email", email))
        if email not in self.users:
            raise LookupError(f"No user record found for the provided email: {email}.")
        return self.users[email]

    def set_admin_claim(self, uid: str, value: bool) -> None:
        self.calls.append(("set_admin_claim", uid, value))
        if self.fail_set_claim:
            raise RuntimeError("claims backend unavailable")
        self.claims.setdefault(uid, {})["admin"] = value


class FakeStore:
    """In-memory Firestore keeping every document per collection."""

    def __init__(self, collections: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.collections = {k: list(v) for k, v in (collections or {}).items()}
        self.reads: List[tuple] = []
        self.fail_reads = False
        self.fail_writes = False

    def add_with_timestamp(self, collection: str, data: Dict[str, Any], field: str = "timestamp") -> None:
        if self.fail_writes:
            raise RuntimeError("firestore write failed")
        self.collections.setdefault(collection, []).append({**data, field: "SERVER_TIMESTAMP"})

    def list_documents(self, collection: str) -> List[Dict[str, Any]]:
        self.reads.append(("list", collection))
        if self.fail_reads:
            raise RuntimeError("deadline exceeded")
        return list(self.collections.get(collection, []))

    def count(self, collection: str) -> int:
        self.reads.append(("count", collection))
        if self.fail_reads:
            raise RuntimeError("deadline exceeded")
        return len(self.collections.get(collection, []))


def make_caller(uid: str, email: Optional[str], admin: Any = None) -> Caller:
    claims: Dict[str, Any] = {}
    if email is not None:
        claims["email"] = email
    if admin is not None:
        claims["admin"] = admin
    return Caller(uid=uid, email=email.lower() if email else None, claims=claims)


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity(
        {
            "boss@example.com": "uid-boss",
            "alice@example.com": "uid-alice",
            "bob@example.com": "uid-bob",
        }
    )


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def config() -> AdminConfig:
    return AdminConfig(admin_emails=frozenset({ALLOWLISTED}))


@pytest.fixture
def service(config: AdminConfig, identity: FakeIdentity, store: FakeStore) -> AdminService:
    return AdminService(config, identity, store, clock=lambda: NOW)


@pytest.fixture
def admin_caller() -> Caller:
    return make_caller("uid-alice", "Alice@Example.com", admin=True)


@pytest.fixture
def plain_caller() -> Caller:
    return make_caller("uid-bob", "bob@example.com")
