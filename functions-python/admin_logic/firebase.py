"""Ports for the identity provider and document store, and their Firebase adapters."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from firebase_admin import auth
from firebase_admin import firestore as admin_fs
from google.cloud.firestore import Client


class IdentityProvider(Protocol):
    def get_uid_by_email(self, email: str) -> str:
        ...

    def set_admin_claim(self, uid: str, value: bool) -> None:
        ...


class DocumentStore(Protocol):
    def add_with_timestamp(self, collection: str, data: Dict[str, Any], field: str = "timestamp") -> None:
        ...

    def list_documents(self, collection: str) -> List[Dict[str, Any]]:
        ...

    def count(self, collection: str) -> int:
        ...


class FirebaseIdentityProvider:
    """Firebase Auth through the Admin SDK."""

    def __init__(self, app: Optional[Any] = None):
        self._app = app

    def get_uid_by_email(self, email: str) -> str:
        return auth.get_user_by_email(email, app=self._app).uid

    def set_admin_claim(self, uid: str, value: bool) -> None:
        # set_custom_user_claims replaces the whole map; keep the other claims
        user = auth.get_user(uid, app=self._app)
        claims = dict(user.custom_claims or {})
        claims["admin"] = value
        auth.set_custom_user_claims(uid, claims, app=self._app)


class FirestoreStore:
    def __init__(self, db: Client):
        self._db = db

    def add_with_timestamp(self, collection: str, data: Dict[str, Any], field: str = "timestamp") -> None:
        self._db.collection(collection).add({**data, field: admin_fs.SERVER_TIMESTAMP})

    def list_documents(self, collection: str) -> List[Dict[str, Any]]:
        return [snap.to_dict() or {} for snap in self._db.collection(collection).stream()]

    def count(self, collection: str) -> int:
        # server-side aggregation, no documents are transferred
        results = self._db.collection(collection).count(alias="count").get()
        return int(results[0][0].value)
