from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional

from .config import parse_allowlist
from .errors import Result, permission_denied, unauthenticated


@dataclass(frozen=True)
class Caller:
    """Verified identity attached to a callable request."""

    uid: str
    email: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_auth(cls, auth: Any) -> Optional["Caller"]:
        # auth is https_fn.AuthData (uid + decoded ID token) or None
        if auth is None or not getattr(auth, "uid", None):
            return None
        token = dict(getattr(auth, "token", None) or {})
        email = token.get("email")
        return cls(
            uid=auth.uid,
            email=email.lower() if isinstance(email, str) else None,
            claims=token,
        )

    @property
    def has_admin_claim(self) -> bool:
        return self.claims.get("admin") is True


class Authorizer:
    """Decides whether a caller may perform administrative actions.

    A caller is an admin when its ``admin`` custom claim is exactly ``True``
    or when its email is on the allowlist. The allowlist is fixed for the
    lifetime of the instance.
    """

    def __init__(self, admin_emails: Iterable[str]):
        self._admin_emails: FrozenSet[str] = parse_allowlist(admin_emails)

    @property
    def admin_emails(self) -> FrozenSet[str]:
        return self._admin_emails

    def is_allowlisted(self, email: Optional[str]) -> bool:
        return bool(email) and email.lower() in self._admin_emails

    def is_admin(self, caller: Optional[Caller]) -> bool:
        if caller is None:
            return False
        return caller.has_admin_claim or self.is_allowlisted(caller.email)

    def gate(self, caller: Optional[Caller], message: Optional[str] = None) -> Optional[Result]:
        """Return a failed Result when the caller may not proceed, else None."""
        if caller is None:
            return unauthenticated()
        if not self.is_admin(caller):
            return permission_denied(message) if message else permission_denied()
        return None
