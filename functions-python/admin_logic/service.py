"""
Admin operations behind the callable endpoints.

Each operation takes the verified caller (or None) and returns a Result.
Authorization and input validation always run before the first call to
Firebase Auth or Firestore, so a rejected request has no side effects.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from firebase_functions import logger
from firebase_functions.https_fn import FunctionsErrorCode
from pydantic import ValidationError

from .authz import Authorizer, Caller
from .config import AdminConfig
from .errors import ErrorCode, Result, internal
from .firebase import DocumentStore, IdentityProvider
from .schemas import AdminStatus, EmailRequest, MutationResponse
from .stats import build_stats

SET_ADMIN_CLAIM = "setAdminClaim"
REMOVE_ADMIN_CLAIM = "removeAdminClaim"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AdminService:
    def __init__(
        self,
        config: AdminConfig,
        identity: IdentityProvider,
        store: DocumentStore,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.config = config
        self.authorizer = Authorizer(config.admin_emails)
        self.identity = identity
        self.store = store
        self.clock = clock

    # -------------------------
    # Claim mutation
    # -------------------------

    def grant_admin(self, caller: Optional[Caller], data: Any) -> Result:
        return self._mutate_claim(caller, data, grant=True)

    def revoke_admin(self, caller: Optional[Caller], data: Any) -> Result:
        return self._mutate_claim(caller, data, grant=False)

    def _mutate_claim(self, caller: Optional[Caller], data: Any, grant: bool) -> Result:
        action = SET_ADMIN_CLAIM if grant else REMOVE_ADMIN_CLAIM

        denied = self.authorizer.gate(caller)
        if denied is not None:
            if caller is not None:
                logger.warn(f"{action} denied", uid=caller.uid, email=caller.email)
            return denied

        try:
            email = EmailRequest.model_validate(data if isinstance(data, dict) else {}).email
        except ValidationError:
            return Result.fail(
                FunctionsErrorCode.INVALID_ARGUMENT,
                ErrorCode.ERR_INVALID_EMAIL,
                "A valid email address is required.",
            )
        target = email.lower()

        if not grant and target == caller.email:
            return Result.fail(
                FunctionsErrorCode.FAILED_PRECONDITION,
                ErrorCode.ERR_SELF_REVOKE,
                "You cannot remove your own admin privilege.",
            )

        try:
            uid = self.identity.get_uid_by_email(target)
            self.identity.set_admin_claim(uid, grant)
            self.store.add_with_timestamp(
                self.config.admin_logs_collection,
                {
                    "action": action,
                    "targetEmail": target,
                    "performedBy": caller.email,
                },
            )
        except Exception as e:
            logger.error(f"{action} error: {e}", targetEmail=target, performedBy=caller.email)
            return internal(f"Error: {e}")

        logger.info(f"{action} succeeded", targetEmail=target, targetUid=uid, performedBy=caller.email)
        if grant:
            message = f"{email} is now an admin."
        else:
            message = f"{email} is no longer an admin."
        return Result.ok(MutationResponse(message=message).model_dump())

    # -------------------------
    # Status
    # -------------------------

    def check_admin_status(self, caller: Optional[Caller]) -> Result:
        """Report the caller's admin status. Never fails.

        An allowlisted caller without the claim gets it granted on the spot;
        if that write fails the caller is still reported as admin through the
        allowlist.
        """
        if caller is None:
            return Result.ok(AdminStatus(isAdmin=False, reason="not_authenticated").model_dump())

        has_claim = caller.has_admin_claim
        whitelisted = self.authorizer.is_allowlisted(caller.email)

        if whitelisted and not has_claim:
            try:
                self.identity.set_admin_claim(caller.uid, True)
            except Exception as e:
                logger.error(f"Auto-grant admin error: {e}", uid=caller.uid, email=caller.email)
            else:
                logger.info("Auto-granted admin claim", uid=caller.uid, email=caller.email)
                return Result.ok(AdminStatus(isAdmin=True, reason="whitelisted_auto_granted").model_dump())

        if has_claim:
            reason = "custom_claim"
        elif whitelisted:
            reason = "whitelisted"
        else:
            reason = "not_admin"
        return Result.ok(AdminStatus(isAdmin=has_claim or whitelisted, reason=reason).model_dump())

    # -------------------------
    # Dashboard stats
    # -------------------------

    def get_admin_stats(self, caller: Optional[Caller]) -> Result:
        denied = self.authorizer.gate(caller, "Admin privilege required.")
        if denied is not None:
            return denied

        try:
            user_docs = self.store.list_documents(self.config.users_collection)
            content_counts: Dict[str, int] = {
                name: self.store.count(name) for name in self.config.content_collections
            }
        except Exception as e:
            logger.error(f"getAdminStats error: {e}", uid=caller.uid)
            return internal(f"Could not load stats: {e}", ErrorCode.ERR_STATS_UNAVAILABLE)

        stats = build_stats(user_docs, content_counts, self.clock(), self.config.stats_timezone)
        return Result.ok(stats.model_dump())
