"""
Deploy-time configuration for the admin callables.

Values come from Firebase params (``.env.<project>`` or the CLI prompt on
deploy) and are read once, on the first invocation, into an immutable
``AdminConfig``. Param values must not be read at import time because they
are only resolved inside the running function.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import FrozenSet, Iterable, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from firebase_functions import logger, params

ADMIN_EMAILS = params.StringParam(
    "ADMIN_EMAILS",
    default="",
    description="Comma-separated emails that are always treated as admins.",
)
STATS_TIMEZONE = params.StringParam(
    "STATS_TIMEZONE",
    default="UTC",
    description="IANA timezone used to find the start of 'today' in dashboard stats.",
)

USERS_COLLECTION = "users"
ADMIN_LOGS_COLLECTION = "adminLogs"
CONTENT_COLLECTIONS: Tuple[str, ...] = ("categories", "challenges", "songs")


def parse_allowlist(raw: Iterable[str] | str) -> FrozenSet[str]:
    if isinstance(raw, str):
        raw = raw.split(",")
    return frozenset(e.strip().lower() for e in raw if e and e.strip())


def resolve_timezone(name: str) -> tzinfo:
    """Return the named zone, or UTC when the name is empty or unknown."""
    if not name:
        return ZoneInfo("UTC")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        logger.error(f"Unknown STATS_TIMEZONE {name!r}, using UTC: {e}")
        return ZoneInfo("UTC")


@dataclass(frozen=True)
class AdminConfig:
    admin_emails: FrozenSet[str] = frozenset()
    stats_timezone: tzinfo = ZoneInfo("UTC")
    users_collection: str = USERS_COLLECTION
    admin_logs_collection: str = ADMIN_LOGS_COLLECTION
    content_collections: Tuple[str, ...] = CONTENT_COLLECTIONS

    @classmethod
    def from_params(cls) -> "AdminConfig":
        return cls(
            admin_emails=parse_allowlist(ADMIN_EMAILS.value),
            stats_timezone=resolve_timezone(STATS_TIMEZONE.value),
        )
