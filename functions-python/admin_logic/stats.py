"""
Dashboard statistics over an in-memory snapshot of the ``users`` collection.

Everything here is synchronous and side-effect free; the caller is in charge
of loading the documents and the content counts.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Dict, Iterable, List, Mapping

from .schemas import (
    AdminStats,
    ContentMetrics,
    GameMetrics,
    Number,
    UserMetrics,
    UserRecord,
)


@dataclass(frozen=True)
class Windows:
    one_day_ago: datetime
    one_week_ago: datetime
    today_start: datetime


def activity_windows(now: datetime, tz: tzinfo) -> Windows:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    local = now.astimezone(tz)
    return Windows(
        one_day_ago=now - timedelta(days=1),
        one_week_ago=now - timedelta(days=7),
        today_start=local.replace(hour=0, minute=0, second=0, microsecond=0),
    )


def average_game_time(total_time_played: Number, total_games_played: Number) -> int:
    if total_games_played <= 0:
        return 0
    # half-up rounding, 2.5 -> 3
    return int(math.floor(total_time_played / total_games_played + 0.5))


def parse_users(docs: Iterable[Mapping[str, Any]]) -> List[UserRecord]:
    return [UserRecord.model_validate(dict(doc or {})) for doc in docs]


def user_metrics(users: List[UserRecord], windows: Windows) -> UserMetrics:
    return UserMetrics(
        totalUsers=len(users),
        premiumUsers=sum(1 for u in users if u.isPremium),
        dauUsers=sum(1 for u in users if u.lastLoginAt >= windows.one_day_ago),
        wauUsers=sum(1 for u in users if u.lastLoginAt >= windows.one_week_ago),
        todayRegistrations=sum(1 for u in users if u.createdAt >= windows.today_start),
    )


def game_metrics(users: List[UserRecord]) -> GameMetrics:
    games = sum(u.gamesPlayed for u in users)
    songs = sum(u.totalSongsFound for u in users)
    seconds = sum(u.totalTimePlayed for u in users)
    return GameMetrics(
        totalGamesPlayed=games,
        totalSongsFound=songs,
        totalTimePlayed=seconds,
        avgGameTime=average_game_time(seconds, games),
    )


def iso_timestamp(now: datetime) -> str:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_stats(
    user_docs: Iterable[Mapping[str, Any]],
    content_counts: Dict[str, int],
    now: datetime,
    tz: tzinfo,
) -> AdminStats:
    users = parse_users(user_docs)
    return AdminStats(
        userMetrics=user_metrics(users, activity_windows(now, tz)),
        gameMetrics=game_metrics(users),
        contentMetrics=ContentMetrics(
            categories=content_counts.get("categories", 0),
            challenges=content_counts.get("challenges", 0),
            songs=content_counts.get("songs", 0),
        ),
        timestamp=iso_timestamp(now),
    )
