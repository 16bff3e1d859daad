"""Pydantic models for callable payloads and the user documents they read."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

Number = Union[int, float]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class EmailRequest(BaseModel):
    email: StrictStr = Field(min_length=1)


class MutationResponse(BaseModel):
    success: bool = True
    message: str


class AdminStatus(BaseModel):
    isAdmin: bool
    reason: str


class UserRecord(BaseModel):
    """A ``users/{uid}`` document, read leniently.

    Missing or malformed timestamps become the epoch and missing or
    malformed counters become zero, so a partial profile never breaks the
    dashboard.
    """

    model_config = ConfigDict(extra="ignore")

    isPremium: bool = False
    lastLoginAt: datetime = EPOCH
    createdAt: datetime = EPOCH
    gamesPlayed: Number = 0
    totalSongsFound: Number = 0
    totalTimePlayed: Number = 0

    @field_validator("isPremium", mode="before")
    @classmethod
    def _strict_true(cls, v: Any) -> bool:
        return v is True

    @field_validator("lastLoginAt", "createdAt", mode="before")
    @classmethod
    def _as_aware_datetime(cls, v: Any) -> datetime:
        # Firestore returns DatetimeWithNanoseconds (a datetime subclass)
        if not isinstance(v, datetime):
            return EPOCH
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("gamesPlayed", "totalSongsFound", "totalTimePlayed", mode="before")
    @classmethod
    def _number_or_zero(cls, v: Any) -> Number:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return 0
        return v


class UserMetrics(BaseModel):
    totalUsers: int
    premiumUsers: int
    dauUsers: int
    wauUsers: int
    todayRegistrations: int


class GameMetrics(BaseModel):
    totalGamesPlayed: Number
    totalSongsFound: Number
    totalTimePlayed: Number
    avgGameTime: int


class ContentMetrics(BaseModel):
    categories: int
    challenges: int
    songs: int


class AdminStats(BaseModel):
    userMetrics: UserMetrics
    gameMetrics: GameMetrics
    contentMetrics: ContentMetrics
    timestamp: str
