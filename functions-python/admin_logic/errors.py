from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from firebase_functions.https_fn import FunctionsErrorCode, HttpsError


class ErrorCode(str, Enum):
    ERR_INTERNAL = "ERR_INTERNAL"
    ERR_UNAUTHENTICATED = "ERR_UNAUTHENTICATED"
    ERR_PERMISSION_DENIED = "ERR_PERMISSION_DENIED"
    ERR_INVALID_EMAIL = "ERR_INVALID_EMAIL"
    ERR_SELF_REVOKE = "ERR_SELF_REVOKE"
    ERR_STATS_UNAVAILABLE = "ERR_STATS_UNAVAILABLE"


@dataclass(frozen=True)
class Failure:
    """A categorized failure of a callable operation.

    Attributes:
        kind: callable protocol code the client sees (e.g. permission-denied)
        code: ErrorCode enum, sent to the client as ``details.error``
        message: human readable message
    """

    kind: FunctionsErrorCode
    code: ErrorCode
    message: str

    def to_https_error(self) -> HttpsError:
        return HttpsError(self.kind, self.message, details={"error": self.code.value})


@dataclass(frozen=True)
class Result:
    """Outcome of an admin operation: a payload or a Failure, never both."""

    payload: Dict[str, Any] = field(default_factory=dict)
    failure: Optional[Failure] = None

    @classmethod
    def ok(cls, payload: Dict[str, Any]) -> "Result":
        return cls(payload=payload)

    @classmethod
    def fail(cls, kind: FunctionsErrorCode, code: ErrorCode, message: str) -> "Result":
        return cls(failure=Failure(kind, code, message))

    @property
    def is_ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> Dict[str, Any]:
        if self.failure is not None:
            raise self.failure.to_https_error()
        return self.payload


def unauthenticated() -> Result:
    return Result.fail(
        FunctionsErrorCode.UNAUTHENTICATED,
        ErrorCode.ERR_UNAUTHENTICATED,
        "You must be signed in.",
    )


def permission_denied(message: str = "You are not allowed to perform this action.") -> Result:
    return Result.fail(FunctionsErrorCode.PERMISSION_DENIED, ErrorCode.ERR_PERMISSION_DENIED, message)


def internal(message: str, code: ErrorCode = ErrorCode.ERR_INTERNAL) -> Result:
    return Result.fail(FunctionsErrorCode.INTERNAL, code, message)
