# Domain error kinds and the exception that carries them to the HTTP boundary
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrCode(str, Enum):
    PATIENT_NOT_FOUND = "PATIENT_NOT_FOUND"
    INVALID_TIME_WINDOW = "INVALID_TIME_WINDOW"
    INVALID_THRESHOLD = "INVALID_THRESHOLD"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_MESSAGES: Dict[ErrCode, str] = {
    ErrCode.PATIENT_NOT_FOUND: "Patient not found",
    ErrCode.INVALID_TIME_WINDOW: "Invalid time window",
    ErrCode.INVALID_THRESHOLD: "Invalid threshold",
    ErrCode.VALIDATION_FAILED: "Validation failed",
    ErrCode.INTERNAL_ERROR: "Internal Server Error",
}

ERROR_STATUS: Dict[ErrCode, int] = {
    ErrCode.PATIENT_NOT_FOUND: 404,
    ErrCode.INVALID_TIME_WINDOW: 400,
    ErrCode.INVALID_THRESHOLD: 400,
    ErrCode.VALIDATION_FAILED: 400,
    ErrCode.INTERNAL_ERROR: 500,
}


class AppError(Exception):
    """
    A recognized, coded failure raised by core logic.

    `code` is the discriminant callers branch on; `context` holds the
    offending ids/bounds and `detail` an optional human-readable note.
    """

    def __init__(
        self,
        code: ErrCode,
        context: Optional[Dict[str, Any]] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(detail or ERROR_MESSAGES[code])
        self.code = code
        self.context = context
        self.detail = detail

    @property
    def status(self) -> int:
        return ERROR_STATUS[self.code]

    @property
    def title(self) -> str:
        return ERROR_MESSAGES[self.code]

    @classmethod
    def not_found(cls, code: ErrCode, context: Optional[Dict[str, Any]] = None) -> "AppError":
        return cls(code, context)

    @classmethod
    def bad_request(
        cls,
        code: ErrCode,
        context: Optional[Dict[str, Any]] = None,
        detail: Optional[str] = None,
    ) -> "AppError":
        return cls(code, context, detail)

    @classmethod
    def internal(cls, context: Optional[Dict[str, Any]] = None) -> "AppError":
        return cls(ErrCode.INTERNAL_ERROR, context)

    def __repr__(self) -> str:
        return f"AppError({self.code.value}, context={self.context!r})"
