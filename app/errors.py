from enum import StrEnum
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger


class RejectionReason(StrEnum):
    MISSING_FIELDS = "missing_fields"
    CHECK_IN_IN_PAST = "check_in_in_past"
    CHECK_OUT_BEFORE_CHECK_IN = "check_out_before_check_in"
    ROOM_UNAVAILABLE = "room_unavailable"
    DATE_RANGE_CONFLICT = "date_range_conflict"
    GUEST_COUNT_EXCEEDED = "guest_count_exceeded"


class BookingRejected(Exception):
    """
    A booking request was refused by the admission check.

    Carries a stable `reason` code for clients, a human-readable message and
    any extra context (e.g. `max_guests`) that is rendered next to it.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, reason: RejectionReason, message: str, **context: Any):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "reason": self.reason.value, **self.context}


class BookingValidationError(BookingRejected):
    """The request itself is wrong; retrying it unchanged never helps."""

    status_code = status.HTTP_400_BAD_REQUEST


class BookingConflictError(BookingRejected):
    """The request clashes with current room state; other dates may work."""

    status_code = status.HTTP_409_CONFLICT


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BookingRejected)
    async def booking_rejected_handler(
        request: Request, exc: BookingRejected
    ) -> JSONResponse:
        logger.info(
            "Booking rejected: reason={} path={}", exc.reason, request.url.path
        )
        return JSONResponse(content=exc.to_dict(), status_code=exc.status_code)
