"""
Admission check for new room bookings.

Everything here is pure: callers load the room and its bookings, pass the
current time in, and persist the booking themselves when a Quote comes back.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from app.errors import BookingConflictError, BookingValidationError, RejectionReason

_SECONDS_PER_DAY = 86400
_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class RoomSnapshot:
    id: Any
    price_per_night: Decimal
    is_available: bool
    max_guests: int


@dataclass(frozen=True)
class ExistingBooking:
    check_in_date: date
    check_out_date: date
    status_is_terminal_inactive: bool = False


@dataclass(frozen=True)
class BookingRequest:
    check_in_date: date | None
    check_out_date: date | None
    number_of_guests: int | None


@dataclass(frozen=True)
class Quote:
    nights: int
    total_price: Decimal
    final_price: Decimal


DiscountHook = Callable[[Decimal], Decimal]


def no_discount(total_price: Decimal) -> Decimal:
    return total_price


def _as_date(value: date | datetime) -> date:
    # datetime is a subclass of date
    if isinstance(value, datetime):
        return value.date()
    return value


def overlaps(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Half-open intervals: the check-out day is free for the next guest."""
    return a_start < b_end and b_start < a_end


def count_nights(check_in: date | datetime, check_out: date | datetime) -> int:
    """Whole nights between two points; any partial day counts as a night."""
    if isinstance(check_in, datetime) != isinstance(check_out, datetime):
        check_in, check_out = _as_date(check_in), _as_date(check_out)
    seconds = (check_out - check_in).total_seconds()
    return math.ceil(seconds / _SECONDS_PER_DAY)


def validate_request(request: BookingRequest, now: datetime | date) -> None:
    """Checks that need neither the room nor its bookings."""
    if (
        request.check_in_date is None
        or request.check_out_date is None
        or request.number_of_guests is None
        or request.number_of_guests < 1
    ):
        raise BookingValidationError(
            RejectionReason.MISSING_FIELDS, "Missing required fields"
        )

    check_in = _as_date(request.check_in_date)
    check_out = _as_date(request.check_out_date)

    if check_in < _as_date(now):
        raise BookingValidationError(
            RejectionReason.CHECK_IN_IN_PAST, "Check-in date cannot be in the past"
        )

    if check_out <= check_in:
        raise BookingValidationError(
            RejectionReason.CHECK_OUT_BEFORE_CHECK_IN,
            "Check-out date must be after check-in date",
        )


def check_admission(
    room: RoomSnapshot,
    existing: Iterable[ExistingBooking],
    request: BookingRequest,
    now: datetime | date,
    discount: DiscountHook = no_discount,
) -> Quote:
    """
    Decide whether `request` may be booked on `room` and price it.

    Rules are checked in a fixed order and the first one that fails raises:
      1. dates and guest count present              -> MISSING_FIELDS
      2. check-in not before today                  -> CHECK_IN_IN_PAST
      3. check-out after check-in                   -> CHECK_OUT_BEFORE_CHECK_IN
      4. room switched on by the hotel              -> ROOM_UNAVAILABLE
      5. no active booking overlaps the stay        -> DATE_RANGE_CONFLICT
      6. guest count within the room type capacity  -> GUEST_COUNT_EXCEEDED

    Validation failures raise BookingValidationError, state clashes raise
    BookingConflictError.
    """
    validate_request(request, now)

    check_in = _as_date(request.check_in_date)  # type: ignore[arg-type]
    check_out = _as_date(request.check_out_date)  # type: ignore[arg-type]

    if not room.is_available:
        raise BookingConflictError(
            RejectionReason.ROOM_UNAVAILABLE, "Room is not available"
        )

    for booking in existing:
        if booking.status_is_terminal_inactive:
            continue
        if overlaps(
            check_in,
            check_out,
            _as_date(booking.check_in_date),
            _as_date(booking.check_out_date),
        ):
            raise BookingConflictError(
                RejectionReason.DATE_RANGE_CONFLICT,
                "Room is already booked for these dates",
            )

    if request.number_of_guests > room.max_guests:  # type: ignore[operator]
        raise BookingValidationError(
            RejectionReason.GUEST_COUNT_EXCEEDED,
            f"Room can accommodate maximum {room.max_guests} guests",
            max_guests=room.max_guests,
        )

    nights = count_nights(check_in, check_out)
    total_price = (room.price_per_night * nights).quantize(_CENTS)
    # Discount codes are not part of booking creation yet; the hook stays
    # the identity until one is wired in.
    final_price = discount(total_price).quantize(_CENTS)

    return Quote(nights=nights, total_price=total_price, final_price=final_price)
