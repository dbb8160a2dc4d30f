from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.availability import BookingRequest
from app.models import STATUS_DISPLAY, BookingStatus


class BookingCreate(BaseModel):
    """
    Request body for a new booking.

    Every field is optional at this level: absent fields are reported by the
    admission check as a single "Missing required fields" 400.
    """

    room_id: UUID | None = None
    check_in_date: date | None = None
    check_out_date: date | None = None
    number_of_guests: int | None = Field(default=None, ge=0)
    special_requests: str | None = Field(default=None, max_length=1000)

    def to_request(self) -> BookingRequest:
        return BookingRequest(
            check_in_date=self.check_in_date,
            check_out_date=self.check_out_date,
            number_of_guests=self.number_of_guests,
        )


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingResponse(BaseModel):
    id: UUID
    room_id: UUID
    user_id: UUID
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    special_requests: str | None
    status: BookingStatus
    total_price: Decimal
    final_price: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status_label(self) -> str:
        return STATUS_DISPLAY[self.status][0]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status_color(self) -> str:
        return STATUS_DISPLAY[self.status][1]


class BookingSlot(BaseModel):
    """Occupied date range of a room — reveals no guest identity."""

    check_in_date: date
    check_out_date: date

    model_config = ConfigDict(from_attributes=True)


class BookingFilters(BaseModel):
    """Bind to a FastAPI route via Depends(BookingFilters)."""

    room_id: UUID | None = None
    status: BookingStatus | None = None

    # Pagination
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)
