from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from tortoise.transactions import in_transaction

from app.availability import (
    ExistingBooking,
    RoomSnapshot,
    check_admission,
)
from app.models import Booking, BookingStatus, Room
from app.schemas import BookingCreate, BookingFilters, BookingResponse, BookingSlot

# Statuses that hold a room's dates
_BLOCKING_STATUSES = [s for s in BookingStatus if not s.is_terminal_inactive]


def _today(now: datetime | date) -> date:
    return now.date() if isinstance(now, datetime) else now


def _snapshot(room: Room) -> RoomSnapshot:
    return RoomSnapshot(
        id=room.id,
        price_per_night=room.price_per_night,
        is_available=room.is_available,
        max_guests=room.room_type.max_guests,
    )


class BookingCRUD:
    async def get_room(self, room_id: UUID) -> Room | None:
        """Room with its room type loaded, or None."""
        return await Room.get_or_none(id=room_id).prefetch_related("room_type")

    async def create_booking(
        self,
        room_id: UUID,
        user_id: UUID,
        payload: BookingCreate,
        now: datetime,
    ) -> BookingResponse:
        """
        Run the admission check and persist the booking as one atomic step.

        The room row is locked first so concurrent requests for the same room
        are serialized; the overlap check then sees every committed booking.
        Raises BookingRejected subclasses when the request is not admissible.
        """
        async with in_transaction():
            room = (
                await Room.filter(id=room_id)
                .select_for_update()
                .prefetch_related("room_type")
                .get()
            )

            # Bookings ending today or earlier cannot overlap an admissible stay
            existing = await Booking.filter(
                room_id=room_id,
                check_out_date__gt=_today(now),
            ).only("check_in_date", "check_out_date", "status")

            quote = check_admission(
                _snapshot(room),
                [
                    ExistingBooking(
                        check_in_date=b.check_in_date,
                        check_out_date=b.check_out_date,
                        status_is_terminal_inactive=BookingStatus(
                            b.status
                        ).is_terminal_inactive,
                    )
                    for b in existing
                ],
                payload.to_request(),
                now,
            )

            inst = await Booking.create(
                room_id=room_id,
                user_id=user_id,
                check_in_date=payload.check_in_date,
                check_out_date=payload.check_out_date,
                number_of_guests=payload.number_of_guests,
                special_requests=payload.special_requests,
                status=BookingStatus.PENDING,
                total_price=quote.total_price,
                final_price=quote.final_price,
            )

        return BookingResponse.model_validate(inst, from_attributes=True)

    async def get_booking(
        self,
        booking_id: UUID,
        user_id: UUID | None = None,
    ) -> BookingResponse | None:
        if user_id is not None:
            inst = await Booking.get_or_none(id=booking_id, user_id=user_id)
        else:
            inst = await Booking.get_or_none(id=booking_id)

        if not inst:
            return None
        return BookingResponse.model_validate(inst, from_attributes=True)

    async def list_bookings(
        self,
        filters: BookingFilters,
        user_id: UUID | None = None,
    ) -> list[BookingResponse]:
        qs = Booking.all()

        if user_id is not None:
            qs = qs.filter(user_id=user_id)
        if filters.room_id is not None:
            qs = qs.filter(room_id=filters.room_id)
        if filters.status is not None:
            qs = qs.filter(status=filters.status)

        offset = (filters.page - 1) * filters.page_size
        qs = qs.order_by("-created_at").offset(offset).limit(filters.page_size)

        bookings = await qs
        return [
            BookingResponse.model_validate(b, from_attributes=True) for b in bookings
        ]

    async def cancel_booking(self, booking_id: UUID) -> BookingResponse | None:
        inst = await Booking.get_or_none(id=booking_id)
        if not inst:
            return None
        inst.status = BookingStatus.CANCELLED  # type: ignore
        await inst.save(update_fields=["status", "updated_at"])
        return BookingResponse.model_validate(inst, from_attributes=True)

    async def list_occupied_slots(self, room_id: UUID) -> list[BookingSlot]:
        """Return booked date ranges for a room — no guest info exposed."""
        bookings = (
            await Booking.filter(room_id=room_id, status__in=_BLOCKING_STATUSES)
            .order_by("check_in_date")
            .only("check_in_date", "check_out_date")
        )
        return [BookingSlot.model_validate(b, from_attributes=True) for b in bookings]


booking_crud = BookingCRUD()
