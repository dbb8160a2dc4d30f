from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from app.availability import validate_request
from app.cache import get_slots_cache, invalidate_slots_cache, set_slots_cache
from app.crud import booking_crud
from app.deps import (
    CurrentUser,
    can_cancel_booking,
    can_read_booking,
    can_write_booking,
    get_current_user,
    get_now,
)
from app.errors import BookingValidationError, RejectionReason
from app.models import BookingStatus
from app.schemas import (
    BookingCreate,
    BookingFilters,
    BookingResponse,
    BookingSlot,
    BookingStatusUpdate,
)

router = APIRouter(prefix="/bookings", tags=["bookings"])


# ---------------------------------------------------------------------------
# Transition guard
# ---------------------------------------------------------------------------

# Guests may only cancel; confirm/reject/complete belong to hotel staff.
_GUEST_TARGETS = {BookingStatus.CANCELLED}
_NOT_CANCELLABLE = {BookingStatus.CANCELLED, BookingStatus.COMPLETED}


def _assert_cancellation(old_status: BookingStatus, new_status: BookingStatus) -> None:
    """Raise HTTP 400 unless a guest may move a booking from old to new status."""
    if new_status not in _GUEST_TARGETS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Cannot transition to '{new_status}'. "
                f"Allowed: {[s.value for s in _GUEST_TARGETS]}"
            ),
        )
    if old_status in _NOT_CANCELLABLE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot cancel a booking that is '{old_status}'",
        )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/slots", response_model=list[BookingSlot])
async def get_room_slots(
    room_id: UUID,
    _: CurrentUser = Depends(get_current_user),
) -> list[BookingSlot]:
    """
    Returns occupied date ranges for a room.
    Any authenticated user can call this — response contains NO guest identity.
    """
    cached = await get_slots_cache(room_id)
    if cached is not None:
        logger.debug("Cache hit for slots: room_id={}", room_id)
        return [BookingSlot(**s) for s in cached]

    logger.debug("Cache miss for slots: room_id={}", room_id)
    slots = await booking_crud.list_occupied_slots(room_id)
    await set_slots_cache(room_id, [s.model_dump(mode="json") for s in slots])
    return slots


@router.get("/", response_model=list[BookingResponse])
async def list_bookings(
    filters: BookingFilters = Depends(),
    current_user: CurrentUser = Depends(can_read_booking),
) -> list[BookingResponse]:
    if current_user.is_admin:
        return await booking_crud.list_bookings(filters=filters)
    return await booking_crud.list_bookings(filters=filters, user_id=current_user.id)


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate,
    current_user: CurrentUser = Depends(can_write_booking),
    now: datetime = Depends(get_now),
) -> BookingResponse:
    # 1. Input checks that need no database access
    if payload.room_id is None:
        raise BookingValidationError(
            RejectionReason.MISSING_FIELDS, "Missing required fields"
        )
    validate_request(payload.to_request(), now)

    # 2. Room must exist
    room = await booking_crud.get_room(payload.room_id)
    if room is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Room not found"
        )

    # 3. Availability, overlap and capacity are re-checked under a row lock
    booking = await booking_crud.create_booking(
        room_id=payload.room_id,
        user_id=current_user.id,
        payload=payload,
        now=now,
    )
    logger.info(
        "Booking created: id={} room_id={} user_id={} total={}",
        booking.id,
        booking.room_id,
        current_user.id,
        booking.total_price,
    )
    await invalidate_slots_cache(payload.room_id)
    return booking


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    current_user: CurrentUser = Depends(can_read_booking),
) -> BookingResponse:
    if current_user.is_admin:
        booking = await booking_crud.get_booking(booking_id)
    else:
        booking = await booking_crud.get_booking(booking_id, user_id=current_user.id)

    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found"
        )
    return booking


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: UUID,
    payload: BookingStatusUpdate,
    current_user: CurrentUser = Depends(can_cancel_booking),
) -> BookingResponse:
    # Scoped to the booker: someone else's booking looks like a missing one
    booking = await booking_crud.get_booking(booking_id, user_id=current_user.id)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found"
        )

    _assert_cancellation(old_status=booking.status, new_status=payload.status)

    updated = await booking_crud.cancel_booking(booking_id)
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found"
        )

    logger.info("Booking cancelled: id={} user_id={}", booking_id, current_user.id)
    await invalidate_slots_cache(booking.room_id)
    return updated
