from enum import StrEnum

from tortoise import fields
from tortoise.models import Model


class BookingStatus(StrEnum):
    PENDING = "pending"  # just created, awaiting hotel confirmation
    CONFIRMED = "confirmed"  # hotel accepted
    CANCELLED = "cancelled"  # cancelled by the guest
    REJECTED = "rejected"  # refused by the hotel
    COMPLETED = "completed"  # stay is over

    @property
    def is_terminal_inactive(self) -> bool:
        """Inactive bookings never hold their dates."""
        return self in (BookingStatus.CANCELLED, BookingStatus.REJECTED)

    @property
    def is_terminal(self) -> bool:
        return self.is_terminal_inactive or self is BookingStatus.COMPLETED


# Presentation only; logic must go through BookingStatus itself.
STATUS_DISPLAY: dict[BookingStatus, tuple[str, str]] = {
    BookingStatus.PENDING: ("Pending", "#F59E0B"),
    BookingStatus.CONFIRMED: ("Confirmed", "#10B981"),
    BookingStatus.CANCELLED: ("Cancelled", "#EF4444"),
    BookingStatus.REJECTED: ("Rejected", "#EF4444"),
    BookingStatus.COMPLETED: ("Completed", "#6366F1"),
}


class RoomType(Model):
    id = fields.IntField(primary_key=True)
    name = fields.CharField(max_length=100, unique=True)
    description = fields.TextField(null=True)
    max_guests = fields.IntField()

    class Meta:  # type: ignore
        table = "room_types"


class Room(Model):
    id = fields.UUIDField(primary_key=True)
    number = fields.CharField(max_length=20)
    room_type: fields.ForeignKeyRelation[RoomType] = fields.ForeignKeyField(
        "models.RoomType", related_name="rooms", on_delete=fields.RESTRICT
    )
    price_per_night = fields.DecimalField(max_digits=10, decimal_places=2)
    is_available = fields.BooleanField(default=True)  # admin on/off switch
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:  # type: ignore
        table = "rooms"


class Booking(Model):
    id = fields.UUIDField(primary_key=True)

    room: fields.ForeignKeyRelation[Room] = fields.ForeignKeyField(
        "models.Room", related_name="bookings", on_delete=fields.RESTRICT
    )
    user_id = fields.UUIDField()  # the guest who made the booking

    check_in_date = fields.DateField()
    check_out_date = fields.DateField()
    number_of_guests = fields.IntField()
    special_requests = fields.TextField(null=True)

    status = fields.CharEnumField(BookingStatus, default=BookingStatus.PENDING)

    total_price = fields.DecimalField(max_digits=10, decimal_places=2)  # computed
    final_price = fields.DecimalField(
        max_digits=10, decimal_places=2
    )  # after discount

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:  # type: ignore
        table = "bookings"
        ordering = ["-created_at"]
