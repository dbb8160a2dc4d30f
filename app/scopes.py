from enum import StrEnum


class BookingScope(StrEnum):
    # Customer scopes
    READ = "bookings:read"  # view own bookings
    WRITE = "bookings:write"  # create a booking
    CANCEL = "bookings:cancel"  # cancel own booking

    # Admin scopes
    ADMIN = "admin:bookings"
    ADMIN_READ = "admin:bookings:read"


BOOKING_SCOPE_DESCRIPTIONS: dict[str, str] = {
    BookingScope.READ: "View your own bookings.",
    BookingScope.WRITE: "Book a hotel room.",
    BookingScope.CANCEL: "Cancel your own booking before it is completed.",
    BookingScope.ADMIN: "Full access to every booking (admin).",
    BookingScope.ADMIN_READ: "Read any booking regardless of owner (admin).",
}
