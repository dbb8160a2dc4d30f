from dataclasses import dataclass, field
from datetime import UTC, datetime
from urllib.parse import unquote
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from app.scopes import BookingScope


@dataclass
class CurrentUser:
    id: UUID
    username: str
    scopes: list[str] = field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return (
            BookingScope.ADMIN in self.scopes
            or BookingScope.ADMIN_READ in self.scopes
        )


def get_current_user(
    x_user_id: str = Header(...),
    x_username: str = Header(...),
    x_user_scopes: str = Header(default=""),
) -> CurrentUser:
    """
    Reads the identity headers injected by the API gateway after it has
    validated the session. They are trusted as-is.
    """
    try:
        user_id = UUID(x_user_id)
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user identity from gateway",
        ) from None

    scopes = x_user_scopes.split(" ") if x_user_scopes else []

    return CurrentUser(id=user_id, username=unquote(x_username), scopes=scopes)


def get_now() -> datetime:
    """Current instant; overridden in tests to pin the clock."""
    return datetime.now(UTC)


def require_scopes(*required: str):
    """
    Factory that returns a dependency enforcing one or more scopes.

    Usage:
        @router.get("/protected")
        async def route(user = Depends(require_scopes("bookings:read"))):
            ...
    """

    async def _dep(
        current_user: CurrentUser = Depends(get_current_user),
    ) -> CurrentUser:
        missing = [s for s in required if s not in current_user.scopes]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing required scopes: {', '.join(missing)}",
            )
        return current_user

    return _dep


can_write_booking = require_scopes(BookingScope.WRITE)
can_cancel_booking = require_scopes(BookingScope.CANCEL)


async def can_read_booking(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """
    Passes for guests reading their own bookings and for admins.
    - bookings:read          → own bookings only
    - admin:bookings[:read]  → every booking
    """
    if not (BookingScope.READ in current_user.scopes or current_user.is_admin):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=(
                f"Requires '{BookingScope.READ}' (guests) "
                f"or '{BookingScope.ADMIN_READ}' (admin)."
            ),
        )
    return current_user
