"""
Shared pytest fixtures available to every test file automatically.
No imports needed in test files — pytest discovers this by convention.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.deps import (
    can_cancel_booking,
    can_read_booking,
    can_write_booking,
    get_current_user,
    get_now,
)
from app.errors import register_exception_handlers
from app.routers.booking import router

from .factories import NOW, make_admin, make_guest

CACHE_PATH = "app.routers.booking"


# ---------------------------------------------------------------------------
# Redis is never reached from tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def no_redis():
    with (
        patch(f"{CACHE_PATH}.get_slots_cache", AsyncMock(return_value=None)) as get_,
        patch(f"{CACHE_PATH}.set_slots_cache", AsyncMock()) as set_,
        patch(f"{CACHE_PATH}.invalidate_slots_cache", AsyncMock()) as invalidate,
    ):
        yield {"get": get_, "set": set_, "invalidate": invalidate}


# ---------------------------------------------------------------------------
# App builder — used by all client fixtures
# ---------------------------------------------------------------------------


def build_app(current_user, now=NOW) -> FastAPI:
    """
    Fresh FastAPI app with auth/scope dependencies overridden to return
    `current_user` unconditionally and the clock pinned to `now`.
    """
    app = FastAPI()
    app.include_router(router)
    register_exception_handlers(app)

    async def _user():
        return current_user

    for dep in (
        can_read_booking,
        can_write_booking,
        can_cancel_booking,
        get_current_user,
    ):
        app.dependency_overrides[dep] = _user

    app.dependency_overrides[get_now] = lambda: now
    return app


def build_anon_app(now=NOW) -> FastAPI:
    app = FastAPI()
    app.include_router(router)
    register_exception_handlers(app)
    app.dependency_overrides[get_now] = lambda: now
    return app


# ---------------------------------------------------------------------------
# Reusable client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def guest_client():
    return TestClient(build_app(make_guest()), raise_server_exceptions=True)


@pytest.fixture()
def admin_client():
    return TestClient(build_app(make_admin()), raise_server_exceptions=True)


@pytest.fixture()
def anon_app():
    """
    App with NO auth overrides.
    Use this when you want real scope/auth deps to run so you can assert 401/403/422.
    """
    return build_anon_app()


@pytest.fixture()
def client_factory():
    def _make(current_user, now=NOW) -> TestClient:
        return TestClient(build_app(current_user, now=now), raise_server_exceptions=True)

    return _make
