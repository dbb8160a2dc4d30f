import sys

from fastapi import FastAPI, status
from fastapi.responses import JSONResponse
from loguru import logger
from tortoise import connections
from tortoise.contrib.fastapi import register_tortoise

from app import settings
from app.errors import register_exception_handlers
from app.routers.booking import router as booking_router

logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)

TORTOISE_ORM = {
    "connections": {"default": settings.db_url},
    "apps": {"models": {"models": ["app.models"], "default_connection": "default"}},
}


def create_app() -> FastAPI:
    app = FastAPI(title="Room bookings service")
    app.include_router(booking_router)
    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    async def health() -> JSONResponse:
        try:
            await connections.get("default").execute_query("SELECT 1")
        except Exception as exc:
            logger.error("Health check failed: {}", exc)
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "error", "database": "disconnected"},
            )
        return JSONResponse(content={"status": "ok", "database": "connected"})

    return app


app = create_app()

register_tortoise(
    app,
    config=TORTOISE_ORM,
    generate_schemas=settings.generate_schemas,
)
