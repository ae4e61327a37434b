import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .database import engine
from .models import Base
from .redis_client import redis_client
from .routers import appointments, catalog, slots, staff
from .services.scheduling import BookingRejected

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # SQLite dev databases are created on the fly; PostgreSQL goes through Alembic
    if engine.dialect.name == "sqlite":
        Base.metadata.create_all(bind=engine)
    logger.info(f"Booking engine started (db={engine.dialect.name}, redis={redis_client is not None})")
    yield


async def booking_rejected_handler(_request: Request, exc: BookingRejected) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.result.error,
            "kind": exc.kind.value,
            "retryable": exc.kind.retryable,
        },
    )


def create_app() -> FastAPI:
    app = FastAPI(title="Booking Engine API", lifespan=lifespan)

    app.add_exception_handler(BookingRejected, booking_rejected_handler)

    app.include_router(staff.router)
    app.include_router(catalog.services_router)
    app.include_router(catalog.customers_router)
    app.include_router(appointments.router)
    app.include_router(slots.router)

    @app.get("/health")
    def health():
        redis_ok = None
        if redis_client is not None:
            try:
                redis_ok = redis_client.ping()
            except Exception as e:
                logger.error(f"Redis ping failed: {e}")
                redis_ok = False
        return {"status": "ok", "redis": redis_ok}

    return app


app = create_app()
