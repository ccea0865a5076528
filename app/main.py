# app/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.db import create_db_and_tables
from app.errors import SchedulingError
from app.logging_config import get_logger, setup_structured_logging
from app.routers import (
    auth_routes,
    availability_routes,
    blocks_routes,
    bookings_routes,
    catalog_routes,
    schedule_routes,
    users_routes,
)
from app.settings import LOG_LEVEL

setup_structured_logging(LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info("startup", tables="ready")
    yield


app = FastAPI(title="Barbershop Scheduling API", lifespan=lifespan)


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    logger.info(
        "request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        detail=exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(auth_routes.router)
app.include_router(users_routes.router)
app.include_router(catalog_routes.router)
app.include_router(schedule_routes.router)
app.include_router(blocks_routes.router)
app.include_router(availability_routes.router)
app.include_router(bookings_routes.router)
