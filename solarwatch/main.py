"""SolarWatch - Historical solar events timeline."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from solarwatch.config import settings
from solarwatch.database import engine, init_db
from solarwatch.api import accounts, content, events, public
from solarwatch.schemas.common import ErrorBody

logger = logging.getLogger("solarwatch")

VERSION = "0.3.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    logger.info("Starting SolarWatch")
    logger.info("Data directory: %s", settings.data_dir)

    settings.media_dir.mkdir(parents=True, exist_ok=True)

    await init_db()

    yield

    logger.info("Shutting down SolarWatch")
    await engine.dispose()


app = FastAPI(
    title="SolarWatch",
    description="Historical solar events timeline and admin API",
    version=VERSION,
    lifespan=lifespan,
)

_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins or ["*"],
    allow_credentials=bool(_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Every failure body is ``{"error": <message>}``."""
    body = ErrorBody(error=str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request."
    return JSONResponse(status_code=400, content=ErrorBody(error=message).model_dump())


# Register routers
app.include_router(public.router)
app.include_router(accounts.router)
app.include_router(events.router)
app.include_router(content.router)


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "app": "solarwatch", "version": VERSION}
