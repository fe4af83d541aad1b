import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.database import engine
from app.core.seed import seed_admin_account
from app.utils.timestamps import utcnow

SERVICE_NAME = "crm-leads-api"
VERSION = "0.1.0"

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting %s %s (%s)", SERVICE_NAME, VERSION, settings.APP_ENV)
    # Startup: seed admin account
    await seed_admin_account()
    yield
    # Shutdown: release pooled connections
    await engine.dispose()


app = FastAPI(
    title="CRM Leads API",
    description="Sales lead tracking API with live WebSocket updates",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed, missing or out-of-range input is a client error (400)."""
    logger.info("Rejected %s %s: %d validation errors", request.method, request.url.path, len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Anything unexpected: log the detail, return a generic message."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": VERSION,
        "environment": settings.APP_ENV,
        "timestamp": utcnow().isoformat() + "Z",
    }


def run():
    """Console entry point: serve the API with uvicorn on settings.PORT."""
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)
