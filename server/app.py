"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from config.config import get_config
from db.engine import get_engine
from db.tables import init_db
from models.errors import ScoutMailError
from server.middleware import RequestIDMiddleware
from server.routes import conversations, email, health, mailbox, search
from server.utils import error_response
from utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup/shutdown logic."""
    logger.info("FastAPI server starting up")
    init_db(get_engine())

    missing = get_config().missing_keys()
    if missing:
        logger.warning(f"Missing environment variables: {missing}")

    yield

    logger.info("FastAPI server shutting down")


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(
        "Request validation failed",
        extra={"extra_fields": {"path": request.url.path, "errors": len(exc.errors())}},
    )
    return error_response("Invalid request", _validation_message(exc), status.HTTP_400_BAD_REQUEST)


async def scoutmail_exception_handler(request: Request, exc: ScoutMailError):
    logger.error(
        "Unhandled application error",
        extra={"extra_fields": {"path": request.url.path, "error": str(exc)}},
    )
    return error_response("Internal server error", str(exc))


async def configuration_exception_handler(request: Request, exc: ValueError):
    # Provider clients raise ValueError when their API key is missing
    logger.error(
        "Service unavailable",
        extra={"extra_fields": {"path": request.url.path, "error": str(exc)}},
    )
    return error_response("Internal server error", str(exc))


def create_app() -> FastAPI:
    """Factory function to create FastAPI application."""
    app = FastAPI(
        title="ScoutMail API",
        description="Person research, outreach email drafting and Gmail delivery",
        version=health.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ScoutMailError, scoutmail_exception_handler)
    app.add_exception_handler(ValueError, configuration_exception_handler)

    app.include_router(health.router)
    app.include_router(search.router)
    app.include_router(email.router)
    app.include_router(mailbox.router)
    app.include_router(conversations.router)

    return app
