"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.api.error_handling import register_exception_handlers
from app.api.v1 import router as v1_router
from app.core.config import settings
from app.core.database import session_scope
from app.core.logging import configure_logging
from app.core.ownership import RECORD_OWNERSHIP
from app.models import Base
from app.services.accounts import ensure_super_admin

logger = logging.getLogger(__name__)

# A registry entry pointing at a missing table or column is a startup failure.
RECORD_OWNERSHIP.validate(Base.metadata)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.DEBUG)
    try:
        with session_scope() as db:
            ensure_super_admin(db, settings)
    except SQLAlchemyError:
        logger.exception("Failed to ensure super admin")
    yield


app = FastAPI(
    title="NGO FRF Records API",
    version="0.1.0",
    docs_url="/docs" if settings.APP_ENV == "dev" else None,
    redoc_url="/redoc" if settings.APP_ENV == "dev" else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)
app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "NGO FRF Records API"}
