import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings, validate_runtime_config
from app.core.errors import register_error_handlers
from app.core.logging import configure_logging
from app.db.session import engine
from app.db.base import Base
from app import models  # noqa: F401  registers tables on Base.metadata

from app.api.auth import router as auth_router
from app.api.payout_requests import router as payout_requests_router
from app.api.teamleader import router as teamleader_router
from app.api.teams import router as teams_router
from app.api.expenses import router as expenses_router

configure_logging()
validate_runtime_config()

logger = logging.getLogger(__name__)


def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError:
        logger.exception("Database initialization failed. Check DATABASE_URL and credentials.")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    initialize_database()
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_BASE_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

register_error_handlers(app)


# ROUTERS
app.include_router(auth_router, prefix="/api")
app.include_router(expenses_router, prefix="/api")
app.include_router(payout_requests_router)
app.include_router(teamleader_router)
app.include_router(teams_router)


@app.get("/api/health")
def health():
    return {"status": "ok"}
