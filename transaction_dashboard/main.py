from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from transaction_dashboard.core.config import settings
from transaction_dashboard.core.exceptions import register_exception_handlers
from transaction_dashboard.core.log_config import RequestLoggingMiddleware, setup_logging
from transaction_dashboard.db.session import engine, get_session_factory
from transaction_dashboard.transactions.routes import transactions_router

setup_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("starting", database=engine.url.render_as_string(hide_password=True))

    yield

    logger.info("disposing_engine")
    engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description="Read-only analytics API backing the transaction dashboard",
    version="1.0.0",
)

register_exception_handlers(app, debug=settings.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(transactions_router, prefix=settings.API_V1_PREFIX, tags=["transactions"])


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": settings.PROJECT_NAME, "version": "1.0.0", "status": "running"}


@app.get("/health")
def health_check(
    session_factory: sessionmaker[Session] = Depends(get_session_factory),
) -> dict[str, str]:
    db_status = "unknown"

    try:
        with session_factory() as db:
            db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("database_health_check_failed", error=str(e))
        db_status = "unhealthy"

    overall = "healthy" if db_status == "healthy" else "degraded"
    return {"status": overall, "database": db_status}
