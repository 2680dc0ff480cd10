"""
Gleam Growth Ledger — FastAPI Application.

This is the entry point for the application. The database
engine and the action catalog are opened in the lifespan
handler and closed again on shutdown.
"""

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from growth_ledger.config import Settings, get_settings
from growth_ledger.api.health import router as health_router
from growth_ledger.api.users import router as users_router
from growth_ledger.api.webhooks import router as webhooks_router
from growth_ledger.models.base import (
    Base,
    create_db_engine,
    create_session_factory,
)
from growth_ledger.services.action_catalog import load_action_catalog

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure console logging for the service."""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )
    logging.getLogger("growth_ledger").setLevel(log_level)

    # Quiet noisy third-party loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the ledger store at startup and close it at shutdown."""
    settings = get_settings()

    engine = create_db_engine(settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.action_catalog = load_action_catalog(settings)

    logger.info("Database at %s", engine.url.render_as_string(hide_password=True))
    logger.info("Webhook: POST /webhooks/gleam/post-entry?token=***")
    if not settings.GLEAM_WEBHOOK_TOKEN:
        logger.warning("GLEAM_WEBHOOK_TOKEN is not set; webhook calls will be rejected")
    yield

    logger.info("Shutting down, closing database connections")
    engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Growth points ledger fed by Gleam post-entry webhooks",
        lifespan=lifespan,
    )

    # Register routers
    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(webhooks_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
