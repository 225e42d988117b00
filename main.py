import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from charter_notifications.config import get_settings
from charter_notifications.infrastructure.database import engine, initialize_database
from charter_notifications.infrastructure.notifications import (
    build_email_sender,
    build_push_gateway,
)
from charter_notifications.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema and the delivery transports once per process."""

    settings = get_settings()
    initialize_database()
    app.state.push_gateway = build_push_gateway(settings)
    app.state.email_sender = build_email_sender(settings)
    yield
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Charter Notifications", lifespan=lifespan)
    register_routes(app)
    return app


app = create_app()
