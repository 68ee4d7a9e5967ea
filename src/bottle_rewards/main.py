"""FastAPI application entrypoint for the bottle rewards service."""

from fastapi import FastAPI

from .api.v1.router import api_router
from .bootstrap import register_bootstrap
from .core.logging import configure_logging


def create_app() -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    configure_logging()
    app = FastAPI(title="Bottle Rewards API", version="0.1.0")
    app.include_router(api_router, prefix="/api/v1")
    register_bootstrap(app)
    return app


app = create_app()
