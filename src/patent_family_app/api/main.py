"""FastAPI application setup."""

from fastapi import FastAPI

from patent_family_app.api.routers import health, identifiers
from patent_family_app.config.logging import build_logging_config, configure_logging
from patent_family_app.config.settings import AppSettings, get_settings


def create_app() -> FastAPI:
    """Application factory to wire routes and dependencies."""
    settings: AppSettings = get_settings()
    configure_logging(build_logging_config(settings.log_level, json_output=settings.log_json))

    app = FastAPI(
        title="Patent Family Service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.include_router(health.router)
    app.include_router(identifiers.router)

    @app.get("/config", include_in_schema=False)
    def show_runtime_configuration() -> dict[str, str | bool | list[str]]:
        """Return non-sensitive runtime settings for smoke testing."""
        return settings.snapshot()

    return app


app = create_app()
