"""FastAPI entry point: app factory, logging and session-table bootstrap."""

import logging

from fastapi import FastAPI

from rps_editor import __version__
from rps_editor.api.v1 import router as api_v1_router
from rps_editor.config import get_settings
from rps_editor.db import Base, engine, session_scope
from rps_editor.models import EditorSession  # noqa: F401  registers the table
from rps_editor.services.rps_api import RPSApiClient
from rps_editor.services.sessions import EditorSessionService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("rps_editor").setLevel(level.upper())


def create_app() -> FastAPI:
    """Application factory."""

    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title="RPS Editor API", version=__version__)

    @app.on_event("startup")
    def init_models() -> None:
        """Create the session table and drop sessions nobody came back to."""

        Base.metadata.create_all(bind=engine)
        api = RPSApiClient.from_settings(settings)
        try:
            with session_scope() as db:
                EditorSessionService(db, api, settings).purge_stale()
        finally:
            api.close()

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "api_base_url": settings.api_base_url}

    app.include_router(api_v1_router)
    return app


app = create_app()
