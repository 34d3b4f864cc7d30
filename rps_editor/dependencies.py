"""FastAPI dependency providers."""

from collections.abc import Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from rps_editor.db import SessionLocal
from rps_editor.services.rps_api import RPSApiClient
from rps_editor.services.sessions import EditorSessionService


def get_db() -> Iterator[Session]:
    """Database session per request."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_rps_api() -> Iterator[RPSApiClient]:
    """Curriculum API client per request, closed afterwards."""

    client = RPSApiClient.from_settings()
    try:
        yield client
    finally:
        client.close()


def get_session_service(
    db: Session = Depends(get_db), api: RPSApiClient = Depends(get_rps_api)
) -> EditorSessionService:
    return EditorSessionService(db, api)
