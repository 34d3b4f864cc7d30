"""API v1 router package."""

from fastapi import APIRouter

from rps_editor.api.v1 import cpl, sessions

router = APIRouter(prefix="/api/v1")

router.include_router(sessions.router, prefix="/sessions", tags=["RPS sessions"])
router.include_router(cpl.router, prefix="/cpl", tags=["CPL"])
