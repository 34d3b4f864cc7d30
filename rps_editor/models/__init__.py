"""SQLAlchemy models and enums."""

from rps_editor.models.enums import (
    CPLStatus,
    EditorMode,
    JenisBahan,
    JenisTugas,
    RPSTab,
    SemesterType,
    TAB_ORDER,
)
from rps_editor.models.session import EditorSession

__all__ = [
    "CPLStatus",
    "EditorMode",
    "EditorSession",
    "JenisBahan",
    "JenisTugas",
    "RPSTab",
    "SemesterType",
    "TAB_ORDER",
]
