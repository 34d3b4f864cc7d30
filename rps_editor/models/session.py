"""Editing session model.

One row per open RPS form. The RPS document itself lives in the external API;
this table only keeps the in-progress aggregate between HTTP requests.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from rps_editor.db import Base
from rps_editor.models.enums import EditorMode, RPSTab


def _new_session_id() -> str:
    return uuid.uuid4().hex


class EditorSession(Base):
    """Server-side state of one RPS editing session."""

    __tablename__ = "editor_sessions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_session_id)
    # Empty until the aggregate is persisted for the first time
    rps_id: Mapped[Optional[str]] = mapped_column(String(64))
    mode: Mapped[EditorMode] = mapped_column(
        Enum(EditorMode), default=EditorMode.EDIT, nullable=False
    )
    active_tab: Mapped[RPSTab] = mapped_column(
        Enum(RPSTab), default=RPSTab.INFO, nullable=False
    )

    # RPSAggregate.model_dump(mode="json")
    aggregate_json: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)
    # Read-only CPL snapshot: [{"id": ..., "kode": ..., "deskripsi": ...}]
    cpl_json: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)
    # Course record embedded in the API response, used by the document data
    mata_kuliah_json: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON)

    last_error: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<EditorSession(id={self.id}, rps_id={self.rps_id}, mode={self.mode.value})>"
