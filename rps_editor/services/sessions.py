"""Editing session service.

Keeps one ``RPSAggregate`` per open form in the ``editor_sessions`` table so
the editor survives between HTTP requests. The curriculum API is only called
when a session is opened and when it is saved.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import delete
from sqlalchemy.orm import Session

from rps_editor.config import Settings, get_settings
from rps_editor.editor import RPSEditor
from rps_editor.models import EditorMode, EditorSession, RPSTab
from rps_editor.schemas.rps import LearningOutcome, MataKuliah, RPSAggregate, new_aggregate
from rps_editor.services.document import build_document_data
from rps_editor.services.errors import (
    ExternalApiError,
    ReadOnlySessionError,
    SessionNotFoundError,
    ValidationFailedError,
)
from rps_editor.services.mapping import hydrate, hydrate_cpl_list, hydrate_mata_kuliah, serialize
from rps_editor.services.rps_api import RPSApiClient
from rps_editor.services.validation import validate_full, validate_step, validate_through

logger = logging.getLogger(__name__)


class EditorSessionService:
    """Open, mutate, save and discard RPS editing sessions."""

    def __init__(
        self, db: Session, api: RPSApiClient, settings: Optional[Settings] = None
    ) -> None:
        self.db = db
        self.api = api
        self.settings = settings or get_settings()

    # --- lifecycle -----------------------------------------------------

    def open(self, rps_id: Optional[str] = None, mode: EditorMode = EditorMode.EDIT) -> EditorSession:
        """Start editing (or viewing) an RPS; a blank one when ``rps_id`` is empty."""

        if mode == EditorMode.VIEW and not rps_id:
            raise ValueError("view mode needs an existing RPS")

        cpl_list = hydrate_cpl_list(self.api.list_active_cpl())
        mata_kuliah: Optional[MataKuliah] = None
        if rps_id:
            document = self.api.get_rps(rps_id)
            aggregate = hydrate(document)
            mata_kuliah = hydrate_mata_kuliah(document)
        else:
            aggregate = new_aggregate(self.settings.default_tahun_ajaran)

        row = EditorSession(
            rps_id=aggregate.id,
            mode=mode,
            active_tab=RPSTab.INFO,
            aggregate_json=aggregate.model_dump(mode="json"),
            cpl_json=[cpl.model_dump(mode="json") for cpl in cpl_list],
            mata_kuliah_json=mata_kuliah.model_dump(mode="json") if mata_kuliah else None,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info("Opened session %s (rps=%s, mode=%s)", row.id, row.rps_id, mode.value)
        return row

    def get(self, session_id: str) -> EditorSession:
        row = self.db.get(EditorSession, session_id)
        if row is None:
            raise SessionNotFoundError(f"editing session {session_id} not found")
        return row

    def discard(self, session_id: str) -> None:
        row = self.get(session_id)
        self.db.delete(row)
        self.db.commit()
        logger.info("Discarded session %s", session_id)

    def purge_stale(self, ttl_hours: Optional[int] = None) -> int:
        """Delete sessions idle for longer than ``ttl_hours``."""

        ttl = self.settings.session_ttl_hours if ttl_hours is None else ttl_hours
        cutoff = datetime.now(timezone.utc) - timedelta(hours=ttl)
        stmt = (
            delete(EditorSession)
            .where(EditorSession.updated_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        if result.rowcount:
            logger.info("Purged %d stale editing sessions", result.rowcount)
        return result.rowcount or 0

    # --- state ---------------------------------------------------------

    def aggregate(self, row: EditorSession) -> RPSAggregate:
        return RPSAggregate.model_validate(row.aggregate_json or {})

    def cpl_list(self, row: EditorSession) -> List[LearningOutcome]:
        return [LearningOutcome.model_validate(item) for item in row.cpl_json or []]

    def editor(self, row: EditorSession) -> RPSEditor:
        return RPSEditor(
            self.aggregate(row),
            self.cpl_list(row),
            read_only=row.mode == EditorMode.VIEW,
        )

    def _store(self, row: EditorSession, aggregate: RPSAggregate) -> None:
        row.aggregate_json = aggregate.model_dump(mode="json")
        row.rps_id = aggregate.id
        self.db.commit()
        self.db.refresh(row)

    def apply(self, session_id: str, operation: Callable[[RPSEditor], Any]) -> EditorSession:
        """Run one editor operation and persist the resulting aggregate."""

        row = self.get(session_id)
        if row.mode == EditorMode.VIEW:
            raise ReadOnlySessionError(f"session {session_id} is read-only")
        editor = self.editor(row)
        operation(editor)
        self._store(row, editor.snapshot())
        return row

    def navigate(self, session_id: str, tab: RPSTab) -> List[str]:
        """Move to ``tab``; going forward requires the current tab to validate.

        Returns the blocking messages, empty when the move happened.
        """

        row = self.get(session_id)
        tab = RPSTab(tab)
        order = list(RPSTab)
        if row.mode == EditorMode.EDIT and order.index(tab) > order.index(row.active_tab):
            errors = validate_step(self.editor(row).state, row.active_tab)
            if errors:
                return errors
        row.active_tab = tab
        self.db.commit()
        return []

    # --- derived views -------------------------------------------------

    def validation(self, session_id: str, tab: Optional[RPSTab] = None) -> Dict[str, List[str]]:
        state = self.editor(self.get(session_id)).state
        if tab is None:
            return validate_full(state)
        messages = validate_step(state, tab)
        return {RPSTab(tab).value: messages} if messages else {}

    def document(self, session_id: str) -> Dict[str, Any]:
        row = self.get(session_id)
        mata_kuliah = (
            MataKuliah.model_validate(row.mata_kuliah_json) if row.mata_kuliah_json else None
        )
        return build_document_data(
            self.aggregate(row),
            self.cpl_list(row),
            mata_kuliah,
            perguruan_tinggi=self.settings.perguruan_tinggi,
        )

    # --- persistence ---------------------------------------------------

    def save(self, session_id: str, draft: bool = False) -> EditorSession:
        """Validate, then create or update the RPS with one API request.

        A draft save only checks the tabs up to the active one, so entries can
        get their ids (and become referenceable) before the form is complete.

        On failure the aggregate is left untouched and the message is kept in
        ``last_error``; on success the aggregate is rehydrated from the
        response so new entry ids become visible.
        """

        row = self.get(session_id)
        if row.mode == EditorMode.VIEW:
            raise ReadOnlySessionError(f"session {session_id} is read-only")

        editor = self.editor(row)
        if draft:
            errors = validate_through(editor.state, row.active_tab)
        else:
            errors = validate_full(editor.state)
        if errors:
            raise ValidationFailedError(errors)

        aggregate = editor.snapshot()
        payload = serialize(aggregate)
        try:
            if aggregate.id:
                response = self.api.update_rps(aggregate.id, payload)
            else:
                response = self.api.create_rps(payload)
        except ExternalApiError as exc:
            row.last_error = exc.message
            self.db.commit()
            logger.warning("Saving session %s failed: %s", session_id, exc.message)
            raise

        if isinstance(response, dict) and "cpmk" in response:
            saved = hydrate(response)
        else:
            # API answered with the header only
            new_id = response.get("id") if isinstance(response, dict) else None
            saved = aggregate.model_copy(update={"id": str(new_id) if new_id else aggregate.id})

        row.last_error = None
        mata_kuliah = hydrate_mata_kuliah(response) if isinstance(response, dict) else None
        if mata_kuliah is not None and (mata_kuliah.nama or row.mata_kuliah_json is None):
            row.mata_kuliah_json = mata_kuliah.model_dump(mode="json")
        self._store(row, saved)
        logger.info("Saved session %s as RPS %s", session_id, row.rps_id)
        return row
