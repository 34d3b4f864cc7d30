"""RPS editing session API."""

import unicodedata
from typing import Any, Callable, Dict, NoReturn, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response, status

from rps_editor.dependencies import get_session_service
from rps_editor.editor import RPSEditor, UnknownCollectionError
from rps_editor.models import EditorSession, RPSTab
from rps_editor.schemas.editor import (
    FieldUpdate,
    FormToggle,
    ReferenceToggle,
    SessionOpenRequest,
    SessionResponse,
    SubCPMKMove,
    TabChange,
    TabChangeResponse,
    ValidationResponse,
)
from rps_editor.services.errors import (
    ExternalApiError,
    ReadOnlySessionError,
    ServiceError,
    SessionNotFoundError,
    ValidationFailedError,
)
from rps_editor.services.sessions import EditorSessionService
from rps_editor.utils.docx_export import DOCX_MEDIA_TYPE, render_rps_docx

router = APIRouter()


def _raise_http(exc: Exception) -> NoReturn:
    if isinstance(exc, (SessionNotFoundError, UnknownCollectionError)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, ReadOnlySessionError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if isinstance(exc, ValidationFailedError):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(exc), "errors": exc.errors},
        ) from exc
    if isinstance(exc, ExternalApiError):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
    raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


def _attachment(filename: str) -> str:
    """Content-Disposition with an ASCII fallback name and the UTF-8 original."""

    fallback = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    fallback = fallback.replace('"', "").replace("\\", "")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


def _to_response(service: EditorSessionService, row: EditorSession) -> SessionResponse:
    editor = service.editor(row)
    return SessionResponse(
        id=row.id,
        rps_id=row.rps_id,
        mode=row.mode,
        active_tab=row.active_tab,
        aggregate=editor.snapshot(),
        cpl=editor.state.cpl_list,
        totals=editor.totals(),
        last_error=row.last_error,
    )


def _apply(
    service: EditorSessionService, session_id: str, operation: Callable[[RPSEditor], Any]
) -> SessionResponse:
    try:
        row = service.apply(session_id, operation)
    except (ServiceError, ValueError) as exc:
        _raise_http(exc)
    return _to_response(service, row)


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def open_session(
    payload: SessionOpenRequest, service: EditorSessionService = Depends(get_session_service)
):
    try:
        row = service.open(payload.rps_id, payload.mode)
    except (ServiceError, ValueError) as exc:
        _raise_http(exc)
    return _to_response(service, row)


@router.get("/{session_id}", response_model=SessionResponse)
def get_session(session_id: str, service: EditorSessionService = Depends(get_session_service)):
    try:
        row = service.get(session_id)
    except ServiceError as exc:
        _raise_http(exc)
    return _to_response(service, row)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def discard_session(session_id: str, service: EditorSessionService = Depends(get_session_service)):
    try:
        service.discard(session_id)
    except ServiceError as exc:
        _raise_http(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# === Info Dasar ===

@router.put("/{session_id}/form", response_model=SessionResponse)
def update_form(
    session_id: str,
    payload: FieldUpdate,
    service: EditorSessionService = Depends(get_session_service),
):
    return _apply(service, session_id, lambda e: e.form.update(payload.field, payload.value))


@router.post("/{session_id}/form/toggle", response_model=SessionResponse)
def toggle_form_item(
    session_id: str,
    payload: FormToggle,
    service: EditorSessionService = Depends(get_session_service),
):
    return _apply(service, session_id, lambda e: e.form.toggle(payload.field, payload.item))


# === Navigation, read-only views and save ===

@router.post("/{session_id}/tab", response_model=TabChangeResponse)
def change_tab(
    session_id: str,
    payload: TabChange,
    service: EditorSessionService = Depends(get_session_service),
):
    try:
        errors = service.navigate(session_id, payload.tab)
        row = service.get(session_id)
    except ServiceError as exc:
        _raise_http(exc)
    return TabChangeResponse(active_tab=row.active_tab, errors=errors)


@router.get("/{session_id}/view")
def view_session(
    session_id: str, service: EditorSessionService = Depends(get_session_service)
) -> Dict[str, Any]:
    try:
        row = service.get(session_id)
    except ServiceError as exc:
        _raise_http(exc)
    return service.editor(row).render_view()


@router.get("/{session_id}/validation", response_model=ValidationResponse)
def validate_session(
    session_id: str,
    tab: Optional[RPSTab] = None,
    service: EditorSessionService = Depends(get_session_service),
):
    try:
        errors = service.validation(session_id, tab)
    except ServiceError as exc:
        _raise_http(exc)
    return ValidationResponse(valid=not errors, errors=errors)


@router.post("/{session_id}/save", response_model=SessionResponse)
def save_session(
    session_id: str,
    draft: bool = False,
    service: EditorSessionService = Depends(get_session_service),
):
    try:
        row = service.save(session_id, draft=draft)
    except ServiceError as exc:
        _raise_http(exc)
    return _to_response(service, row)


@router.get("/{session_id}/document")
def document_data(
    session_id: str, service: EditorSessionService = Depends(get_session_service)
) -> Dict[str, Any]:
    try:
        return service.document(session_id)
    except ServiceError as exc:
        _raise_http(exc)


@router.get("/{session_id}/document.docx")
def document_docx(session_id: str, service: EditorSessionService = Depends(get_session_service)):
    try:
        data = service.document(session_id)
    except ServiceError as exc:
        _raise_http(exc)
    filename = f"RPS_{data['kode_mk']}_{data['semester']}.docx".replace(" ", "_").replace("/", "-")
    return Response(
        content=render_rps_docx(data),
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": _attachment(filename)},
    )


# === Sub-CPMK (nested under a CPMK) ===

@router.post("/{session_id}/cpmk/{cpmk_index}/sub-cpmk", response_model=SessionResponse)
def add_sub_cpmk(
    session_id: str,
    cpmk_index: int,
    service: EditorSessionService = Depends(get_session_service),
):
    return _apply(service, session_id, lambda e: e.sub_cpmk.add(cpmk_index))


@router.patch("/{session_id}/cpmk/{cpmk_index}/sub-cpmk/{sub_index}", response_model=SessionResponse)
def update_sub_cpmk(
    session_id: str,
    cpmk_index: int,
    sub_index: int,
    payload: FieldUpdate,
    service: EditorSessionService = Depends(get_session_service),
):
    return _apply(
        service,
        session_id,
        lambda e: e.sub_cpmk.update(cpmk_index, sub_index, payload.field, payload.value),
    )


@router.delete("/{session_id}/cpmk/{cpmk_index}/sub-cpmk/{sub_index}", response_model=SessionResponse)
def remove_sub_cpmk(
    session_id: str,
    cpmk_index: int,
    sub_index: int,
    service: EditorSessionService = Depends(get_session_service),
):
    return _apply(service, session_id, lambda e: e.sub_cpmk.remove(cpmk_index, sub_index))


@router.post(
    "/{session_id}/cpmk/{cpmk_index}/sub-cpmk/{sub_index}/move", response_model=SessionResponse
)
def move_sub_cpmk(
    session_id: str,
    cpmk_index: int,
    sub_index: int,
    payload: SubCPMKMove,
    service: EditorSessionService = Depends(get_session_service),
):
    return _apply(
        service,
        session_id,
        lambda e: e.sub_cpmk.move(cpmk_index, sub_index, payload.target_cpmk_index),
    )


# === Flat collections ===

@router.post("/{session_id}/{collection}", response_model=SessionResponse)
def add_entry(
    session_id: str,
    collection: str,
    service: EditorSessionService = Depends(get_session_service),
):
    return _apply(service, session_id, lambda e: e.collection(collection).add())


@router.patch("/{session_id}/{collection}/{index}", response_model=SessionResponse)
def update_entry(
    session_id: str,
    collection: str,
    index: int,
    payload: FieldUpdate,
    service: EditorSessionService = Depends(get_session_service),
):
    return _apply(
        service,
        session_id,
        lambda e: e.collection(collection).update(index, payload.field, payload.value),
    )


@router.delete("/{session_id}/{collection}/{index}", response_model=SessionResponse)
def remove_entry(
    session_id: str,
    collection: str,
    index: int,
    service: EditorSessionService = Depends(get_session_service),
):
    return _apply(service, session_id, lambda e: e.collection(collection).remove(index))


@router.post("/{session_id}/{collection}/{index}/toggle", response_model=SessionResponse)
def toggle_reference(
    session_id: str,
    collection: str,
    index: int,
    payload: ReferenceToggle,
    service: EditorSessionService = Depends(get_session_service),
):
    return _apply(
        service,
        session_id,
        lambda e: e.collection(collection).toggle_reference(index, payload.ref_id, payload.field),
    )
