"""Learning outcome (CPL) create/edit API, gated by form validation."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from rps_editor.dependencies import get_rps_api
from rps_editor.schemas.cpl import CPLForm, CPLValidationResult
from rps_editor.services.errors import ExternalApiError
from rps_editor.services.rps_api import RPSApiClient
from rps_editor.services.validation import validate_cpl_form

router = APIRouter()


def _validated_payload(form: CPLForm) -> Dict[str, Any]:
    errors = validate_cpl_form(form)
    if errors:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Validasi gagal", "errors": errors},
        )
    payload = form.model_dump(mode="json", exclude_none=True)
    for field in ("kode", "nama", "deskripsi"):
        payload[field] = payload[field].strip()
    return payload


@router.post("/validate", response_model=CPLValidationResult)
def validate_cpl(form: CPLForm):
    errors = validate_cpl_form(form)
    return CPLValidationResult(valid=not errors, errors=errors)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_cpl(form: CPLForm, api: RPSApiClient = Depends(get_rps_api)) -> Dict[str, Any]:
    payload = _validated_payload(form)
    try:
        return api.create_cpl(payload)
    except ExternalApiError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc


@router.put("/{cpl_id}")
def update_cpl(
    cpl_id: str, form: CPLForm, api: RPSApiClient = Depends(get_rps_api)
) -> Dict[str, Any]:
    payload = _validated_payload(form)
    try:
        return api.update_cpl(cpl_id, payload)
    except ExternalApiError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
