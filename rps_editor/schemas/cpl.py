"""Learning outcome (CPL) create/edit contracts."""

from typing import Dict, Optional

from pydantic import BaseModel, Field

from rps_editor.models.enums import CPLStatus


class CPLForm(BaseModel):
    """Raw CPL form values; validated by ``services.validation.validate_cpl_form``."""

    kode: str = ""
    nama: str = ""
    deskripsi: str = ""
    kategori: Optional[str] = None
    status: CPLStatus = CPLStatus.DRAFT


class CPLValidationResult(BaseModel):
    valid: bool
    errors: Dict[str, str] = Field(default_factory=dict)
