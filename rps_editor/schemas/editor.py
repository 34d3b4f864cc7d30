"""Request/response contracts of the editing-session API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from rps_editor.models.enums import EditorMode, RPSTab
from rps_editor.schemas.rps import LearningOutcome, RPSAggregate


class SessionOpenRequest(BaseModel):
    rps_id: Optional[str] = None
    mode: EditorMode = EditorMode.EDIT


class FieldUpdate(BaseModel):
    field: str
    value: Any = None


class ReferenceToggle(BaseModel):
    """Many-to-many membership flip; ``field`` may be omitted when unambiguous."""

    ref_id: str
    field: Optional[str] = None


class FormToggle(BaseModel):
    field: str
    item: str


class SubCPMKMove(BaseModel):
    target_cpmk_index: int


class TabChange(BaseModel):
    tab: RPSTab


class SessionResponse(BaseModel):
    id: str
    rps_id: Optional[str]
    mode: EditorMode
    active_tab: RPSTab
    aggregate: RPSAggregate
    cpl: List[LearningOutcome] = Field(default_factory=list)
    totals: Dict[str, int] = Field(default_factory=dict)
    last_error: Optional[str] = None


class ValidationResponse(BaseModel):
    valid: bool
    errors: Dict[str, List[str]] = Field(default_factory=dict)


class TabChangeResponse(BaseModel):
    active_tab: RPSTab
    errors: List[str] = Field(default_factory=list)
