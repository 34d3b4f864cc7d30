"""Info Dasar (top-level form fields) editor."""

from typing import Any, Dict

from rps_editor.editor.base import FieldCoercion
from rps_editor.editor.fields import UnknownFieldError
from rps_editor.editor.lookup import PLACEHOLDER
from rps_editor.editor.state import EditorState
from rps_editor.models.enums import SemesterType
from rps_editor.schemas.rps import RPSFormData

TOGGLE_FIELDS = frozenset({"metode_pembelajaran", "media_pembelajaran"})


def semester_label(form: RPSFormData) -> str:
    parity = "Ganjil" if form.semester_type == SemesterType.GANJIL else "Genap"
    return f"{parity} {form.tahun_ajaran}".strip()


class FormEditor(FieldCoercion):
    entry_type = RPSFormData
    enum_fields = {"semester_type": SemesterType}
    list_fields = TOGGLE_FIELDS
    locked_fields = frozenset()

    def __init__(self, state: EditorState) -> None:
        self.state = state

    def update(self, field: str, value: Any) -> None:
        coerced = self.coerce(field, value)
        if self.state.read_only:
            return
        # the course is fixed once the RPS exists
        if field == "mata_kuliah_id" and self.state.rps_id:
            return
        self.state.set_form(self.state.form.model_copy(update={field: coerced}))

    def toggle(self, field: str, item: str) -> None:
        if field not in TOGGLE_FIELDS:
            raise UnknownFieldError(f"RPSFormData has no list field {field!r}")
        if self.state.read_only:
            return
        current = list(getattr(self.state.form, field))
        if item in current:
            current = [value for value in current if value != item]
        else:
            current.append(item)
        self.state.set_form(self.state.form.model_copy(update={field: current}))

    def render_view(self) -> Dict[str, Any]:
        form = self.state.form
        view: Dict[str, Any] = {
            key: (value or PLACEHOLDER)
            for key, value in form.model_dump(mode="json").items()
            if key not in TOGGLE_FIELDS
        }
        view["semester"] = semester_label(form)
        view["metode_pembelajaran"] = list(form.metode_pembelajaran)
        view["media_pembelajaran"] = list(form.media_pembelajaran)
        return view
