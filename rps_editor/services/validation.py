"""Form validation.

Two independent concerns live here:

- CPL create/edit: pure field predicates returning a per-field error map.
- RPS step validation: the checks run before the user may leave a tab, and
  the full-form check run before saving. Weight totals are reported by the
  editor but never validated.
"""

import re
from typing import Dict, List, Optional, Union

from rps_editor.editor.state import EditorState
from rps_editor.models.enums import TAB_ORDER, RPSTab
from rps_editor.schemas.cpl import CPLForm

CPL_CODE_PATTERN = re.compile(r"^[A-Za-z0-9-]+$")
# only spaces and hyphens, e.g. "----" or "- - -"
FILLER_PATTERN = re.compile(r"^[\s-]+$")

CPL_MIN_LENGTH = {"kode": 2, "nama": 3, "deskripsi": 10}
CPL_LABELS = {"kode": "Kode CPL", "nama": "Nama CPL", "deskripsi": "Deskripsi CPL"}


def _check_text(field: str, value: str) -> Optional[str]:
    label = CPL_LABELS[field]
    text = (value or "").strip()
    if not text:
        return f"{label} wajib diisi"
    if FILLER_PATTERN.match(text):
        return f"{label} tidak valid"
    if len(text) < CPL_MIN_LENGTH[field]:
        return f"{label} minimal {CPL_MIN_LENGTH[field]} karakter"
    return None


def validate_cpl_form(form: Union[CPLForm, Dict[str, str]]) -> Dict[str, str]:
    """Per-field error map for a CPL form; empty when the form may be submitted."""

    if not isinstance(form, CPLForm):
        form = CPLForm.model_validate(form)

    errors: Dict[str, str] = {}
    for field in ("kode", "nama", "deskripsi"):
        message = _check_text(field, getattr(form, field))
        if message:
            errors[field] = message

    if "kode" not in errors and not CPL_CODE_PATTERN.match(form.kode.strip()):
        errors["kode"] = "Kode CPL hanya boleh berisi huruf, angka, dan tanda hubung"
    return errors


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


def _info_errors(state: EditorState) -> List[str]:
    form = state.form
    errors = []
    if not form.mata_kuliah_id:
        errors.append("Pilih mata kuliah")
    if _blank(form.tahun_ajaran):
        errors.append("Tahun ajaran wajib diisi")
    if _blank(form.deskripsi_mk):
        errors.append("Deskripsi mata kuliah wajib diisi")
    return errors


def _cpmk_errors(state: EditorState) -> List[str]:
    if not state.cpmk:
        return ["Minimal harus ada 1 CPMK"]
    undescribed = [cpmk for cpmk in state.cpmk if _blank(cpmk.deskripsi)]
    if undescribed:
        return [f"{len(undescribed)} CPMK belum memiliki deskripsi"]
    return []


def _rencana_errors(state: EditorState) -> List[str]:
    if not any(not _blank(entry.topik) for entry in state.rencana_pembelajaran):
        return ["Minimal harus ada 1 rencana pembelajaran dengan topik"]
    return []


def _analisis_errors(state: EditorState) -> List[str]:
    reversed_ranges = [
        entry
        for entry in state.analisis_ketercapaian
        if entry.minggu_selesai is not None and entry.minggu_mulai > entry.minggu_selesai
    ]
    if reversed_ranges:
        return [f"{len(reversed_ranges)} analisis memiliki minggu mulai setelah minggu selesai"]
    return []


def _pustaka_errors(state: EditorState) -> List[str]:
    incomplete = [
        entry for entry in state.bahan_bacaan if not _blank(entry.judul) and _blank(entry.penulis)
    ]
    if incomplete:
        return [f"{len(incomplete)} bahan bacaan belum lengkap (perlu penulis)"]
    return []


STEP_CHECKS = {
    RPSTab.INFO: _info_errors,
    RPSTab.CPMK: _cpmk_errors,
    RPSTab.RENCANA: _rencana_errors,
    RPSTab.ANALISIS: _analisis_errors,
    RPSTab.PUSTAKA: _pustaka_errors,
}


def validate_step(state: EditorState, tab: RPSTab) -> List[str]:
    """Messages blocking navigation away from ``tab``.

    Sub-CPMK and task tabs are optional and always pass.
    """

    check = STEP_CHECKS.get(RPSTab(tab))
    return check(state) if check else []


def validate_full(state: EditorState) -> Dict[str, List[str]]:
    """Every failing step keyed by tab, plus the CPMK to CPL mapping rule."""

    errors: Dict[str, List[str]] = {}
    for tab in TAB_ORDER:
        messages = validate_step(state, tab)
        if tab == RPSTab.CPMK and state.cpmk and any(not cpmk.cpl_ids for cpmk in state.cpmk):
            messages = [*messages, "Semua CPMK harus dipetakan ke minimal 1 CPL"]
        if messages:
            errors[tab.value] = messages
    return errors


def validate_through(state: EditorState, tab: RPSTab) -> Dict[str, List[str]]:
    """Step errors for every tab up to and including ``tab`` (draft saves)."""

    last = TAB_ORDER.index(RPSTab(tab))
    errors: Dict[str, List[str]] = {}
    for step in TAB_ORDER[: last + 1]:
        messages = validate_step(state, step)
        if messages:
            errors[step.value] = messages
    return errors


def next_tab(tab: RPSTab) -> Optional[RPSTab]:
    position = TAB_ORDER.index(RPSTab(tab))
    return TAB_ORDER[position + 1] if position + 1 < len(TAB_ORDER) else None


def previous_tab(tab: RPSTab) -> Optional[RPSTab]:
    position = TAB_ORDER.index(RPSTab(tab))
    return TAB_ORDER[position - 1] if position > 0 else None
