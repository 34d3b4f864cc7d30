"""Client for the external curriculum REST API.

Every response is wrapped as ``{"success": bool, "message": str, "data": ...}``.
Failures surface as ``ExternalApiError`` carrying the most user-friendly
message the body offers.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from rps_editor.config import Settings, get_settings
from rps_editor.services.errors import ExternalApiError
from rps_editor.services.mapping import unwrap

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Terjadi kesalahan pada server"
UNREACHABLE_ERROR = "Tidak dapat terhubung ke server"


def extract_error_message(body: Any, fallback: str = GENERIC_ERROR) -> str:
    """Pick ``message``, then ``error``, then ``detail``, then the flattened ``errors`` map."""

    if not isinstance(body, dict):
        return fallback
    for key in ("message", "error", "detail"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    errors = body.get("errors")
    if isinstance(errors, dict):
        messages: List[str] = []
        for field_messages in errors.values():
            if isinstance(field_messages, list):
                messages.extend(str(message) for message in field_messages)
            elif field_messages:
                messages.append(str(field_messages))
        if messages:
            return ", ".join(messages)
    return fallback


class RPSApiClient:
    """Thin synchronous wrapper over the RPS and CPL endpoints."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RPSApiClient":
        settings = settings or get_settings()
        return cls(
            settings.api_base_url,
            token=settings.api_token,
            timeout=settings.api_timeout_seconds,
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = self._client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ExternalApiError(UNREACHABLE_ERROR) from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error or (isinstance(body, dict) and body.get("success") is False):
            message = extract_error_message(body)
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, message)
            raise ExternalApiError(message, status_code=response.status_code)
        return unwrap(body)

    def get_rps(self, rps_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/rps/{rps_id}")

    def create_rps(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/rps", json=payload)

    def update_rps(self, rps_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/rps/{rps_id}", json=payload)

    def list_active_cpl(self) -> List[Dict[str, Any]]:
        data = self._request("GET", "/cpl/active")
        if isinstance(data, dict):
            # paginated shape
            data = data.get("data") or []
        return list(data or [])

    def create_cpl(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/cpl", json=payload)

    def update_cpl(self, cpl_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/cpl/{cpl_id}", json=payload)
