"""Service-layer errors, translated to HTTP status codes by the routers."""

from typing import Dict, List, Optional


class ServiceError(Exception):
    """Base class for service-layer errors."""


class SessionNotFoundError(ServiceError):
    """No editing session with that id (or it was purged)."""


class ReadOnlySessionError(ServiceError):
    """A mutation was attempted on a session opened in view mode."""


class ExternalApiError(ServiceError):
    """The curriculum API rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationFailedError(ServiceError):
    """The aggregate is not complete enough to be saved."""

    def __init__(self, errors: Dict[str, List[str]]) -> None:
        super().__init__("Validasi gagal")
        self.errors = errors
