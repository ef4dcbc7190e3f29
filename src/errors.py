"""Error taxonomy — every failure a caller can see is one of these."""


class SnapAnswerError(Exception):
    """Base exception for snap-answer."""


class ReadError(SnapAnswerError):
    """Raised when an uploaded file cannot be read or decoded as an image."""


class PermissionOrHardwareError(SnapAnswerError):
    """Raised when the camera is denied, busy, missing or stops delivering frames."""


class AuthConfigError(SnapAnswerError):
    """Raised when no vendor credential is configured. Fatal at startup."""


class HttpError(SnapAnswerError):
    """Raised when the vendor answers with a non-2xx status."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"HTTP {status}: {message}")
        self.status = status
        self.message = message


class EmptyResponseError(SnapAnswerError):
    """Raised when a successful vendor response carries no answer text."""


class NetworkError(SnapAnswerError):
    """Raised when the vendor endpoint cannot be reached at all."""
