"""AnswerProvider — abstract base for image question-answering backends."""
from abc import ABC, abstractmethod
from typing import Any

from src.errors import AuthConfigError


class AnswerProvider(ABC):
    name: str = "provider"

    def __init__(self, api_key: str, model: str) -> None:
        match api_key:
            case None | "":
                raise AuthConfigError(f"No API key configured for {self.name}")
            case _:
                pass
        self._api_key = api_key
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    @abstractmethod
    async def answer(self, image_base64: str, mime_type: str) -> str:
        """Send the image with the answer prompt and return the model's text verbatim.

        Raises HttpError, NetworkError or EmptyResponseError on failure.
        """
        ...


def vendor_error_message(exc: Any) -> str:
    """Vendor-reported message from an SDK status error, else the HTTP status line."""
    match getattr(exc, "body", None):
        case {"error": {"message": str() as message}} if message:
            return message
        case {"message": str() as message} if message:
            return message
        case _:
            response = exc.response
            return f"{response.status_code} {response.reason_phrase}".strip()
