"""OpenAICompatibleProvider — chat-completions backend (OpenAI, Gemini's OpenAI endpoint)."""
import logging
from typing import Optional

import httpx
from openai import (
    APIConnectionError,
    APIResponseValidationError,
    APIStatusError,
    AsyncOpenAI,
)

from src.answer.provider import AnswerProvider, vendor_error_message
from src.constants import ANSWER_PROMPT, MSG_REQUESTING_ANSWER
from src.errors import EmptyResponseError, HttpError, NetworkError

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider(AnswerProvider):
    """Sends the image as a ``data:`` URI ``image_url`` part."""

    name = "openai-compatible"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(api_key, model)
        self._base_url = base_url
        self._http_client = http_client

    async def answer(self, image_base64: str, mime_type: str) -> str:
        client = AsyncOpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            max_retries=0,
            http_client=self._http_client,
        )
        logger.info(MSG_REQUESTING_ANSWER, self._model, mime_type, len(image_base64))
        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": ANSWER_PROMPT},
                            {
                                "type": "image_url",
                                "image_url": {"url": f"data:{mime_type};base64,{image_base64}"},
                            },
                        ],
                    }
                ],
            )
        except APIStatusError as exc:
            raise HttpError(exc.status_code, vendor_error_message(exc)) from exc
        except APIConnectionError as exc:
            raise NetworkError(str(exc)) from exc
        except (APIResponseValidationError, ValueError) as exc:
            # 2xx whose body is not JSON or not the expected shape
            raise EmptyResponseError("The API returned an empty response.") from exc

        choices = getattr(response, "choices", None) or []
        match choices:
            case [first, *_] if getattr(first.message, "content", None):
                return first.message.content
            case _:
                raise EmptyResponseError("The API returned an empty response.")
