"""ClaudeProvider — Anthropic Messages backend."""
import logging
from typing import Optional

import httpx
from anthropic import (
    APIConnectionError,
    APIResponseValidationError,
    APIStatusError,
    AsyncAnthropic,
)

from src.answer.provider import AnswerProvider, vendor_error_message
from src.constants import ANSWER_PROMPT, CLAUDE_MAX_TOKENS, MSG_REQUESTING_ANSWER
from src.errors import EmptyResponseError, HttpError, NetworkError

logger = logging.getLogger(__name__)


class ClaudeProvider(AnswerProvider):
    """Sends the image as an inline base64 ``source`` block."""

    name = "claude"

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
        client = AsyncAnthropic(
            api_key=self._api_key,
            base_url=self._base_url,
            max_retries=0,
            http_client=self._http_client,
        )
        logger.info(MSG_REQUESTING_ANSWER, self._model, mime_type, len(image_base64))
        try:
            message = await client.messages.create(
                model=self._model,
                max_tokens=CLAUDE_MAX_TOKENS,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": mime_type,
                                    "data": image_base64,
                                },
                            },
                            {"type": "text", "text": ANSWER_PROMPT},
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

        text = "".join(
            block.text
            for block in getattr(message, "content", None) or []
            if getattr(block, "type", None) == "text"
        )
        match text:
            case "":
                raise EmptyResponseError("The API returned an empty response.")
            case answer:
                return answer
