"""AnswerSession — the current image and the one live AnswerResult."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union

from src.answer.provider import AnswerProvider
from src.capture.payload import ImagePayload
from src.constants import MSG_ANSWER_FAILED, MSG_STALE_RESULT, MSG_UNEXPECTED_ERROR
from src.errors import SnapAnswerError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pending:
    token: int


@dataclass(frozen=True)
class Success:
    text: str


@dataclass(frozen=True)
class Failure:
    message: str


AnswerResult = Union[Pending, Success, Failure]


class AnswerSession:
    """Tracks which image a request was issued for.

    Every new image or reset bumps ``token``. A provider reply is applied only
    while its token is still current; otherwise it is dropped and
    ``request_answer`` returns None.
    """

    def __init__(self, provider: AnswerProvider) -> None:
        self._provider = provider
        self._image: Optional[ImagePayload] = None
        self._result: Optional[AnswerResult] = None
        self._token = 0

    @property
    def image(self) -> Optional[ImagePayload]:
        return self._image

    @property
    def result(self) -> Optional[AnswerResult]:
        return self._result

    @property
    def token(self) -> int:
        return self._token

    def select_image(self, payload: ImagePayload) -> None:
        self._token += 1
        self._image = payload
        self._result = None

    def reset(self) -> None:
        self._token += 1
        self._image = None
        self._result = None

    async def request_answer(self) -> Optional[AnswerResult]:
        match (self._image, self._result):
            case (None, _):
                return None
            case (_, Pending() as pending):
                return pending
            case (image, _):
                pass

        token = self._token
        self._result = Pending(token)
        try:
            text = await self._provider.answer(image.base64_data, image.mime_type)
            result: AnswerResult = Success(text)
        except asyncio.CancelledError:
            if token == self._token:
                self._result = None
            raise
        except SnapAnswerError as exc:
            logger.warning("Answer request failed: %s", exc)
            result = Failure(MSG_ANSWER_FAILED % exc)
        except Exception:
            logger.exception("Answer request failed")
            result = Failure(MSG_ANSWER_FAILED % MSG_UNEXPECTED_ERROR)

        match token == self._token:
            case False:
                logger.info(MSG_STALE_RESULT, token)
                return None
            case True:
                self._result = result
                return result
