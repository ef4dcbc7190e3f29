"""AnswerSession tests — single live result and stale-result suppression"""
import asyncio

import pytest
from unittest.mock import AsyncMock

from src.answer.provider import AnswerProvider
from src.capture.payload import ImagePayload
from src.errors import EmptyResponseError, HttpError, NetworkError
from src.session import AnswerSession, Failure, Pending, Success


class GatedProvider(AnswerProvider):
    """Provider whose replies are released by the test."""

    name = "gated"

    def __init__(self) -> None:
        super().__init__("key", "model")
        self.calls: list[tuple[str, str]] = []
        self.gate = asyncio.Event()
        self.reply = "answer"

    async def answer(self, image_base64: str, mime_type: str) -> str:
        self.calls.append((image_base64, mime_type))
        await self.gate.wait()
        return self.reply


def make_image(raw: bytes = b"img") -> ImagePayload:
    return ImagePayload.from_bytes(raw, "image/png")


def mock_provider(**kwargs) -> AnswerProvider:
    provider = AsyncMock(spec=AnswerProvider)
    provider.answer = AsyncMock(**kwargs)
    return provider


async def test_no_image_makes_no_request():
    provider = mock_provider(return_value="x")
    session = AnswerSession(provider)

    assert await session.request_answer() is None
    provider.answer.assert_not_called()


async def test_success_passes_base64_and_mime():
    provider = mock_provider(return_value="A solid blue square.")
    session = AnswerSession(provider)
    image = make_image()
    session.select_image(image)

    result = await session.request_answer()

    assert result == Success("A solid blue square.")
    assert session.result == result
    provider.answer.assert_awaited_once_with(image.base64_data, "image/png")


@pytest.mark.parametrize(
    "error, expected",
    [
        (HttpError(401, "bad key"), "Failed to get answer: HTTP 401: bad key"),
        (EmptyResponseError("The API returned an empty response."),
         "Failed to get answer: The API returned an empty response."),
        (NetworkError("Connection error."), "Failed to get answer: Connection error."),
    ],
)
async def test_failures_become_messages(error, expected):
    session = AnswerSession(mock_provider(side_effect=error))
    session.select_image(make_image())

    assert await session.request_answer() == Failure(expected)


async def test_unexpected_error_becomes_generic_message():
    session = AnswerSession(mock_provider(side_effect=KeyError("oops")))
    session.select_image(make_image())

    result = await session.request_answer()

    assert result == Failure("Failed to get answer: An unknown error occurred.")


async def test_second_request_while_pending_does_not_call_again():
    provider = GatedProvider()
    session = AnswerSession(provider)
    session.select_image(make_image())

    first = asyncio.create_task(session.request_answer())
    await asyncio.sleep(0)
    second = await session.request_answer()

    assert isinstance(second, Pending)
    provider.gate.set()
    assert await first == Success("answer")
    assert len(provider.calls) == 1


async def test_reset_while_pending_discards_result():
    provider = GatedProvider()
    session = AnswerSession(provider)
    session.select_image(make_image())

    task = asyncio.create_task(session.request_answer())
    await asyncio.sleep(0)
    session.reset()
    provider.gate.set()

    assert await task is None
    assert session.result is None
    assert session.image is None


async def test_new_image_while_pending_discards_old_result():
    provider = GatedProvider()
    session = AnswerSession(provider)
    session.select_image(make_image(b"old"))

    old = asyncio.create_task(session.request_answer())
    await asyncio.sleep(0)
    session.select_image(make_image(b"new"))
    provider.gate.set()

    assert await old is None
    assert session.result is None

    provider.reply = "fresh"
    assert await session.request_answer() == Success("fresh")
    assert provider.calls[-1][0] == make_image(b"new").base64_data


async def test_select_image_clears_previous_result():
    session = AnswerSession(mock_provider(return_value="x"))
    session.select_image(make_image())
    await session.request_answer()

    session.select_image(make_image(b"other"))

    assert session.result is None


async def test_cancelled_request_clears_pending():
    provider = GatedProvider()
    session = AnswerSession(provider)
    session.select_image(make_image())

    task = asyncio.create_task(session.request_answer())
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert session.result is None
