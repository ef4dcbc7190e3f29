"""TelegramClient tests"""
import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from telegram.constants import ChatAction

from src.config import Config
from src.constants import JPEG_MIME, MSG_READ_FAILED
from src.orchestrator import Orchestrator, Reply
from src.telegram.client import TelegramClient, normalize_chat_id, split_message
from src.telegram.typing import chat_action


def make_config(*, token: str = "test-token", chat_id: str = "123456789") -> Config:
    return Config(
        telegram_bot_token=token,
        allowed_chat_id=chat_id,
        log_level="INFO",
        answer_provider="gemini",
        answer_api_key="key",
        answer_model="gemini-2.5-flash",
        answer_base_url=None,
        camera_max_devices=4,
        camera_zoom_range=(1.0, 5.0, 0.1),
    )


def make_client(chat_id: str = "123456789") -> tuple[TelegramClient, MagicMock]:
    orchestrator = MagicMock(spec=Orchestrator)
    return TelegramClient(make_config(chat_id=chat_id), orchestrator), orchestrator


def make_update(*, chat_id: int) -> MagicMock:
    """Build a minimal mock of a python-telegram-bot Update."""
    update = MagicMock()
    update.effective_chat.id = chat_id
    return update


def make_context(args=None) -> MagicMock:
    context = MagicMock()
    context.args = args or []
    context.bot = AsyncMock()
    return context


# ── helpers ───────────────────────────────────────────────────────────────────


def test_normalize_chat_id():
    assert normalize_chat_id("-100123") == "100123"


def test_allowed_chat_id_passes_filter():
    client, _ = make_client(chat_id="123456789")
    assert client._is_allowed(make_update(chat_id=123456789))


def test_blocked_chat_id_fails_filter():
    client, _ = make_client(chat_id="123456789")
    assert not client._is_allowed(make_update(chat_id=999999999))


def test_missing_chat_fails_filter():
    client, _ = make_client()
    update = MagicMock()
    update.effective_chat = None
    assert not client._is_allowed(update)


def test_split_message_short_text_is_single_chunk():
    assert split_message("hello") == ["hello"]


def test_split_message_prefers_line_breaks():
    text = "a" * 6 + "\n" + "b" * 6
    assert split_message(text, limit=10) == ["aaaaaa", "bbbbbb"]


def test_split_message_hard_cut_without_newline():
    assert split_message("x" * 25, limit=10) == ["x" * 10, "x" * 10, "x" * 5]


# ── send_reply ────────────────────────────────────────────────────────────────


async def test_send_reply_before_run_fails():
    client, _ = make_client()
    assert await client.send_reply("1", Reply("hi")) is False


async def test_send_reply_text_and_photo():
    client, _ = make_client()
    client._app = MagicMock()
    client._app.bot = AsyncMock()

    assert await client.send_reply("42", Reply("hi")) is True
    client._app.bot.send_message.assert_awaited_once_with(chat_id=42, text="hi")

    assert await client.send_reply("42", Reply("look", photo=b"jpeg")) is True
    client._app.bot.send_photo.assert_awaited_once_with(chat_id=42, photo=b"jpeg", caption="look")


async def test_send_reply_swallows_transport_error():
    client, _ = make_client()
    client._app = MagicMock()
    client._app.bot = AsyncMock()
    client._app.bot.send_message.side_effect = RuntimeError("network")

    assert await client.send_reply("42", Reply("hi")) is False


# ── command handlers ──────────────────────────────────────────────────────────


async def test_command_handler_passes_args_and_sends_reply():
    client, _ = make_client()
    callback = MagicMock(return_value=Reply("Zoom set to 2.00."))

    with patch.object(client, "send_reply", new_callable=AsyncMock, return_value=True) as mock_send:
        handler = client._make_command_handler(callback)
        await handler(make_update(chat_id=123456789), make_context(["2"]))

    callback.assert_called_once_with(["2"])
    mock_send.assert_awaited_once_with("123456789", Reply("Zoom set to 2.00."))


async def test_command_handler_awaits_async_callback_with_chat_action():
    client, _ = make_client()
    calls = []

    async def callback(args):
        calls.append(args)
        await asyncio.sleep(0)
        return Reply("B")

    context = make_context()

    with patch.object(client, "send_reply", new_callable=AsyncMock, return_value=True) as mock_send:
        handler = client._make_command_handler(callback, ChatAction.TYPING)
        await handler(make_update(chat_id=123456789), context)

    assert calls == [[]]
    mock_send.assert_awaited_once_with("123456789", Reply("B"))
    context.bot.send_chat_action.assert_awaited_with(chat_id=123456789, action=ChatAction.TYPING)


async def test_command_handler_sends_nothing_for_stale_answer():
    client, _ = make_client()
    callback = AsyncMock(return_value=None)

    with patch.object(client, "send_reply", new_callable=AsyncMock) as mock_send:
        handler = client._make_command_handler(callback)
        await handler(make_update(chat_id=123456789), make_context())

    mock_send.assert_not_called()


async def test_command_handler_ignores_blocked_chat():
    client, _ = make_client()
    callback = MagicMock()

    with patch.object(client, "send_reply", new_callable=AsyncMock) as mock_send:
        handler = client._make_command_handler(callback)
        await handler(make_update(chat_id=5), make_context())

    callback.assert_not_called()
    mock_send.assert_not_called()


async def test_answer_command_is_wired_to_orchestrator():
    client, orchestrator = make_client()
    orchestrator.answer = AsyncMock(return_value=Reply("The answer is C."))
    commands = {name: (callback, action) for name, callback, action in client._commands()}

    callback, action = commands["answer"]
    reply = await callback([])

    assert reply == Reply("The answer is C.")
    assert action == ChatAction.TYPING
    assert set(commands) >= {"answer", "reset", "camera", "switch", "zoom", "focus", "snap", "cancel"}


# ── uploads ───────────────────────────────────────────────────────────────────


def make_photo_update(payload: bytes) -> MagicMock:
    update = make_update(chat_id=123456789)
    tg_file = AsyncMock()
    tg_file.download_as_bytearray = AsyncMock(return_value=bytearray(payload))
    small, large = MagicMock(), MagicMock()
    large.get_file = AsyncMock(return_value=tg_file)
    update.message.photo = (small, large)
    return update


async def test_photo_handler_uses_largest_size():
    client, orchestrator = make_client()
    orchestrator.accept_upload.return_value = Reply("Image received")
    update = make_photo_update(b"jpeg-bytes")

    with patch.object(client, "send_reply", new_callable=AsyncMock, return_value=True) as mock_send:
        await client._make_photo_handler()(update, make_context())

    orchestrator.accept_upload.assert_called_once_with(b"jpeg-bytes", JPEG_MIME)
    mock_send.assert_awaited_once_with("123456789", Reply("Image received"))
    update.message.photo[0].get_file.assert_not_called()


async def test_photo_download_failure_replies_read_failed():
    client, orchestrator = make_client()
    update = make_photo_update(b"")
    update.message.photo[-1].get_file = AsyncMock(side_effect=RuntimeError("timeout"))

    with patch.object(client, "send_reply", new_callable=AsyncMock, return_value=True) as mock_send:
        await client._make_photo_handler()(update, make_context())

    orchestrator.accept_upload.assert_not_called()
    mock_send.assert_awaited_once_with("123456789", Reply(MSG_READ_FAILED))


async def test_document_handler_passes_declared_mime():
    client, orchestrator = make_client()
    orchestrator.accept_upload.return_value = Reply("Image received")
    update = make_update(chat_id=123456789)
    tg_file = AsyncMock()
    tg_file.download_as_bytearray = AsyncMock(return_value=bytearray(b"png-bytes"))
    update.message.document.get_file = AsyncMock(return_value=tg_file)
    update.message.document.mime_type = "image/png"

    with patch.object(client, "send_reply", new_callable=AsyncMock, return_value=True):
        await client._make_document_handler()(update, make_context())

    orchestrator.accept_upload.assert_called_once_with(b"png-bytes", "image/png")


# ── chat action ───────────────────────────────────────────────────────────────


async def test_chat_action_sends_until_block_exits():
    bot = AsyncMock()

    async with chat_action(bot, "77", ChatAction.UPLOAD_PHOTO):
        await asyncio.sleep(0)

    bot.send_chat_action.assert_awaited_with(chat_id=77, action=ChatAction.UPLOAD_PHOTO)


async def test_chat_action_survives_send_failure():
    bot = AsyncMock()
    bot.send_chat_action.side_effect = RuntimeError("flood")

    async with chat_action(bot, "77"):
        await asyncio.sleep(0)
