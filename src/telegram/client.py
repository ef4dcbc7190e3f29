"""TelegramClient — event-driven transport via python-telegram-bot."""
import inspect
import logging
import time
from typing import Awaitable, Callable, Optional, Union

from telegram import Update
from telegram.constants import ChatAction
from telegram.ext import Application, CommandHandler, ContextTypes
from telegram.ext import MessageHandler as TGMessageHandler
from telegram.ext import filters

from src.config import Config
from src.constants import (
    CMD_ANSWER,
    CMD_CAMERA,
    CMD_CANCEL,
    CMD_FOCUS,
    CMD_HELP,
    CMD_PREVIEW,
    CMD_RESET,
    CMD_SNAP,
    CMD_STATUS,
    CMD_SWITCH,
    CMD_ZOOM,
    JPEG_MIME,
    MSG_BLOCKED_CHAT,
    MSG_HELP,
    MSG_READ_FAILED,
    MSG_SEND_FAIL,
    MSG_SEND_OK,
    TELEGRAM_MAX_MESSAGE,
)
from src.orchestrator import Orchestrator, Reply
from src.telegram.typing import chat_action

logger = logging.getLogger(__name__)

CommandCallback = Callable[[list[str]], Union[Optional[Reply], Awaitable[Optional[Reply]]]]


def normalize_chat_id(s: str) -> str:
    return "".join(c for c in s if c.isdigit())


def split_message(text: str, limit: int = TELEGRAM_MAX_MESSAGE) -> list[str]:
    """Cut text into Telegram-sized chunks, preferring line breaks."""
    chunks: list[str] = []
    rest = text
    while len(rest) > limit:
        cut = rest.rfind("\n", 0, limit)
        cut = cut if cut > 0 else limit
        chunks.append(rest[:cut])
        rest = rest[cut:].lstrip("\n")
    chunks.append(rest)
    return chunks


class TelegramClient:

    def __init__(self, config: Config, orchestrator: Orchestrator) -> None:
        self._token = config.telegram_bot_token
        self._allowed_chat_id = config.allowed_chat_id
        self._orchestrator = orchestrator
        self._app: Optional[Application] = None

    def run(self) -> None:
        self._app = (
            Application.builder()
            .token(self._token)
            .concurrent_updates(True)
            .post_shutdown(self._on_shutdown)
            .build()
        )
        for command, callback, action in self._commands():
            self._app.add_handler(
                CommandHandler(command, self._make_command_handler(callback, action))
            )
        self._app.add_handler(TGMessageHandler(filters.PHOTO, self._make_photo_handler()))
        self._app.add_handler(
            TGMessageHandler(filters.Document.IMAGE, self._make_document_handler())
        )
        self._app.run_polling()

    def _commands(self) -> list[tuple[str, CommandCallback, Optional[ChatAction]]]:
        o = self._orchestrator
        return [
            (CMD_ANSWER, lambda _: o.answer(), ChatAction.TYPING),
            (CMD_RESET, lambda _: o.reset(), None),
            (CMD_CAMERA, lambda _: o.open_camera(), ChatAction.UPLOAD_PHOTO),
            (CMD_PREVIEW, lambda _: o.preview(), ChatAction.UPLOAD_PHOTO),
            (CMD_SWITCH, lambda _: o.switch_camera(), ChatAction.UPLOAD_PHOTO),
            (CMD_ZOOM, o.set_zoom, ChatAction.UPLOAD_PHOTO),
            (CMD_FOCUS, o.focus, ChatAction.UPLOAD_PHOTO),
            (CMD_SNAP, lambda _: o.capture(), ChatAction.UPLOAD_PHOTO),
            (CMD_CANCEL, lambda _: o.cancel_camera(), None),
            (CMD_STATUS, lambda _: Reply(o.status()), None),
            (CMD_HELP, lambda _: Reply(MSG_HELP), None),
        ]

    async def _on_shutdown(self, _app: Application) -> None:
        self._orchestrator.shutdown()

    async def send_reply(self, to: str, reply: Reply) -> bool:
        match self._app:
            case None:
                logger.error("send_reply called before run()")
                return False
            case app:
                try:
                    match reply.photo:
                        case None:
                            for chunk in split_message(reply.text):
                                await app.bot.send_message(chat_id=int(to), text=chunk)
                        case photo:
                            await app.bot.send_photo(
                                chat_id=int(to), photo=photo, caption=reply.text
                            )
                    return True
                except Exception as exc:
                    logger.error("Telegram send failed: %s", exc)
                    return False

    # ── helpers (also used in tests) ─────────────────────────────────────────

    def _is_allowed(self, update: Update) -> bool:
        if update.effective_chat is None:
            return False
        incoming = normalize_chat_id(str(update.effective_chat.id))
        allowed = normalize_chat_id(self._allowed_chat_id)
        return incoming == allowed

    @staticmethod
    def _sender(update: Update) -> str:
        return str(update.effective_chat.id) if update.effective_chat else ""

    def _reject(self, update: Update) -> bool:
        match self._is_allowed(update):
            case False:
                chat_id = update.effective_chat.id if update.effective_chat else "?"
                logger.warning(MSG_BLOCKED_CHAT, chat_id)
                return True
            case True:
                return False

    async def _deliver(self, sender: str, reply: Optional[Reply], start: float) -> None:
        match reply:
            case None:
                return
            case _:
                pass
        success = await self.send_reply(sender, reply)
        elapsed = time.time() - start
        match success:
            case True:
                logger.info(MSG_SEND_OK, elapsed)
            case False:
                logger.error(MSG_SEND_FAIL, elapsed)

    # ── internal handler factory ──────────────────────────────────────────────

    def _make_command_handler(
        self, callback: CommandCallback, action: Optional[ChatAction] = None
    ) -> Callable:
        async def _run(args: list[str]) -> Optional[Reply]:
            result = callback(args)
            return await result if inspect.isawaitable(result) else result

        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            if self._reject(update):
                return
            start = time.time()
            sender = self._sender(update)
            args = list(context.args or [])
            match action:
                case None:
                    reply = await _run(args)
                case _:
                    async with chat_action(context.bot, sender, action):
                        reply = await _run(args)
            await self._deliver(sender, reply, start)

        return _handler

    def _make_photo_handler(self) -> Callable:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            if self._reject(update):
                return
            start = time.time()
            sender = self._sender(update)
            photos = update.message.photo if update.message else None
            match photos:
                case None | () | []:
                    return
                case _:
                    try:
                        tg_file = await photos[-1].get_file()
                        image_bytes = bytes(await tg_file.download_as_bytearray())
                    except Exception:
                        logger.exception("Photo download failed")
                        await self._deliver(sender, Reply(MSG_READ_FAILED), start)
                        return
            reply = self._orchestrator.accept_upload(image_bytes, JPEG_MIME)
            await self._deliver(sender, reply, start)

        return _handler

    def _make_document_handler(self) -> Callable:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            if self._reject(update):
                return
            start = time.time()
            sender = self._sender(update)
            document = update.message.document if update.message else None
            match document:
                case None:
                    return
                case doc:
                    try:
                        tg_file = await doc.get_file()
                        image_bytes = bytes(await tg_file.download_as_bytearray())
                    except Exception:
                        logger.exception("Document download failed")
                        await self._deliver(sender, Reply(MSG_READ_FAILED), start)
                        return
            reply = self._orchestrator.accept_upload(image_bytes, doc.mime_type)
            await self._deliver(sender, reply, start)

        return _handler
