"""Orchestrator — transport-agnostic command logic; every method returns a Reply."""
import logging
import math
from dataclasses import dataclass
from typing import Optional

from src.capture.camera import CameraSession
from src.capture.file_input import read_image_bytes
from src.constants import (
    MSG_ANSWER_IN_PROGRESS,
    MSG_CAMERA_CLOSED,
    MSG_CAMERA_NOT_OPEN,
    MSG_CAMERA_READY,
    MSG_CAMERA_SINGLE,
    MSG_CAMERA_SWITCHED,
    MSG_CAMERA_ZOOM_HINT,
    MSG_FOCUS_SET,
    MSG_FOCUS_USAGE,
    MSG_IMAGE_CAPTURED,
    MSG_IMAGE_READY,
    MSG_NO_IMAGE,
    MSG_READ_FAILED,
    MSG_RESET,
    MSG_STATUS,
    MSG_ZOOM_SET,
    MSG_ZOOM_UNSUPPORTED,
    MSG_ZOOM_USAGE,
)
from src.errors import PermissionOrHardwareError, ReadError
from src.session import AnswerSession, Failure, Pending, Success

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reply:
    text: str
    photo: Optional[bytes] = None


# ── pure helpers (module-level so tests can import them directly) ──────────────


def parse_zoom_args(args: list[str]) -> float | None:
    match args:
        case [raw]:
            try:
                value = float(raw)
            except ValueError:
                return None
            return value if math.isfinite(value) else None
        case _:
            return None


def parse_focus_args(args: list[str]) -> tuple[float, float] | None:
    match args:
        case [raw_x, raw_y]:
            try:
                x, y = float(raw_x), float(raw_y)
            except ValueError:
                return None
            return (x, y) if math.isfinite(x) and math.isfinite(y) else None
        case _:
            return None


# ── orchestrator ──────────────────────────────────────────────────────────────


class Orchestrator:

    def __init__(
        self,
        answers: AnswerSession,
        camera: CameraSession,
        provider_name: str,
        model: str,
    ) -> None:
        self._answers = answers
        self._camera = camera
        self._provider_name = provider_name
        self._model = model

    # ── image input ───────────────────────────────────────────────────────────

    def accept_upload(self, raw: bytes, declared_mime: str | None = None) -> Reply:
        try:
            payload = read_image_bytes(raw, declared_mime)
        except ReadError as exc:
            logger.warning("Error reading upload: %s", exc)
            return Reply(MSG_READ_FAILED)
        self._camera.close()
        self._answers.select_image(payload)
        return Reply(MSG_IMAGE_READY)

    # ── answers ───────────────────────────────────────────────────────────────

    async def answer(self) -> Reply | None:
        """Reply for the current image, or None when the result went stale."""
        match self._answers.image:
            case None:
                return Reply(MSG_NO_IMAGE)
            case _:
                pass
        match await self._answers.request_answer():
            case None:
                return None
            case Pending():
                return Reply(MSG_ANSWER_IN_PROGRESS)
            case Success(text=text):
                return Reply(text)
            case Failure(message=message):
                return Reply(message)

    def reset(self) -> Reply:
        self._camera.close()
        self._answers.reset()
        return Reply(MSG_RESET)

    # ── camera ────────────────────────────────────────────────────────────────

    def _camera_reply(self, text: str) -> Reply:
        try:
            preview = self._camera.preview()
        except PermissionOrHardwareError as exc:
            self._camera.close()
            return Reply(str(exc))
        return Reply(text, photo=preview.to_bytes())

    def _device_label(self) -> str:
        device = self._camera.active_device
        return device.label if device else str(self._camera.active_device_id)

    async def open_camera(self) -> Reply:
        try:
            await self._camera.open()
        except PermissionOrHardwareError as exc:
            return Reply(str(exc))
        if not self._camera.is_open:
            return Reply(MSG_CAMERA_CLOSED)
        zoom_hint = ""
        match (self._camera.zoom_capability, self._camera.zoom):
            case (None, _):
                pass
            case (cap, value):
                zoom_hint = MSG_CAMERA_ZOOM_HINT % (value, cap.min, cap.max, cap.step)
        text = MSG_CAMERA_READY % (self._device_label(), len(self._camera.devices), zoom_hint)
        return self._camera_reply(text)

    def preview(self) -> Reply:
        match self._camera.is_open:
            case False:
                return Reply(MSG_CAMERA_NOT_OPEN)
            case True:
                return self._camera_reply(self._device_label())

    async def switch_camera(self) -> Reply:
        try:
            switched = await self._camera.switch_device()
        except PermissionOrHardwareError as exc:
            return Reply(str(exc))
        match switched:
            case False:
                return Reply(MSG_CAMERA_SINGLE if self._camera.is_open else MSG_CAMERA_NOT_OPEN)
            case True if not self._camera.is_open:
                return Reply(MSG_CAMERA_CLOSED)
            case True:
                return self._camera_reply(MSG_CAMERA_SWITCHED % self._device_label())

    def set_zoom(self, args: list[str]) -> Reply:
        value = parse_zoom_args(args)
        match (value, self._camera.is_open):
            case (None, _):
                return Reply(MSG_ZOOM_USAGE)
            case (_, False):
                return Reply(MSG_CAMERA_NOT_OPEN)
            case _:
                pass
        match self._camera.set_zoom(value):
            case None:
                return Reply(MSG_ZOOM_UNSUPPORTED)
            case applied:
                return self._camera_reply(MSG_ZOOM_SET % applied)

    def focus(self, args: list[str]) -> Reply:
        coords = parse_focus_args(args)
        match (coords, self._camera.is_open):
            case (None, _):
                return Reply(MSG_FOCUS_USAGE)
            case (_, False):
                return Reply(MSG_CAMERA_NOT_OPEN)
            case ((x, y), True):
                self._camera.tap_focus(x, y)
                return self._camera_reply(MSG_FOCUS_SET % (x, y))

    def capture(self) -> Reply:
        try:
            payload = self._camera.capture()
        except PermissionOrHardwareError as exc:
            return Reply(str(exc))
        self._answers.select_image(payload)
        return Reply(MSG_IMAGE_CAPTURED, photo=payload.to_bytes())

    def cancel_camera(self) -> Reply:
        self._camera.close()
        return Reply(MSG_CAMERA_CLOSED)

    def shutdown(self) -> None:
        self._camera.close()

    # ── status ────────────────────────────────────────────────────────────────

    def status(self) -> str:
        image = self._answers.image
        match self._answers.result:
            case None:
                answer = "none"
            case Pending():
                answer = "pending"
            case Success():
                answer = "ready"
            case Failure():
                answer = "failed"
        camera = (
            f"open ({self._device_label()}, {len(self._camera.devices)} device(s))"
            if self._camera.is_open
            else "closed"
        )
        return MSG_STATUS % (
            self._provider_name,
            self._model,
            image.mime_type if image else "none",
            answer,
            camera,
        )
