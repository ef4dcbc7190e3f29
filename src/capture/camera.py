"""CameraSession — owns one live camera device and the state bound to it.

The session is the only holder of the device handle. Every operation that
gives the device up (close, capture, switch, context-manager exit) goes
through ``_release`` so no path leaves a handle open. Open and close are
serialized by a lock, so a new device is only acquired after the previous
one has been released. A close that lands while an open is still acquiring
wins: the late handle is released instead of stored.
"""
import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Optional

import cv2
import numpy as np

from src.capture.device import CameraBackend, CameraDevice, CameraHandle, ZoomCapability
from src.capture.payload import ImagePayload
from src.constants import (
    FOCUS_INDICATOR_SECONDS,
    FOCUS_RING_COLOR,
    FOCUS_RING_RADIUS,
    FOCUS_RING_THICKNESS,
    JPEG_EXTENSION,
    JPEG_MIME,
    MSG_CAMERA_ENCODE_FAILED,
    MSG_CAMERA_NOT_OPEN,
    MSG_CAMERA_OPEN_ABANDONED,
    MSG_CAMERA_OPENED,
    MSG_CAMERA_RELEASED,
    MSG_CAMERA_SWITCH_NOOP,
)
from src.errors import PermissionOrHardwareError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FocusIndicator:
    x: float
    y: float
    visible: bool


def encode_jpeg(frame: np.ndarray) -> ImagePayload:
    ok, buffer = cv2.imencode(JPEG_EXTENSION, frame)
    match ok:
        case False:
            raise PermissionOrHardwareError(MSG_CAMERA_ENCODE_FAILED)
        case _:
            return ImagePayload.from_bytes(buffer.tobytes(), JPEG_MIME)


class CameraSession:

    def __init__(
        self,
        backend: CameraBackend,
        focus_delay: float = FOCUS_INDICATOR_SECONDS,
    ) -> None:
        self._backend = backend
        self._focus_delay = focus_delay
        self._lock = asyncio.Lock()
        self._handle: Optional[CameraHandle] = None
        self._devices: list[CameraDevice] = []
        self._zoom: Optional[float] = None
        self._zoom_capability: Optional[ZoomCapability] = None
        self._focus: Optional[FocusIndicator] = None
        self._focus_timer: Optional[asyncio.TimerHandle] = None
        self._closes = 0

    async def __aenter__(self) -> "CameraSession":
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    # ── state ─────────────────────────────────────────────────────────────────

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    @property
    def active_device_id(self) -> Optional[str]:
        return self._handle.device_id if self._handle else None

    @property
    def active_device(self) -> Optional[CameraDevice]:
        active = self.active_device_id
        return next((d for d in self._devices if d.device_id == active), None)

    @property
    def devices(self) -> list[CameraDevice]:
        return list(self._devices)

    @property
    def can_switch(self) -> bool:
        return self.is_open and len(self._devices) > 1

    @property
    def zoom(self) -> Optional[float]:
        return self._zoom

    @property
    def zoom_capability(self) -> Optional[ZoomCapability]:
        return self._zoom_capability

    @property
    def focus_indicator(self) -> Optional[FocusIndicator]:
        return self._focus

    # ── device lifecycle ──────────────────────────────────────────────────────

    async def open(self, device_id: Optional[str] = None) -> None:
        """Acquire ``device_id`` (default device when None), releasing any current one first."""
        closes = self._closes
        async with self._lock:
            self._release()
            handle = await asyncio.to_thread(self._backend.open, device_id)
            try:
                devices = await asyncio.to_thread(self._backend.list_devices)
                capability = handle.zoom_capability()
                current_zoom = handle.zoom() if capability else None
            except BaseException:
                handle.release()
                raise
            if closes != self._closes:
                handle.release()
                logger.info(MSG_CAMERA_OPEN_ABANDONED, handle.device_id)
                return
            self._handle = handle
            self._devices = devices
            self._zoom_capability = capability
            match (capability, current_zoom):
                case (None, _):
                    self._zoom = None
                case (cap, None):
                    self._zoom = cap.min
                case (cap, value):
                    self._zoom = cap.clamp(value)
            logger.info(MSG_CAMERA_OPENED, handle.device_id, len(devices))

    async def switch_device(self) -> bool:
        """Move to the next enumerated device. No-op (False) with fewer than two."""
        match self.can_switch:
            case False:
                logger.debug(MSG_CAMERA_SWITCH_NOOP, len(self._devices))
                return False
            case True:
                pass
        ids = [d.device_id for d in self._devices]
        current = self.active_device_id
        index = ids.index(current) if current in ids else -1
        await self.open(ids[(index + 1) % len(ids)])
        return True

    def close(self) -> None:
        self._closes += 1
        self._release()
        self._cancel_focus_timer()
        self._focus = None
        self._devices = []

    def _release(self) -> None:
        match self._handle:
            case None:
                pass
            case handle:
                self._handle = None
                self._zoom = None
                self._zoom_capability = None
                handle.release()
                logger.info(MSG_CAMERA_RELEASED, handle.device_id)

    def _require_handle(self) -> CameraHandle:
        match self._handle:
            case None:
                raise PermissionOrHardwareError(MSG_CAMERA_NOT_OPEN)
            case handle:
                return handle

    # ── controls ──────────────────────────────────────────────────────────────

    def set_zoom(self, value: float) -> Optional[float]:
        """Apply zoom to the live device; returns the applied value, None if unsupported."""
        handle = self._require_handle()
        match self._zoom_capability:
            case None:
                return None
            case capability:
                applied = capability.clamp(value)
                handle.apply_zoom(applied)
                self._zoom = applied
                return applied

    def tap_focus(self, x: float, y: float) -> FocusIndicator:
        """Show the focus ring at (x, y); it hides itself after the focus delay."""
        self._cancel_focus_timer()
        self._focus = FocusIndicator(x=x, y=y, visible=True)
        loop = asyncio.get_running_loop()
        self._focus_timer = loop.call_later(self._focus_delay, self._hide_focus)
        return self._focus

    def _hide_focus(self) -> None:
        self._focus_timer = None
        match self._focus:
            case None:
                pass
            case focus:
                self._focus = replace(focus, visible=False)

    def _cancel_focus_timer(self) -> None:
        match self._focus_timer:
            case None:
                pass
            case timer:
                timer.cancel()
                self._focus_timer = None

    # ── frames ────────────────────────────────────────────────────────────────

    def preview(self) -> ImagePayload:
        """Current frame with the focus ring drawn; the device stays open."""
        frame = self._require_handle().read_frame()
        match self._focus:
            case FocusIndicator(x=x, y=y, visible=True):
                frame = frame.copy()
                cv2.circle(
                    frame,
                    (int(x), int(y)),
                    FOCUS_RING_RADIUS,
                    FOCUS_RING_COLOR,
                    FOCUS_RING_THICKNESS,
                )
            case _:
                pass
        return encode_jpeg(frame)

    def capture(self) -> ImagePayload:
        """Still frame at native resolution as JPEG. The device is released afterwards."""
        handle = self._require_handle()
        try:
            return encode_jpeg(handle.read_frame())
        finally:
            self.close()
