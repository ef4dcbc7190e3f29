"""OpenCVCameraBackend — cv2.VideoCapture devices addressed by index."""
import logging
from typing import Callable, Optional

import cv2
import numpy as np

from src.capture.device import CameraBackend, CameraDevice, CameraHandle, ZoomCapability
from src.constants import (
    CAMERA_LABEL,
    CAMERA_MAX_DEVICES,
    MSG_CAMERA_NO_FRAME,
    MSG_CAMERA_NOT_FOUND,
    MSG_CAMERA_UNAVAILABLE,
)
from src.errors import PermissionOrHardwareError

logger = logging.getLogger(__name__)


class OpenCVCameraHandle(CameraHandle):

    def __init__(
        self,
        capture: cv2.VideoCapture,
        index: int,
        zoom_range: tuple[float, float, float],
        on_release: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._capture = capture
        self._index = index
        self._zoom_range = zoom_range
        self._on_release = on_release

    @property
    def device_id(self) -> str:
        return str(self._index)

    def zoom_capability(self) -> Optional[ZoomCapability]:
        # Backends without zoom report 0 or -1 for the property.
        match self._capture.get(cv2.CAP_PROP_ZOOM):
            case value if value > 0:
                return ZoomCapability(*self._zoom_range)
            case _:
                return None

    def zoom(self) -> Optional[float]:
        match self._capture.get(cv2.CAP_PROP_ZOOM):
            case value if value > 0:
                return float(value)
            case _:
                return None

    def apply_zoom(self, value: float) -> None:
        self._capture.set(cv2.CAP_PROP_ZOOM, value)

    def read_frame(self) -> np.ndarray:
        ok, frame = self._capture.read()
        match (ok, frame):
            case (flag, np.ndarray()) if flag:
                return frame
            case _:
                raise PermissionOrHardwareError(MSG_CAMERA_NO_FRAME)

    def release(self) -> None:
        self._capture.release()
        if self._on_release is not None:
            self._on_release(self._index)


class OpenCVCameraBackend(CameraBackend):

    def __init__(
        self,
        max_devices: int = CAMERA_MAX_DEVICES,
        zoom_range: tuple[float, float, float] = (1.0, 5.0, 0.1),
    ) -> None:
        self._max_devices = max_devices
        self._zoom_range = zoom_range
        self._in_use: set[int] = set()

    def _probe(self, index: int) -> bool:
        capture = cv2.VideoCapture(index)
        try:
            return capture.isOpened()
        finally:
            capture.release()

    def list_devices(self) -> list[CameraDevice]:
        # An index we already hold cannot be reopened for probing on most platforms.
        return [
            CameraDevice(device_id=str(index), label=CAMERA_LABEL % index)
            for index in range(self._max_devices)
            if index in self._in_use or self._probe(index)
        ]

    def open(self, device_id: Optional[str] = None) -> CameraHandle:
        index = int(device_id) if device_id is not None else 0
        capture = cv2.VideoCapture(index)
        match capture.isOpened():
            case True:
                self._in_use.add(index)
                return OpenCVCameraHandle(
                    capture, index, self._zoom_range, on_release=self._in_use.discard
                )
            case False:
                capture.release()
                logger.error("Error accessing camera %d", index)
                match self.list_devices():
                    case []:
                        raise PermissionOrHardwareError(MSG_CAMERA_NOT_FOUND)
                    case _:
                        raise PermissionOrHardwareError(MSG_CAMERA_UNAVAILABLE)
