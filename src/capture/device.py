"""Camera device interfaces — the platform capture API as seen by CameraSession."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class CameraDevice:
    device_id: str
    label: str


@dataclass(frozen=True)
class ZoomCapability:
    min: float
    max: float
    step: float

    def clamp(self, value: float) -> float:
        return max(self.min, min(self.max, value))


class CameraHandle(ABC):
    """An acquired device. Owned by exactly one CameraSession until released."""

    @property
    @abstractmethod
    def device_id(self) -> str: ...

    @abstractmethod
    def zoom_capability(self) -> Optional[ZoomCapability]:
        """Continuous zoom range, or None when the device cannot zoom."""
        ...

    @abstractmethod
    def zoom(self) -> Optional[float]: ...

    @abstractmethod
    def apply_zoom(self, value: float) -> None: ...

    @abstractmethod
    def read_frame(self) -> np.ndarray:
        """Current BGR frame at native resolution. Raises PermissionOrHardwareError."""
        ...

    @abstractmethod
    def release(self) -> None: ...


class CameraBackend(ABC):
    @abstractmethod
    def list_devices(self) -> list[CameraDevice]: ...

    @abstractmethod
    def open(self, device_id: Optional[str] = None) -> CameraHandle:
        """Acquire a device, the default one when device_id is None.

        Raises PermissionOrHardwareError when access is denied, the device is
        busy, or no device exists.
        """
        ...
