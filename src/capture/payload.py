import base64
from dataclasses import dataclass


@dataclass(frozen=True)
class ImagePayload:
    """An image carried as a ``data:<mime>;base64,<...>`` URL."""

    data: str
    mime_type: str

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str) -> "ImagePayload":
        encoded = base64.b64encode(raw).decode("ascii")
        return cls(data=f"data:{mime_type};base64,{encoded}", mime_type=mime_type)

    @property
    def base64_data(self) -> str:
        """The base64 part of the data URL, as vendors expect it."""
        _, _, encoded = self.data.partition(",")
        return encoded

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.base64_data)
