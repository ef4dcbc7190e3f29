"""Turn uploaded bytes or a file on disk into an ImagePayload."""
import io
import logging
import mimetypes
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from src.capture.payload import ImagePayload
from src.constants import DEFAULT_IMAGE_MIME, MSG_EMPTY_FILE
from src.errors import ReadError

logger = logging.getLogger(__name__)


def _detect_mime(raw: bytes) -> str:
    """Decode with Pillow and return the detected MIME type. Raises ReadError."""
    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.verify()
            fmt = img.format
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise ReadError(f"Not a readable image: {exc}") from exc
    return Image.MIME.get(fmt or "", DEFAULT_IMAGE_MIME)


def read_image_bytes(raw: bytes, declared_mime: Optional[str] = None) -> ImagePayload:
    match raw:
        case b"" | None:
            raise ReadError(MSG_EMPTY_FILE)
        case _:
            pass
    detected = _detect_mime(raw)
    mime_type = (declared_mime or detected).split(";")[0].strip()
    return ImagePayload.from_bytes(raw, mime_type)


def read_image_file(path: Path | str) -> ImagePayload:
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        logger.error("Error reading file %s: %s", path, exc)
        raise ReadError(f"Cannot read {path.name}: {exc.strerror or exc}") from exc
    declared, _ = mimetypes.guess_type(path.name)
    return read_image_bytes(raw, declared)
