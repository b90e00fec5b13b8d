import io
import logging
import mimetypes
import time
from typing import Callable, Optional

import numpy as np
from PIL import Image

from ..ports.capture_source import (
    CameraDevice,
    CameraStream,
    CapturedImage,
    FACING_ENVIRONMENT,
    FACING_USER,
)
from ...exceptions import CameraError, CameraUnavailable, InvalidInput

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
JPEG_QUALITY = 92
GENERIC_MIME_TYPES = ("", "application/octet-stream")


def _now_ms() -> int:
    return int(time.time() * 1000)


def validate_image(image: CapturedImage, max_file_size: int = MAX_FILE_SIZE) -> None:
    if not image.mime_type.startswith("image/"):
        raise InvalidInput("Please upload an image file", status_code=415)
    if image.size == 0:
        raise InvalidInput("Uploaded file is empty")
    if image.size > max_file_size:
        raise InvalidInput(f"File size exceeds {max_file_size // (1024 * 1024)}MB limit", status_code=413)


def validate_upload(data: bytes, content_type: Optional[str], filename: Optional[str], max_file_size: int = MAX_FILE_SIZE) -> CapturedImage:
    """Build a CapturedImage from a picked file, rejecting non-images and oversized files."""
    filename = filename or "upload"
    mime_type = (content_type or "").split(";")[0].strip().lower()
    if mime_type in GENERIC_MIME_TYPES:
        guessed, _ = mimetypes.guess_type(filename)
        mime_type = guessed or mime_type
    image = CapturedImage(data=data or b"", mime_type=mime_type, filename=filename)
    validate_image(image, max_file_size)
    return image


def encode_jpeg(frame: np.ndarray, quality: int = JPEG_QUALITY) -> bytes:
    image = Image.fromarray(frame)
    if image.mode != "RGB":
        image = image.convert("RGB")
    buf = io.BytesIO()
    image.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


class CameraSession:
    """Live camera -> still -> confirmed image, holding the device only while live."""

    def __init__(
        self,
        device: CameraDevice,
        facing_mode: str = FACING_ENVIRONMENT,
        jpeg_quality: int = JPEG_QUALITY,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._device = device
        self._stream: Optional[CameraStream] = None
        self._clock = clock
        self.facing_mode = facing_mode
        self.jpeg_quality = jpeg_quality
        self.captured: Optional[bytes] = None
        self.error: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self._stream is not None

    def _release(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.release()

    def start(self) -> bool:
        self._release()
        try:
            self._stream = self._device.acquire(self.facing_mode)
        except Exception as e:
            self._stream = None
            self.error = f"Camera access error: {e}"
            logger.error(f"Camera access error: {e}")
            return False
        self.error = None
        return True

    def capture(self) -> Optional[bytes]:
        if self._stream is None or self.captured is not None:
            raise CameraUnavailable("Camera is not active")
        try:
            frame = self._stream.read_frame()
        except CameraError as e:
            self.error = f"Camera access error: {e.message}"
            logger.error(self.error)
            self._release()
            return None
        try:
            self.captured = encode_jpeg(frame, self.jpeg_quality)
        finally:
            self._release()
        return self.captured

    def retake(self) -> bool:
        self.captured = None
        return self.start()

    def switch_facing(self) -> bool:
        if self._stream is None or self.captured is not None:
            raise CameraUnavailable("Camera can only be switched while the live view is active")
        self._release()
        self.facing_mode = FACING_USER if self.facing_mode == FACING_ENVIRONMENT else FACING_ENVIRONMENT
        return self.start()

    def confirm(self) -> CapturedImage:
        if self.captured is None:
            raise CameraUnavailable("No photo has been captured")
        image = CapturedImage(
            data=self.captured,
            mime_type="image/jpeg",
            filename=f"bitebyte-capture-{self._clock()}.jpg",
        )
        self.close()
        return image

    def close(self) -> None:
        self._release()
        self.captured = None

    def __enter__(self) -> "CameraSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
