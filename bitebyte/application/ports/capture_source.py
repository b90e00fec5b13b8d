import base64
from dataclasses import dataclass
from typing import Protocol

import numpy as np


FACING_USER = "user"
FACING_ENVIRONMENT = "environment"


@dataclass(frozen=True)
class CapturedImage:
    data: bytes
    mime_type: str
    filename: str

    @property
    def size(self) -> int:
        return len(self.data)

    def data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


class CameraStream(Protocol):
    def read_frame(self) -> np.ndarray:
        """Return the current frame as an RGB uint8 array."""
        ...

    def release(self) -> None:
        ...


class CameraDevice(Protocol):
    def acquire(self, facing_mode: str) -> CameraStream:
        ...
