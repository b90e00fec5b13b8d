import logging
import threading
from typing import Optional

import cv2
import numpy as np

from ...application.ports.capture_source import CameraDevice, CameraStream, FACING_USER
from ...exceptions import CameraError

logger = logging.getLogger(__name__)


class OpenCVCameraStream(CameraStream):
    def __init__(self, owner: "OpenCVCamera", capture: cv2.VideoCapture) -> None:
        self._owner = owner
        self._capture: Optional[cv2.VideoCapture] = capture

    def read_frame(self) -> np.ndarray:
        if self._capture is None:
            raise CameraError("Camera stream has been released")
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise CameraError("Could not read a frame from the camera")
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def release(self) -> None:
        if self._capture is None:
            return
        self._capture.release()
        self._capture = None
        self._owner._on_release(self)


class OpenCVCamera(CameraDevice):
    """Local capture devices, one index per facing mode. At most one live stream."""

    def __init__(self, front_index: int = 0, back_index: int = 1, width: int = 1920, height: int = 1080) -> None:
        self.front_index = front_index
        self.back_index = back_index
        self.width = width
        self.height = height
        self._lock = threading.Lock()
        self._active: Optional[OpenCVCameraStream] = None

    def acquire(self, facing_mode: str) -> OpenCVCameraStream:
        index = self.front_index if facing_mode == FACING_USER else self.back_index
        with self._lock:
            if self._active is not None:
                raise CameraError("Camera is already in use")
            capture = cv2.VideoCapture(index)
            if not capture.isOpened():
                capture.release()
                raise CameraError(f"Could not open camera {index} ({facing_mode})")
            # ideal resolution; the driver may pick the nearest supported mode
            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
            stream = OpenCVCameraStream(self, capture)
            self._active = stream
        logger.info(f"Camera {index} acquired ({facing_mode})")
        return stream

    def _on_release(self, stream: OpenCVCameraStream) -> None:
        with self._lock:
            if self._active is stream:
                self._active = None
        logger.info("Camera released")
