import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..ports.analysis_repo import AnalysisRecord
from ..ports.capture_source import CapturedImage
from .analysis_service import AnalysisService
from .capture_service import CameraSession, MAX_FILE_SIZE, validate_upload
from ...exceptions import BiteByteError, CameraUnavailable, InvalidInput, NotFound

logger = logging.getLogger(__name__)


@dataclass
class AnalyzerController:
    """View state for one browser: capture -> preview -> analyze -> history."""

    analysis_service: AnalysisService
    camera_factory: Callable[[], CameraSession]
    max_file_size: int = MAX_FILE_SIZE
    analysis_type: Optional[str] = None
    image: Optional[CapturedImage] = None
    preview_url: Optional[str] = None
    current_record: Optional[AnalysisRecord] = None
    error: Optional[str] = None
    is_analyzing: bool = False
    history: List[AnalysisRecord] = field(default_factory=list)
    camera: Optional[CameraSession] = None

    def load_history(self) -> List[AnalysisRecord]:
        self.history = self.analysis_service.history()
        return self.history

    def _select(self, image: CapturedImage) -> None:
        self.image = image
        self.preview_url = image.data_url()
        self.error = None
        self.current_record = None

    def select_file(self, data: bytes, content_type: Optional[str], filename: Optional[str]) -> bool:
        try:
            image = validate_upload(data, content_type, filename, self.max_file_size)
        except InvalidInput as e:
            self.error = e.message
            return False
        self._select(image)
        return True

    def open_camera(self) -> CameraSession:
        self.close_camera()
        self.camera = self.camera_factory()
        self.camera.start()
        return self.camera

    def require_camera(self) -> CameraSession:
        if self.camera is None:
            raise CameraUnavailable("Camera is not open")
        return self.camera

    def close_camera(self) -> None:
        if self.camera is not None:
            self.camera.close()
            self.camera = None

    def confirm_camera(self) -> CapturedImage:
        image = self.require_camera().confirm()
        self.camera = None
        self._select(image)
        return image

    @property
    def can_analyze(self) -> bool:
        return self.image is not None and not self.is_analyzing

    async def analyze(self, analysis_type: Optional[str] = None) -> Optional[AnalysisRecord]:
        if not self.can_analyze:
            return None

        self.is_analyzing = True
        self.error = None
        try:
            record = await self.analysis_service.analyze(self.image, analysis_type or self.analysis_type)
        except BiteByteError as e:
            self.error = f"Failed to analyze the image: {e.message}"
            logger.error(self.error)
            return None
        finally:
            self.is_analyzing = False

        self.current_record = record
        if record.image_url:
            self.preview_url = record.image_url
        self.load_history()
        return record

    def select_history_item(self, record_id: str) -> AnalysisRecord:
        record = self.analysis_service.get_record(record_id)
        if record is None:
            raise NotFound(f"Analysis record {record_id} not found")
        self.current_record = record
        self.preview_url = record.image_url
        return record

    async def delete_record(self, record_id: str) -> bool:
        try:
            await self.analysis_service.delete_record(record_id)
        except NotFound as e:
            logger.error(f"Failed to delete record: {e.message}")
            return False
        finally:
            self.load_history()

        if self.current_record is not None and self.current_record.id == record_id:
            self.current_record = None
        return True

    def close(self) -> None:
        self.close_camera()


class ControllerRegistry:
    """Per-session controllers, least recently used evicted past max_sessions."""

    def __init__(self, factory: Callable[[], AnalyzerController], max_sessions: int = 100) -> None:
        self._factory = factory
        self.max_sessions = max_sessions
        self._controllers: "OrderedDict[str, AnalyzerController]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str) -> AnalyzerController:
        evicted: List[AnalyzerController] = []
        with self._lock:
            controller = self._controllers.get(session_id)
            if controller is None:
                controller = self._factory()
                controller.load_history()
                self._controllers[session_id] = controller
            self._controllers.move_to_end(session_id)
            while len(self._controllers) > self.max_sessions:
                _, old = self._controllers.popitem(last=False)
                evicted.append(old)
        for old in evicted:
            old.close()
        return controller

    def __len__(self) -> int:
        with self._lock:
            return len(self._controllers)

    def close_all(self) -> None:
        with self._lock:
            controllers = list(self._controllers.values())
            self._controllers.clear()
        for controller in controllers:
            controller.close()
