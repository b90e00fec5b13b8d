# bitebyte/dependencies.py
from functools import lru_cache

from .config import get_settings, resolve_model_config
from .prompts import PromptBook
from .application.ports.ai_provider import AIProvider
from .application.services.analysis_service import AnalysisService
from .application.services.analyzer_controller import AnalyzerController, ControllerRegistry
from .application.services.capture_service import CameraSession
from .application.services.record_store import RecordStore
from .infrastructure.ai import build_ai_provider
from .infrastructure.camera.opencv_camera import OpenCVCamera
from .infrastructure.events.std_logger import StdEventLogger
from .infrastructure.storage.vercel_blob_storage import VercelBlobStorage


@lru_cache()
def get_model_config():
    return resolve_model_config(get_settings())


@lru_cache()
def get_ai_provider() -> AIProvider:
    return build_ai_provider(get_model_config(), get_settings())


@lru_cache()
def get_object_storage() -> VercelBlobStorage:
    s = get_settings()
    return VercelBlobStorage(
        token=s.BLOB_READ_WRITE_TOKEN,
        api_url=s.BLOB_API_URL,
        api_version=s.BLOB_API_VERSION,
        host_suffix=s.BLOB_URL_HOST_SUFFIX,
    )


@lru_cache()
def get_record_store() -> RecordStore:
    s = get_settings()
    return RecordStore(
        storage=get_object_storage(),
        events=StdEventLogger(),
        capacity=s.HISTORY_LIMIT,
        key_prefix=s.BLOB_KEY_PREFIX,
    )


@lru_cache()
def get_analysis_service() -> AnalysisService:
    s = get_settings()
    return AnalysisService(
        ai_provider=get_ai_provider(),
        record_store=get_record_store(),
        prompts=PromptBook(override=get_model_config().prompt_template),
        max_file_size=s.MAX_FILE_SIZE,
        default_analysis_type=s.DEFAULT_ANALYSIS_TYPE,
    )


@lru_cache()
def get_camera_device() -> OpenCVCamera:
    s = get_settings()
    return OpenCVCamera(
        front_index=s.CAMERA_FRONT_INDEX,
        back_index=s.CAMERA_BACK_INDEX,
        width=s.CAMERA_FRAME_WIDTH,
        height=s.CAMERA_FRAME_HEIGHT,
    )


@lru_cache()
def get_controller_registry() -> ControllerRegistry:
    s = get_settings()

    def new_camera() -> CameraSession:
        return CameraSession(get_camera_device(), jpeg_quality=s.CAMERA_JPEG_QUALITY)

    def new_controller() -> AnalyzerController:
        return AnalyzerController(
            analysis_service=get_analysis_service(),
            camera_factory=new_camera,
            max_file_size=s.MAX_FILE_SIZE,
        )

    return ControllerRegistry(new_controller, max_sessions=s.UI_MAX_SESSIONS)
