# bitebyte/schemas/ui.py
from pydantic import BaseModel
from typing import List, Optional

from .analysis import AnalysisRecordResponse
from ..application.services.analyzer_controller import AnalyzerController
from ..application.services.capture_service import CameraSession


class CameraState(BaseModel):
    facingMode: str
    isActive: bool
    hasCapture: bool
    error: Optional[str] = None

    @classmethod
    def from_session(cls, camera: CameraSession) -> "CameraState":
        return cls(
            facingMode=camera.facing_mode,
            isActive=camera.is_active,
            hasCapture=camera.captured is not None,
            error=camera.error,
        )


class UIState(BaseModel):
    imageSelected: bool
    previewUrl: Optional[str] = None
    canAnalyze: bool
    isAnalyzing: bool
    currentRecord: Optional[AnalysisRecordResponse] = None
    error: Optional[str] = None
    history: List[AnalysisRecordResponse]
    camera: Optional[CameraState] = None

    @classmethod
    def from_controller(cls, controller: AnalyzerController) -> "UIState":
        current = controller.current_record
        return cls(
            imageSelected=controller.image is not None,
            previewUrl=controller.preview_url,
            canAnalyze=controller.can_analyze,
            isAnalyzing=controller.is_analyzing,
            currentRecord=AnalysisRecordResponse.from_record(current) if current else None,
            error=controller.error,
            history=[AnalysisRecordResponse.from_record(r) for r in controller.history],
            camera=CameraState.from_session(controller.camera) if controller.camera else None,
        )


class UIStateResponse(BaseModel):
    success: bool = True
    data: UIState
    error: Optional[str] = None
