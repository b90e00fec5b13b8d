from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile
from typing import Optional
import logging
import secrets

from ..application.services.analyzer_controller import AnalyzerController, ControllerRegistry
from ..config import settings
from ..dependencies import get_controller_registry
from ..exceptions import AnalysisInProgress, CameraUnavailable, InvalidInput, NotFound
from ..schemas.ui import UIState, UIStateResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ui", tags=["UI"])


def get_controller(
    request: Request,
    response: Response,
    registry: ControllerRegistry = Depends(get_controller_registry),
) -> AnalyzerController:
    cookie_name = settings.UI_SESSION_COOKIE
    session_id = request.cookies.get(cookie_name)
    if not session_id:
        session_id = secrets.token_urlsafe(16)
        logger.info("Starting new UI session")
    response.set_cookie(cookie_name, session_id, httponly=True, samesite="lax")
    return registry.get(session_id)


def _state(controller: AnalyzerController) -> UIStateResponse:
    return UIStateResponse(data=UIState.from_controller(controller))


@router.get("/state", response_model=UIStateResponse)
def get_state(controller: AnalyzerController = Depends(get_controller)):
    controller.load_history()
    return _state(controller)


@router.post("/image", response_model=UIStateResponse)
async def select_image(
    file: UploadFile = File(...),
    controller: AnalyzerController = Depends(get_controller),
):
    content = await file.read()
    controller.select_file(content, file.content_type, file.filename)
    return _state(controller)


@router.post("/analyze", response_model=UIStateResponse)
async def analyze(
    analysis_type: Optional[str] = Form(None),
    controller: AnalyzerController = Depends(get_controller),
):
    if controller.is_analyzing:
        raise AnalysisInProgress("Analysis already in progress")
    if controller.image is None:
        raise InvalidInput("Select or capture an image first")
    await controller.analyze(analysis_type)
    return _state(controller)


@router.post("/history/{record_id}/select", response_model=UIStateResponse)
def select_history_item(record_id: str, controller: AnalyzerController = Depends(get_controller)):
    controller.select_history_item(record_id)
    return _state(controller)


@router.delete("/history/{record_id}", response_model=UIStateResponse)
async def delete_history_item(record_id: str, controller: AnalyzerController = Depends(get_controller)):
    if not await controller.delete_record(record_id):
        raise NotFound(f"Analysis record {record_id} not found")
    return _state(controller)


# Camera

@router.post("/camera/open", response_model=UIStateResponse)
def open_camera(controller: AnalyzerController = Depends(get_controller)):
    controller.open_camera()
    return _state(controller)


@router.post("/camera/capture", response_model=UIStateResponse)
def capture_photo(controller: AnalyzerController = Depends(get_controller)):
    controller.require_camera().capture()
    return _state(controller)


@router.post("/camera/retake", response_model=UIStateResponse)
def retake_photo(controller: AnalyzerController = Depends(get_controller)):
    controller.require_camera().retake()
    return _state(controller)


@router.post("/camera/switch", response_model=UIStateResponse)
def switch_camera(controller: AnalyzerController = Depends(get_controller)):
    controller.require_camera().switch_facing()
    return _state(controller)


@router.post("/camera/confirm", response_model=UIStateResponse)
def confirm_photo(controller: AnalyzerController = Depends(get_controller)):
    controller.confirm_camera()
    return _state(controller)


@router.post("/camera/close", response_model=UIStateResponse)
def close_camera(controller: AnalyzerController = Depends(get_controller)):
    controller.close_camera()
    return _state(controller)


@router.get("/camera/still")
def get_still(controller: AnalyzerController = Depends(get_controller)):
    captured = controller.require_camera().captured
    if captured is None:
        raise CameraUnavailable("No photo has been captured")
    return Response(content=captured, media_type="image/jpeg")
