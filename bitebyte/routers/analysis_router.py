from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import Optional
import logging

from ..application.services.analysis_service import AnalysisService
from ..application.services.capture_service import validate_upload
from ..dependencies import get_analysis_service
from ..schemas.analysis import AnalysisHistoryResponse, AnalysisRecordResponse, AnalysisResponse
from ..schemas.common import MessageEnvelope, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analysis", tags=["Analysis"])


@router.post("", response_model=AnalysisResponse)
async def analyze_image(
    file: UploadFile = File(...),
    analysis_type: Optional[str] = Form(None),
    service: AnalysisService = Depends(get_analysis_service),
):
    content = await file.read()
    image = validate_upload(content, file.content_type, file.filename, service.max_file_size)
    record = await service.analyze(image, analysis_type)
    return AnalysisResponse(data=AnalysisRecordResponse.from_record(record))


@router.get("/history", response_model=AnalysisHistoryResponse)
def get_history(service: AnalysisService = Depends(get_analysis_service)):
    records = service.history()
    return AnalysisHistoryResponse(data=[AnalysisRecordResponse.from_record(r) for r in records])


@router.delete("/{record_id}", response_model=MessageEnvelope)
async def delete_record(record_id: str, service: AnalysisService = Depends(get_analysis_service)):
    await service.delete_record(record_id)
    logger.info(f"Deleted analysis record {record_id}")
    return MessageEnvelope(data=MessageResponse(message="Analysis record deleted"))
