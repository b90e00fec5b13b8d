# bitebyte/schemas/analysis.py
from pydantic import BaseModel, Field
from typing import List, Optional

from ..application.ports.analysis_repo import AnalysisRecord


class AnalysisRecordResponse(BaseModel):
    id: str
    imageUrl: str
    timestamp: int = Field(..., description="Creation time, ms since epoch")
    analysisType: str
    analysisResult: str
    thumbnailUrl: Optional[str] = None

    @classmethod
    def from_record(cls, record: AnalysisRecord) -> "AnalysisRecordResponse":
        return cls(
            id=record.id,
            imageUrl=record.image_url,
            timestamp=record.timestamp,
            analysisType=record.analysis_type,
            analysisResult=record.analysis_result,
            thumbnailUrl=record.thumbnail_url,
        )


class AnalysisResponse(BaseModel):
    success: bool = True
    data: AnalysisRecordResponse
    error: Optional[str] = None


class AnalysisHistoryResponse(BaseModel):
    success: bool = True
    data: List[AnalysisRecordResponse]
    error: Optional[str] = None
