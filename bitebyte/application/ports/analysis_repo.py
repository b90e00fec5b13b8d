from dataclasses import dataclass
from typing import List, Optional, Protocol

from .capture_source import CapturedImage


@dataclass(frozen=True)
class AnalysisRecord:
    id: str
    image_url: str
    timestamp: int  # ms since epoch
    analysis_type: str
    analysis_result: str
    thumbnail_url: Optional[str] = None


class AnalysisRepository(Protocol):
    async def store(self, image: CapturedImage, analysis_type: str, analysis_result: str) -> AnalysisRecord:
        ...

    def list_records(self) -> List[AnalysisRecord]:
        ...

    def get(self, record_id: str) -> Optional[AnalysisRecord]:
        ...

    async def delete(self, record_id: str) -> None:
        ...
