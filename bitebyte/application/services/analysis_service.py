import logging
from dataclasses import dataclass, field
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool

from ..ports.ai_provider import AIProvider
from ..ports.analysis_repo import AnalysisRecord, AnalysisRepository
from ..ports.capture_source import CapturedImage
from .capture_service import MAX_FILE_SIZE, validate_image
from ...exceptions import AnalysisFailed
from ...prompts import PromptBook

logger = logging.getLogger(__name__)


@dataclass
class AnalysisService:
    ai_provider: AIProvider
    record_store: AnalysisRepository
    prompts: PromptBook = field(default_factory=PromptBook)
    max_file_size: int = MAX_FILE_SIZE
    default_analysis_type: str = "food"

    async def analyze(self, image: CapturedImage, analysis_type: Optional[str] = None) -> AnalysisRecord:
        validate_image(image, self.max_file_size)

        analysis_type = (analysis_type or "").strip() or self.default_analysis_type
        prompt = self.prompts.build(analysis_type)
        model_id = getattr(self.ai_provider, "model_id", "unknown")
        logger.info(f"Starting {analysis_type} analysis with model: {model_id}")

        try:
            text = await run_in_threadpool(self.ai_provider.generate_text, prompt, image.data, image.mime_type)
        except AnalysisFailed:
            raise
        except Exception as e:
            logger.error(f"Error generating AI analysis: {e}")
            raise AnalysisFailed(f"Analysis service error: {e}") from e

        text = (text or "").strip()
        if not text:
            raise AnalysisFailed("Analysis service returned an empty response")

        logger.info("Analysis completed successfully, storing result")
        return await self.record_store.store(image, analysis_type, text)

    def history(self) -> List[AnalysisRecord]:
        return self.record_store.list_records()

    def get_record(self, record_id: str) -> Optional[AnalysisRecord]:
        return self.record_store.get(record_id)

    async def delete_record(self, record_id: str) -> None:
        await self.record_store.delete(record_id)
