import logging

import google.generativeai as genai

from ...application.ports.ai_provider import AIProvider
from ...exceptions import AnalysisFailed

logger = logging.getLogger(__name__)


class GeminiProvider(AIProvider):
    def __init__(self, api_key: str, model_id: str) -> None:
        self.model_id = model_id
        self.model = None
        if not api_key:
            logger.warning("GEMINI_API_KEY not configured")
            return
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_id)

    def generate_text(self, prompt: str, image_bytes: bytes, mime_type: str) -> str:
        if self.model is None:
            raise AnalysisFailed("GEMINI_API_KEY is not configured")
        result = self.model.generate_content([
            prompt,
            {"mime_type": mime_type, "data": image_bytes},
        ])
        return getattr(result, "text", str(result))
