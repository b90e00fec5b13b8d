import base64
import logging

from openai import OpenAI

from ...application.ports.ai_provider import AIProvider
from ...exceptions import AnalysisFailed

logger = logging.getLogger(__name__)


class OpenAIProvider(AIProvider):
    def __init__(self, api_key: str, model_id: str) -> None:
        self.model_id = model_id
        self.client = None
        if not api_key:
            logger.warning("OPENAI_API_KEY not configured")
            return
        self.client = OpenAI(api_key=api_key)

    def generate_text(self, prompt: str, image_bytes: bytes, mime_type: str) -> str:
        if self.client is None:
            raise AnalysisFailed("OPENAI_API_KEY is not configured")
        b64 = base64.b64encode(image_bytes).decode("utf-8")
        resp = self.client.chat.completions.create(
            model=self.model_id,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{b64}"}},
                    ],
                },
            ],
        )
        return resp.choices[0].message.content or ""
