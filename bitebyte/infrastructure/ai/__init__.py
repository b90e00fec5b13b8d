from ...config import ModelConfig, Settings
from ...application.ports.ai_provider import AIProvider


def build_ai_provider(model_config: ModelConfig, s: Settings) -> AIProvider:
    if model_config.provider == "gemini":
        from .gemini_provider import GeminiProvider
        return GeminiProvider(api_key=s.GEMINI_API_KEY, model_id=model_config.model_id)
    if model_config.provider == "openai":
        from .openai_provider import OpenAIProvider
        return OpenAIProvider(api_key=s.OPENAI_API_KEY, model_id=model_config.model_id)
    raise ValueError(f"Unsupported analysis provider: {model_config.provider}")
