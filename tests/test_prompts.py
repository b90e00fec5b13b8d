import pytest

from bitebyte.config import Settings, resolve_model_config
from bitebyte.prompts import ACCESSIBILITY_PROMPT, FOOD_PROMPT, UI_UX_PROMPT, PromptBook, normalize_analysis_type


def test_known_types_and_aliases():
    book = PromptBook()
    assert book.build("food") == FOOD_PROMPT.strip()
    assert book.build("UI/UX") == UI_UX_PROMPT.strip()
    assert book.build("a11y") == ACCESSIBILITY_PROMPT.strip()
    assert normalize_analysis_type("  Security ") == "security"


def test_unknown_type_falls_back_to_generic():
    prompt = PromptBook().build("packaging")
    assert "packaging" in prompt


def test_food_prompt_asks_for_weight_and_calories():
    assert "grams" in FOOD_PROMPT
    assert "calories" in FOOD_PROMPT


def test_model_config_defaults_per_provider():
    assert resolve_model_config(Settings(ANALYSIS_PROVIDER="gemini", ANALYSIS_MODEL=None)).model_id == "gemini-2.5-flash"
    config = resolve_model_config(Settings(ANALYSIS_PROVIDER="OpenAI", ANALYSIS_MODEL=None, ANALYSIS_PROMPT_TEMPLATE="  "))
    assert config.provider == "openai"
    assert config.model_id == "gpt-4o"
    assert config.prompt_template is None


def test_model_config_explicit_model_and_template():
    config = resolve_model_config(Settings(ANALYSIS_PROVIDER="gemini", ANALYSIS_MODEL="gemini-2.0-flash", ANALYSIS_PROMPT_TEMPLATE="Rate {analysis_type}"))
    assert config.model_id == "gemini-2.0-flash"
    assert config.prompt_template == "Rate {analysis_type}"


def test_unknown_provider_is_rejected():
    with pytest.raises(ValueError):
        resolve_model_config(Settings(ANALYSIS_PROVIDER="llama"))
