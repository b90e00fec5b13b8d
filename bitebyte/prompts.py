from dataclasses import dataclass, field
from typing import Dict, Optional

FOOD_PROMPT = """
Analyze the food in this image and provide ONLY the following information in a concise format:
1. What is this dish/food? (1-2 sentence description)
2. Approximate weight (in grams)
3. Total calories count

Keep your response brief and to-the-point, without additional information.
"""

UI_UX_PROMPT = """
Analyze the user interface in this screenshot and provide:
1. A short description of what the screen is for
2. The most important usability or layout problems
3. Concrete suggestions to improve the design

Keep your response brief and to-the-point.
"""

SECURITY_PROMPT = """
Review this screenshot for security concerns and provide:
1. Any sensitive information that is visible (credentials, tokens, personal data)
2. Risky patterns shown in the interface or configuration
3. Recommended mitigations

Keep your response brief and to-the-point.
"""

ACCESSIBILITY_PROMPT = """
Review this screenshot for accessibility and provide:
1. Contrast, text size or color-only cues that may be a problem
2. Controls likely to be hard to use with a keyboard or screen reader
3. Concrete fixes, most important first

Keep your response brief and to-the-point.
"""

GENERIC_PROMPT = """
Analyze this image with a focus on {analysis_type} and describe the most relevant findings.

Keep your response brief and to-the-point.
"""

PROMPT_TEMPLATES: Dict[str, str] = {
    "food": FOOD_PROMPT,
    "ui-ux": UI_UX_PROMPT,
    "security": SECURITY_PROMPT,
    "accessibility": ACCESSIBILITY_PROMPT,
}

ALIASES = {
    "ui/ux": "ui-ux",
    "uiux": "ui-ux",
    "ui": "ui-ux",
    "ux": "ui-ux",
    "a11y": "accessibility",
}


def normalize_analysis_type(analysis_type: str) -> str:
    key = (analysis_type or "").strip().lower()
    return ALIASES.get(key, key)


@dataclass(frozen=True)
class PromptBook:
    templates: Dict[str, str] = field(default_factory=lambda: dict(PROMPT_TEMPLATES))
    fallback: str = GENERIC_PROMPT
    override: Optional[str] = None

    def build(self, analysis_type: str) -> str:
        if self.override:
            template = self.override
        else:
            template = self.templates.get(normalize_analysis_type(analysis_type), self.fallback)
        return template.replace("{analysis_type}", analysis_type).strip()
