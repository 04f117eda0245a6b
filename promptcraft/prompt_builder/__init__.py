"""Prompt validation, rule-based enhancement, and fluent composition."""
from __future__ import annotations

from .builder import PromptBuilder
from .enhancer import enhance_prompt, enhance_with_token_preservation, quick_enhance
from .validator import get_score_label, validate_prompt

__all__ = [
    "PromptBuilder",
    "enhance_prompt",
    "enhance_with_token_preservation",
    "get_score_label",
    "quick_enhance",
    "validate_prompt",
]
