"""Prompt quality validation and scoring."""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from .models import CategoryBreakdown, ScoreLabel, ValidationResult
from .presets import CATEGORY_CHECKS, CATEGORY_WEIGHTS, CONFLICTING_PAIRS, SCORE_BANDS, VAGUE_TERMS

BASE_SCORE = 20
MIN_PROMPT_LENGTH = 10
MAX_PROMPT_LENGTH = 3000

_VAGUE_PATTERNS = [(term, re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)) for term in VAGUE_TERMS]


def _detect_conflicts(lower: str) -> List[str]:
    return [
        f'Conflicting styles: "{first}" and "{second}"'
        for first, second in CONFLICTING_PAIRS
        if first in lower and second in lower
    ]


def _detect_vague_term(lower: str) -> Optional[str]:
    for term, pattern in _VAGUE_PATTERNS:
        if pattern.search(lower):
            return f'"{term}" is vague -- replace with specific visual descriptors'
    return None


def analyze_categories(prompt: str, declared_style: Optional[str] = None) -> CategoryBreakdown:
    lower = prompt.lower()
    flags: Dict[str, bool] = {name: bool(pattern.search(lower)) for name, pattern, _ in CATEGORY_CHECKS}
    if declared_style:
        flags["has_style"] = True
    return CategoryBreakdown(**flags)


def score_prompt(word_count: int, breakdown: CategoryBreakdown, warning_count: int, error_count: int) -> int:
    score = BASE_SCORE
    if word_count >= 8:
        score += 5
    if word_count >= 15:
        score += 5
    for name, weight in CATEGORY_WEIGHTS.items():
        if getattr(breakdown, name):
            score += weight
    score -= warning_count * 3
    score -= error_count * 10
    return max(0, min(100, score))


def validate_prompt(prompt: str, declared_style: Optional[str] = None) -> ValidationResult:
    """Score a raw prompt and collect actionable feedback.

    Never raises for prompt content; an empty prompt scores 0 with a single error.
    """

    if not isinstance(prompt, str):
        raise ValueError("prompt must be a string")

    if not prompt.strip():
        return ValidationResult(
            is_valid=False,
            score=0,
            errors=["Prompt is empty"],
            suggestions=["Start by describing what you want to see in the image"],
        )

    errors: List[str] = []
    warnings: List[str] = []
    suggestions: List[str] = []
    lower = prompt.lower()

    if len(prompt.strip()) < MIN_PROMPT_LENGTH:
        errors.append("Prompt is too short for reliable results")
    if len(prompt) > MAX_PROMPT_LENGTH:
        warnings.append("Prompt is very long -- some models may truncate it")

    warnings.extend(_detect_conflicts(lower))
    vague = _detect_vague_term(lower)
    if vague:
        warnings.append(vague)

    breakdown = analyze_categories(prompt, declared_style)
    for name, _, suggestion in CATEGORY_CHECKS:
        if suggestion and not getattr(breakdown, name):
            suggestions.append(suggestion)

    score = score_prompt(len(prompt.split()), breakdown, len(warnings), len(errors))
    return ValidationResult(
        is_valid=not errors,
        score=score,
        errors=errors,
        warnings=warnings,
        suggestions=suggestions,
        breakdown=breakdown,
    )


def get_score_label(score: int) -> ScoreLabel:
    for minimum, label, tone in SCORE_BANDS:
        if score >= minimum:
            return ScoreLabel(label=label, tone=tone)
    return ScoreLabel(label="Poor", tone="poor")
