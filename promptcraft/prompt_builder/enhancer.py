"""Rule-based prompt enhancement.

- Purpose: append the style, lighting, quality, and composition phrases a prompt is missing,
  and synthesize a matching negative prompt.
- Assumptions: categories and quality tiers come from the fixed enumerations in ``models``.
- Side effects: none; every call is a pure function of its inputs.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Mapping, Optional, Union

from .models import EnhancementOptions, EnhancementResult, PreservationResult
from .presets import (
    CATEGORY_DEFAULT_IMAGE_TYPES,
    CATEGORY_ENHANCEMENTS,
    CATEGORY_TO_SPEC_KEY,
    COMPOSITION_GUIDANCE,
    COMPOSITION_RULES,
    DEFAULT_STYLE_LABEL,
    EXPECTED_STYLE_LABELS,
    FALLBACK_COMPOSITION,
    GENERIC_SUGGESTIONS,
    IMAGE_TYPE_KEYWORDS,
    IMAGE_TYPE_LABELS,
    LIGHTING_TEMPLATES,
    QUALITY_MODIFIERS,
    SPECIFIC_NEGATIVES,
    STYLE_DESCRIPTORS,
    TECHNICAL_SPECS,
    UNIVERSAL_NEGATIVES,
)
from .validator import validate_prompt

logger = logging.getLogger(__name__)

SHORT_PROMPT_LENGTH = 10
LONG_PROMPT_LENGTH = 2000
SUBJECT_PREVIEW_LENGTH = 60
MAX_CATEGORY_EXTRAS = 3

TOKEN_PLACEHOLDER_PATTERN = re.compile(r"(\{[A-Z_]+\}|\[[A-Z_]+\]|__[A-Z_]+__|%[A-Z_]+%)")
_PLACEHOLDER_EDGES = re.compile(r"^[\[{%_]+|[\]}%_]+$")
_MARKER = "__TKNPH{index}__"


def detect_image_type(prompt: str, category: str) -> str:
    lower = prompt.lower()
    for image_type, keywords in IMAGE_TYPE_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return image_type
    return CATEGORY_DEFAULT_IMAGE_TYPES.get(category, "digital-art")


def detect_composition_type(prompt: str) -> str:
    lower = prompt.lower()
    for pattern, composition_type in COMPOSITION_RULES:
        if pattern.search(lower):
            return composition_type
    return FALLBACK_COMPOSITION


def build_negative_prompt(image_type: str, category: str) -> str:
    parts: List[str] = list(UNIVERSAL_NEGATIVES)
    parts.extend(SPECIFIC_NEGATIVES.get(image_type, ()))
    parts.extend(SPECIFIC_NEGATIVES.get(category, ()))
    return ", ".join(dict.fromkeys(parts))


def build_expected_result(prompt: str, image_type: str, category: str) -> str:
    composition_type = detect_composition_type(prompt)
    subject = re.split(r"[.,!?]", prompt, maxsplit=1)[0].strip()
    if len(subject) > SUBJECT_PREVIEW_LENGTH:
        subject = subject[:SUBJECT_PREVIEW_LENGTH] + "..."
    style_label = EXPECTED_STYLE_LABELS.get(category, DEFAULT_STYLE_LABEL)
    return (
        f'A {image_type.replace("-", " ", 1)} {composition_type} depicting "{subject}" '
        f"with {style_label} styling, consistent quality and well-defined composition."
    )


def _normalize(text: str) -> str:
    text = re.sub(r"\.\s*\.", ".", text)
    text = re.sub(r",\s*\.", ".", text)
    return text.strip()


def _coerce_options(options: Union[EnhancementOptions, Mapping[str, object]]) -> EnhancementOptions:
    if isinstance(options, EnhancementOptions):
        coerced = options
    elif isinstance(options, Mapping):
        coerced = EnhancementOptions(**options)
    else:
        raise ValueError("options must be EnhancementOptions or a mapping")
    coerced.validate()
    return coerced


def enhance_prompt(prompt: str, options: Union[EnhancementOptions, Mapping[str, object]]) -> EnhancementResult:
    """Append the descriptive phrases ``prompt`` lacks for its category."""

    if not isinstance(prompt, str):
        raise ValueError("prompt must be a string")
    opts = _coerce_options(options)
    category = opts.category
    lower = prompt.lower()

    image_type = opts.image_type or detect_image_type(prompt, category)
    composition_type = detect_composition_type(prompt)
    logger.debug("Enhancing %s prompt as %s/%s", category, image_type, composition_type)

    improvements: List[str] = []
    warnings: List[str] = []
    parts: List[str] = [prompt.strip()]

    if len(prompt.strip()) < SHORT_PROMPT_LENGTH:
        warnings.append("Prompt is very short -- results may be unpredictable")
    if len(prompt) > LONG_PROMPT_LENGTH:
        warnings.append("Prompt exceeds recommended length -- consider simplifying")

    if opts.style_descriptors and image_type.replace("-", " ", 1) not in lower:
        parts.append(STYLE_DESCRIPTORS[image_type])
        improvements.append(f"Added {image_type} style descriptors")

    spec_key = CATEGORY_TO_SPEC_KEY.get(category)
    if opts.technical_specs:
        specs = TECHNICAL_SPECS.get(spec_key) if spec_key else None
        if specs is not None:
            if "lighting" not in lower and "light" not in lower:
                parts.append(specs["lighting"])
                improvements.append("Added category-specific lighting")
            if "resolution" not in lower and "quality" not in lower:
                parts.append(specs["resolution"])
                improvements.append("Added resolution/quality spec")
        elif not validate_prompt(prompt).breakdown.has_lighting:
            parts.append(LIGHTING_TEMPLATES[image_type])
            improvements.append(f"Added {image_type}-appropriate lighting")

    if "quality" not in lower and "resolution" not in lower:
        parts.append(QUALITY_MODIFIERS[opts.quality])
        improvements.append(f'Applied "{opts.quality}" quality tier')

    if opts.composition_guidance and not any(word in lower for word in ("composition", "angle", "frame")):
        parts.append(COMPOSITION_GUIDANCE[composition_type])
        improvements.append(f"Added {composition_type} composition guidance")

    extras = CATEGORY_ENHANCEMENTS.get(spec_key, ()) if spec_key else ()
    fresh = [extra for extra in extras if extra.lower().split(",")[0] not in lower]
    if fresh:
        parts.append(", ".join(fresh[:MAX_CATEGORY_EXTRAS]))
        improvements.append(f"Added {category}-specific enhancements")

    enhanced = _normalize(". ".join(part for part in parts if part))

    return EnhancementResult(
        original=prompt,
        enhanced=enhanced,
        negative_prompt=build_negative_prompt(image_type, category) if opts.negative_prompt else "",
        key_improvements=improvements,
        expected_result=build_expected_result(prompt, image_type, category),
        quality_score=validate_prompt(enhanced).score,
        detected_image_type=image_type,
        warnings=warnings,
    )


def quick_enhance(prompt: str, category: str) -> str:
    """Enhance with every pass on and no negative prompt; return the text only."""

    options = EnhancementOptions(category=category, quality="high", negative_prompt=False)
    return enhance_prompt(prompt, options).enhanced


def enhance_with_token_preservation(
    prompt: str, category: str, token_values: Optional[Mapping[str, str]] = None
) -> PreservationResult:
    """Enhance ``prompt`` without letting the added prose touch its placeholders.

    ``{K}``, ``[K]``, ``__K__`` and ``%K%`` are swapped for opaque markers,
    enhanced, then restored with the supplied value or the original text.
    """

    token_values = token_values or {}
    originals: Dict[str, str] = {}

    def _stash(match: "re.Match[str]") -> str:
        marker = _MARKER.format(index=len(originals))
        originals[marker] = match.group(0)
        return marker

    stripped = TOKEN_PLACEHOLDER_PATTERN.sub(_stash, prompt)
    resolved = quick_enhance(stripped, category)

    resolved_tokens: List[str] = []
    warnings: List[str] = []
    for marker, original in originals.items():
        key = _PLACEHOLDER_EDGES.sub("", original)
        value = token_values.get(key)
        if value:
            resolved = resolved.replace(marker, value, 1)
            resolved_tokens.append(key)
        else:
            resolved = resolved.replace(marker, original, 1)
            warnings.append(f"Unresolved token: {key}")

    return PreservationResult(enhanced=resolved, resolved_tokens=resolved_tokens, warnings=warnings)


def get_image_type_options() -> List[Dict[str, str]]:
    return [{"value": value, "label": label} for value, label in IMAGE_TYPE_LABELS.items()]


def get_prompt_suggestions(category: str) -> List[str]:
    spec_key = CATEGORY_TO_SPEC_KEY.get(category)
    suggestions = list(GENERIC_SUGGESTIONS)
    specs = TECHNICAL_SPECS.get(spec_key) if spec_key else None
    if specs is not None:
        suggestions.append(f"Use {specs['resolution']} for quality")
        suggestions.append(f"Consider {specs['lighting']} approach")
    extras = CATEGORY_ENHANCEMENTS.get(spec_key, ()) if spec_key else ()
    if extras:
        suggestions.append(f"Incorporate {extras[0]} for authenticity")
    return suggestions


def validate_prompt_template(template: str) -> Dict[str, object]:
    """Flag template-level issues before tokens are resolved."""

    issues: List[str] = []
    suggestions: List[str] = []
    lower = template.lower()

    if '"' in template and "[" in template:
        issues.append("Mixed token formats detected")
        suggestions.append('Use consistent [TOKEN] format instead of "PLACEHOLDER"')
    if "lighting" not in lower:
        suggestions.append("Add lighting specifications (studio, natural, dramatic, etc.)")
    if "resolution" not in lower and "8k" not in lower:
        suggestions.append("Specify resolution or quality level")
    if "action figure" in lower and "packaging" not in lower:
        suggestions.append("Add packaging details for action figures")

    return {"is_valid": not issues, "issues": issues, "suggestions": suggestions}
