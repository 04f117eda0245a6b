"""Shared data models for the Prompt Builder module.

- Purpose: define serializable structures for validation reports, enhancement results,
  fluent-builder component trees, and the request handed to an image generator.
- Assumptions: dataclass consumers will serialize via ``to_dict``/``to_payload`` and lists
  remain order-sensitive.
- Side effects: none; classes are passive containers.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

CATEGORIES = (
    "ai-image",
    "action-figure",
    "ghibli",
    "cartoon",
    "meme",
    "video",
    "musicStar",
    "retro",
    "tvShow",
    "wrestling",
)

IMAGE_TYPES = (
    "photograph",
    "illustration",
    "3d-render",
    "digital-art",
    "oil-painting",
    "watercolor",
    "vector",
    "pixel-art",
    "sketch",
    "anime",
)

COMPOSITION_TYPES = ("portrait", "landscape", "product", "character", "abstract", "scene")

QUALITY_TIERS = ("standard", "high", "ultra")

PROMPT_STYLES = (
    "photorealistic",
    "cartoon",
    "anime",
    "digital-art",
    "sketch",
    "illustration",
    "ghibli",
    "3d-render",
    "pixel-art",
    "watercolor",
)

PROMPT_QUALITIES = ("low", "medium", "high", "ultra", "maximum")

ASPECT_RATIOS = ("1:1", "4:3", "3:4", "16:9", "9:16", "21:9", "9:21")

CONDITION_OPERATORS = ("exists", "equals", "not_equals", "contains")

COMPONENT_TYPES = ("text", "token", "conditional", "composite")

PROVIDERS = ("openai", "gemini", "gemini-nano")


@dataclass(frozen=True)
class CategoryBreakdown:
    has_subject: bool = False
    has_style: bool = False
    has_lighting: bool = False
    has_composition: bool = False
    has_quality: bool = False
    has_color: bool = False
    has_mood: bool = False


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    score: int
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    breakdown: CategoryBreakdown = field(default_factory=CategoryBreakdown)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class ScoreLabel:
    label: str
    tone: str


@dataclass
class EnhancementOptions:
    """Switches for a single enhancement run."""

    category: str
    image_type: Optional[str] = None
    quality: str = "high"
    negative_prompt: bool = True
    technical_specs: bool = True
    style_descriptors: bool = True
    composition_guidance: bool = True

    def validate(self) -> None:
        if self.category not in CATEGORIES:
            raise ValueError(f"category must be one of {CATEGORIES}; received {self.category!r}")
        if self.image_type is not None and self.image_type not in IMAGE_TYPES:
            raise ValueError(f"image_type must be one of {IMAGE_TYPES}; received {self.image_type!r}")
        if self.quality not in QUALITY_TIERS:
            raise ValueError(f"quality must be one of {QUALITY_TIERS}; received {self.quality!r}")


@dataclass(frozen=True)
class EnhancementResult:
    original: str
    enhanced: str
    negative_prompt: str
    key_improvements: List[str]
    expected_result: str
    quality_score: int
    detected_image_type: str
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class PreservationResult:
    enhanced: str
    resolved_tokens: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass
class PromptCondition:
    """Branch selected by comparing a token value."""

    token: str
    operator: str
    then: "PromptComponent"
    otherwise: Optional["PromptComponent"] = None
    value: Optional[str] = None

    def __post_init__(self) -> None:
        if self.operator not in CONDITION_OPERATORS:
            raise ValueError(f"operator must be one of {CONDITION_OPERATORS}; received {self.operator!r}")
        if self.operator != "exists" and self.value is None:
            raise ValueError(f"operator {self.operator!r} requires a comparison value")


@dataclass
class PromptComponent:
    """Node of a fluent-builder prompt tree.

    ``text`` and ``token`` nodes carry ``content``; ``conditional`` nodes carry a
    ``condition``; ``composite`` nodes carry ordered ``children`` and use
    ``content`` as the group name.
    """

    type: str
    content: str = ""
    condition: Optional[PromptCondition] = None
    children: List["PromptComponent"] = field(default_factory=list)
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if self.type not in COMPONENT_TYPES:
            raise ValueError(f"component type must be one of {COMPONENT_TYPES}; received {self.type!r}")
        if self.type == "conditional" and self.condition is None:
            raise ValueError("conditional components require a condition")
        for idx, child in enumerate(self.children):
            if not isinstance(child, PromptComponent):
                raise ValueError(f"children[{idx}] must be a PromptComponent")


@dataclass
class BuilderOptions:
    validate_tokens: bool = True
    strict_mode: bool = False
    max_length: int = 4000
    include_metadata: bool = False


@dataclass
class PromptMetadata:
    template_id: str
    generated_at: datetime
    token_count: int
    character_count: int


@dataclass
class PromptResult:
    success: bool
    prompt: str
    tokens: Dict[str, str] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metadata: Optional[PromptMetadata] = None

    def to_dict(self) -> Dict[str, object]:
        payload = asdict(self)
        if self.metadata is not None:
            payload["metadata"]["generated_at"] = self.metadata.generated_at.isoformat()
        return payload


@dataclass
class GenerationRequest:
    """Request bundle consumed by the external image-generation caller."""

    prompt: str
    negative_prompt: str = ""
    provider: str = "openai"
    category: str = "ai-image"
    metadata: Dict[str, object] = field(default_factory=dict)

    def validate(self) -> None:
        if not isinstance(self.prompt, str) or not self.prompt.strip():
            raise ValueError("prompt must be a non-empty string")
        if not isinstance(self.negative_prompt, str):
            raise ValueError("negative_prompt must be a string")
        if self.provider not in PROVIDERS:
            raise ValueError(f"provider must be one of {PROVIDERS}; received {self.provider!r}")

    def to_payload(self) -> Dict[str, object]:
        """Serialize using the field names the generation API expects."""

        self.validate()
        payload: Dict[str, object] = {
            "prompt": self.prompt,
            "provider": self.provider,
            "category": self.category,
            "metadata": dict(self.metadata),
        }
        if self.negative_prompt:
            payload["negativePrompt"] = self.negative_prompt
        return payload
