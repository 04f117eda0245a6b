"""Data models for the token dictionary and resolver.

- Purpose: describe placeholder definitions and the outcome of a resolution pass.
- Assumptions: definitions are created once at import time and never mutated.
- Side effects: none; classes are passive containers.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

VALUE_TYPES = ("string", "number", "boolean", "array", "object")
GROUP_CATEGORIES = ("personal", "company", "technical", "creative", "system")


@dataclass(frozen=True)
class TokenValidation:
    """Optional constraints applied to string token values."""

    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    enum: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class TokenDefinition:
    key: str
    value_type: str
    required: bool
    description: str
    examples: Tuple[str, ...] = ()
    default_value: Optional[Any] = None
    validation: Optional[TokenValidation] = None

    def __post_init__(self) -> None:
        if self.value_type not in VALUE_TYPES:
            raise ValueError(f"{self.key}.value_type must be one of {VALUE_TYPES}")
        if not self.key or self.key != self.key.upper():
            raise ValueError(f"token key {self.key!r} must be an uppercase identifier")


@dataclass(frozen=True)
class TokenGroup:
    name: str
    description: str
    category: str
    tokens: Tuple[TokenDefinition, ...]

    def __post_init__(self) -> None:
        if self.category not in GROUP_CATEGORIES:
            raise ValueError(f"{self.name}.category must be one of {GROUP_CATEGORIES}")


@dataclass(frozen=True)
class TokenReplacementResult:
    """Outcome of resolving placeholders in a single text."""

    original: str
    replaced: str
    tokens_found: Tuple[str, ...] = ()
    tokens_replaced: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, object]:
        return {
            "original": self.original,
            "replaced": self.replaced,
            "tokens_found": list(self.tokens_found),
            "tokens_replaced": list(self.tokens_replaced),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class TokenValidationReport:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass
class TokenStats:
    total_tokens: int
    defined_tokens: int
    undefined_tokens: int
    token_keys: List[str] = field(default_factory=list)
