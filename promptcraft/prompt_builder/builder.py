"""Fluent prompt composition from typed components."""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Set

from promptcraft.tokens.resolver import TokenResolver

from .models import (
    ASPECT_RATIOS,
    PROMPT_QUALITIES,
    PROMPT_STYLES,
    BuilderOptions,
    PromptComponent,
    PromptCondition,
    PromptMetadata,
    PromptResult,
)
from .presets import BUILDER_QUALITY_PHRASES

logger = logging.getLogger(__name__)

TEMPLATE_ID = "custom-built"
_RAW_PLACEHOLDER = re.compile(r"\[([^\]|?]+)\]")


def text_component(content: str) -> PromptComponent:
    return PromptComponent(type="text", content=content)


def token_component(key: str, description: Optional[str] = None) -> PromptComponent:
    return PromptComponent(type="token", content=f"[{key}]", description=description or f"Token for {key}")


def conditional_component(
    token: str,
    then: PromptComponent,
    otherwise: Optional[PromptComponent] = None,
    operator: str = "exists",
    value: Optional[str] = None,
) -> PromptComponent:
    condition = PromptCondition(token=token, operator=operator, then=then, otherwise=otherwise, value=value)
    return PromptComponent(type="conditional", condition=condition)


def composite_component(name: str, children: Iterable[PromptComponent]) -> PromptComponent:
    return PromptComponent(type="composite", content=name, children=list(children))


class PromptBuilder:
    """Accumulate prompt components through chained calls, then ``build`` once.

    Example::

        result = await (
            PromptBuilder()
            .text("portrait of")
            .token("FIRSTNAME")
            .conditional("COMPANY", "wearing a branded hoodie")
            .style("anime")
            .with_tokens({"FIRSTNAME": "Ada"})
            .build()
        )
    """

    def __init__(self, options: Optional[BuilderOptions] = None) -> None:
        self.options = options or BuilderOptions()
        self._components: List[PromptComponent] = []
        self._tokens: Dict[str, str] = {}

    def text(self, content: str) -> "PromptBuilder":
        self._components.append(text_component(content))
        return self

    def token(self, key: str, description: Optional[str] = None) -> "PromptBuilder":
        self._components.append(token_component(key, description))
        return self

    def conditional(
        self,
        token: str,
        then_content: str,
        else_content: Optional[str] = None,
        operator: str = "exists",
        value: Optional[str] = None,
    ) -> "PromptBuilder":
        otherwise = text_component(else_content) if else_content else None
        self._components.append(
            conditional_component(token, text_component(then_content), otherwise, operator=operator, value=value)
        )
        return self

    def composite(self, name: str, components: Iterable[PromptComponent]) -> "PromptBuilder":
        self._components.append(composite_component(name, components))
        return self

    def with_tokens(self, tokens: Mapping[str, str]) -> "PromptBuilder":
        self._tokens.update(tokens)
        return self

    def with_token(self, key: str, value: str) -> "PromptBuilder":
        self._tokens[key] = value
        return self

    def style(self, style: str) -> "PromptBuilder":
        if style not in PROMPT_STYLES:
            raise ValueError(f"style must be one of {PROMPT_STYLES}; received {style!r}")
        return self.text(f"in {style} style")

    def quality(self, quality: str) -> "PromptBuilder":
        if quality not in PROMPT_QUALITIES:
            raise ValueError(f"quality must be one of {PROMPT_QUALITIES}; received {quality!r}")
        return self.text(BUILDER_QUALITY_PHRASES[quality])

    def aspect_ratio(self, ratio: str) -> "PromptBuilder":
        if ratio not in ASPECT_RATIOS:
            raise ValueError(f"aspect ratio must be one of {ASPECT_RATIOS}; received {ratio!r}")
        return self.text(f"{ratio} aspect ratio")

    def lighting(self, description: str) -> "PromptBuilder":
        return self.text(f"with {description} lighting")

    def composition(self, description: str) -> "PromptBuilder":
        return self.text(description)

    def colors(self, description: str) -> "PromptBuilder":
        return self.text(f"with {description} color scheme")

    async def build(self) -> PromptResult:
        """Assemble the prompt; kept awaitable for callers that expect it, never suspends."""

        return self.build_sync()

    def build_sync(self) -> PromptResult:
        errors: List[str] = []
        warnings: List[str] = []
        resolver = TokenResolver(self._tokens, strict_mode=self.options.strict_mode)

        parts: List[str] = []
        for component in self._components:
            processed = self._process(component, resolver, errors)
            if processed:
                parts.append(processed)

        prompt = " ".join(parts)
        max_length = self.options.max_length
        if max_length and len(prompt) > max_length:
            # The ellipsis only fits when the limit leaves room for it.
            prompt = prompt[: max_length - 3] + "..." if max_length > 3 else prompt[:max_length]
            warnings.append(f"Prompt truncated to {max_length} characters")
            logger.warning("Built prompt exceeded %d characters and was truncated", max_length)

        if self.options.validate_tokens:
            errors.extend(self._validate_tokens())

        metadata = None
        if self.options.include_metadata:
            metadata = PromptMetadata(
                template_id=TEMPLATE_ID,
                generated_at=datetime.now(timezone.utc),
                token_count=len(self._tokens),
                character_count=len(prompt),
            )

        return PromptResult(
            success=not errors,
            prompt=prompt,
            tokens=dict(self._tokens),
            errors=errors,
            warnings=warnings,
            metadata=metadata,
        )

    def _process(self, component: PromptComponent, resolver: TokenResolver, errors: List[str]) -> Optional[str]:
        if component.type == "text":
            resolution = resolver.replace_tokens(component.content)
            errors.extend(error for error in resolution.errors if error not in errors)
            return resolution.replaced

        if component.type == "token":
            key = component.content.strip("[]")
            value = self._tokens.get(key)
            return value if value is not None else component.content

        if component.type == "conditional":
            condition = component.condition
            if self._condition_met(condition):
                return self._process(condition.then, resolver, errors)
            if condition.otherwise is not None:
                return self._process(condition.otherwise, resolver, errors)
            return None

        results = [self._process(child, resolver, errors) for child in component.children]
        return " ".join(result for result in results if result is not None)

    def _condition_met(self, condition: PromptCondition) -> bool:
        value = self._tokens.get(condition.token)
        if condition.operator == "exists":
            return value is not None and value != ""
        if condition.operator == "equals":
            return value == condition.value
        if condition.operator == "not_equals":
            return value != condition.value
        return value is not None and condition.value in value

    def _validate_tokens(self) -> List[str]:
        """Report ``[KEY]`` placeholders in raw component text with no usable value."""

        required: List[str] = []
        seen: Set[str] = set()
        for content in self._raw_contents(self._components):
            for match in _RAW_PLACEHOLDER.finditer(content):
                key = match.group(1)
                if key not in seen:
                    seen.add(key)
                    required.append(key)

        return [
            f"Required token [{key}] is missing or empty"
            for key in required
            if not (self._tokens.get(key) or "").strip()
        ]

    def _raw_contents(self, components: Iterable[PromptComponent]) -> Iterable[str]:
        # Conditional branches are guarded by their own token and are not scanned.
        for component in components:
            if component.type == "conditional":
                continue
            if component.content:
                yield component.content
            yield from self._raw_contents(component.children)

    def get_components(self) -> List[PromptComponent]:
        return list(self._components)

    def clear(self) -> "PromptBuilder":
        self._components = []
        return self

    def clone(self) -> "PromptBuilder":
        twin = PromptBuilder(replace(self.options))
        twin._components = list(self._components)
        twin._tokens = dict(self._tokens)
        return twin
