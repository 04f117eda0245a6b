"""Service wrappers for the Prompt Builder module.

- Purpose: run resolve -> validate -> enhance as one call and hand the result to the
  external image-generation caller.
- Assumptions: configuration comes from ``config_service.load_config``; bundle path is writable.
- Side effects: ``GenerationHandoff.publish`` writes the request bundle to disk.
"""

from __future__ import annotations

import json
import logging
from dataclasses import fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from promptcraft.path_utils import get_bundle_path
from promptcraft.tokens.models import TokenReplacementResult
from promptcraft.tokens.resolver import TokenResolver

from . import enhancer, validator
from .builder import PromptBuilder
from .models import BuilderOptions, EnhancementOptions, GenerationRequest, ValidationResult

logger = logging.getLogger(__name__)


class PromptPipelineService:
    """Facade that turns a raw user prompt into a generation request."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None) -> None:
        config = config or {}
        self.enhancement: Dict[str, Any] = dict(config.get("enhancement") or {})
        token_config = config.get("tokens") or {}
        self.token_defaults: Dict[str, str] = dict(token_config.get("values") or {})
        self.strict_tokens = bool(token_config.get("strict_mode", False))
        self.provider = (config.get("generation") or {}).get("provider", "openai")
        self.builder: Dict[str, Any] = dict(config.get("builder") or {})

    def builder_options(self, **overrides: Any) -> BuilderOptions:
        """Builder settings from the ``builder`` config section; unknown keys are ignored."""

        known = {field.name for field in fields(BuilderOptions)}
        given = {key: value for key, value in overrides.items() if value is not None}
        settings = {key: value for key, value in {**self.builder, **given}.items() if key in known}
        return BuilderOptions(**settings)

    def new_builder(self, **overrides: Any) -> PromptBuilder:
        """Return a ``PromptBuilder`` seeded with configured options and token values."""

        return PromptBuilder(self.builder_options(**overrides)).with_tokens(self.token_defaults)

    def resolve(self, prompt: str, token_values: Optional[Mapping[str, str]] = None) -> TokenReplacementResult:
        resolver = TokenResolver({**self.token_defaults, **(token_values or {})}, strict_mode=self.strict_tokens)
        return resolver.replace_tokens(prompt)

    def enhancement_options(self, category: Optional[str] = None, **overrides: Any) -> EnhancementOptions:
        settings = {**self.enhancement, **{key: value for key, value in overrides.items() if value is not None}}
        if category:
            settings["category"] = category
        settings.setdefault("category", "ai-image")
        options = EnhancementOptions(**settings)
        options.validate()
        return options

    def prepare(
        self,
        prompt: str,
        category: Optional[str] = None,
        token_values: Optional[Mapping[str, str]] = None,
        provider: Optional[str] = None,
        **overrides: Any,
    ) -> GenerationRequest:
        resolution = self.resolve(prompt, token_values)
        validation = validator.validate_prompt(resolution.replaced)
        options = self.enhancement_options(category, **overrides)
        enhanced = enhancer.enhance_prompt(resolution.replaced, options)

        return GenerationRequest(
            prompt=enhanced.enhanced,
            negative_prompt=enhanced.negative_prompt,
            provider=provider or self.provider,
            category=options.category,
            metadata={
                "original_prompt": prompt,
                "quality_score": enhanced.quality_score,
                "original_score": validation.score,
                "detected_image_type": enhanced.detected_image_type,
                "key_improvements": list(enhanced.key_improvements),
                "expected_result": enhanced.expected_result,
                "token_errors": list(resolution.errors),
                "warnings": list(validation.warnings) + list(enhanced.warnings) + list(resolution.warnings),
                "validation_errors": list(validation.errors),
            },
        )


class GenerationHandoff:
    """Hooks for UI layers to gate and deliver generation requests.

    Published requests are written to a JSON bundle so the generation caller
    can pick up the latest payload without additional RPC plumbing.
    """

    def __init__(self, bundle_path: Optional[Path] = None) -> None:
        self.bundle_path = Path(bundle_path) if bundle_path else get_bundle_path()

    def preflight(self, validation: ValidationResult) -> Optional[str]:
        """Return a blocking message when the prompt has errors; warnings never block."""

        if validation.errors:
            return "Resolve prompt errors before generating: " + "; ".join(validation.errors)
        return None

    def publish(self, request: GenerationRequest) -> Dict:
        payload = request.to_payload()
        return self._write_bundle(payload)

    def _write_bundle(self, payload: Dict) -> Dict:
        self.bundle_path.parent.mkdir(parents=True, exist_ok=True)

        enriched_payload = {
            **payload,
            "compiled_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "bundle_path": str(self.bundle_path),
        }
        self.bundle_path.write_text(json.dumps(enriched_payload, indent=2), encoding="utf-8")
        logger.info("Published generation request to %s", self.bundle_path)
        return enriched_payload
