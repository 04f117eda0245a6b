"""CLI entrypoint for Prompt Builder.

- Purpose: validate, enhance, or resolve a prompt and emit the result as JSON.
- Assumptions: prompts arrive as UTF-8 command-line text; config defaults come from config_service.
- Side effects: ``request --publish`` writes the generation request bundle via GenerationHandoff.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Iterable, List

from promptcraft.config_service.config_service import DEFAULT_CONFIG_PATH, ConfigError, load_config
from promptcraft.tokens.resolver import TokenResolver

from . import enhancer, validator
from .models import CATEGORIES, IMAGE_TYPES, PROVIDERS, QUALITY_TIERS
from .services import GenerationHandoff, PromptPipelineService


def _parse_tokens(pairs: List[str]) -> Dict[str, str]:
    tokens: Dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Token '{pair}' must use KEY=value format")
        key, value = pair.split("=", 1)
        tokens[key.strip()] = value
    return tokens


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate, enhance, and resolve image-generation prompts")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to a JSON/YAML config file")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="Score a prompt and list suggestions")
    validate_parser.add_argument("--prompt", required=True)
    validate_parser.add_argument("--style", help="Declared art style, counts as style information")

    enhance_parser = subparsers.add_parser("enhance", help="Append missing descriptors to a prompt")
    enhance_parser.add_argument("--prompt", required=True)
    enhance_parser.add_argument("--category", choices=CATEGORIES)
    enhance_parser.add_argument("--quality", choices=QUALITY_TIERS)
    enhance_parser.add_argument("--image-type", dest="image_type", choices=IMAGE_TYPES)
    enhance_parser.add_argument("--no-negative", dest="negative_prompt", action="store_false", default=None)

    resolve_parser = subparsers.add_parser("resolve", help="Replace [TOKEN] placeholders")
    resolve_parser.add_argument("--text", required=True)
    resolve_parser.add_argument("--token", dest="tokens", action="append", default=[], help="KEY=value pair")
    resolve_parser.add_argument("--strict", action="store_true", help="Report undefined [TOKEN] placeholders")

    preserve_parser = subparsers.add_parser("preserve", help="Enhance while keeping placeholders intact")
    preserve_parser.add_argument("--prompt", required=True)
    preserve_parser.add_argument("--category", choices=CATEGORIES, required=True)
    preserve_parser.add_argument("--token", dest="tokens", action="append", default=[], help="KEY=value pair")

    request_parser = subparsers.add_parser("request", help="Build a generation request payload")
    request_parser.add_argument("--prompt", required=True)
    request_parser.add_argument("--category", choices=CATEGORIES)
    request_parser.add_argument("--provider", choices=PROVIDERS)
    request_parser.add_argument("--token", dest="tokens", action="append", default=[], help="KEY=value pair")
    request_parser.add_argument("--publish", action="store_true", help="Write the request bundle to disk")
    request_parser.add_argument("--bundle", type=Path, help="Bundle path used with --publish")

    compose_parser = subparsers.add_parser("compose", help="Join text parts with the configured fluent builder")
    compose_parser.add_argument("--text", dest="parts", action="append", required=True, help="Text part")
    compose_parser.add_argument("--token", dest="tokens", action="append", default=[], help="KEY=value pair")
    compose_parser.add_argument("--max-length", dest="max_length", type=int, help="Override builder.max_length")
    compose_parser.add_argument("--metadata", action="store_true", default=None, help="Include build metadata")
    return parser


def _run(args: argparse.Namespace, config: Dict) -> Dict:
    if args.command == "validate":
        result = validator.validate_prompt(args.prompt, args.style)
        payload = result.to_dict()
        payload["label"] = validator.get_score_label(result.score).label
        return payload

    if args.command == "enhance":
        service = PromptPipelineService(config)
        options = service.enhancement_options(
            args.category, quality=args.quality, image_type=args.image_type, negative_prompt=args.negative_prompt
        )
        return enhancer.enhance_prompt(args.prompt, options).to_dict()

    if args.command == "resolve":
        token_config = config.get("tokens") or {}
        tokens = {**(token_config.get("values") or {}), **_parse_tokens(args.tokens)}
        strict = args.strict or bool(token_config.get("strict_mode"))
        return TokenResolver(tokens, strict_mode=strict).replace_tokens(args.text).to_dict()

    if args.command == "preserve":
        return enhancer.enhance_with_token_preservation(
            args.prompt, args.category, _parse_tokens(args.tokens)
        ).to_dict()

    service = PromptPipelineService(config)
    if args.command == "compose":
        builder = service.new_builder(max_length=args.max_length, include_metadata=args.metadata)
        for part in args.parts:
            builder.text(part)
        return builder.with_tokens(_parse_tokens(args.tokens)).build_sync().to_dict()

    tokens = _parse_tokens(args.tokens)
    request = service.prepare(args.prompt, args.category, tokens, provider=args.provider)
    if not args.publish:
        return request.to_payload()

    hooks = GenerationHandoff(args.bundle)
    resolved = service.resolve(args.prompt, tokens).replaced
    preflight_error = hooks.preflight(validator.validate_prompt(resolved))
    if preflight_error:
        raise SystemExit(preflight_error)
    return hooks.publish(request)


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s [%(name)s] %(message)s")

    try:
        config = load_config(args.config).data
    except ConfigError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1

    try:
        payload = _run(args, config)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
