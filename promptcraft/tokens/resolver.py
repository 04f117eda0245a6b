"""Bracket placeholder resolution for prompt templates.

- Purpose: substitute ``[KEY]``, ``[KEY|default]`` and ``[KEY?text]`` placeholders with caller values.
- Assumptions: token values are plain strings; unknown keys are advisory, never fatal.
- Side effects: none beyond logging when nested resolution does not settle.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .definitions import get_token_definition, validate_token_value
from .models import TokenReplacementResult, TokenStats, TokenValidationReport

logger = logging.getLogger(__name__)

MAX_NESTED_PASSES = 10

CONDITIONAL_PATTERN = re.compile(r"\[([^\]|?]+)\?([^\]]+)\]")
DEFAULT_PATTERN = re.compile(r"\[([^\]|?]+)\|([^\]]+)\]")
SIMPLE_PATTERN = re.compile(r"\[([^\]|?]+)\]")

TOKEN_KEY_PATTERN = re.compile(r"\[([A-Z_]+)\]")

# content type -> (pattern, format string)
TOKEN_FORMATS: Dict[str, Tuple[re.Pattern, str]] = {
    "prompt": (re.compile(r"\[([A-Z_]+)\]"), "[{key}]"),
    "email": (re.compile(r"\{([A-Z_]+)\}"), "{{{key}}}"),
    "sms": (re.compile(r"%([A-Z_]+)%"), "%{key}%"),
    "marketing": (re.compile(r"\[([A-Z_]+)\]"), "[{key}]"),
    "social": (re.compile(r"\{([A-Z_]+)\}"), "{{{key}}}"),
}


class _Pass:
    """Bookkeeping for one sweep of the three placeholder patterns."""

    def __init__(self) -> None:
        self.found: List[str] = []
        self.replaced: List[str] = []
        self.errors: List[str] = []


class TokenResolver:
    """Resolve placeholders against a caller-owned token map.

    Instances are not meant to be shared across concurrent callers; use
    ``create_context`` or ``clone`` to derive independent resolvers.
    """

    def __init__(self, tokens: Optional[Mapping[str, str]] = None, strict_mode: bool = False) -> None:
        self._tokens: Dict[str, str] = dict(tokens or {})
        self.strict_mode = strict_mode

    def set_tokens(self, tokens: Mapping[str, str]) -> "TokenResolver":
        self._tokens.update(tokens)
        return self

    def set_token(self, key: str, value: str) -> "TokenResolver":
        self._tokens[key] = value
        return self

    def get_token(self, key: str) -> Optional[str]:
        return self._tokens.get(key)

    def get_all_tokens(self) -> Dict[str, str]:
        return dict(self._tokens)

    def has_token(self, key: str) -> bool:
        return key in self._tokens

    def set_strict_mode(self, strict: bool) -> "TokenResolver":
        self.strict_mode = strict
        return self

    def replace_tokens(self, text: str) -> TokenReplacementResult:
        """Replace every placeholder in ``text``.

        A first sweep records what was found; the sweep is then repeated on
        its own output so defaults and conditional text may carry further
        placeholders. Repetition stops once the text is stable or after
        ``MAX_NESTED_PASSES`` extra sweeps.
        """

        first = _Pass()
        result = self._sweep(text, first)
        found, replaced, errors = list(first.found), list(first.replaced), list(first.errors)
        warnings: List[str] = []

        for _ in range(MAX_NESTED_PASSES):
            nested = _Pass()
            candidate = self._sweep(result, nested)
            if candidate == result:
                settled = True
                break
            result = candidate
            found.extend(nested.found)
            replaced.extend(nested.replaced)
            errors.extend(error for error in nested.errors if error not in errors)
        else:
            settled = False

        if not settled:
            message = f"Token resolution stopped after {MAX_NESTED_PASSES} nested passes without settling"
            logger.warning("%s: %.80r", message, text)
            warnings.append(message)

        return TokenReplacementResult(
            original=text,
            replaced=result,
            tokens_found=tuple(found),
            tokens_replaced=tuple(replaced),
            errors=tuple(errors),
            warnings=tuple(warnings),
        )

    def _sweep(self, text: str, bookkeeping: _Pass) -> str:
        # Each pattern scans the raw text; edits land on the working copy.
        result = text

        for match in CONDITIONAL_PATTERN.finditer(text):
            key, conditional_text = match.group(1), match.group(2)
            bookkeeping.found.append(key)
            value = self._tokens.get(key)
            result = result.replace(match.group(0), conditional_text if value else "", 1)
            if value:
                bookkeeping.replaced.append(key)

        for match in DEFAULT_PATTERN.finditer(text):
            key, default_text = match.group(1), match.group(2)
            bookkeeping.found.append(key)
            value = self._tokens.get(key)
            result = result.replace(match.group(0), value or default_text, 1)
            if value:
                bookkeeping.replaced.append(key)

        for match in SIMPLE_PATTERN.finditer(text):
            key = match.group(1)
            bookkeeping.found.append(key)
            value = self._tokens.get(key)
            if value is not None:
                result = result.replace(match.group(0), value, 1)
                if value:
                    bookkeeping.replaced.append(key)
            elif self.strict_mode:
                bookkeeping.errors.append(f"Required token [{key}] is not defined")

        return result

    def replace_tokens_in_batch(self, texts: Iterable[str]) -> List[TokenReplacementResult]:
        return [self.replace_tokens(text) for text in texts]

    def validate_tokens(self) -> TokenValidationReport:
        """Check current values against the token dictionary."""

        errors: List[str] = []
        warnings: List[str] = []
        for key, value in self._tokens.items():
            if get_token_definition(key) is None:
                warnings.append(f"Unknown token: {key}")
                continue
            errors.extend(validate_token_value(key, value).errors)
        return TokenValidationReport(valid=not errors, errors=errors, warnings=warnings)

    def get_missing_tokens(self, required_tokens: Iterable[str]) -> List[str]:
        return [token for token in required_tokens if not self._tokens.get(token)]

    def create_context(self, additional_tokens: Optional[Mapping[str, str]] = None) -> "TokenResolver":
        return TokenResolver({**self._tokens, **(additional_tokens or {})}, self.strict_mode)

    def clone(self) -> "TokenResolver":
        return TokenResolver(dict(self._tokens), self.strict_mode)

    def clear(self) -> "TokenResolver":
        self._tokens = {}
        return self

    def to_dict(self) -> Dict[str, str]:
        return dict(self._tokens)

    def from_dict(self, data: Mapping[str, str]) -> "TokenResolver":
        self._tokens = dict(data)
        return self

    def get_stats(self) -> TokenStats:
        keys = list(self._tokens)
        defined = [key for key in keys if self._tokens[key] is not None]
        return TokenStats(
            total_tokens=len(keys),
            defined_tokens=len(defined),
            undefined_tokens=len(keys) - len(defined),
            token_keys=keys,
        )


def replace_tokens(
    text: str, token_values: Optional[Mapping[str, str]] = None, strict_mode: bool = False
) -> TokenReplacementResult:
    """Resolve ``text`` with a throwaway resolver."""

    return TokenResolver(token_values, strict_mode).replace_tokens(text)


def extract_tokens(text: str) -> List[str]:
    """Return unique ``[KEY]`` keys in order of first appearance."""

    keys: List[str] = []
    for match in TOKEN_KEY_PATTERN.finditer(text or ""):
        if match.group(1) not in keys:
            keys.append(match.group(1))
    return keys


def convert_token_format(text: str, source: str, target: str) -> str:
    """Rewrite placeholders from one content type's syntax to another's."""

    if source not in TOKEN_FORMATS or target not in TOKEN_FORMATS:
        raise ValueError(f"content types must be one of {sorted(TOKEN_FORMATS)}")
    pattern, _ = TOKEN_FORMATS[source]
    _, template = TOKEN_FORMATS[target]
    return pattern.sub(lambda match: template.format(key=match.group(1)), text)
