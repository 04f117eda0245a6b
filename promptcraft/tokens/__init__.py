"""Token dictionary and placeholder resolution."""
from __future__ import annotations

from .definitions import get_all_tokens, get_token_definition, validate_token_value
from .resolver import TokenResolver, replace_tokens

__all__ = [
    "TokenResolver",
    "get_all_tokens",
    "get_token_definition",
    "replace_tokens",
    "validate_token_value",
]
