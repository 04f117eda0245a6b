"""Static placeholder definitions shared by the resolver and the UI palette."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from .models import TokenDefinition, TokenGroup, TokenValidation, TokenValidationReport

PERSONAL_TOKENS = TokenGroup(
    name="Personal Information",
    description="User personal details for personalization",
    category="personal",
    tokens=(
        TokenDefinition(
            key="FIRSTNAME",
            value_type="string",
            required=False,
            default_value="User",
            description="User first name",
            examples=("John", "Sarah", "Mike"),
            validation=TokenValidation(min_length=1, max_length=50),
        ),
        TokenDefinition(
            key="LASTNAME",
            value_type="string",
            required=False,
            default_value="",
            description="User last name",
            examples=("Smith", "Johnson", "Williams"),
            validation=TokenValidation(min_length=1, max_length=50),
        ),
        TokenDefinition(
            key="FULLNAME",
            value_type="string",
            required=False,
            description="User full name (FIRSTNAME + LASTNAME)",
            examples=("John Smith", "Sarah Johnson"),
            validation=TokenValidation(min_length=1, max_length=100),
        ),
    ),
)

COMPANY_TOKENS = TokenGroup(
    name="Company Information",
    description="Company and business details",
    category="company",
    tokens=(
        TokenDefinition(
            key="COMPANY",
            value_type="string",
            required=False,
            default_value="the company",
            description="Company name",
            examples=("Acme Corp", "Tech Solutions Inc"),
            validation=TokenValidation(min_length=1, max_length=100),
        ),
        TokenDefinition(
            key="INDUSTRY",
            value_type="string",
            required=False,
            description="Company industry",
            examples=("Technology", "Healthcare", "Finance"),
            validation=TokenValidation(min_length=1, max_length=50),
        ),
    ),
)

SYSTEM_TOKENS = TokenGroup(
    name="System Tokens",
    description="Built-in dynamic tokens filled in at generation time",
    category="system",
    tokens=(
        TokenDefinition(
            key="CURRENT_DATE",
            value_type="string",
            required=False,
            description="Current date in YYYY-MM-DD format",
            examples=("2024-01-15",),
            validation=TokenValidation(pattern=r"^\d{4}-\d{2}-\d{2}$"),
        ),
        TokenDefinition(
            key="CURRENT_TIME",
            value_type="string",
            required=False,
            description="Current time in HH:MM format",
            examples=("14:30", "09:15"),
            validation=TokenValidation(pattern=r"^\d{2}:\d{2}$"),
        ),
    ),
)

ALL_TOKEN_GROUPS: Tuple[TokenGroup, ...] = (PERSONAL_TOKENS, COMPANY_TOKENS, SYSTEM_TOKENS)

_PYTHON_TYPES = {
    "number": (int, float),
    "boolean": bool,
    "array": (list, tuple),
    "object": dict,
}


def _index_definitions(groups: Tuple[TokenGroup, ...]) -> Dict[str, TokenDefinition]:
    index: Dict[str, TokenDefinition] = {}
    for group in groups:
        for definition in group.tokens:
            if definition.key in index:
                raise ValueError(f"Duplicate token key {definition.key} in group {group.name}")
            index[definition.key] = definition
    return index


_DEFINITIONS = _index_definitions(ALL_TOKEN_GROUPS)


def get_token_definition(key: str) -> Optional[TokenDefinition]:
    return _DEFINITIONS.get(key)


def get_all_tokens() -> List[TokenDefinition]:
    return [definition for group in ALL_TOKEN_GROUPS for definition in group.tokens]


def get_tokens_by_category() -> Dict[str, List[TokenDefinition]]:
    grouped: Dict[str, List[TokenDefinition]] = {}
    for group in ALL_TOKEN_GROUPS:
        grouped.setdefault(group.category, []).extend(group.tokens)
    return grouped


def default_token_values() -> Dict[str, Any]:
    """Return the declared defaults for tokens that have one."""

    return {
        definition.key: definition.default_value
        for definition in get_all_tokens()
        if definition.default_value is not None
    }


def _matches_type(value: Any, value_type: str) -> bool:
    if value_type == "string":
        return True
    py_type = _PYTHON_TYPES[value_type]
    # bool is an int subclass; keep it out of "number".
    if value_type == "number" and isinstance(value, bool):
        return False
    return isinstance(value, py_type)


def validate_token_value(key: str, value: Any) -> TokenValidationReport:
    """Check a value against the definition registered for ``key``.

    Unknown keys come back valid with a warning; callers decide severity.
    """

    definition = get_token_definition(key)
    if definition is None:
        return TokenValidationReport(valid=True, warnings=[f"Unknown token: {key}"])

    errors: List[str] = []
    if not _matches_type(value, definition.value_type):
        errors.append(f"Token {key} must be of type {definition.value_type}")

    rules = definition.validation
    if rules and definition.value_type == "string" and isinstance(value, str):
        if rules.min_length is not None and len(value) < rules.min_length:
            errors.append(f"Token {key} must be at least {rules.min_length} characters")
        if rules.max_length is not None and len(value) > rules.max_length:
            errors.append(f"Token {key} must be at most {rules.max_length} characters")
        if rules.pattern is not None and not re.search(rules.pattern, value):
            errors.append(f"Token {key} format is invalid")
        if rules.enum is not None and value not in rules.enum:
            errors.append(f"Token {key} must be one of: {', '.join(rules.enum)}")

    return TokenValidationReport(valid=not errors, errors=errors)
