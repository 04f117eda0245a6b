import asyncio
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[3]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from promptcraft.prompt_builder.builder import (
    PromptBuilder,
    composite_component,
    conditional_component,
    text_component,
    token_component,
)
from promptcraft.prompt_builder.models import BuilderOptions, PromptComponent, PromptCondition


def build(builder):
    return asyncio.run(builder.build())


def test_chained_parts_join_with_spaces():
    result = build(
        PromptBuilder().text("portrait of").token("FIRSTNAME").style("anime").with_tokens({"FIRSTNAME": "Ada"})
    )

    assert result.success
    assert result.prompt == "portrait of Ada in anime style"
    assert result.tokens == {"FIRSTNAME": "Ada"}
    assert result.metadata is None


def test_missing_token_stays_literal_and_is_reported():
    result = build(PromptBuilder().text("portrait of").token("FIRSTNAME"))

    assert result.prompt == "portrait of [FIRSTNAME]"
    assert result.errors == ["Required token [FIRSTNAME] is missing or empty"]
    assert not result.success


def test_token_validation_can_be_disabled():
    result = build(PromptBuilder(BuilderOptions(validate_tokens=False)).token("FIRSTNAME"))

    assert result.success
    assert result.prompt == "[FIRSTNAME]"


def test_text_placeholders_resolve_through_resolver():
    result = build(PromptBuilder().text("[NAME|Guest] figure, made by [COMPANY]").with_token("COMPANY", "Acme"))

    assert result.prompt == "Guest figure, made by Acme"
    assert result.success


def test_strict_mode_reports_undefined_text_placeholders():
    result = build(PromptBuilder(BuilderOptions(strict_mode=True)).text("hello [NAME]"))

    assert any("is not defined" in error for error in result.errors)
    assert "Required token [NAME] is missing or empty" in result.errors


def test_conditional_picks_branch_by_presence():
    def builder():
        return PromptBuilder().text("a hero").conditional("COMPANY", "wearing a [COMPANY] hoodie", "in casual clothes")

    with_company = build(builder().with_token("COMPANY", "Acme"))
    without_company = build(builder())

    assert with_company.prompt == "a hero wearing a Acme hoodie"
    assert without_company.prompt == "a hero in casual clothes"
    assert without_company.success


def test_unmet_conditional_without_else_is_skipped():
    result = build(PromptBuilder().text("a").conditional("VIP", "golden").text("b"))

    assert result.prompt == "a b"


def test_empty_string_does_not_satisfy_exists():
    result = build(PromptBuilder().conditional("VIP", "golden", "plain").with_token("VIP", ""))

    assert result.prompt == "plain"


@pytest.mark.parametrize(
    "operator, value, tier, expected",
    [
        ("equals", "gold", "gold", "shiny armor"),
        ("equals", "gold", "silver", "plain armor"),
        ("not_equals", "gold", "silver", "shiny armor"),
        ("contains", "old", "golden", "shiny armor"),
        ("contains", "old", "bronze", "plain armor"),
    ],
)
def test_comparison_operators(operator, value, tier, expected):
    builder = PromptBuilder().conditional("TIER", "shiny armor", "plain armor", operator=operator, value=value)

    assert build(builder.with_token("TIER", tier)).prompt == expected


def test_composite_joins_children_and_skips_empty_branches():
    children = [
        text_component("a"),
        token_component("HERO"),
        conditional_component("CAPE", text_component("with a cape")),
    ]
    result = build(PromptBuilder().composite("subject", children).with_token("HERO", "knight"))

    assert result.prompt == "a knight"
    assert result.success


def test_composite_children_are_validated():
    result = build(PromptBuilder().composite("subject", [text_component("a"), token_component("HERO")]))

    assert result.errors == ["Required token [HERO] is missing or empty"]


def test_nested_composites():
    inner = composite_component("inner", [text_component("in"), text_component("the rain")])
    result = build(PromptBuilder().composite("outer", [text_component("dancing"), inner]))

    assert result.prompt == "dancing in the rain"


def test_long_prompt_is_truncated_with_warning():
    result = build(PromptBuilder(BuilderOptions(max_length=20)).text("x" * 50))

    assert result.prompt == "x" * 17 + "..."
    assert len(result.prompt) == 20
    assert result.warnings == ["Prompt truncated to 20 characters"]


@pytest.mark.parametrize("max_length, expected", [(1, "x"), (2, "xx"), (3, "xxx"), (4, "x...")])
def test_tiny_limits_never_exceed_max_length(max_length, expected):
    result = build(PromptBuilder(BuilderOptions(max_length=max_length)).text("x" * 10))

    assert result.prompt == expected
    assert len(result.prompt) <= max_length


def test_phrase_helpers():
    result = build(
        PromptBuilder()
        .text("a fox")
        .quality("maximum")
        .aspect_ratio("16:9")
        .lighting("golden hour")
        .composition("rule of thirds")
        .colors("warm autumn")
    )

    assert result.prompt == (
        "a fox maximum quality, ultra detailed 16:9 aspect ratio with golden hour lighting "
        "rule of thirds with warm autumn color scheme"
    )


@pytest.mark.parametrize(
    "call",
    [
        lambda builder: builder.style("baroque"),
        lambda builder: builder.quality("insane"),
        lambda builder: builder.aspect_ratio("5:4"),
    ],
)
def test_invalid_enumerated_values_raise(call):
    with pytest.raises(ValueError):
        call(PromptBuilder())


def test_metadata_only_when_requested():
    result = build(
        PromptBuilder(BuilderOptions(include_metadata=True)).text("a").token("HERO").with_token("HERO", "knight")
    )

    assert result.metadata.template_id == "custom-built"
    assert result.metadata.character_count == len(result.prompt)
    assert result.metadata.token_count == 1
    assert "generated_at" in result.to_dict()["metadata"]


def test_build_and_build_sync_agree():
    builder = PromptBuilder().text("a").token("HERO").with_token("HERO", "knight")

    assert build(builder).prompt == builder.build_sync().prompt


def test_clone_and_clear_are_independent():
    original = PromptBuilder(BuilderOptions(max_length=100)).text("a")
    twin = original.clone().text("b")
    twin.options.max_length = 5

    assert len(original.get_components()) == 1
    assert len(twin.get_components()) == 2
    assert original.options.max_length == 100
    assert original.clear().get_components() == []
    assert len(twin.get_components()) == 2


def test_component_models_reject_invalid_shapes():
    with pytest.raises(ValueError):
        PromptCondition(token="A", operator="matches", then=text_component("x"))
    with pytest.raises(ValueError):
        PromptCondition(token="A", operator="equals", then=text_component("x"))
    with pytest.raises(ValueError):
        PromptComponent(type="conditional")
    with pytest.raises(ValueError):
        PromptComponent(type="composite", children=["not a component"])
    with pytest.raises(ValueError):
        PromptComponent(type="image")
