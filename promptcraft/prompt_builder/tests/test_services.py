import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[3]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from promptcraft.prompt_builder.models import GenerationRequest
from promptcraft.prompt_builder.services import GenerationHandoff, PromptPipelineService
from promptcraft.prompt_builder.validator import validate_prompt


def test_prepare_resolves_validates_and_enhances():
    service = PromptPipelineService({"tokens": {"values": {"FIRSTNAME": "Ada"}}})

    request = service.prepare("[FIRSTNAME] as a robot", "action-figure")

    assert request.prompt.startswith("Ada as a robot")
    assert request.category == "action-figure"
    assert request.provider == "openai"
    assert "watermark" in request.negative_prompt
    assert request.metadata["original_prompt"] == "[FIRSTNAME] as a robot"
    assert request.metadata["quality_score"] > request.metadata["original_score"]
    assert request.metadata["token_errors"] == []


def test_call_values_override_configured_tokens_and_provider():
    service = PromptPipelineService(
        {"tokens": {"values": {"FIRSTNAME": "Ada"}}, "generation": {"provider": "gemini"}}
    )

    request = service.prepare("[FIRSTNAME] as a robot", token_values={"FIRSTNAME": "Bo"}, provider="gemini-nano")

    assert request.prompt.startswith("Bo as a robot")
    assert request.provider == "gemini-nano"
    assert request.category == "ai-image"


def test_enhancement_options_layer_config_and_overrides():
    service = PromptPipelineService({"enhancement": {"category": "cartoon", "quality": "ultra"}})

    assert service.enhancement_options().quality == "ultra"
    assert service.enhancement_options(quality=None).quality == "ultra"
    assert service.enhancement_options("meme", quality="standard").category == "meme"

    with pytest.raises(ValueError):
        service.enhancement_options("poster")


def test_builder_options_come_from_builder_section():
    service = PromptPipelineService(
        {"builder": {"max_length": 120, "strict_mode": True, "legacy_key": 1}, "tokens": {"values": {"HERO": "Ada"}}}
    )

    options = service.builder_options()
    assert options.max_length == 120
    assert options.strict_mode is True
    assert options.validate_tokens is True
    assert service.builder_options(max_length=None, include_metadata=True).max_length == 120
    assert service.builder_options(include_metadata=True).include_metadata is True

    result = service.new_builder().text("[HERO] rides").build_sync()
    assert result.prompt == "Ada rides"
    assert result.success


def test_resolve_merges_configured_and_call_tokens():
    service = PromptPipelineService({"tokens": {"values": {"HERO": "Ada", "PET": "cat"}, "strict_mode": True}})

    result = service.resolve("[HERO] and [PET] meet [VILLAIN]", {"PET": "dragon"})

    assert result.replaced == "Ada and dragon meet [VILLAIN]"
    assert len(result.errors) == 1


def test_payload_uses_generation_api_field_names():
    payload = GenerationRequest(prompt="a robot", negative_prompt="blurry").to_payload()

    assert payload["negativePrompt"] == "blurry"
    assert "negativePrompt" not in GenerationRequest(prompt="a robot").to_payload()


@pytest.mark.parametrize("request_kwargs", [{"prompt": "   "}, {"prompt": "a robot", "provider": "dalle"}])
def test_invalid_request_is_rejected(request_kwargs):
    with pytest.raises(ValueError):
        GenerationRequest(**request_kwargs).to_payload()


def test_preflight_blocks_on_errors_only():
    hooks = GenerationHandoff(Path("unused.json"))

    assert "Prompt is too short" in hooks.preflight(validate_prompt("a cat"))
    assert hooks.preflight(validate_prompt("a photorealistic cartoon cat")) is None


def test_publish_writes_bundle(tmp_path):
    bundle = tmp_path / "nested" / "request.json"
    request = PromptPipelineService().prepare("a knight guarding a bridge", "wrestling")

    payload = GenerationHandoff(bundle).publish(request)

    written = json.loads(bundle.read_text(encoding="utf-8"))
    assert written == payload
    assert written["bundle_path"] == str(bundle)
    assert written["compiled_at"].endswith("Z")
    assert written["category"] == "wrestling"


def test_bundle_path_honours_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("PROMPTCRAFT_BUNDLE_PATH", str(tmp_path / "env.json"))

    assert GenerationHandoff().bundle_path == tmp_path / "env.json"
