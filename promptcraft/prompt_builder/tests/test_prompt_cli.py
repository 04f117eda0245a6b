import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[3]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from promptcraft.prompt_builder import __main__ as prompt_cli


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "missing.yaml")


def run_cli(capsys, *argv):
    assert prompt_cli.main(list(argv)) == 0
    return json.loads(capsys.readouterr().out)


def test_cli_enhances_prompt(config_path, capsys):
    payload = run_cli(
        capsys, "--config", config_path, "enhance", "--prompt", "a robot", "--category", "action-figure"
    )

    assert payload["enhanced"].startswith("a robot")
    assert payload["detected_image_type"] == "photograph"
    assert "blurry" in payload["negative_prompt"]


def test_cli_can_skip_negative_prompt(config_path, capsys):
    payload = run_cli(capsys, "--config", config_path, "enhance", "--prompt", "a robot", "--no-negative")

    assert payload["negative_prompt"] == ""


def test_cli_validate_adds_label(config_path, capsys):
    payload = run_cli(capsys, "--config", config_path, "validate", "--prompt", "a cat")

    assert payload["score"] == 25
    assert payload["label"] == "Poor"
    assert payload["breakdown"]["has_subject"] is True


def test_cli_resolves_tokens(config_path, capsys):
    payload = run_cli(
        capsys,
        "--config",
        config_path,
        "resolve",
        "--text",
        "Hi [NAME|Guest] from [COMPANY]",
        "--token",
        "COMPANY=Acme",
    )

    assert payload["replaced"] == "Hi Guest from Acme"
    assert payload["tokens_replaced"] == ["COMPANY"]


def test_cli_strict_resolution_reports_missing(config_path, capsys):
    payload = run_cli(capsys, "--config", config_path, "resolve", "--text", "[MISSING]", "--strict")

    assert len(payload["errors"]) == 1


def test_cli_uses_configured_token_values(tmp_path, capsys):
    config = tmp_path / "config.yaml"
    config.write_text("tokens:\n  values:\n    NAME: Ada\n", encoding="utf-8")

    payload = run_cli(capsys, "--config", str(config), "resolve", "--text", "Hello [NAME]")

    assert payload["replaced"] == "Hello Ada"


def test_cli_preserves_placeholders(config_path, capsys):
    payload = run_cli(
        capsys,
        "--config",
        config_path,
        "preserve",
        "--prompt",
        "portrait of {FIRSTNAME}",
        "--category",
        "ghibli",
    )

    assert "{FIRSTNAME}" in payload["enhanced"]
    assert payload["warnings"] == ["Unresolved token: FIRSTNAME"]


def test_cli_publishes_generation_request(tmp_path, config_path, capsys):
    bundle = tmp_path / "bundle.json"

    payload = run_cli(
        capsys,
        "--config",
        config_path,
        "request",
        "--prompt",
        "[HERO] guarding a bridge",
        "--token",
        "HERO=a knight",
        "--category",
        "retro",
        "--publish",
        "--bundle",
        str(bundle),
    )

    assert bundle.exists()
    assert payload["prompt"].startswith("a knight guarding a bridge")
    assert payload["provider"] == "openai"
    assert "negativePrompt" in payload


def test_cli_publish_refuses_invalid_prompt(tmp_path, config_path):
    with pytest.raises(SystemExit) as excinfo:
        prompt_cli.main(
            ["--config", config_path, "request", "--prompt", "a cat", "--publish", "--bundle", str(tmp_path / "b.json")]
        )

    assert "Resolve prompt errors" in str(excinfo.value)
    assert not (tmp_path / "b.json").exists()


def test_cli_publish_gates_on_resolved_prompt(tmp_path, config_path, capsys):
    bundle = tmp_path / "bundle.json"

    payload = run_cli(
        capsys,
        "--config",
        config_path,
        "request",
        "--prompt",
        "[SUBJ]",
        "--token",
        "SUBJ=a detailed portrait of a knight in golden light",
        "--publish",
        "--bundle",
        str(bundle),
    )

    assert bundle.exists()
    assert payload["prompt"].startswith("a detailed portrait of a knight in golden light")


def test_cli_publish_blocks_when_resolution_is_too_short(tmp_path, config_path):
    bundle = tmp_path / "bundle.json"

    with pytest.raises(SystemExit) as excinfo:
        prompt_cli.main(
            ["--config", config_path, "request", "--prompt", "[SUBJ|a cat]", "--publish", "--bundle", str(bundle)]
        )

    assert "Prompt is too short" in str(excinfo.value)
    assert not bundle.exists()


def test_cli_compose_uses_builder_config(tmp_path, capsys):
    config = tmp_path / "config.yaml"
    config.write_text(
        "builder:\n  max_length: 10\ntokens:\n  values:\n    HERO: Ada\n", encoding="utf-8"
    )

    payload = run_cli(capsys, "--config", str(config), "compose", "--text", "[HERO]", "--text", "rides a dragon")

    assert payload["prompt"] == "Ada rid..."
    assert payload["warnings"] == ["Prompt truncated to 10 characters"]
    assert payload["success"] is True

    payload = run_cli(capsys, "--config", str(config), "compose", "--text", "[HERO] rides", "--max-length", "50")

    assert payload["prompt"] == "Ada rides"


def test_cli_rejects_malformed_token(config_path):
    with pytest.raises(SystemExit) as excinfo:
        prompt_cli.main(["--config", config_path, "resolve", "--text", "[A]", "--token", "A"])

    assert "KEY=value" in str(excinfo.value)


@pytest.mark.parametrize("name, text", [("bad.json", "[1, 2]"), ("bad.json", "{not json"), ("bad.yaml", "a: [1, 2\n")])
def test_cli_reports_bad_config(tmp_path, capsys, name, text):
    config = tmp_path / name
    config.write_text(text, encoding="utf-8")

    assert prompt_cli.main(["--config", str(config), "validate", "--prompt", "a robot dancing"]) == 1
    assert "[error]" in capsys.readouterr().err
