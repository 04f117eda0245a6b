import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from promptcraft import path_utils


def test_explicit_variables_win(tmp_path, monkeypatch):
    monkeypatch.setenv("PROMPTCRAFT_CONFIG_DIR", str(tmp_path / "cfg"))
    monkeypatch.delenv("PROMPTCRAFT_CONFIG_FILE", raising=False)
    monkeypatch.setenv("PROMPTCRAFT_BUNDLE_PATH", str(tmp_path / "out.json"))

    assert path_utils.get_config_file() == tmp_path / "cfg" / "config.yaml"
    assert path_utils.get_bundle_path() == tmp_path / "out.json"


def test_config_file_variable_overrides_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("PROMPTCRAFT_CONFIG_DIR", str(tmp_path / "cfg"))
    monkeypatch.setenv("PROMPTCRAFT_CONFIG_FILE", str(tmp_path / "other.json"))

    assert path_utils.get_config_file() == tmp_path / "other.json"


def test_windows_uses_appdata_folders(tmp_path, monkeypatch):
    for name in ("PROMPTCRAFT_CONFIG_DIR", "PROMPTCRAFT_CONFIG_FILE", "PROMPTCRAFT_BUNDLE_PATH"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(path_utils.platform, "system", lambda: "Windows")
    monkeypatch.setenv("APPDATA", str(tmp_path / "roaming"))
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "local"))

    assert path_utils.get_config_file() == tmp_path / "roaming" / "PromptCraft" / "config.yaml"
    assert path_utils.get_bundle_path() == tmp_path / "local" / "PromptCraft" / "generation_request.json"


def test_unix_defaults_live_under_home(monkeypatch):
    for name in ("PROMPTCRAFT_CONFIG_DIR", "PROMPTCRAFT_CONFIG_FILE", "PROMPTCRAFT_BUNDLE_PATH"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(path_utils.platform, "system", lambda: "Linux")

    assert path_utils.get_config_root() == Path.home() / ".config" / "promptcraft"
    assert path_utils.get_bundle_path() == Path.home() / ".cache" / "promptcraft" / "generation_request.json"
