
import pytest
from app.core.config_loader import load_config

@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("ARTIFACT_INSPECTOR_CONFIG_FILE", raising=False)
    monkeypatch.delenv("ARTIFACT_INSPECTOR_CONFIG_DIR", raising=False)
    monkeypatch.delenv("ARTIFACT_INSPECTOR_ENV", raising=False)

def test_legacy_download_dir_mapping(tmp_path, monkeypatch, clean_env):
    """
    Test that top-level download_dir is mapped to paths.download_dir.
    """
    config_file = tmp_path / "legacy.yaml"
    config_file.write_text("""
download_dir: files
paths:
  preview_dir: previews
""", encoding='utf-8')

    monkeypatch.setenv("ARTIFACT_INSPECTOR_CONFIG_FILE", str(config_file))

    status = load_config()
    assert status["status"] == "OK"
    data = status["data"]

    assert "download_dir" not in data
    assert data["paths"]["download_dir"] == str(tmp_path / "files")

def test_legacy_key_ignored_when_paths_set(tmp_path, monkeypatch, clean_env):
    config_file = tmp_path / "both.yaml"
    config_file.write_text("""
download_dir: old
paths:
  download_dir: new
""", encoding='utf-8')

    monkeypatch.setenv("ARTIFACT_INSPECTOR_CONFIG_FILE", str(config_file))

    status = load_config()
    assert status["status"] == "OK"
    assert status["data"]["paths"]["download_dir"] == str(tmp_path / "new")

def test_missing_paths_error(tmp_path, monkeypatch, clean_env):
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text("""
extraction:
  list_limit: 10
""", encoding='utf-8')

    monkeypatch.setenv("ARTIFACT_INSPECTOR_CONFIG_FILE", str(config_file))

    status = load_config()
    assert status["status"] == "ERROR"
    assert "Missing required section: 'paths'" in status["error"]
    # data is kept for debugging
    assert status["data"]["extraction"]["list_limit"] == 10

def test_invalid_type_error(tmp_path, monkeypatch, clean_env):
    config_file = tmp_path / "bad_type.yaml"
    config_file.write_text("""
paths:
  download_dir: files
extraction:
  external_tools: "yes" # String instead of bool
""", encoding='utf-8')

    monkeypatch.setenv("ARTIFACT_INSPECTOR_CONFIG_FILE", str(config_file))

    status = load_config()
    assert status["status"] == "ERROR"
    assert "Field 'external_tools' must be boolean" in status["error"]
