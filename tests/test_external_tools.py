
import os
from unittest.mock import patch

from app.core.external_tools import PROGRAMS, ExternalTools

def test_config_override(tmp_path):
    binary = tmp_path / "my-unrar"
    binary.write_text("#!/bin/sh\n")
    config = {"extraction": {"tools": {"unrar": str(binary)}}}
    assert ExternalTools.find("unrar", config) == str(binary)

@patch("app.core.external_tools.shutil.which", return_value=None)
def test_missing_override_falls_through(mock_which, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = {"extraction": {"tools": {"unrar": str(tmp_path / "nope")}}}
    assert ExternalTools.find("unrar", config) is None

@patch("app.core.external_tools.shutil.which", return_value=None)
def test_local_tools_directory(mock_which, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    name = "lha.exe" if os.name == "nt" else "lha"
    (tmp_path / "tools" / "lha").mkdir(parents=True)
    (tmp_path / "tools" / "lha" / name).write_text("")
    assert ExternalTools.find("lha") == str(tmp_path / "tools" / "lha" / name)

@patch("app.core.external_tools.shutil.which", side_effect=lambda n: f"/usr/bin/{n}" if n.startswith("7z") else None)
def test_check_binaries(mock_which, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    results = ExternalTools.check_binaries()
    assert set(results) == set(PROGRAMS)
    assert results["7z"] is True
    assert results["arj"] is False
