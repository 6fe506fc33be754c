import pytest


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    # Keep user config files and environment overrides out of the test run
    monkeypatch.delenv("VOXELSCOPE_HIGHLIGHT_COLOR", raising=False)
    monkeypatch.delenv("VOXELSCOPE_TILE_ID_KEY", raising=False)
    monkeypatch.delenv("APPDATA", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
