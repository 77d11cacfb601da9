"""Test configuration management"""
import json
import tempfile
from pathlib import Path

import pytest

from bingoboard.common import config as config_module
from bingoboard.common.config import ConfigManager, get_config
from bingoboard.common.enums import GridPivot


@pytest.fixture
def temp_config_file():
    """Create a temporary config file path"""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
        config_file = Path(f.name)
    config_file.unlink()
    yield config_file
    # Cleanup
    if config_file.exists():
        config_file.unlink()


@pytest.fixture
def config_manager(temp_config_file):
    """Create a config manager instance"""
    return ConfigManager(temp_config_file)


def test_create_default_config(config_manager, temp_config_file):
    """Test creating default configuration"""
    assert temp_config_file.exists()
    assert config_manager.data["columns"] == 5
    assert config_manager.data["rows"] == 5
    assert config_manager.data["spacing"] == [10.0, 10.0]

    on_disk = json.loads(temp_config_file.read_text(encoding="utf-8"))
    assert on_disk["pipe_path"] == "BingoPipe"


def test_defaults_not_shared(config_manager):
    """Test changing loaded data leaves the class defaults alone"""
    config_manager.data["padding"]["left"] = 42
    assert ConfigManager.DEFAULT_CONFIG["padding"]["left"] == 0


def test_merge_with_defaults(temp_config_file):
    """Test a partial config is completed with defaults and saved back"""
    temp_config_file.write_text(
        json.dumps({"columns": 3, "padding": {"top": 4}}), encoding="utf-8"
    )

    config = ConfigManager(temp_config_file)
    assert config.data["columns"] == 3
    assert config.data["rows"] == 5
    assert config.data["padding"] == {"left": 0, "right": 0, "top": 4, "bottom": 0}

    on_disk = json.loads(temp_config_file.read_text(encoding="utf-8"))
    assert "fps" in on_disk


def test_invalid_json_falls_back(temp_config_file):
    """Test a broken config file is replaced with defaults"""
    temp_config_file.write_text("{not json", encoding="utf-8")

    config = ConfigManager(temp_config_file)
    assert config.data["columns"] == 5
    json.loads(temp_config_file.read_text(encoding="utf-8"))


def test_reload_config(config_manager):
    """Test reloading configuration"""
    config_manager.data["columns"] = 9
    config_manager.reload_config()
    assert config_manager.data["columns"] == 5

    config_manager.data["columns"] = 9
    config_manager.save()
    config_manager.reload_config()
    assert config_manager.data["columns"] == 9


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("UPPER_LEFT", GridPivot.UPPER_LEFT),
        ("center", GridPivot.CENTER),
        ("BottomRight", GridPivot.BOTTOM_RIGHT),
        ("upper-center", GridPivot.UPPER_CENTER),
        ("sideways", GridPivot.UPPER_LEFT),
    ],
)
def test_get_pivot(config_manager, raw, expected):
    """Test pivot names are parsed leniently"""
    config_manager.data["grid_pivot"] = raw
    assert config_manager.get_pivot("grid_pivot") == expected


def test_get_fps(config_manager):
    """Test the frame rate never drops below 1"""
    assert config_manager.get_fps() == 15.0
    config_manager.data["fps"] = 0.25
    assert config_manager.get_fps() == 1.0
    config_manager.data["fps"] = "fast"
    assert config_manager.get_fps() == 15.0


def test_get_pipe_path(config_manager, temp_config_file):
    """Test relative pipe paths resolve next to the config file"""
    assert config_manager.get_pipe_path() == temp_config_file.resolve().parent / "BingoPipe"

    config_manager.data["pipe_path"] = "/tmp/elsewhere"
    assert config_manager.get_pipe_path() == Path("/tmp/elsewhere")


def test_global_config_manager(tmp_path, monkeypatch):
    """Test global config manager singleton"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_module, "_config_manager", None)

    config1 = get_config()
    config2 = get_config()

    # Should be the same instance
    assert config1 is config2
