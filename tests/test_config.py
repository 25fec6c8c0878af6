import os

import pytest
import yaml

from namaz_timer.core.config import DEFAULT_CONFIG, Config


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def test_missing_file_is_created_with_defaults(tmp_path):
    path = tmp_path / "conf" / "config.yaml"

    config = Config(config_path=str(path))

    assert path.exists()
    assert yaml.safe_load(path.read_text()) == DEFAULT_CONFIG
    assert config.get("source", "backend") == "astronomical"
    assert config.get("api", "port") == 8765


def test_partial_file_is_merged_with_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("location:\n  latitude: 31.5204\n  longitude: 74.3587\nsource:\n  backend: aladhan\n")

    config = Config(config_path=str(path))

    assert config.get("location", "latitude") == 31.5204
    assert config.get("location", "utc_offset") is None
    assert config.get("source", "backend") == "aladhan"
    assert config.get("source", "method") == 2
    assert config.section("database")["enabled"] is True
    assert config.section("nonexistent") == {}
    assert config.get("nonexistent", "key", "fallback") == "fallback"


def test_environment_substitution(tmp_path, monkeypatch):
    monkeypatch.setenv("NAMAZ_TEST_DB", "/tmp/elsewhere.db")
    path = tmp_path / "config.yaml"
    path.write_text("database:\n  path: ${NAMAZ_TEST_DB}\nlogging:\n  file: $NAMAZ_TEST_UNSET_VAR\n")

    config = Config(config_path=str(path))

    assert config.get("database", "path") == "/tmp/elsewhere.db"
    assert config.get("logging", "file") == "$NAMAZ_TEST_UNSET_VAR"


def test_env_file_is_loaded_without_overriding(tmp_path, monkeypatch):
    monkeypatch.setenv("NAMAZ_TEST_PRESET", "from-environment")
    (tmp_path / ".env").write_text(
        "# location secrets\nNAMAZ_TEST_FROM_FILE='from-file'\nNAMAZ_TEST_PRESET=from-file\n"
    )
    path = tmp_path / "config.yaml"
    path.write_text("api:\n  host: ${NAMAZ_TEST_FROM_FILE}\nlogging:\n  level: ${NAMAZ_TEST_PRESET}\n")

    try:
        config = Config(config_path=str(path))
        assert config.get("api", "host") == "from-file"
        assert config.get("logging", "level") == "from-environment"
    finally:
        os.environ.pop("NAMAZ_TEST_FROM_FILE", None)


def test_invalid_yaml_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("location: [unclosed\n")

    config = Config(config_path=str(path))

    assert config.data == DEFAULT_CONFIG


def test_non_mapping_root_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")

    config = Config(config_path=str(path))

    assert config.data == DEFAULT_CONFIG


def test_data_skips_file(tmp_path):
    config = Config(data={"location": {"latitude": 1, "longitude": 2}})

    assert config.config_file is None
    assert config.get("location", "latitude") == 1
    assert config.get("cache", "coordinate_precision") == 2
    assert not list(tmp_path.iterdir())
