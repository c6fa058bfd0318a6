"""Tests for echolog.core.config."""

import os

import pytest
import yaml

from echolog.core.config import Config, get_config, reset_config
from echolog.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _reset_singleton():
    """Reset config singleton between tests."""
    reset_config()
    yield
    reset_config()


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.get("paths.data_dir").endswith(".echolog-data")
        assert config.get("journal.entries_key") == "ECHOLOG_ENTRIES_V1"
        assert config.get("journal.places_key") == "ECHOLOG_PLACE_MAP_V1"
        assert config.get("journal.default_place") == "Unknown place"
        assert config.get("journal.enrich_location") is False

    def test_custom_data_dir(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get("paths.data_dir") == tmp_dir
        assert config.get("paths.storage_dir") == os.path.join(tmp_dir, "storage")

    def test_custom_env_prefix(self, monkeypatch, tmp_dir):
        monkeypatch.setenv("MYAPP_JOURNAL__DEFAULT_PLACE", "Home")
        config = Config(env_prefix="MYAPP_", data_dir=tmp_dir)
        assert config.get("journal.default_place") == "Home"

    def test_yaml_config_file(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.yaml")
        with open(config_path, "w") as f:
            yaml.dump({"journal": {"default_place": "Office", "enrich_location": True}}, f)

        config = Config(config_file=config_path, data_dir=tmp_dir)
        assert config.get("journal.default_place") == "Office"
        assert config.get("journal.enrich_location") is True
        assert config.get("journal.entries_key") == "ECHOLOG_ENTRIES_V1"

    def test_json_config_file(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.json")
        with open(config_path, "w") as f:
            f.write('{"location": {"lat": 43.0, "lng": -79.0}}')

        config = Config(config_file=config_path, data_dir=tmp_dir)
        assert config.get("location.lat") == 43.0

    def test_data_dir_in_file_relocates_subdirectories(self, tmp_config_file, tmp_dir):
        config = Config(config_file=tmp_config_file)
        data_dir = os.path.join(tmp_dir, "data")
        assert config.get("paths.storage_dir") == os.path.join(data_dir, "storage")
        assert config.get("paths.log_dir") == os.path.join(data_dir, "logs")

    def test_env_overrides_file(self, tmp_dir, monkeypatch):
        config_path = os.path.join(tmp_dir, "config.yaml")
        with open(config_path, "w") as f:
            yaml.dump({"journal": {"default_place": "Office"}}, f)

        monkeypatch.setenv("ECHOLOG_JOURNAL__DEFAULT_PLACE", "Cafe")
        config = Config(config_file=config_path, data_dir=tmp_dir)
        assert config.get("journal.default_place") == "Cafe"

    def test_unparseable_file_raises(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.yaml")
        with open(config_path, "w") as f:
            f.write("journal: [unclosed")

        with pytest.raises(ConfigurationError):
            Config(config_file=config_path, data_dir=tmp_dir)

    def test_non_mapping_file_raises(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.yaml")
        with open(config_path, "w") as f:
            f.write("- just\n- a list\n")

        with pytest.raises(ConfigurationError):
            Config(config_file=config_path, data_dir=tmp_dir)

    def test_missing_file_uses_defaults(self, tmp_dir):
        config = Config(config_file=os.path.join(tmp_dir, "absent.yaml"), data_dir=tmp_dir)
        assert config.get("journal.default_place") == "Unknown place"

    def test_get_missing_key(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get("nonexistent.key") is None
        assert config.get("nonexistent.key", "fallback") == "fallback"

    def test_set(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        config.set("custom.nested.value", 42)
        assert config.get("custom.nested.value") == 42

    def test_get_data_dir(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get_data_dir() == tmp_dir

    def test_ensure_directories(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        config.ensure_directories()
        assert os.path.isdir(os.path.join(tmp_dir, "storage"))
        assert os.path.isdir(os.path.join(tmp_dir, "logs"))

    def test_extra_defaults(self, tmp_dir):
        config = Config(data_dir=tmp_dir, defaults={"custom": {"key": "value"}})
        assert config.get("custom.key") == "value"


class TestGetConfig:
    def test_singleton(self, tmp_dir):
        c1 = get_config(data_dir=tmp_dir)
        c2 = get_config()
        assert c1 is c2

    def test_reset_clears_singleton(self, tmp_dir):
        c1 = get_config(data_dir=tmp_dir)
        reset_config()
        c2 = get_config(data_dir=tmp_dir)
        assert c1 is not c2
