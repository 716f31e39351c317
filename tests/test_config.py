"""
Tests for configuration schemas, defaults and the configuration manager.
"""

import json

import pytest
from pydantic import ValidationError

from cineplux.core.config_defaults import BUILTIN_PROVIDERS, get_default_providers
from cineplux.core.config_manager import ConfigManager
from cineplux.core.config_schemas import DetailConfig, ProviderConfig
from cineplux.core.exceptions import ConfigurationError


class TestSchemas:
    """Test provider record validation."""

    def test_base_url_is_normalized(self):
        config = ProviderConfig(name="X", base_url="https://site.test/")
        assert config.base_url == "https://site.test"

    def test_relative_base_url_rejected(self):
        with pytest.raises(ValidationError):
            ProviderConfig(name="X", base_url="/site")

    def test_poster_replacement_needs_two_items(self):
        with pytest.raises(ValidationError):
            DetailConfig(poster_from_backdrop=["original"])

    def test_provider_record_round_trips_through_json(self):
        config = BUILTIN_PROVIDERS["cuevana"]()
        restored = ProviderConfig.model_validate(json.loads(json.dumps(config.model_dump(mode="json"))))
        assert restored == config

    def test_enabled_providers_sorted_by_priority(self):
        providers = get_default_providers()
        providers.providers["cuevana"] = providers.providers["cuevana"].model_copy(update={"priority": 50})

        keys = list(providers.get_enabled_providers())
        assert keys[-1] == "cuevana"
        assert keys[0] == "cinecalidad"


class TestConfigManager:
    """Test JSON persistence and updates."""

    def test_creates_default_files(self, tmp_path):
        manager = ConfigManager(tmp_path)

        assert (tmp_path / "settings.json").exists()
        assert (tmp_path / "providers.json").exists()
        assert set(manager.providers.providers) == set(BUILTIN_PROVIDERS)
        assert manager.settings.http.timeout == 60

    def test_update_and_get_setting(self, tmp_path):
        manager = ConfigManager(tmp_path)

        manager.update_setting("http.timeout", 90)

        assert manager.get_setting("http.timeout") == 90
        assert ConfigManager(tmp_path).settings.http.timeout == 90
        assert manager.get_setting("http.missing", "fallback") == "fallback"

    def test_invalid_setting(self, tmp_path):
        manager = ConfigManager(tmp_path)

        with pytest.raises(ConfigurationError):
            manager.update_setting("http.timeout", 1)
        with pytest.raises(ConfigurationError):
            manager.update_setting("http.nope", 1)

    def test_disable_provider_persists(self, tmp_path):
        manager = ConfigManager(tmp_path)

        manager.disable_provider("cuevana")

        reloaded = ConfigManager(tmp_path)
        assert reloaded.providers.get_provider("cuevana").enabled is False
        assert "cuevana" not in reloaded.get_enabled_providers()

    def test_unknown_provider(self, tmp_path):
        manager = ConfigManager(tmp_path)

        with pytest.raises(ConfigurationError):
            manager.enable_provider("nope")

    def test_add_provider_record(self, tmp_path):
        manager = ConfigManager(tmp_path)

        manager.update_provider_config("local", {"name": "Local", "base_url": "https://local.test"})

        assert manager.providers.get_provider("local").base_url == "https://local.test"

    def test_corrupted_file_is_backed_up(self, tmp_path):
        (tmp_path / "settings.json").write_text("{not json", encoding="utf-8")

        manager = ConfigManager(tmp_path)

        assert (tmp_path / "settings.json.backup").exists()
        assert manager.settings.http.timeout == 60

    def test_validate_configuration(self, tmp_path):
        manager = ConfigManager(tmp_path)
        for key in list(manager.providers.providers):
            manager.disable_provider(key)

        report = manager.validate_configuration()

        assert report["valid"] is True
        assert "No providers are enabled" in report["warnings"]

    def test_reset_to_defaults(self, tmp_path):
        manager = ConfigManager(tmp_path)
        manager.update_setting("search.min_query_length", 5)

        manager.reset_to_defaults()

        assert manager.settings.search.min_query_length == 2
