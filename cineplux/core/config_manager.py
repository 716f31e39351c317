"""
Configuration Manager - JSON-based settings and provider configuration management.

This module provides centralized configuration management for CinePlux,
handling application settings and provider records with validation,
atomic persistence and default value management.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union
from threading import RLock

from pydantic import BaseModel, ValidationError

from cineplux.core.config_defaults import get_default_providers, get_default_settings
from cineplux.core.config_schemas import AppSettings, ProvidersConfig, ProviderConfig
from cineplux.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Manages application configuration with JSON persistence and validation.

    Provides thread-safe access to configuration data with automatic
    validation, corrupted-file backup and default value management.
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_dir: Directory containing configuration files.
                       Defaults to './config' if not specified.
        """
        self.config_dir = Path(config_dir or "config")
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._settings_file = self.config_dir / "settings.json"
        self._providers_file = self.config_dir / "providers.json"

        self._lock = RLock()
        self._settings: Optional[AppSettings] = None
        self._providers: Optional[ProvidersConfig] = None

        self._load_configurations()

    def _load_configurations(self) -> None:
        """Load all configuration files with error handling."""
        try:
            self._settings = self._load_settings()
            self._providers = self._load_providers()
            logger.info("Configuration loaded successfully")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load configuration: {e}")
            raise ConfigurationError(
                f"Configuration loading failed: {e}", config_path=str(self.config_dir)
            )

    def _load_model(self, path: Path, model: type, default_factory) -> Any:
        """Load one JSON file into a model, backing up corrupted files."""
        if not path.exists():
            logger.info(f"{path.name} not found, creating default configuration")
            value = default_factory()
            self._write_json(path, value)
            return value

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return model.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Invalid {path.name}, using defaults: {e}")
            backup_path = path.with_suffix(".json.backup")
            path.replace(backup_path)
            logger.info(f"Corrupted configuration backed up to {backup_path}")

            value = default_factory()
            self._write_json(path, value)
            return value

    def _load_settings(self) -> AppSettings:
        return self._load_model(self._settings_file, AppSettings, get_default_settings)

    def _load_providers(self) -> ProvidersConfig:
        return self._load_model(self._providers_file, ProvidersConfig, get_default_providers)

    def _write_json(self, path: Path, value: BaseModel) -> None:
        """Save a model to file with atomic write."""
        temp_file = path.with_suffix(".tmp")
        try:
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(value.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
            temp_file.replace(path)
            logger.debug(f"{path.name} saved successfully")
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise ConfigurationError(f"Failed to save {path.name}: {e}", config_path=str(path))

    @property
    def settings(self) -> AppSettings:
        """Get current application settings (thread-safe)."""
        with self._lock:
            if self._settings is None:
                self._settings = self._load_settings()
            return self._settings

    @property
    def providers(self) -> ProvidersConfig:
        """Get current providers configuration (thread-safe)."""
        with self._lock:
            if self._providers is None:
                self._providers = self._load_providers()
            return self._providers

    def update_setting(self, key_path: str, value: Any) -> None:
        """
        Update a specific setting using dot notation.

        Args:
            key_path: Dot-separated path to the setting (e.g., 'http.timeout')
            value: New value for the setting

        Raises:
            ConfigurationError: If key path is invalid or value is invalid
        """
        with self._lock:
            settings_dict = self.settings.model_dump()

            keys = key_path.split(".")
            current = settings_dict

            for key in keys[:-1]:
                if not isinstance(current, dict) or key not in current:
                    raise ConfigurationError(f"Invalid setting path: {key_path}")
                current = current[key]

            final_key = keys[-1]
            if not isinstance(current, dict) or final_key not in current:
                raise ConfigurationError(f"Invalid setting key: {final_key}")

            current[final_key] = value

            try:
                updated_settings = AppSettings.model_validate(settings_dict)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid setting value: {e}")

            self._settings = updated_settings
            self._write_json(self._settings_file, updated_settings)
            logger.info(f"Setting updated: {key_path} = {value}")

    def get_setting(self, key_path: str, default: Any = None) -> Any:
        """
        Get a specific setting using dot notation.

        Args:
            key_path: Dot-separated path to the setting
            default: Default value if setting not found

        Returns:
            The setting value or default
        """
        current: Any = self.settings.model_dump()
        try:
            for key in key_path.split("."):
                current = current[key]
            return current
        except (KeyError, TypeError):
            return default

    def update_provider_config(self, provider_key: str, config: Dict[str, Any]) -> None:
        """
        Update (or create) the configuration of one provider.

        Args:
            provider_key: Provider identifier
            config: Fields to merge into the provider record

        Raises:
            ConfigurationError: If the resulting configuration is invalid
        """
        with self._lock:
            providers_dict = self.providers.model_dump()
            providers_dict["providers"].setdefault(provider_key, {}).update(config)

            try:
                updated = ProvidersConfig.model_validate(providers_dict)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid provider configuration for {provider_key}: {e}")

            self._providers = updated
            self._write_json(self._providers_file, updated)
            logger.info(f"Provider configuration updated: {provider_key}")

    def enable_provider(self, provider_key: str) -> None:
        """Enable a provider."""
        self._require_provider(provider_key)
        self.update_provider_config(provider_key, {"enabled": True})

    def disable_provider(self, provider_key: str) -> None:
        """Disable a provider."""
        self._require_provider(provider_key)
        self.update_provider_config(provider_key, {"enabled": False})

    def _require_provider(self, provider_key: str) -> ProviderConfig:
        config = self.providers.get_provider(provider_key)
        if config is None:
            raise ConfigurationError(f"Unknown provider: {provider_key}")
        return config

    def get_enabled_providers(self) -> Dict[str, ProviderConfig]:
        """Get all enabled provider configurations sorted by priority."""
        return self.providers.get_enabled_providers()

    def reset_to_defaults(self) -> None:
        """Reset all configuration to default values."""
        with self._lock:
            logger.warning("Resetting configuration to defaults")
            self._settings = get_default_settings()
            self._providers = get_default_providers()
            self._write_json(self._settings_file, self._settings)
            self._write_json(self._providers_file, self._providers)

    def validate_configuration(self) -> Dict[str, Any]:
        """
        Validate current configuration and return validation report.

        Returns:
            Dictionary containing validation results and any issues found
        """
        report: Dict[str, Any] = {"valid": True, "issues": [], "warnings": []}

        try:
            AppSettings.model_validate(self.settings.model_dump())
        except ValidationError as e:
            report["valid"] = False
            report["issues"].append(f"Settings validation failed: {e}")

        try:
            ProvidersConfig.model_validate(self.providers.model_dump())
        except ValidationError as e:
            report["valid"] = False
            report["issues"].append(f"Providers validation failed: {e}")

        if not self.get_enabled_providers():
            report["warnings"].append("No providers are enabled")

        return report


__all__ = ["ConfigManager"]
