"""
Configuration management for the site analytics server.
Handles loading, validating, and providing access to application settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class AppConfig:
    """Application configuration settings."""
    host: str
    port: int
    debug: bool
    proxy_hops: int


@dataclass
class AnalyticsConfig:
    """Request analytics configuration settings."""
    data_dir: str
    summary_file: str
    daily_file: str
    save_interval: int
    default_limit: int


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    log_dir: str
    level: str


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "site_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        # Start with default config
        self._config = self._get_default_config()

        # Load base config from file
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    # Merge file config with defaults
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        # Override with environment variables
        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "app": {
                "host": "0.0.0.0",
                "port": 6000,
                "debug": False,
                "proxy_hops": 1
            },
            "analytics": {
                "data_dir": "analytics_data",
                "summary_file": "data.json",
                "daily_file": "daily-data.json",
                "save_interval": 10,
                "default_limit": 10
            },
            "logging": {
                "log_dir": "logs",
                "level": "INFO"
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config:
                if isinstance(values, dict):
                    self._config[section].update(values)
                else:
                    self._config[section] = values
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # App settings
        if os.getenv("APP_HOST"):
            self._config["app"]["host"] = os.getenv("APP_HOST")

        if os.getenv("PORT"):
            self._config["app"]["port"] = int(os.getenv("PORT"))

        if os.getenv("APP_PORT"):
            self._config["app"]["port"] = int(os.getenv("APP_PORT"))

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = os.getenv("APP_DEBUG").lower() == "true"

        if os.getenv("PROXY_HOPS"):
            self._config["app"]["proxy_hops"] = int(os.getenv("PROXY_HOPS"))

        # Analytics settings
        if os.getenv("ANALYTICS_DATA_DIR"):
            self._config["analytics"]["data_dir"] = os.getenv("ANALYTICS_DATA_DIR")

        if os.getenv("ANALYTICS_SAVE_INTERVAL"):
            self._config["analytics"]["save_interval"] = int(os.getenv("ANALYTICS_SAVE_INTERVAL"))

        # Logging settings
        if os.getenv("LOG_DIR"):
            self._config["logging"]["log_dir"] = os.getenv("LOG_DIR")

        if os.getenv("LOG_LEVEL"):
            self._config["logging"]["level"] = os.getenv("LOG_LEVEL").upper()

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"],
            proxy_hops=app_config["proxy_hops"]
        )

    def get_analytics_config(self) -> AnalyticsConfig:
        """Get request analytics configuration."""
        analytics_config = self._config["analytics"]
        return AnalyticsConfig(
            data_dir=analytics_config["data_dir"],
            summary_file=analytics_config["summary_file"],
            daily_file=analytics_config["daily_file"],
            save_interval=analytics_config["save_interval"],
            default_limit=analytics_config["default_limit"]
        )

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        logging_config = self._config["logging"]
        return LoggingConfig(
            log_dir=logging_config["log_dir"],
            level=logging_config["level"]
        )

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)


# Global configuration instance
config_manager = ConfigManager()


def get_app_config() -> AppConfig:
    """Get application configuration."""
    return config_manager.get_app_config()


def get_analytics_config() -> AnalyticsConfig:
    """Get request analytics configuration."""
    return config_manager.get_analytics_config()


def get_logging_config() -> LoggingConfig:
    """Get logging configuration."""
    return config_manager.get_logging_config()


def reload_config() -> None:
    """Reload configuration."""
    config_manager.reload()


def save_config() -> None:
    """Save configuration to file."""
    config_manager.save_config()
