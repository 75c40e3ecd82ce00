#!/usr/bin/env python3
"""
Configuration service with environment variable priority
Handles: Environment Variables > Runtime Overrides > Defaults

Nothing is persisted; overrides live only as long as the process.
"""

import os
import logging
from typing import Any, Dict, List, Optional


class ConfigService:
    """Centralized configuration management with priority system"""

    DEFAULTS = [
        # Logging Configuration
        {'key': 'LOG_LEVEL', 'default_value': 'INFO', 'data_type': 'string', 'category': 'logging', 'description': 'Logging level', 'options': ['DEBUG', 'INFO', 'WARNING', 'ERROR']},
        {'key': 'LOG_FILE', 'default_value': 'data/logs/vodarr.log', 'data_type': 'string', 'category': 'logging', 'description': 'Log file location (empty for console only)'},
        {'key': 'LOG_RETENTION_DAYS', 'default_value': '7', 'data_type': 'int', 'category': 'logging', 'description': 'Number of daily log files to keep'},

        # Playlist Sources
        {'key': 'PLAYLIST_URL', 'default_value': 'https://app.rcsfacility.com/1.m3u', 'data_type': 'string', 'category': 'playlist', 'description': 'Built-in playlist source URL'},
        {'key': 'PLAYLIST_EXTRA_URLS', 'default_value': '', 'data_type': 'list', 'category': 'playlist', 'description': 'Additional playlist URLs, comma separated'},
        {'key': 'FETCH_TIMEOUT_SECONDS', 'default_value': '10', 'data_type': 'float', 'category': 'playlist', 'description': 'Timeout for each source fetch in seconds'},
        {'key': 'FETCH_CONCURRENTLY', 'default_value': 'true', 'data_type': 'bool', 'category': 'playlist', 'description': 'Fetch all sources at the same time'},
        {'key': 'HTTP_USER_AGENT', 'default_value': 'Vodarr', 'data_type': 'string', 'category': 'playlist', 'description': 'User agent sent to playlist hosts'},

        # Cache Configuration
        {'key': 'CACHE_TTL_SECONDS', 'default_value': '300', 'data_type': 'int', 'category': 'cache', 'description': 'Seconds before the cached playlist is fetched again'},
        {'key': 'BACKGROUND_REFRESH_INTERVAL_SECONDS', 'default_value': '600', 'data_type': 'int', 'category': 'cache', 'description': 'Refresh interval for the watch command in seconds'},

        # Catalog Configuration
        {'key': 'ENTRY_ID_PREFIX', 'default_value': 'vod-', 'data_type': 'string', 'category': 'catalog', 'description': 'Prefix for generated entry ids'},
        {'key': 'DEFAULT_POSTER_URL', 'default_value': 'https://dl.strem.io/addon-logo.png', 'data_type': 'string', 'category': 'catalog', 'description': 'Poster for entries without tvg-logo'},
        {'key': 'DEFAULT_BACKGROUND_URL', 'default_value': 'https://dl.strem.io/addon-background.jpg', 'data_type': 'string', 'category': 'catalog', 'description': 'Background image for every entry'},
        {'key': 'INCLUDE_REFRESH_ENTRY', 'default_value': 'true', 'data_type': 'bool', 'category': 'catalog', 'description': 'List a reload item at the top of the catalog'},
    ]

    def __init__(self, overrides: Optional[Dict[str, Any]] = None, environ=None):
        self.logger = logging.getLogger('vodarr.config_service')
        self._environ = os.environ if environ is None else environ
        self._settings = {setting['key']: setting for setting in self.DEFAULTS}
        self._overrides: Dict[str, Any] = {}

        for key, value in (overrides or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with priority: Environment > Override > Default"""
        data_type = self._get_data_type(key)

        # Check environment variable first
        env_key = key.upper()
        if env_value := self._environ.get(env_key):
            try:
                return self._convert_value(env_value, data_type)
            except ValueError:
                self.logger.warning(f"Ignoring invalid {data_type} value for {env_key}: {env_value!r}")

        if key in self._overrides:
            return self._overrides[key]

        setting = self._settings.get(key)
        if setting:
            return self._convert_value(setting['default_value'], data_type)

        return default

    def set(self, key: str, value: Any) -> None:
        """Set a runtime override for this process"""
        data_type = self._get_data_type(key)
        if isinstance(value, str):
            value = self._convert_value(value, data_type)
        self._overrides[key] = value

    def get_int(self, key: str, default: int = 0) -> int:
        """Get a configuration value as integer"""
        try:
            value = self.get(key)
            if value is None:
                return default
            return int(value)
        except (ValueError, TypeError):
            self.logger.warning(f"Failed to convert {key} to int, using default: {default}")
            return default

    def get_float(self, key: str, default: float = 0.0) -> float:
        """Get a configuration value as float"""
        try:
            value = self.get(key)
            if value is None:
                return default
            return float(value)
        except (ValueError, TypeError):
            self.logger.warning(f"Failed to convert {key} to float, using default: {default}")
            return default

    def get_all_by_category(self, category: str) -> Dict[str, Any]:
        """Get all configuration settings for a category"""
        return {
            key: self.get(key)
            for key, setting in self._settings.items()
            if setting['category'] == category
        }

    def get_source_urls(self) -> List[str]:
        """Built-in source followed by any extra sources"""
        urls = []
        for url in [self.get('PLAYLIST_URL')] + list(self.get('PLAYLIST_EXTRA_URLS') or []):
            if url and url not in urls:
                urls.append(url)
        return urls

    def _get_data_type(self, key: str) -> str:
        """Get data type for a configuration key"""
        setting = self._settings.get(key)
        return setting['data_type'] if setting else 'string'

    def _convert_value(self, value: str, data_type: str) -> Any:
        """Convert string value to appropriate type"""
        if value is None:
            return None

        if data_type == 'bool':
            return value.strip().lower() in ('true', '1', 'yes', 'on')
        elif data_type == 'int':
            return int(value)
        elif data_type == 'float':
            return float(value)
        elif data_type == 'list':
            return [item.strip() for item in value.split(',') if item.strip()]
        else:  # string
            return value
