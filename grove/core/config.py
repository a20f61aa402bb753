"""Configuration management for Grove.

Repository-local and global configuration files in INI format, with
environment variables taking precedence over both.
"""

import configparser
import os
from pathlib import Path
from typing import Dict, Optional, Tuple

from grove.core.errors import ConfigError

TRUE_VALUES = {'1', 'true', 'yes', 'on'}
FALSE_VALUES = {'0', 'false', 'no', 'off'}

DEFAULT_USER_NAME = 'Grove User'
DEFAULT_USER_EMAIL = 'grove@localhost'


class Config:
    """
    Layered Grove configuration.

    - Global config: ~/.groveconfig
    - Repository config: .grove/config
    - Environment: GROVE_<SECTION>_<KEY>

    Environment beats repository config, which beats global config.
    """

    GLOBAL_CONFIG_PATH = Path.home() / '.groveconfig'

    def __init__(self, repo_config_path: Optional[Path] = None):
        self.repo_config_path = repo_config_path
        self._global_config = None
        self._repo_config = None

    @property
    def global_config(self) -> configparser.ConfigParser:
        """Load and return global configuration."""
        if self._global_config is None:
            self._global_config = configparser.ConfigParser()
            if self.GLOBAL_CONFIG_PATH.exists():
                self._global_config.read(self.GLOBAL_CONFIG_PATH)
        return self._global_config

    @property
    def repo_config(self) -> Optional[configparser.ConfigParser]:
        """Load and return repository configuration."""
        if self._repo_config is None and self.repo_config_path:
            self._repo_config = configparser.ConfigParser()
            if self.repo_config_path.exists():
                self._repo_config.read(self.repo_config_path)
        return self._repo_config

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value.

        Priority order (highest to lowest):
        1. Environment variables (GROVE_<SECTION>_<KEY>)
        2. Repository config
        3. Global config
        4. Fallback value
        """
        env_value = os.environ.get(f"GROVE_{section.upper()}_{key.upper()}")
        if env_value is not None:
            return env_value

        if self.repo_config and self.repo_config.has_option(section, key):
            return self.repo_config.get(section, key)

        if self.global_config.has_option(section, key):
            return self.global_config.get(section, key)

        return fallback

    def get_bool(self, section: str, key: str, fallback: bool = False) -> bool:
        """
        Get a boolean configuration value.

        Raises:
            ConfigError: If the stored value is not a recognised boolean
        """
        value = self.get(section, key)
        if value is None:
            return fallback
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ConfigError(f"Not a boolean value for {section}.{key}: {value!r}")

    def set(self, section: str, key: str, value: str, global_config: bool = False) -> None:
        """
        Set a configuration value and write it back to disk.

        Args:
            section: Config section
            key: Config key
            value: Value to set
            global_config: Write to global config instead of repository config
        """
        if global_config:
            config = self.global_config
            config_path = self.GLOBAL_CONFIG_PATH
        else:
            if not self.repo_config_path:
                raise ConfigError("No repository config path available")
            config = self.repo_config
            config_path = self.repo_config_path

        if not config.has_section(section):
            config.add_section(section)

        config.set(section, key, value)

        with open(config_path, 'w') as f:
            config.write(f)

    def list_all(self) -> Dict[str, Dict[str, str]]:
        """All values from global then repository config, repository winning."""
        result: Dict[str, Dict[str, str]] = {}
        sources = [self.global_config]
        if self.repo_config:
            sources.append(self.repo_config)

        for config in sources:
            for section in config.sections():
                result.setdefault(section, {}).update(config.items(section))

        return result

    def get_user_identity(self) -> Tuple[str, str]:
        """Name and email used for new commits."""
        name = self.get('user', 'name') or DEFAULT_USER_NAME
        email = self.get('user', 'email') or DEFAULT_USER_EMAIL
        return name, email


def get_config(repo=None) -> Config:
    """
    Get a Config instance.

    Args:
        repo: Repository instance, or None for global-only config
    """
    if repo:
        return repo.config
    return Config()
