"""Configuration management for KeePass backup."""

import os
import yaml
from typing import Dict, List, Any, Optional
from .config_validator import ConfigValidator

BACKUP_DIR_ENV = 'BACKUP_DIR'
DEFAULT_BACKUP_DIR = 'backups'


class ConfigManager:
    """Manages configuration loading and validation for KeePass backup."""

    DEFAULT_CONFIG_LOCATIONS = [
        "config.yaml",
        "config.yml",
        os.path.expanduser("~/.keepass-backup/config.yaml"),
        os.path.expanduser("~/.keepass-backup/config.yml"),
        "/etc/keepass-backup/config.yaml",
        "/etc/keepass-backup/config.yml"
    ]

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to config file. If not provided,
                        will search in default locations.
        """
        self.config_path = config_path
        self.config_data: Dict[str, Any] = {}
        self.validator = ConfigValidator()

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from file.

        Returns:
            Dictionary containing configuration data.

        Raises:
            FileNotFoundError: If config file cannot be found.
            ValueError: If config file is invalid.
        """
        config_file = self._find_config_file()

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                self.config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file {config_file}: {e}")
        except OSError as e:
            raise ValueError(f"Error reading config file {config_file}: {e}")

        if not isinstance(self.config_data, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")

        self.validator.validate(self.config_data)
        self._set_defaults()

        return self.config_data

    def _find_config_file(self) -> str:
        """Find configuration file in default locations.

        Returns:
            Path to configuration file.

        Raises:
            FileNotFoundError: If no config file is found.
        """
        if self.config_path:
            if os.path.exists(self.config_path):
                return self.config_path
            else:
                raise FileNotFoundError(f"Config file not found: {self.config_path}")

        for location in self.DEFAULT_CONFIG_LOCATIONS:
            if os.path.exists(location):
                return location

        raise FileNotFoundError(
            f"Configuration file not found in any of these locations:\n" +
            "\n".join(f"  - {loc}" for loc in self.DEFAULT_CONFIG_LOCATIONS) +
            "\n\nPlease copy config.example.yaml to config.yaml and add your database paths."
        )

    def _set_defaults(self):
        """Set default values for optional configuration parameters."""
        if self.config_data.get('backup_dir') is None:
            self.config_data['backup_dir'] = DEFAULT_BACKUP_DIR

        defaults = {
            'naming': {
                'prefix': 'keepass'
            },
            'logging': {
                'level': 'INFO',
                'file': None
            }
        }

        for section, section_defaults in defaults.items():
            if not self.config_data.get(section):
                self.config_data[section] = {}
            for key, value in section_defaults.items():
                if key not in self.config_data[section]:
                    self.config_data[section][key] = value

    def get_databases(self) -> List[str]:
        """Get the ordered list of configured database paths.

        Null entries (a bare ``-`` in YAML) come back as empty strings.
        """
        return [entry or '' for entry in self.config_data.get('databases', [])]

    def get_backup_dir(self) -> str:
        """Get the backup directory.

        A non-empty ``BACKUP_DIR`` environment variable overrides the file.

        Returns:
            Backup directory as configured (not yet expanded).
        """
        override = os.environ.get(BACKUP_DIR_ENV)
        if override:
            return override
        return self.config_data.get('backup_dir', DEFAULT_BACKUP_DIR)

    def get_naming_config(self) -> Dict[str, Any]:
        """Get naming configuration.

        Returns:
            Naming configuration dictionary.
        """
        return self.config_data.get('naming', {})

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration.

        Returns:
            Logging configuration dictionary.
        """
        return self.config_data.get('logging', {})
