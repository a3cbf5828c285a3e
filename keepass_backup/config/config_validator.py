"""Configuration validation for KeePass backup."""

from typing import Dict, List, Any


class ConfigValidator:
    """Validates KeePass backup configuration."""

    REQUIRED_SECTIONS = ['databases']
    LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

    def validate(self, config: Dict[str, Any]) -> None:
        """Validate configuration data.

        Args:
            config: Configuration dictionary to validate.

        Raises:
            ValueError: If configuration is invalid.
        """
        self._validate_structure(config)
        self._validate_databases(config.get('databases'))

        if config.get('backup_dir') is not None:
            self._validate_backup_dir(config['backup_dir'])

        if config.get('naming'):
            self._validate_naming_config(config['naming'])

        if config.get('logging'):
            self._validate_logging_config(config['logging'])

    def _validate_structure(self, config: Dict[str, Any]) -> None:
        """Validate basic configuration structure.

        Args:
            config: Configuration dictionary.

        Raises:
            ValueError: If required sections are missing.
        """
        missing_sections = []
        for section in self.REQUIRED_SECTIONS:
            if section not in config:
                missing_sections.append(section)

        if missing_sections:
            raise ValueError(f"Missing required configuration sections: {missing_sections}")

    def _validate_databases(self, databases: List[Any]) -> None:
        """Validate the database list.

        Blank, null and ``#`` entries are allowed here; they are skipped at run time.

        Args:
            databases: Configured database paths.

        Raises:
            ValueError: If the list is missing, empty or has non-string entries.
        """
        if not isinstance(databases, list):
            raise ValueError("databases must be a list of file paths")

        if not databases:
            raise ValueError("At least one database must be configured")

        for i, entry in enumerate(databases):
            if entry is not None and not isinstance(entry, str):
                raise ValueError(f"Database entry {i} must be a string, got {type(entry).__name__}")

    def _validate_backup_dir(self, backup_dir: Any) -> None:
        if not isinstance(backup_dir, str):
            raise ValueError("backup_dir must be a string")

    def _validate_naming_config(self, naming_config: Dict[str, Any]) -> None:
        """Validate naming configuration.

        Raises:
            ValueError: If the prefix is unusable in a filename.
        """
        if not isinstance(naming_config, dict):
            raise ValueError("naming must be a dictionary")

        if 'prefix' in naming_config:
            prefix = naming_config['prefix']
            if not isinstance(prefix, str) or not prefix:
                raise ValueError("naming.prefix must be a non-empty string")
            if '/' in prefix or '\\' in prefix:
                raise ValueError(f"naming.prefix cannot contain path separators: {prefix}")

    def _validate_logging_config(self, logging_config: Dict[str, Any]) -> None:
        """Validate logging configuration.

        Raises:
            ValueError: If the log level is unknown.
        """
        if not isinstance(logging_config, dict):
            raise ValueError("logging must be a dictionary")

        level = logging_config.get('level')
        if level is not None and str(level).upper() not in self.LOG_LEVELS:
            raise ValueError(f"Invalid logging level: {level}")
