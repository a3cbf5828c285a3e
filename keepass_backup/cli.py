"""Command-line interface for KeePass backup."""

import logging
import sys
import click
from typing import Optional

from .core.backup import KeePassBackup, inspect_source, is_skipped_entry
from .core.exceptions import KeePassBackupError
from .config.config_manager import ConfigManager

logger = logging.getLogger(__name__)

LEVEL_STYLES = {
    'DEBUG': ('DEBUG', None),
    'INFO': ('INFO', 'green'),
    'WARNING': ('WARN', 'yellow'),
    'ERROR': ('ERROR', 'red'),
    'CRITICAL': ('ERROR', 'red'),
}


class ConsoleFormatter(logging.Formatter):
    """Formats console records as ``[LEVEL] message`` with a coloured tag."""

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record):
        label, color = LEVEL_STYLES.get(record.levelname, (record.levelname, None))
        tag = f"[{label}]"
        if self.use_color:
            tag = click.style(tag, fg=color, bold=record.levelno >= logging.WARNING)
        return f"{tag} {record.getMessage()}"


class MaxLevelFilter(logging.Filter):
    """Lets through records below a level."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record):
        return record.levelno < self.level


def _is_terminal(stream) -> bool:
    isatty = getattr(stream, 'isatty', None)
    return bool(isatty and isatty())


def setup_logging(level: str, log_file: Optional[str] = None):
    """Set up logging configuration."""
    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    # Progress to stdout, warnings and errors to stderr
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(ConsoleFormatter(_is_terminal(sys.stdout)))
    stdout_handler.addFilter(MaxLevelFilter(logging.WARNING))
    root_logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(ConsoleFormatter(_is_terminal(sys.stderr)))
    stderr_handler.setLevel(logging.WARNING)
    root_logger.addHandler(stderr_handler)

    # Add file handler if specified
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            root_logger.addHandler(file_handler)
        except OSError as e:
            click.echo(f"Warning: Could not set up file logging: {e}", err=True)


def _load_config(config_path: Optional[str]) -> ConfigManager:
    config_manager = ConfigManager(config_path)
    config_manager.load_config()
    return config_manager


@click.group()
@click.option('--config', '-c', 'config_path',
              help='Path to configuration file')
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level (defaults to the config file, then INFO)')
@click.option('--log-file',
              help='Log file path')
@click.pass_context
def cli(ctx, config_path: Optional[str], log_level: Optional[str], log_file: Optional[str]):
    """KeePass Backup - Timestamped, deduplicated copies of KeePass databases."""

    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path
    ctx.obj['log_level'] = log_level
    ctx.obj['log_file'] = log_file

    # Until the config is read, log with the command-line settings
    setup_logging(log_level or 'INFO', log_file)


def _apply_logging_config(ctx, config_manager: ConfigManager):
    """Reconfigure logging with config file values the command line did not set."""
    logging_config = config_manager.get_logging_config()
    level = ctx.obj.get('log_level') or logging_config.get('level') or 'INFO'
    log_file = ctx.obj.get('log_file') or logging_config.get('file')
    setup_logging(str(level), log_file)


@cli.command()
@click.pass_context
def run(ctx):
    """Back up all configured databases."""
    try:
        config_manager = _load_config(ctx.obj.get('config_path'))
        _apply_logging_config(ctx, config_manager)

        backup = KeePassBackup.from_config(config_manager)
        summary = backup.run()

    except (FileNotFoundError, ValueError, KeePassBackupError) as e:
        logger.error(str(e))
        sys.exit(1)

    sys.exit(summary.exit_code)


@cli.command()
@click.pass_context
def validate_config(ctx):
    """Validate configuration file."""
    try:
        config_manager = _load_config(ctx.obj.get('config_path'))
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)

    click.echo("✅ Configuration loaded successfully")

    databases = config_manager.get_databases()
    backup_dir = config_manager.get_backup_dir()
    prefix = config_manager.get_naming_config().get('prefix')

    click.echo(f"\n📊 Configuration Summary:")
    click.echo(f"   Backup directory: {backup_dir or '(empty)'}")
    click.echo(f"   Filename prefix: {prefix}")
    click.echo(f"   Databases: {len(databases)}")

    for i, entry in enumerate(databases, 1):
        click.echo(f"     {i}. {entry or '(blank)'} [{_entry_status(entry)}]")


def _entry_status(entry: str) -> str:
    """Describe whether a configured entry would be backed up."""
    if is_skipped_entry(entry):
        return 'skipped'
    source = inspect_source(entry)
    if not source.exists:
        return 'missing'
    if not source.readable:
        return 'unreadable'
    return 'ok'


def main():
    """Main CLI entry point."""
    cli()


if __name__ == '__main__':
    main()
