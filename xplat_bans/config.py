"""
Configuration management for Xplat Bans.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import yaml

from .exceptions import ConfigurationError
from .logging_config import get_logger
from .matching.suppression import DEFAULT_MARKERS

logger = get_logger('config')

REPORT_FORMATS = ('text', 'json', 'markdown', 'excel')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class BansConfig:
    """Where ban lists come from."""
    override: Optional[str] = None  # path or http(s) URL overlaid on the defaults
    fetch_timeout: float = 10.0


@dataclass
class SuppressionConfig:
    """Annotation names that suppress diagnostics on a declaration."""
    markers: List[str] = field(default_factory=lambda: list(DEFAULT_MARKERS))


@dataclass
class OutputConfig:
    """Configuration for output formatting."""
    default_format: str = "text"
    use_colors: Optional[bool] = None  # None auto-detects


@dataclass
class AnalysisConfig:
    jobs: int = 1


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "WARNING"
    log_file: Optional[str] = None
    verbose: bool = False


@dataclass
class Config:
    """Main configuration class."""
    bans: BansConfig = field(default_factory=BansConfig)
    suppression: SuppressionConfig = field(default_factory=SuppressionConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from file or use defaults.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Config object with loaded settings

    Raises:
        ConfigurationError: If configuration file is invalid
    """
    config = Config()

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error loading configuration file: {e}") from e

        if config_data:
            if not isinstance(config_data, dict):
                raise ConfigurationError("Configuration file must contain a mapping at the top level")
            _update_config_from_dict(config, config_data)
            logger.info(f"Loaded configuration from {config_path}")

    elif config_path:
        logger.warning(f"Configuration file not found: {config_path}")

    _validate_config(config)
    return config


def _section(config_data: Dict, name: str) -> Dict:
    section = config_data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"The '{name}' section must be a mapping")
    return section


def _update_config_from_dict(config: Config, config_data: Dict) -> None:
    """
    Update configuration object from dictionary data.

    Args:
        config: Config object to update
        config_data: Dictionary with configuration data
    """
    bans_data = _section(config_data, 'bans')
    if 'override' in bans_data:
        config.bans.override = bans_data['override']
    if 'fetch_timeout' in bans_data:
        config.bans.fetch_timeout = bans_data['fetch_timeout']

    suppression_data = _section(config_data, 'suppression')
    if 'markers' in suppression_data:
        config.suppression.markers = suppression_data['markers']

    output_data = _section(config_data, 'output')
    if 'default_format' in output_data:
        config.output.default_format = output_data['default_format']
    if 'use_colors' in output_data:
        config.output.use_colors = output_data['use_colors']

    analysis_data = _section(config_data, 'analysis')
    if 'jobs' in analysis_data:
        config.analysis.jobs = analysis_data['jobs']

    logging_data = _section(config_data, 'logging')
    if 'level' in logging_data:
        config.logging.level = logging_data['level']
    if 'log_file' in logging_data:
        config.logging.log_file = logging_data['log_file']
    if 'verbose' in logging_data:
        config.logging.verbose = logging_data['verbose']


def _validate_config(config: Config) -> None:
    if config.output.default_format not in REPORT_FORMATS:
        raise ConfigurationError(
            f"Unknown output format '{config.output.default_format}'. "
            f"Choose one of: {', '.join(REPORT_FORMATS)}"
        )

    markers = config.suppression.markers
    if not isinstance(markers, list) or not all(isinstance(m, str) and m for m in markers):
        raise ConfigurationError("suppression.markers must be a list of annotation names")

    if isinstance(config.analysis.jobs, bool) or not isinstance(config.analysis.jobs, int) \
            or config.analysis.jobs < 1:
        raise ConfigurationError("analysis.jobs must be a positive integer")

    if isinstance(config.bans.fetch_timeout, bool) \
            or not isinstance(config.bans.fetch_timeout, (int, float)) \
            or config.bans.fetch_timeout <= 0:
        raise ConfigurationError("bans.fetch_timeout must be a positive number")

    if config.bans.override is not None and not isinstance(config.bans.override, str):
        raise ConfigurationError("bans.override must be a path or URL string")

    level = config.logging.level
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ConfigurationError(f"logging.level must be one of: {', '.join(LOG_LEVELS)}")

    if not isinstance(config.logging.verbose, bool):
        raise ConfigurationError("logging.verbose must be true or false")

    if config.logging.log_file is not None and not isinstance(config.logging.log_file, str):
        raise ConfigurationError("logging.log_file must be a file path")


def get_default_config_path() -> Optional[str]:
    """
    Get the default configuration file path.

    Returns:
        Path to default config file if it exists, None otherwise
    """
    possible_paths = [
        'xplat_bans.yaml',
        'xplat_bans.yml',
        os.path.expanduser('~/.xplat_bans.yaml'),
        os.path.expanduser('~/.xplat_bans.yml'),
    ]

    for path in possible_paths:
        if os.path.exists(path):
            return path

    return None
