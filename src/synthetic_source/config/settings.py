"""
Configuration loading and management for the synthetic source.

This module provides utilities for locating, loading, and writing option
files.
"""

from pathlib import Path

from .models import SyntheticSourceConfig

DEFAULT_CONFIG_NAME = "synthetic_source.json"


def load_config(
    config_path: str | Path | None = None, config_name: str = DEFAULT_CONFIG_NAME
) -> SyntheticSourceConfig:
    """
    Load options from file with path resolution.

    Args:
        config_path: Explicit path to an options file or a directory containing one
        config_name: Name of the options file to look for

    Returns:
        SyntheticSourceConfig: Loaded and validated options

    Raises:
        FileNotFoundError: If no options file is found
        ConfigurationError: If the options are invalid
    """
    if config_path is None:
        search_paths = [
            Path.cwd() / config_name,
            Path.cwd() / "config" / config_name,
        ]

        for path in search_paths:
            if path.exists():
                config_path = path
                break
        else:
            raise FileNotFoundError(
                f"Configuration file '{config_name}' not found in any of: "
                f"{[str(p) for p in search_paths]}"
            )

    config_path = Path(config_path)

    if config_path.is_dir():
        config_path = config_path / config_name

    return SyntheticSourceConfig.from_file(config_path)


def create_default_config(output_path: str | Path) -> SyntheticSourceConfig:
    """
    Write an options file with default values.

    Args:
        output_path: Where to save the options file

    Returns:
        SyntheticSourceConfig: The default options
    """
    default_config = SyntheticSourceConfig(num_records=1000)
    default_config.to_file(output_path)
    return default_config
