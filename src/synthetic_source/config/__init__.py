"""Option models and loading for the synthetic source."""

from synthetic_source.config.models import SyntheticSourceConfig
from synthetic_source.config.settings import create_default_config, load_config

__all__ = ["SyntheticSourceConfig", "create_default_config", "load_config"]
