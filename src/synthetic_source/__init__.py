"""
Synthetic Source

Deterministic synthetic-record generation for pipeline load and
correctness testing:
- Position hashing into well-mixed 64-bit seeds
- Seeded sampling from a small family of distributions
- Per-record delays, skewed bundle splits, progress and watermark shapes
"""

from synthetic_source.config.models import SyntheticSourceConfig
from synthetic_source.generators.record_generator import (
    GeneratedRecord,
    RecordGenerator,
)
from synthetic_source.shared.exceptions import (
    ConfigurationError,
    SyntheticSourceError,
)

__version__ = "1.0.0"
__author__ = "Synthetic Source"

__all__ = [
    "ConfigurationError",
    "GeneratedRecord",
    "RecordGenerator",
    "SyntheticSourceConfig",
    "SyntheticSourceError",
]
