"""
Pytest configuration and fixtures for synthetic source tests.

Provides common option payloads and prebuilt generators.
"""

import json
import sys
import tempfile
from pathlib import Path

import pytest

# Ensure src/ is on sys.path for local test runs without installation
_SRC = Path(__file__).resolve().parents[1] / "src"
if _SRC.exists() and str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from synthetic_source.config.models import SyntheticSourceConfig  # noqa: E402
from synthetic_source.generators.record_generator import RecordGenerator  # noqa: E402


@pytest.fixture
def sample_options() -> dict:
    """Options in the camelCase JSON form used by pipeline option parsing."""
    return {
        "seed": 7,
        "numRecords": 1000,
        "keySizeBytes": 10,
        "valueSizeBytes": 20,
        "splitPointFrequencyRecords": 1,
        "bundleSizeDistribution": {"type": "zipf", "param": 3.5},
        "forceNumInitialBundles": 100,
        "progressShape": "LINEAR",
        "initializeDelayDistribution": {"type": "uniform", "lower": 0, "upper": 50},
        "processingTimeDelayDistribution": {"type": "exp", "mean": 100},
        "delayDistribution": {"type": "const", "const": 5},
        "watermarkSearchInAdvanceCount": 10,
        "watermarkDriftMillis": 0,
    }


@pytest.fixture
def sample_config(sample_options) -> SyntheticSourceConfig:
    return SyntheticSourceConfig.from_dict(sample_options)


@pytest.fixture
def generator(sample_config) -> RecordGenerator:
    return RecordGenerator(sample_config)


@pytest.fixture
def temp_config_file(sample_options) -> str:
    """Write sample options to a temporary JSON file."""
    with tempfile.NamedTemporaryFile(
        mode="w", suffix=".json", delete=False
    ) as temp_file:
        json.dump(sample_options, temp_file)
        temp_path = temp_file.name

    yield temp_path

    Path(temp_path).unlink(missing_ok=True)
