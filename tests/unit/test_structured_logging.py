"""Unit tests for structured logging functionality."""

import io
import json
import logging

from synthetic_source.config.models import SyntheticSourceConfig
from synthetic_source.generators.record_generator import RecordGenerator
from synthetic_source.shared.logging_config import configure_structured_logging
from synthetic_source.shared.logging_utils import get_structured_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_generate_correlation_id(self):
        """Test correlation ID generation."""
        logger = get_structured_logger("test")
        corr_id = logger.generate_correlation_id()

        assert corr_id.startswith("SYN_")
        assert len(corr_id) == 16  # SYN_ + 12 hex chars

    def test_set_and_clear_correlation_id(self):
        """Test setting and clearing correlation IDs."""
        logger = get_structured_logger("test")
        assert logger.correlation_id is None

        logger.set_correlation_id("TEST_123")
        assert logger.correlation_id == "TEST_123"

        logger.clear_correlation_id()
        assert logger.correlation_id is None

    def test_structured_log_format(self, caplog):
        """Test that logs are formatted as JSON with correct fields."""
        logger = get_structured_logger("test.module")
        logger.set_correlation_id("TEST_CORR_123")

        with caplog.at_level(logging.INFO):
            logger.info("Test message", key1="value1", key2=42)

        assert len(caplog.records) == 1
        log_data = json.loads(caplog.records[0].message)

        assert log_data["level"] == "INFO"
        assert log_data["message"] == "Test message"
        assert log_data["correlation_id"] == "TEST_CORR_123"
        assert "timestamp" in log_data
        assert log_data["context"] == {"key1": "value1", "key2": 42}

    def test_log_without_correlation_id(self, caplog):
        """Test logging without a correlation ID set."""
        logger = get_structured_logger("test.module")

        with caplog.at_level(logging.INFO):
            logger.warning("Test message without correlation")

        log_data = json.loads(caplog.records[0].message)
        assert log_data["correlation_id"] == "none"
        assert log_data["level"] == "WARNING"

    def test_disabled_level_is_skipped(self, caplog):
        """Test that entries below the logger level are not formatted or emitted."""
        logger = get_structured_logger("test.module")

        with caplog.at_level(logging.WARNING):
            logger.debug("hidden")
            logger.info("hidden")

        assert caplog.records == []


class TestGeneratorLogging:
    """Test lifecycle events logged by the record generator."""

    def test_generator_logs_configuration(self, caplog):
        """Test that constructing a generator logs a configuration summary."""
        config = SyntheticSourceConfig(num_records=10)

        with caplog.at_level(logging.INFO):
            RecordGenerator(config)

        entries = [json.loads(r.message) for r in caplog.records]
        summary = [e for e in entries if e["message"] == "Record generator configured"]
        assert len(summary) == 1
        assert summary[0]["context"]["num_records"] == 10
        assert summary[0]["correlation_id"].startswith("SYN_")

    def test_generation_does_not_log_per_record(self, caplog):
        """Test that generating records is silent."""
        generator = RecordGenerator(SyntheticSourceConfig(num_records=10))

        with caplog.at_level(logging.DEBUG):
            for position in range(10):
                generator.generate(position)

        assert caplog.records == []


class TestConfigureLogging:
    """Test root logging configuration."""

    def test_configure_sets_hypothesis_level(self):
        """Test that noisy loggers are raised to WARNING."""
        configure_structured_logging("DEBUG", stream=io.StringIO())
        assert logging.getLogger("hypothesis").level == logging.WARNING
