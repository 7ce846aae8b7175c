"""
Unit tests for ProgressModel.

Tests progress shapes and bounds, disabled progress, and watermark drift,
look-ahead and monotonicity.
"""

import pytest

_hyp = pytest.importorskip("hypothesis")
from hypothesis import given
from hypothesis import strategies as st

from synthetic_source.generators.delay_model import DelayModel
from synthetic_source.generators.progress_model import (
    TIMESTAMP_MAX_MILLIS,
    ProgressModel,
    ProgressShape,
)
from synthetic_source.generators.samplers import ConstantSampler, UniformSampler
from synthetic_source.shared.exceptions import ConfigurationError

NOW_MS = 1_700_000_000_000


class TestLinearProgress:
    """Tests for the LINEAR shape."""

    @given(range_size=st.integers(min_value=1, max_value=10**12))
    def test_endpoints(self, range_size):
        """Test progress 0 at the start and 1 at the end for any range."""
        model = ProgressModel(ProgressShape.LINEAR)
        assert model.report_progress(0, range_size) == 0.0
        assert model.report_progress(range_size, range_size) == 1.0

    def test_midpoint(self):
        """Test linear interpolation."""
        assert ProgressModel().report_progress(250, 1000) == 0.25

    def test_clamps_outside_range(self):
        """Test that offsets outside the range are clamped to [0, 1]."""
        model = ProgressModel()
        assert model.report_progress(-5, 100) == 0.0
        assert model.report_progress(500, 100) == 1.0

    def test_empty_range_is_complete(self):
        """Test that a zero-size range reports full progress."""
        assert ProgressModel().report_progress(0, 0) == 1.0


class TestRegressingProgress:
    """Tests for the LINEAR_REGRESSING shape."""

    def test_endpoints(self):
        """Test 0.9 at the start and 0.1 at the end."""
        model = ProgressModel(ProgressShape.LINEAR_REGRESSING)
        assert model.report_progress(0, 1000) == pytest.approx(0.9)
        assert model.report_progress(1000, 1000) == pytest.approx(0.1)

    @given(
        offset=st.integers(min_value=-100, max_value=10_000),
        range_size=st.integers(min_value=0, max_value=5_000),
    )
    def test_bounds(self, offset, range_size):
        """Test that every output stays within [0.1, 0.9]."""
        model = ProgressModel(ProgressShape.LINEAR_REGRESSING)
        value = model.report_progress(offset, range_size)
        assert 0.1 - 1e-12 <= value <= 0.9 + 1e-12

    def test_decreases_with_offset(self):
        """Test that progress never increases as the offset advances."""
        model = ProgressModel(ProgressShape.LINEAR_REGRESSING)
        values = [model.report_progress(o, 100) for o in range(101)]
        assert all(a >= b for a, b in zip(values, values[1:]))

    def test_accepts_shape_name(self):
        """Test that the enum value string is accepted."""
        model = ProgressModel("LINEAR_REGRESSING")
        assert model.shape is ProgressShape.LINEAR_REGRESSING


class TestProgressConfiguration:
    """Tests for progress model validation and disabled reporting."""

    def test_zero_split_frequency_disables_progress(self):
        """Test that non-splittable sources do not report progress."""
        model = ProgressModel(split_point_frequency_records=0)
        assert model.report_progress(10, 100) is None

    def test_unknown_shape_raises(self):
        """Test that an unknown shape name is rejected."""
        with pytest.raises(ConfigurationError, match="Unknown progress shape"):
            ProgressModel("EXPONENTIAL")

    def test_non_positive_look_ahead_raises(self):
        """Test that the look-ahead window must be positive."""
        with pytest.raises(ConfigurationError):
            ProgressModel(watermark_search_in_advance_count=0)

    def test_negative_split_frequency_raises(self):
        """Test that the split point frequency must be non-negative."""
        with pytest.raises(ConfigurationError):
            ProgressModel(split_point_frequency_records=-1)


class TestWatermark:
    """Tests for watermark estimation."""

    def test_constant_delay(self):
        """Test that a constant skew puts the watermark that far behind."""
        model = ProgressModel(delays=DelayModel(processing_time=ConstantSampler(10)))
        assert model.watermark(0, NOW_MS, 100) == NOW_MS - 10

    def test_positive_drift_holds_watermark_back(self):
        """Test that positive drift moves the watermark earlier."""
        delays = DelayModel(processing_time=ConstantSampler(10))
        model = ProgressModel(delays=delays, watermark_drift_millis=500)
        assert model.watermark(0, NOW_MS, 100) == NOW_MS - 10 - 500

    def test_negative_drift_pushes_watermark_ahead(self):
        """Test that negative drift moves the watermark later."""
        delays = DelayModel(processing_time=ConstantSampler(10))
        model = ProgressModel(delays=delays, watermark_drift_millis=-500)
        assert model.watermark(0, NOW_MS, 100) == NOW_MS - 10 + 500

    def test_exhausted_range_is_max(self):
        """Test that a finished reader reports the maximum timestamp."""
        assert ProgressModel().watermark(100, NOW_MS, 100) == TIMESTAMP_MAX_MILLIS

    def test_uses_lowest_event_time_in_window(self):
        """Test that the watermark is the minimum over the look-ahead window."""
        delays = DelayModel(processing_time=UniformSampler(0.0, 1000.0))
        model = ProgressModel(delays=delays, watermark_search_in_advance_count=20)
        expected = min(model.event_time_ms(p, NOW_MS) for p in range(40, 60))
        assert model.watermark(40, NOW_MS, 1000) == expected

    def test_window_clipped_to_range_end(self):
        """Test that positions past the end are not looked at."""
        delays = DelayModel(processing_time=UniformSampler(0.0, 1000.0))
        model = ProgressModel(delays=delays, watermark_search_in_advance_count=50)
        expected = min(model.event_time_ms(p, NOW_MS) for p in range(95, 100))
        assert model.watermark(95, NOW_MS, 100) == expected

    def test_never_moves_backwards(self):
        """Test that a previous watermark is kept when the new estimate is lower."""
        model = ProgressModel(delays=DelayModel(processing_time=ConstantSampler(10)))
        assert model.watermark(0, NOW_MS, 100, previous_ms=NOW_MS) == NOW_MS
        assert model.watermark(0, NOW_MS, 100, previous_ms=0) == NOW_MS - 10

    def test_look_ahead_does_not_change_delays(self):
        """Test that probing future positions leaves their delays unchanged."""
        delays = DelayModel(processing_time=UniformSampler(0.0, 1000.0))
        before = [delays.processing_time_delay_ms(p) for p in range(100)]
        model = ProgressModel(delays=delays, watermark_search_in_advance_count=100)
        for offset in range(0, 100, 10):
            model.watermark(offset, NOW_MS, 100)
        after = [delays.processing_time_delay_ms(p) for p in range(100)]
        assert before == after
