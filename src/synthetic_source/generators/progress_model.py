"""
Progress and watermark reporting shapes.

Progress is a closed-form function of (offset, range, shape). The watermark
samples the processing-time delays of the next few positions to estimate the
lowest event time still to come. Both are pure: they hold no state between
calls and never change what a position generates once it is reached.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from synthetic_source.generators.delay_model import DelayModel
from synthetic_source.shared.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Largest representable timestamp in epoch millis (Long.MAX_VALUE micros / 1000)
TIMESTAMP_MAX_MILLIS = 9_223_372_036_854_775

REGRESSING_START = 0.9
REGRESSING_END = 0.1


class ProgressShape(str, Enum):
    """Shape of the reported progress curve over a reader's range."""

    LINEAR = "LINEAR"  # Grows linearly from 0 to 1
    LINEAR_REGRESSING = "LINEAR_REGRESSING"  # Decreases linearly from 0.9 to 0.1


@dataclass(frozen=True)
class ProgressModel:
    """
    Computes reported progress and watermarks.

    Attributes:
        shape: Progress curve to report
        delays: Delay model read for upcoming event times
        split_point_frequency_records: 0 disables progress reporting
        watermark_search_in_advance_count: Look-ahead window size
        watermark_drift_millis: Positive values hold the watermark back from
            the event times, negative values push it ahead and make records late
    """

    shape: ProgressShape = ProgressShape.LINEAR
    delays: DelayModel = field(default_factory=DelayModel)
    split_point_frequency_records: int = 1
    watermark_search_in_advance_count: int = 100
    watermark_drift_millis: int = 0

    def __post_init__(self) -> None:
        if self.watermark_search_in_advance_count <= 0:
            raise ConfigurationError(
                "watermark_search_in_advance_count must be positive",
                field_name="watermark_search_in_advance_count",
                invalid_value=self.watermark_search_in_advance_count,
            )
        if self.split_point_frequency_records < 0:
            raise ConfigurationError(
                "split_point_frequency_records must be non-negative",
                field_name="split_point_frequency_records",
                invalid_value=self.split_point_frequency_records,
            )
        try:
            object.__setattr__(self, "shape", ProgressShape(self.shape))
        except ValueError as e:
            raise ConfigurationError(
                "Unknown progress shape",
                field_name="progress_shape",
                invalid_value=self.shape,
            ) from e

    @property
    def reports_progress(self) -> bool:
        return self.split_point_frequency_records > 0

    @staticmethod
    def fraction_consumed(offset: int, range_size: int) -> float:
        """Linear fraction of the range consumed, clamped to [0, 1]."""
        if range_size <= 0:
            return 1.0
        return min(1.0, max(0.0, offset / range_size))

    def report_progress(self, offset: int, range_size: int) -> float | None:
        """
        Progress to report at ``offset`` within a range of ``range_size`` positions.

        Returns:
            A value in [0, 1] for LINEAR, in [0.1, 0.9] for LINEAR_REGRESSING,
            or None when the source is not dynamically splittable.
        """
        if not self.reports_progress:
            return None

        fraction = self.fraction_consumed(offset, range_size)
        if self.shape is ProgressShape.LINEAR_REGRESSING:
            return REGRESSING_START - (REGRESSING_START - REGRESSING_END) * fraction
        return fraction

    def event_time_ms(self, position: int, processing_time_ms: int) -> int:
        return processing_time_ms - self.delays.processing_time_delay_ms(position)

    def watermark(
        self,
        offset: int,
        processing_time_ms: int,
        end_offset: int,
        previous_ms: int | None = None,
    ) -> int:
        """
        Watermark in epoch millis for a reader positioned at ``offset``.

        Args:
            offset: Next position the reader will emit
            processing_time_ms: Current processing time in epoch millis
            end_offset: Exclusive end of the reader's range
            previous_ms: Previously reported watermark; the result never
                moves behind it

        Returns:
            ``TIMESTAMP_MAX_MILLIS`` once the range is exhausted, otherwise
            the lowest event time in the look-ahead window minus the drift
        """
        if offset >= end_offset:
            return TIMESTAMP_MAX_MILLIS

        stop = min(end_offset, offset + self.watermark_search_in_advance_count)
        lowest = min(
            self.event_time_ms(position, processing_time_ms)
            for position in range(offset, stop)
        )
        candidate = lowest - self.watermark_drift_millis

        if previous_ms is not None and previous_ms > candidate:
            return previous_ms
        return candidate
