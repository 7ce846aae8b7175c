"""
Per-position delay channels.

The model only computes durations. Sleeping, burning CPU or advancing a
simulated clock is left to the caller.
"""

import math
from dataclasses import dataclass, field
from datetime import timedelta

from synthetic_source.generators.samplers import ConstantSampler, Sampler
from synthetic_source.shared.hashing import PositionHasher, Salt


# Largest whole-millisecond duration a timedelta can hold
MAX_DELAY_MS = timedelta.max // timedelta(milliseconds=1)


def _to_millis(value: float) -> int:
    # Truncate toward zero like a long cast, clamped to [0, MAX_DELAY_MS]
    if math.isnan(value) or value <= 0:
        return 0
    if value >= MAX_DELAY_MS:
        return MAX_DELAY_MS
    return int(value)


@dataclass(frozen=True)
class DelayModel:
    """
    Three independently configured delay channels.

    Each channel hashes the position with its own salt, so the startup delay,
    the event/processing-time skew and the per-record sleep of a position are
    drawn from unrelated seeds.

    Attributes:
        initialize: Distribution of the one-time startup delay of a reader
        processing_time: Distribution of the gap between event time and
            processing time, used to simulate late data
        per_record: Distribution of the throttling sleep per emitted record
        hasher: Position hasher shared with the record generator
    """

    initialize: Sampler = field(default_factory=lambda: ConstantSampler(0))
    processing_time: Sampler = field(default_factory=lambda: ConstantSampler(0))
    per_record: Sampler = field(default_factory=lambda: ConstantSampler(0))
    hasher: PositionHasher = field(default_factory=PositionHasher)

    def initialize_delay_ms(self, position: int) -> int:
        return _to_millis(
            self.initialize.sample(self.hasher.hash(position, Salt.INITIALIZE))
        )

    def processing_time_delay_ms(self, position: int) -> int:
        return _to_millis(
            self.processing_time.sample(
                self.hasher.hash(position, Salt.PROCESSING_TIME)
            )
        )

    def per_record_delay_ms(self, position: int) -> int:
        return _to_millis(self.per_record.sample(self.hasher.hash(position, Salt.SLEEP)))

    def initialize_delay(self, position: int) -> timedelta:
        """Startup delay for a reader whose range begins at ``position``."""
        return timedelta(milliseconds=self.initialize_delay_ms(position))

    def processing_time_delay(self, position: int) -> timedelta:
        """How far the event time of ``position`` lags behind processing time."""
        return timedelta(milliseconds=self.processing_time_delay_ms(position))

    def per_record_delay(self, position: int) -> timedelta:
        """Sleep to apply when emitting the record at ``position``."""
        return timedelta(milliseconds=self.per_record_delay_ms(position))
