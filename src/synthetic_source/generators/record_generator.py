"""
Deterministic record generation by position.

Records must be reproducible when the scenario is run a second time, and
dynamic splitting can hand any position to any worker at any moment. So each
position gets its own generator, seeded from the hash of the position, rather
than reading from a stream shared by the whole range.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Iterator

import numpy as np

from synthetic_source.generators.bundle_shape import OffsetRange, desired_num_bundles
from synthetic_source.generators.samplers import seeded_generator
from synthetic_source.shared.hashing import Salt
from synthetic_source.shared.logging_utils import get_structured_logger

if TYPE_CHECKING:
    from synthetic_source.config.models import SyntheticSourceConfig

# Ordered-code escape bytes; keys avoid them so encoded shuffle keys stay small
_KEY_BYTE_LOW = 0x01
_KEY_BYTE_HIGH = 0xFE


@dataclass(frozen=True)
class GeneratedRecord:
    """One synthetic key/value pair and the sleep to apply when emitting it."""

    key: bytes
    value: bytes
    delay_ms: int

    @property
    def delay(self) -> timedelta:
        return timedelta(milliseconds=self.delay_ms)


def _key_bytes(rng: np.random.Generator, size: int) -> bytes:
    return rng.integers(
        _KEY_BYTE_LOW, _KEY_BYTE_HIGH, size=size, dtype=np.uint8, endpoint=True
    ).tobytes()


class RecordGenerator:
    """
    Entry point used by bounded and unbounded source readers.

    Holds only immutable models built from the options, so one instance can be
    shared by any number of threads or copied to any number of workers.
    """

    def __init__(self, config: SyntheticSourceConfig) -> None:
        self.config = config
        self.hasher = config.hasher()
        self.delays = config.delay_model()
        self.bundles = config.bundle_shape_model()
        self.progress = config.progress_model()

        self._log = get_structured_logger(__name__)
        self._log.set_correlation_id(self._log.generate_correlation_id())
        self._log.info(
            "Record generator configured",
            num_records=config.num_records,
            key_size_bytes=config.key_size_bytes,
            value_size_bytes=config.value_size_bytes,
            num_hot_keys=config.num_hot_keys,
            bundle_size_distribution=config.bundle_size_distribution.to_dict(),
            progress_shape=config.progress_shape.value,
        )

    def generate(self, position: int) -> GeneratedRecord:
        """Generate the record at ``position``; identical on every call."""
        seed = self.hasher.hash(position, Salt.RECORD)
        key, value = self._key_value(seed)
        return GeneratedRecord(key, value, self.delays.per_record_delay_ms(position))

    def generate_range(self, start: int, stop: int) -> Iterator[GeneratedRecord]:
        """Generate records for ``[start, stop)`` in position order."""
        for position in range(start, stop):
            yield self.generate(position)

    def _key_value(self, seed: int) -> tuple[bytes, bytes]:
        rng = seeded_generator(seed)
        config = self.config

        # Fixed draw order: hot-key choice, value, then key. Values stay the
        # same whichever key branch is taken.
        hot_draw, hot_pick = rng.random(2)
        value = rng.bytes(config.value_size_bytes)

        if config.num_hot_keys > 0 and hot_draw < config.hot_key_fraction:
            hot_index = min(int(hot_pick * config.num_hot_keys), config.num_hot_keys - 1)
            key_rng = seeded_generator(self.hasher.hash(hot_index, Salt.HOT_KEY))
            key = _key_bytes(key_rng, config.key_size_bytes)
        else:
            key = _key_bytes(rng, config.key_size_bytes)

        return key, value

    def is_split_point(self, position: int) -> bool:
        frequency = self.config.split_point_frequency_records
        return frequency > 0 and position % frequency == 0

    def estimated_size_bytes(self) -> int:
        return self.config.estimated_size_bytes()

    def split_fractions(self, n: int) -> list[float]:
        return self.bundles.split_fractions(n)

    def split_offsets(self, n: int, start: int, stop: int) -> list[OffsetRange]:
        return self.bundles.split_offsets(n, start, stop)

    def initial_split(self, desired_bundle_size_bytes: int) -> list[OffsetRange]:
        """
        Initial bundles over ``[0, num_records)``.

        The bundle count is ``force_num_initial_bundles`` when set, otherwise
        derived from the estimated size and the desired bundle size.
        """
        n = desired_num_bundles(
            self.estimated_size_bytes(),
            desired_bundle_size_bytes,
            self.config.force_num_initial_bundles,
        )
        ranges = self.bundles.split_offsets(n, 0, self.config.num_records)
        self._log.info(
            "Initial split computed",
            requested_bundles=n,
            produced_bundles=len(ranges),
            desired_bundle_size_bytes=desired_bundle_size_bytes,
        )
        return ranges

    def initialize_delay(self, start_position: int) -> timedelta:
        return self.delays.initialize_delay(start_position)

    def processing_time_delay(self, position: int) -> timedelta:
        return self.delays.processing_time_delay(position)

    def report_progress(self, offset: int, range_size: int) -> float | None:
        return self.progress.report_progress(offset, range_size)

    def watermark(
        self,
        offset: int,
        processing_time_ms: int,
        end_offset: int | None = None,
        previous_ms: int | None = None,
    ) -> int:
        """Watermark at ``offset``; ``end_offset`` defaults to ``num_records``."""
        if end_offset is None:
            end_offset = self.config.num_records
        return self.progress.watermark(
            offset, processing_time_ms, end_offset, previous_ms
        )
