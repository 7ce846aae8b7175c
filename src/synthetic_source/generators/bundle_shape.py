"""
Skewed initial splitting of a position range into bundles.

To split into N bundles, N values are drawn from the bundle size
distribution (one seed per bundle index), normalized to fractions, and the
running sum of those fractions becomes the bundle boundaries. With a Zipf
distribution this yields a few large bundles and many small ones, which is
the shape that exercises dynamic work rebalancing.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import NamedTuple

from synthetic_source.generators.samplers import ConstantSampler, Sampler
from synthetic_source.shared.exceptions import ConfigurationError
from synthetic_source.shared.hashing import PositionHasher, Salt

logger = logging.getLogger(__name__)


class OffsetRange(NamedTuple):
    """Half-open range of positions ``[start, stop)``."""

    start: int
    stop: int

    @property
    def size(self) -> int:
        return self.stop - self.start


def _require_bundle_count(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        raise ConfigurationError(
            "Number of bundles must be a positive integer",
            field_name="n",
            invalid_value=n,
        )


@dataclass(frozen=True)
class BundleShapeModel:
    """
    Computes bundle fractions, boundaries and offset ranges.

    Attributes:
        sampler: Bundle size distribution; only relative sizes matter
        hasher: Hasher used to derive one seed per bundle index
    """

    sampler: Sampler = field(default_factory=lambda: ConstantSampler(1))
    hasher: PositionHasher = field(default_factory=PositionHasher)

    def split_fractions(self, n: int) -> list[float]:
        """
        Relative sizes of ``n`` bundles, in bundle order.

        Args:
            n: Number of bundles

        Returns:
            ``n`` non-negative fractions summing to 1. If every draw is zero
            the bundles are split evenly.

        Raises:
            ConfigurationError: If ``n`` is not a positive integer
        """
        _require_bundle_count(n)

        raw = [
            abs(self.sampler.sample(self.hasher.hash(index, Salt.BUNDLE)))
            for index in range(n)
        ]
        total = math.fsum(raw)
        if total <= 0 or not math.isfinite(total):
            logger.debug(
                f"Bundle size draws summed to {total}; using {n} equal fractions"
            )
            return [1.0 / n] * n

        return [value / total for value in raw]

    def boundaries(self, n: int) -> list[float]:
        """``n + 1`` non-decreasing values from exactly 0.0 to exactly 1.0."""
        result = [0.0]
        running = 0.0
        for fraction in self.split_fractions(n):
            running = min(1.0, running + fraction)
            result.append(running)
        result[-1] = 1.0
        return result

    def cut_points(self, n: int) -> list[float]:
        """The ``n - 1`` interior boundaries."""
        return self.boundaries(n)[1:-1]

    def split_offsets(self, n: int, start: int, stop: int) -> list[OffsetRange]:
        """
        Split ``[start, stop)`` into at most ``n`` contiguous ranges.

        Bundles whose share rounds down to zero positions are dropped, so the
        result can be shorter than ``n``, but it always covers the whole range
        without gaps or overlaps.
        """
        if stop < start:
            raise ConfigurationError(
                "Range stop must not be before start",
                field_name="stop",
                invalid_value=(start, stop),
            )

        total_size = stop - start
        ranges: list[OffsetRange] = []
        current_start = start
        interior = self.boundaries(n)[1:-1]
        for boundary in interior:
            # Float products lose precision past 2**53 positions
            current_end = min(stop, start + int(total_size * boundary))
            if current_end > current_start:
                ranges.append(OffsetRange(current_start, current_end))
                current_start = current_end
        if stop > current_start:
            ranges.append(OffsetRange(current_start, stop))

        logger.debug(
            f"Split [{start}, {stop}) into {len(ranges)} bundles (requested {n})"
        )
        return ranges


def desired_num_bundles(
    estimated_size_bytes: int,
    desired_bundle_size_bytes: int,
    force_num_initial_bundles: int | None = None,
) -> int:
    """
    Number of initial bundles to split a source into.

    A forced count wins; otherwise the estimated size is divided by the
    desired bundle size, rounding up, with a floor of one bundle.
    """
    if force_num_initial_bundles is not None:
        _require_bundle_count(force_num_initial_bundles)
        return force_num_initial_bundles
    if desired_bundle_size_bytes <= 0:
        raise ConfigurationError(
            "desired_bundle_size_bytes must be positive",
            field_name="desired_bundle_size_bytes",
            invalid_value=desired_bundle_size_bytes,
        )
    return max(1, math.ceil(estimated_size_bytes / desired_bundle_size_bytes))
