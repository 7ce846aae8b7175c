"""
Position hashing for deterministic record generation.

Record positions are usually contiguous (sequential scans) or arithmetically
related (split offsets). Using them directly as generator seeds makes adjacent
records visibly correlated, so every position is first pushed through a
SplitMix64 step: a golden-ratio increment followed by the xor-shift-multiply
finalizer. The result is a signed 64-bit seed with full avalanche, i.e. a
one-bit change in the position flips about half of the output bits.

Channels that need their own stream for the same position (record payload,
per-record sleep, processing-time delay, ...) xor a fixed salt into the state
before the finalizer runs.
"""

from dataclasses import dataclass
from enum import IntEnum

MASK64 = (1 << 64) - 1
SIGN_BIT = 1 << 63
GOLDEN_GAMMA = 0x9E3779B97F4A7C15


class Salt(IntEnum):
    """Per-channel salts mixed into the hash state."""

    RECORD = 0
    SLEEP = 0x5EED_5EED_0000_0001
    PROCESSING_TIME = 0x7A1E_DA7A_0000_0002
    INITIALIZE = 0x1417_1A11_0000_0003
    BUNDLE = 0xB0DD_1E00_0000_0004
    HOT_KEY = 0x0407_CE75_0000_0005
    MIXTURE = 0x3171_0BE5_0000_0006


def to_signed64(value: int) -> int:
    """Reinterpret the low 64 bits of ``value`` as a two's complement long."""
    value &= MASK64
    return value - (1 << 64) if value & SIGN_BIT else value


def to_unsigned64(value: int) -> int:
    return value & MASK64


def mix64(z: int) -> int:
    """SplitMix64 finalizer over the low 64 bits of ``z``."""
    z &= MASK64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & MASK64
    return z ^ (z >> 31)


@dataclass(frozen=True)
class PositionHasher:
    """
    Maps record positions to well-distributed 64-bit seeds.

    The mapping depends only on ``(seed, position, salt)``, so any worker can
    compute the seed of any position without coordination.

    Attributes:
        seed: Global seed selecting an independent family of hashes.
    """

    seed: int = 0

    @property
    def _seed_key(self) -> int:
        return mix64(self.seed)

    def hash(self, position: int, salt: int = Salt.RECORD) -> int:
        """
        Hash a position into a signed 64-bit seed.

        Args:
            position: Record position (any int64 value is accepted)
            salt: Channel salt, see :class:`Salt`

        Returns:
            Signed 64-bit seed
        """
        state = ((position + 1) * GOLDEN_GAMMA + self._seed_key) & MASK64
        return to_signed64(mix64(state ^ int(salt)))


def derive_seed(seed: int, salt: int) -> int:
    """Derive an independent seed from an existing one, e.g. for nested samplers."""
    return to_signed64(mix64((seed & MASK64) ^ int(salt) ^ GOLDEN_GAMMA))
