"""Shared hashing, exceptions, and logging utilities for the synthetic source."""

from synthetic_source.shared.hashing import PositionHasher, Salt

__all__ = ["PositionHasher", "Salt"]
