"""
Generators module for synthetic record generation.

This module contains the seeded samplers and the delay, bundle shape and
progress models consumed by bounded and unbounded source readers.
"""

from .bundle_shape import BundleShapeModel, OffsetRange, desired_num_bundles
from .delay_model import DelayModel
from .progress_model import TIMESTAMP_MAX_MILLIS, ProgressModel, ProgressShape
from .record_generator import GeneratedRecord, RecordGenerator
from .samplers import (
    ConstantSampler,
    ExponentialSampler,
    MixtureSampler,
    NormalSampler,
    Sampler,
    UniformSampler,
    ZipfSampler,
    sampler_from_dict,
)

__all__ = [
    "BundleShapeModel",
    "ConstantSampler",
    "DelayModel",
    "ExponentialSampler",
    "GeneratedRecord",
    "MixtureSampler",
    "NormalSampler",
    "OffsetRange",
    "ProgressModel",
    "ProgressShape",
    "RecordGenerator",
    "Sampler",
    "TIMESTAMP_MAX_MILLIS",
    "UniformSampler",
    "ZipfSampler",
    "desired_num_bundles",
    "sampler_from_dict",
]
