"""
Configuration model for the synthetic source.

Options arrive as a JSON object using the camelCase names of the pipeline
options (``numRecords``, ``bundleSizeDistribution``, ...); snake_case field
names are accepted too. Distributions are parsed into immutable samplers at
validation time, so a malformed option fails before any record is generated.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    ValidationError,
)
from pydantic.alias_generators import to_camel

from synthetic_source.generators.bundle_shape import BundleShapeModel
from synthetic_source.generators.delay_model import DelayModel
from synthetic_source.generators.progress_model import ProgressModel, ProgressShape
from synthetic_source.generators.samplers import (
    ConstantSampler,
    Sampler,
    sampler_from_dict,
)
from synthetic_source.shared.exceptions import ConfigurationError
from synthetic_source.shared.hashing import PositionHasher

logger = logging.getLogger(__name__)

SamplerOption = Annotated[
    Sampler,
    BeforeValidator(sampler_from_dict),
    PlainSerializer(lambda sampler: sampler.to_dict(), return_type=dict),
]


def _format_validation_error(error: ValidationError) -> list[str]:
    messages = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ()))
        messages.append(f"{location}: {detail.get('msg')}")
    return messages


class SyntheticSourceConfig(BaseModel):
    """Options of a synthetic bounded or unbounded source."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        arbitrary_types_allowed=True,
    )

    seed: int = Field(0, description="Global seed selecting the hash family")
    num_records: int = Field(0, ge=0, description="Total number of generated records")
    key_size_bytes: int = Field(1, gt=0, description="Size of each generated key")
    value_size_bytes: int = Field(
        1, ge=0, description="Size of each generated value"
    )
    num_hot_keys: int = Field(
        0, ge=0, description="Number of distinct hot keys; 0 disables hot keys"
    )
    hot_key_fraction: float = Field(
        0.0, ge=0.0, le=1.0, description="Fraction of records that use a hot key"
    )
    split_point_frequency_records: int = Field(
        1,
        ge=0,
        description=(
            "Only records whose index is a multiple of this are split points. "
            "0 disables dynamic splitting and progress reporting."
        ),
    )
    bundle_size_distribution: SamplerOption = Field(
        default_factory=lambda: ConstantSampler(1),
        description="Relative sizes of initial split bundles",
    )
    force_num_initial_bundles: int | None = Field(
        None, gt=0, description="Split into exactly this many bundles if set"
    )
    progress_shape: ProgressShape = Field(
        ProgressShape.LINEAR, description="Shape of the reported progress curve"
    )
    initialize_delay_distribution: SamplerOption = Field(
        default_factory=lambda: ConstantSampler(0),
        description="Delay in millis before a reader starts emitting",
    )
    processing_time_delay_distribution: SamplerOption = Field(
        default_factory=lambda: ConstantSampler(0),
        description="Delay in millis between event time and processing time",
    )
    delay_distribution: SamplerOption = Field(
        default_factory=lambda: ConstantSampler(0),
        description="Per-record sleep in millis",
    )
    watermark_search_in_advance_count: int = Field(
        100, gt=0, description="Positions looked ahead at when computing watermarks"
    )
    watermark_drift_millis: int = Field(
        0, description="Signed drift subtracted from the computed watermark"
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyntheticSourceConfig":
        """
        Validate an options mapping.

        Raises:
            ConfigurationError: If any option is missing, malformed or out of range
        """
        try:
            config = cls.model_validate(data)
        except ValidationError as e:
            messages = _format_validation_error(e)
            first_field = str(e.errors()[0]["loc"][0]) if e.errors() else None
            raise ConfigurationError(
                "Invalid synthetic source options",
                field_name=first_field,
                validation_errors=messages,
            ) from e

        logger.debug(
            f"Loaded synthetic source options: num_records={config.num_records}, "
            f"progress_shape={config.progress_shape.value}"
        )
        return config

    @classmethod
    def from_json(cls, text: str) -> "SyntheticSourceConfig":
        """Parse options from a JSON string."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in synthetic source options: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Synthetic source options must be a JSON object",
                invalid_value=type(data).__name__,
            )
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: str | Path) -> "SyntheticSourceConfig":
        """
        Load options from a JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigurationError: If the JSON is invalid or doesn't match the schema
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with path.open("r", encoding="utf-8") as f:
            return cls.from_json(f.read())

    def to_file(self, file_path: str | Path) -> None:
        """Save options as camelCase JSON that :meth:`from_file` reads back."""
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with path.open("w", encoding="utf-8") as f:
            json.dump(self.model_dump(mode="json", by_alias=True), f, indent=2)

    def estimated_size_bytes(self) -> int:
        return self.num_records * (self.key_size_bytes + self.value_size_bytes)

    def hasher(self) -> PositionHasher:
        return PositionHasher(self.seed)

    def delay_model(self) -> DelayModel:
        return DelayModel(
            initialize=self.initialize_delay_distribution,
            processing_time=self.processing_time_delay_distribution,
            per_record=self.delay_distribution,
            hasher=self.hasher(),
        )

    def bundle_shape_model(self) -> BundleShapeModel:
        return BundleShapeModel(self.bundle_size_distribution, self.hasher())

    def progress_model(self) -> ProgressModel:
        return ProgressModel(
            shape=self.progress_shape,
            delays=self.delay_model(),
            split_point_frequency_records=self.split_point_frequency_records,
            watermark_search_in_advance_count=self.watermark_search_in_advance_count,
            watermark_drift_millis=self.watermark_drift_millis,
        )
