"""
Seeded sampling from a small, closed family of distributions.

Every sampler is a frozen value object exposing ``sample(seed) -> float``.
A fresh numpy Generator is created from the seed on every call, so a draw
never depends on which draws happened before it. This is what keeps record
generation stable when a position range is re-split across workers; do not
replace it with one shared generator that advances between calls.

JSON form (as found in source options)::

    {"type": "const", "const": 1}
    {"type": "uniform", "lower": 0, "upper": 10}
    {"type": "exp", "rate": 0.5}           # or {"type": "exp", "mean": 2}
    {"type": "zipf", "param": 3.5}         # optional "num_elements", default 100
    {"type": "normal", "mean": 5, "stddev": 1}
    {"type": "mixture", "components": [...], "weights": [...]}
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping

import numpy as np

from synthetic_source.shared.exceptions import ConfigurationError
from synthetic_source.shared.hashing import Salt, derive_seed, to_unsigned64

logger = logging.getLogger(__name__)

DEFAULT_ZIPF_ELEMENTS = 100


def seeded_generator(seed: int) -> np.random.Generator:
    """Create a new generator for one draw; int64 seeds are reinterpreted as unsigned."""
    return np.random.default_rng(to_unsigned64(seed))


def _require_finite(type_name: str, name: str, value: float) -> None:
    if not math.isfinite(value):
        raise ConfigurationError(
            f"{type_name} sampler parameter must be finite",
            field_name=name,
            invalid_value=value,
        )


class Sampler(ABC):
    """A named distribution that draws one value per seed."""

    type_name: ClassVar[str]

    @abstractmethod
    def sample(self, seed: int) -> float:
        """Draw one value, deterministic in ``seed``."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """JSON form accepted by :func:`sampler_from_dict`."""


@dataclass(frozen=True)
class ConstantSampler(Sampler):
    """Always returns ``value``; the seed is ignored."""

    type_name: ClassVar[str] = "const"

    value: float

    def __post_init__(self) -> None:
        _require_finite(self.type_name, "const", self.value)

    def sample(self, seed: int) -> float:
        return float(self.value)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_name, "const": self.value}


@dataclass(frozen=True)
class UniformSampler(Sampler):
    """Uniform over ``[lower, upper)``."""

    type_name: ClassVar[str] = "uniform"

    lower: float
    upper: float

    def __post_init__(self) -> None:
        _require_finite(self.type_name, "lower", self.lower)
        _require_finite(self.type_name, "upper", self.upper)
        if self.lower > self.upper:
            raise ConfigurationError(
                "uniform sampler requires lower <= upper",
                field_name="lower",
                invalid_value=(self.lower, self.upper),
            )

    def sample(self, seed: int) -> float:
        u = seeded_generator(seed).random()
        return self.lower + (self.upper - self.lower) * u

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_name, "lower": self.lower, "upper": self.upper}


@dataclass(frozen=True)
class ExponentialSampler(Sampler):
    """Exponential with the given ``rate`` (mean ``1 / rate``), by inverse CDF."""

    type_name: ClassVar[str] = "exp"

    rate: float

    def __post_init__(self) -> None:
        _require_finite(self.type_name, "rate", self.rate)
        if self.rate <= 0:
            raise ConfigurationError(
                "exponential sampler requires rate > 0",
                field_name="rate",
                invalid_value=self.rate,
            )

    def sample(self, seed: int) -> float:
        u = seeded_generator(seed).random()
        # u is in [0, 1), so log1p(-u) is finite
        return -math.log1p(-u) / self.rate

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_name, "rate": self.rate}


@dataclass(frozen=True)
class ZipfSampler(Sampler):
    """
    Bounded Zipf law over the integers ``1..num_elements``.

    P(k) is proportional to ``k ** -exponent``. Larger exponents give less
    skew between the largest draws and the median: over 100 bundles, 3.5
    yields a largest bundle roughly 3-10x the median, 3.0 roughly 5-50x and
    2.5 roughly 5-100x (one bundle can match all others combined).
    """

    type_name: ClassVar[str] = "zipf"

    exponent: float
    num_elements: int = DEFAULT_ZIPF_ELEMENTS
    _cdf: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        _require_finite(self.type_name, "param", self.exponent)
        if self.exponent <= 0:
            raise ConfigurationError(
                "zipf sampler requires exponent > 0",
                field_name="param",
                invalid_value=self.exponent,
            )
        if isinstance(self.num_elements, bool) or not isinstance(self.num_elements, int):
            raise ConfigurationError(
                "zipf sampler requires an integer number of elements",
                field_name="num_elements",
                invalid_value=self.num_elements,
            )
        if self.num_elements < 1:
            raise ConfigurationError(
                "zipf sampler requires num_elements >= 1",
                field_name="num_elements",
                invalid_value=self.num_elements,
            )

        ranks = np.arange(1, self.num_elements + 1, dtype=np.float64)
        cdf = np.cumsum(ranks**-self.exponent)
        cdf /= cdf[-1]
        cdf.setflags(write=False)
        object.__setattr__(self, "_cdf", cdf)
        logger.debug(
            f"Built zipf table: exponent={self.exponent}, elements={self.num_elements}"
        )

    def sample(self, seed: int) -> float:
        u = seeded_generator(seed).random()
        index = int(np.searchsorted(self._cdf, u, side="right"))
        return float(min(index, self.num_elements - 1) + 1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type_name,
            "param": self.exponent,
            "num_elements": self.num_elements,
        }


@dataclass(frozen=True)
class NormalSampler(Sampler):
    """Gaussian with ``mean`` and ``stddev``; stddev 0 degenerates to the mean."""

    type_name: ClassVar[str] = "normal"

    mean: float
    stddev: float

    def __post_init__(self) -> None:
        _require_finite(self.type_name, "mean", self.mean)
        _require_finite(self.type_name, "stddev", self.stddev)
        if self.stddev < 0:
            raise ConfigurationError(
                "normal sampler requires stddev >= 0",
                field_name="stddev",
                invalid_value=self.stddev,
            )

    def sample(self, seed: int) -> float:
        return float(seeded_generator(seed).normal(self.mean, self.stddev))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_name, "mean": self.mean, "stddev": self.stddev}


@dataclass(frozen=True)
class MixtureSampler(Sampler):
    """
    Weighted mixture of other samplers.

    The seed picks a component, then the chosen component draws from a seed
    derived from the original one, so the pick and the draw stay independent.
    """

    type_name: ClassVar[str] = "mixture"

    components: tuple[Sampler, ...]
    weights: tuple[float, ...] | None = None
    _cumulative: tuple[float, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        components = tuple(self.components)
        if not components:
            raise ConfigurationError(
                "mixture sampler requires at least one component",
                field_name="components",
            )
        for component in components:
            if not isinstance(component, Sampler):
                raise ConfigurationError(
                    "mixture components must be samplers",
                    field_name="components",
                    invalid_value=component,
                )

        if self.weights is None:
            weights = tuple(1.0 for _ in components)
        else:
            try:
                raw_weights = tuple(self.weights)
                if any(isinstance(w, (bool, str, bytes)) for w in raw_weights):
                    raise TypeError("weights must be numbers")
                weights = tuple(float(w) for w in raw_weights)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    "mixture weights must be a list of numbers",
                    field_name="weights",
                    invalid_value=self.weights,
                ) from e
        if len(weights) != len(components):
            raise ConfigurationError(
                "mixture sampler needs one weight per component",
                field_name="weights",
                invalid_value=len(weights),
            )
        if any(w < 0 or not math.isfinite(w) for w in weights) or sum(weights) <= 0:
            raise ConfigurationError(
                "mixture weights must be finite, non-negative and not all zero",
                field_name="weights",
                invalid_value=weights,
            )

        total = sum(weights)
        cumulative = []
        running = 0.0
        for w in weights:
            running += w / total
            cumulative.append(running)
        cumulative[-1] = 1.0

        object.__setattr__(self, "components", components)
        object.__setattr__(self, "weights", weights)
        object.__setattr__(self, "_cumulative", tuple(cumulative))

    def sample(self, seed: int) -> float:
        u = seeded_generator(seed).random()
        for index, bound in enumerate(self._cumulative):
            if u < bound:
                break
        component_seed = derive_seed(seed, Salt.MIXTURE + index)
        return self.components[index].sample(component_seed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type_name,
            "components": [c.to_dict() for c in self.components],
            "weights": list(self.weights or ()),
        }


def _number(spec: Mapping[str, Any], key: str, type_name: str, default: Any = None) -> float:
    value = spec.get(key, default)
    if value is None:
        raise ConfigurationError(
            f"{type_name} sampler is missing parameter '{key}'", field_name=key
        )
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(
            f"{type_name} sampler parameter '{key}' must be a number",
            field_name=key,
            invalid_value=value,
        )
    return float(value)


def sampler_from_dict(spec: Any) -> Sampler:
    """
    Build a sampler from its JSON form.

    Args:
        spec: A mapping with a ``type`` key, an existing Sampler (returned as
            is), or a bare number (treated as a constant)

    Returns:
        The constructed, validated sampler

    Raises:
        ConfigurationError: If the type is unknown or a parameter is invalid
    """
    if isinstance(spec, Sampler):
        return spec
    if isinstance(spec, (int, float)) and not isinstance(spec, bool):
        return ConstantSampler(float(spec))
    if not isinstance(spec, Mapping):
        raise ConfigurationError(
            "Distribution must be a JSON object with a 'type' field",
            invalid_value=spec,
        )

    type_name = spec.get("type")
    if type_name == "const":
        value = spec.get("const", spec.get("value"))
        return ConstantSampler(_number({"const": value}, "const", type_name))
    if type_name == "uniform":
        return UniformSampler(
            _number(spec, "lower", type_name), _number(spec, "upper", type_name)
        )
    if type_name == "exp":
        if "rate" in spec:
            return ExponentialSampler(_number(spec, "rate", type_name))
        mean = _number(spec, "mean", type_name)
        if mean <= 0:
            raise ConfigurationError(
                "exponential sampler requires mean > 0",
                field_name="mean",
                invalid_value=mean,
            )
        return ExponentialSampler(1.0 / mean)
    if type_name == "zipf":
        num_elements = spec.get(
            "num_elements", spec.get("numElements", DEFAULT_ZIPF_ELEMENTS)
        )
        return ZipfSampler(_number(spec, "param", type_name), num_elements)
    if type_name == "normal":
        return NormalSampler(
            _number(spec, "mean", type_name), _number(spec, "stddev", type_name)
        )
    if type_name == "mixture":
        raw_components = spec.get("components")
        if not isinstance(raw_components, (list, tuple)):
            raise ConfigurationError(
                "mixture sampler requires a list of components",
                field_name="components",
                invalid_value=raw_components,
            )
        weights = spec.get("weights")
        if weights is not None:
            if not isinstance(weights, (list, tuple)):
                raise ConfigurationError(
                    "mixture weights must be a list of numbers",
                    field_name="weights",
                    invalid_value=weights,
                )
            weights = tuple(weights)
        return MixtureSampler(
            tuple(sampler_from_dict(c) for c in raw_components), weights
        )

    raise ConfigurationError(
        "Unknown distribution type",
        field_name="type",
        invalid_value=type_name,
        validation_errors=[
            "expected one of: const, uniform, exp, zipf, normal, mixture"
        ],
    )
