"""Configuration for the touch-draw interaction."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .features import FeatureStore

logger = logging.getLogger(__name__)

DEFAULT_UNIT_CONVERSIONS: Mapping[str, float] = {
    "m": 1.0,
    "ft": 1 / 3.28084,
    "in": 0.0254,
}

DEFAULT_UNIT = "m"


class TouchDrawConfigurationError(ValueError):
    """Raised when the interaction is constructed with unusable options."""


@dataclass
class CandidateSearchConfig:
    """Tuning constants for handle proposals."""

    # Screen-space dedup cell edge, pixels.
    bucket_size_px: float = 100.0
    # Focus region half-size as a fraction of the view diagonal.
    focus_region_fraction: float = 1 / 8
    # Minimum in-focus segment length as a fraction of the view diagonal.
    min_focus_length_ratio: float = 0.1

    def __post_init__(self) -> None:
        if self.bucket_size_px <= 0:
            raise TouchDrawConfigurationError("bucket_size_px must be positive")
        if self.focus_region_fraction <= 0:
            raise TouchDrawConfigurationError("focus_region_fraction must be positive")
        if self.min_focus_length_ratio < 0:
            raise TouchDrawConfigurationError("min_focus_length_ratio must not be negative")


_CANDIDATE_SEARCH_CONFIG = CandidateSearchConfig()


def get_candidate_search_config() -> CandidateSearchConfig:
    return copy.deepcopy(_CANDIDATE_SEARCH_CONFIG)


def set_candidate_search_config(config: CandidateSearchConfig) -> None:
    global _CANDIDATE_SEARCH_CONFIG
    _CANDIDATE_SEARCH_CONFIG = copy.deepcopy(config)


@dataclass
class TouchDrawOptions:
    """Interaction options.

    Either ``source`` (used for both reference and destination) or the
    ``reference_source`` / ``destination_source`` pair must be given.
    """

    source: Optional[FeatureStore] = None
    reference_source: Optional[FeatureStore] = None
    destination_source: Optional[FeatureStore] = None
    unit_conversions: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_UNIT_CONVERSIONS))
    selected_unit: str = DEFAULT_UNIT
    candidate_search: CandidateSearchConfig = field(default_factory=get_candidate_search_config)

    def __post_init__(self) -> None:
        if self.source is not None:
            if self.reference_source is not None or self.destination_source is not None:
                logger.warning("source given; reference_source/destination_source are ignored")
        elif self.reference_source is None or self.destination_source is None:
            raise TouchDrawConfigurationError(
                "either source or both reference_source and destination_source are required"
            )
        if not self.unit_conversions:
            raise TouchDrawConfigurationError("unit_conversions must not be empty")
        for unit, meters in self.unit_conversions.items():
            if not meters or meters <= 0:
                raise TouchDrawConfigurationError(f"unit {unit!r} needs a positive meters-per-unit factor")
        if self.selected_unit not in self.unit_conversions:
            raise TouchDrawConfigurationError(
                f"selected unit {self.selected_unit!r} is not in {sorted(self.unit_conversions)}"
            )

    @property
    def reference(self) -> FeatureStore:
        return self.source if self.source is not None else self.reference_source  # type: ignore[return-value]

    @property
    def destination(self) -> FeatureStore:
        return self.source if self.source is not None else self.destination_source  # type: ignore[return-value]


__all__ = [
    "DEFAULT_UNIT_CONVERSIONS",
    "DEFAULT_UNIT",
    "TouchDrawConfigurationError",
    "CandidateSearchConfig",
    "get_candidate_search_config",
    "set_candidate_search_config",
    "TouchDrawOptions",
]
