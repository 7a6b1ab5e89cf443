"""
Evidence grading tables.

Each behavioral signal is graded against three ascending cutoffs:

    value >= strong    -> strong
    value >= moderate  -> moderate
    value >= weak      -> weak
    otherwise          -> none

Grading is monotonic: a larger value never yields a lower level.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping

from core.enums import EvidenceLevel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThresholdBands:
    """Lower bounds of the weak, moderate and strong grades."""
    weak: float
    moderate: float
    strong: float

    def __post_init__(self):
        errors = self.validate()
        if errors:
            raise ValueError(f"Invalid evidence bands: {errors}")

    def validate(self) -> List[str]:
        errors = []
        if not self.weak <= self.moderate <= self.strong:
            errors.append(
                f"cutoffs must be ascending (weak={self.weak}, "
                f"moderate={self.moderate}, strong={self.strong})"
            )
        return errors

    def grade(self, value: float) -> EvidenceLevel:
        """Evidence level reached by `value`."""
        if value >= self.strong:
            return EvidenceLevel.STRONG
        if value >= self.moderate:
            return EvidenceLevel.MODERATE
        if value >= self.weak:
            return EvidenceLevel.WEAK
        return EvidenceLevel.NONE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ThresholdBands':
        try:
            return cls(
                weak=float(data['weak']),
                moderate=float(data['moderate']),
                strong=float(data['strong']),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Evidence bands need numeric weak/moderate/strong: {e}") from e


def max_evidence(levels: Iterable[EvidenceLevel]) -> EvidenceLevel:
    """Strongest level among `levels` (none for an empty input)."""
    return max(levels, default=EvidenceLevel.NONE)


# Shipped cutoffs, keyed by the metric they grade
DEFAULT_BANDS: Mapping[str, ThresholdBands] = MappingProxyType({
    'commission_rate': ThresholdBands(weak=0.12, moderate=0.18, strong=0.28),
    'omission_rate': ThresholdBands(weak=0.10, moderate=0.18, strong=0.28),
    'rt_cv': ThresholdBands(weak=0.18, moderate=0.24, strong=0.30),
    'vigilance_decrement': ThresholdBands(weak=0.06, moderate=0.10, strong=0.16),
    'stop_failure_rate': ThresholdBands(weak=0.30, moderate=0.40, strong=0.50),
    'fast_guess_rate': ThresholdBands(weak=0.04, moderate=0.07, strong=0.12),
    'excess_moves': ThresholdBands(weak=1, moderate=2, strong=4),
    'plan_latency': ThresholdBands(weak=2.5, moderate=4.0, strong=6.0),
})


def resolve_bands(config: Mapping[str, Any]) -> Mapping[str, ThresholdBands]:
    """
    Shipped bands with any `evidence.bands` overrides applied.

    Raises:
        ValueError: For unknown metric names or non-ascending cutoffs
    """
    overrides = ((config.get('evidence') or {}).get('bands')) or {}
    unknown = sorted(set(overrides) - set(DEFAULT_BANDS))
    if unknown:
        raise ValueError(f"Unknown evidence band metrics: {unknown}")

    bands = dict(DEFAULT_BANDS)
    for metric, values in overrides.items():
        bands[metric] = ThresholdBands.from_dict(values)
        logger.info(f"Evidence bands for {metric} overridden: {bands[metric]}")
    return MappingProxyType(bands)
