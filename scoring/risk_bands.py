"""
Per-game risk banding.

Each mini-game is summarised by a coarse low/medium/high bucket taken from
the unweighted mean of three 0-1 metrics:

- Go/No-Go: commission rate, RT coefficient of variation, vigilance decrement
- Stop-Signal: stop-failure rate, RT coefficient of variation, commission rate
- Tower-of-London: no metric triad; the bucket follows the planning
  organization evidence level (strong -> high, moderate -> medium)

Score interpretation (triad mean m):
- m >= 0.40: high
- 0.25 <= m < 0.40: medium
- m < 0.25: low
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from core.data_models import GameMetricsBundle, GoNoGoMetrics, StopSignalMetrics
from core.enums import EvidenceLevel, GameType, RiskBand

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskCutoffs:
    """Lower bounds of the medium and high buckets."""
    medium: float = 0.25
    high: float = 0.4

    def __post_init__(self):
        errors = self.validate()
        if errors:
            raise ValueError(f"Invalid risk band configuration: {errors}")

    def validate(self):
        errors = []
        if not self.medium <= self.high:
            errors.append("medium cutoff must not exceed high cutoff")
        return errors

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'RiskCutoffs':
        bands = config.get('risk_bands') or {}
        return cls(
            medium=float(bands.get('medium', cls.medium)),
            high=float(bands.get('high', cls.high)),
        )


DEFAULT_RISK_CUTOFFS = RiskCutoffs()


def band_from_triad(
    a: float,
    b: float,
    c: float,
    cutoffs: RiskCutoffs = DEFAULT_RISK_CUTOFFS
) -> RiskBand:
    """
    Bucket the unweighted mean of three metrics.

    Args:
        a, b, c: Metrics on a 0-1 scale
        cutoffs: Bucket lower bounds

    Returns:
        RiskBand
    """
    m = (a + b + c) / 3
    if m >= cutoffs.high:
        return RiskBand.HIGH
    if m >= cutoffs.medium:
        return RiskBand.MEDIUM
    return RiskBand.LOW


def band_from_evidence(level: EvidenceLevel) -> RiskBand:
    """Map an evidence grade onto the risk buckets (weak counts as low)."""
    if level is EvidenceLevel.STRONG:
        return RiskBand.HIGH
    if level is EvidenceLevel.MODERATE:
        return RiskBand.MEDIUM
    return RiskBand.LOW


def go_no_go_risk(gng: GoNoGoMetrics, cutoffs: RiskCutoffs = DEFAULT_RISK_CUTOFFS) -> RiskBand:
    return band_from_triad(gng.commission_rate, gng.cv_rt, gng.vigilance_decrement, cutoffs)


def stop_signal_risk(sst: StopSignalMetrics, cutoffs: RiskCutoffs = DEFAULT_RISK_CUTOFFS) -> RiskBand:
    return band_from_triad(sst.stop_failure_rate, sst.cv_rt, sst.commission_rate, cutoffs)


def assess_game_risks(
    bundle: GameMetricsBundle,
    planning_evidence: Optional[EvidenceLevel] = None,
    cutoffs: RiskCutoffs = DEFAULT_RISK_CUTOFFS
) -> Dict[GameType, RiskBand]:
    """
    Risk bucket for every game present in the bundle.

    Args:
        bundle: Per-game metrics
        planning_evidence: Planning organization evidence level; the
            Tower-of-London bucket is only reported when this is given and a
            Tower-of-London session exists
        cutoffs: Triad bucket lower bounds

    Returns:
        Dict of GameType -> RiskBand
    """
    risks = {
        GameType.GO_NO_GO: go_no_go_risk(bundle.go_no_go, cutoffs),
        GameType.STOP_SIGNAL: stop_signal_risk(bundle.stop_signal, cutoffs),
    }
    if bundle.tower_of_london is not None and planning_evidence is not None:
        risks[GameType.TOWER_OF_LONDON] = band_from_evidence(planning_evidence)

    logger.debug(
        "Game risks: " + ", ".join(f"{g.value}={r.value}" for g, r in risks.items())
    )
    return risks
