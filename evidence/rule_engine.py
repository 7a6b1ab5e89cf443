"""
Evidence-rule engine.

Maps per-game metrics onto the criterion catalogue:
1. Grade every behavioral signal once against its band table
2. For each criterion, take the strongest grade among its signals
   (never a sum or an average)
3. Criteria without an instrumented proxy stay at `none`

The output always has one entry per catalogue criterion, in catalogue
order. Missing metrics take the same path as zero-valued ones.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from core.data_models import Criterion, GameMetricsBundle
from core.enums import EvidenceLevel
from .catalogue import CRITERIA, SIGNALS, CriterionTemplate
from .levels import DEFAULT_BANDS, ThresholdBands, max_evidence

logger = logging.getLogger(__name__)


class EvidenceRuleEngine:
    """
    Grades the criterion catalogue against game telemetry.

    Usage:
        engine = EvidenceRuleEngine()
        criteria = engine.infer(bundle)
    """

    def __init__(
        self,
        bands: Mapping[str, ThresholdBands] = DEFAULT_BANDS,
        criteria: Sequence[CriterionTemplate] = CRITERIA
    ):
        self.bands = bands
        self.criteria = tuple(criteria)

        errors = self.validate()
        if errors:
            raise ValueError(f"Invalid evidence rule configuration: {errors}")

        logger.info(
            f"Evidence rule engine initialized: {len(self.criteria)} criteria, "
            f"{len(SIGNALS)} signals"
        )

    def validate(self) -> List[str]:
        """Check that every referenced signal and band table exists."""
        errors = []
        for template in self.criteria:
            for name in template.signals:
                if name not in SIGNALS:
                    errors.append(f"{template.id}: unknown signal '{name}'")
        for signal in SIGNALS.values():
            if signal.bands_key is not None and signal.bands_key not in self.bands:
                errors.append(f"signal '{signal.name}' has no bands '{signal.bands_key}'")
        for key in ('excess_moves', 'plan_latency'):
            if key not in self.bands:
                errors.append(f"planning organization needs bands '{key}'")
        return errors

    def grade_signals(self, bundle: GameMetricsBundle) -> Dict[str, EvidenceLevel]:
        """Evidence level of every signal."""
        return {
            name: signal.evaluate(bundle, self.bands)
            for name, signal in SIGNALS.items()
        }

    def infer(self, bundle: GameMetricsBundle) -> List[Criterion]:
        """
        Grade every catalogue criterion.

        Args:
            bundle: Per-game metrics

        Returns:
            One Criterion per catalogue entry, in catalogue order
        """
        graded = self.grade_signals(bundle)

        criteria = [
            Criterion(
                id=template.id,
                domain=template.domain,
                label=template.label,
                measured_by=template.measured_by,
                evidence=max_evidence(graded[name] for name in template.signals),
                note=template.note,
            )
            for template in self.criteria
        ]

        flagged = sum(1 for c in criteria if c.evidence is not EvidenceLevel.NONE)
        logger.debug(f"Graded {len(criteria)} criteria, {flagged} with evidence")

        return criteria


@lru_cache(maxsize=1)
def get_default_engine() -> EvidenceRuleEngine:
    """Process-wide engine with the shipped bands and catalogue."""
    return EvidenceRuleEngine()


def infer_criteria(
    metrics: Union[GameMetricsBundle, Mapping[str, Any]],
    engine: Optional[EvidenceRuleEngine] = None
) -> List[Criterion]:
    """
    Convenience function for criterion grading with the shipped tables.

    Args:
        metrics: GameMetricsBundle or a raw mapping with goNoGo / stopSignal /
            tol sections
        engine: Engine to use (default: shipped bands and catalogue)

    Returns:
        List of 18 graded Criterion objects
    """
    if not isinstance(metrics, GameMetricsBundle):
        metrics = GameMetricsBundle.from_dict(metrics)
    return (engine or get_default_engine()).infer(metrics)


def summarize_by_domain(criteria: Sequence[Criterion]) -> Dict[str, Dict[str, int]]:
    """
    Count criteria per domain and evidence level.

    Returns:
        {domain: {evidence level: count}}
    """
    summary: Dict[str, Dict[str, int]] = {}
    for criterion in criteria:
        counts = summary.setdefault(
            criterion.domain.value,
            {level.value: 0 for level in EvidenceLevel}
        )
        counts[criterion.evidence.value] += 1
    return summary
