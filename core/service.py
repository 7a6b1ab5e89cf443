"""
Screening service: the two call surfaces of the scoring core.

- `classify_risk(metrics, profile)` -> 0/1 model risk flag
- `evaluate_criteria(bundle)` -> 18 graded diagnostic criteria

Both are backed by one `ScreeningService`, built once per process from the
configuration. Model parameters, band tables and the catalogue are
validated at construction and never mutated afterwards, so the service can
be shared by every request handler and any client-side preview.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Union

from core.data_models import Criterion, GameMetricsBundle, SessionMetrics, SubjectProfile
from core.enums import GameType, RiskBand
from evidence.levels import resolve_bands
from evidence.narrative import generate_clinical_summary
from evidence.rule_engine import EvidenceRuleEngine
from features.vector_builder import FeatureVector, build_features
from scoring.linear_scorer import ScoreResult, StandardizedLinearScorer
from scoring.model_parameters import ModelParameters, resolve_model_parameters
from scoring.risk_bands import RiskCutoffs, assess_game_risks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskPrediction:
    """Model input and output for one session."""
    features: FeatureVector
    score: ScoreResult

    @property
    def classification(self) -> int:
        return self.score.classification

    def to_dict(self) -> Dict[str, Any]:
        return {
            'prediction': self.score.classification,
            **self.score.to_dict(),
            'input_vector': self.features.as_dict(),
        }


@dataclass(frozen=True)
class CriteriaReport:
    """Graded criteria plus per-game risk buckets and narrative."""
    criteria: List[Criterion]
    game_risks: Dict[GameType, RiskBand]
    summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'criteria': [c.to_dict() for c in self.criteria],
            'game_risks': {g.value: r.value for g, r in self.game_risks.items()},
            'summary': self.summary,
        }


class ScreeningService:
    """
    Shared entry point for model scoring and criterion grading.

    Usage:
        service = ScreeningService(config)
        flag = service.classify_risk(metrics, profile)
        criteria = service.evaluate_criteria(bundle)
    """

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        parameters: Optional[ModelParameters] = None
    ):
        """
        Initialize the service.

        Args:
            config: Configuration dict (model, evidence and risk_bands sections)
            parameters: Explicit model parameters; overrides the configuration

        Raises:
            ValueError: If parameters, band tables or cutoffs are invalid
            FileNotFoundError: If a configured parameter file is missing
        """
        self.config = dict(config or {})

        self.parameters = parameters or resolve_model_parameters(self.config)
        self.scorer = StandardizedLinearScorer(self.parameters)
        self.rule_engine = EvidenceRuleEngine(resolve_bands(self.config))
        self.risk_cutoffs = RiskCutoffs.from_config(self.config)

        logger.info(
            f"Screening service ready: model={self.parameters.version}, "
            f"risk_cutoffs=({self.risk_cutoffs.medium}, {self.risk_cutoffs.high})"
        )

    def predict(
        self,
        metrics: Union[SessionMetrics, Mapping[str, Any]],
        profile: Union[SubjectProfile, Mapping[str, Any]],
        evaluated_at: Optional[datetime] = None
    ) -> RiskPrediction:
        """Build the feature vector and score it."""
        features = build_features(metrics, profile, evaluated_at)
        return RiskPrediction(features=features, score=self.scorer.score(features))

    def classify_risk(
        self,
        metrics: Union[SessionMetrics, Mapping[str, Any]],
        profile: Union[SubjectProfile, Mapping[str, Any]],
        evaluated_at: Optional[datetime] = None
    ) -> int:
        """Binary risk flag for one session (1 = at risk)."""
        return self.predict(metrics, profile, evaluated_at).classification

    def evaluate_criteria(
        self,
        bundle: Union[GameMetricsBundle, Mapping[str, Any]]
    ) -> List[Criterion]:
        """Grade the 18 catalogue criteria."""
        if not isinstance(bundle, GameMetricsBundle):
            bundle = GameMetricsBundle.from_dict(bundle)
        return self.rule_engine.infer(bundle)

    def assess_game_risks(
        self,
        bundle: Union[GameMetricsBundle, Mapping[str, Any]]
    ) -> Dict[GameType, RiskBand]:
        """Low/medium/high bucket per game."""
        if not isinstance(bundle, GameMetricsBundle):
            bundle = GameMetricsBundle.from_dict(bundle)
        planning = self.rule_engine.grade_signals(bundle)['planning_organization']
        return assess_game_risks(bundle, planning, self.risk_cutoffs)

    def build_criteria_report(
        self,
        bundle: Union[GameMetricsBundle, Mapping[str, Any]],
        subject_name: Optional[str] = None
    ) -> CriteriaReport:
        """Criteria, game risk buckets and narrative in one call."""
        if not isinstance(bundle, GameMetricsBundle):
            bundle = GameMetricsBundle.from_dict(bundle)
        return CriteriaReport(
            criteria=self.evaluate_criteria(bundle),
            game_risks=self.assess_game_risks(bundle),
            summary=generate_clinical_summary(bundle, subject_name),
        )


@lru_cache(maxsize=1)
def get_default_service() -> ScreeningService:
    """Process-wide service with the shipped parameters and tables."""
    return ScreeningService()


def classify_risk(
    metrics: Union[SessionMetrics, Mapping[str, Any]],
    profile: Union[SubjectProfile, Mapping[str, Any]],
    evaluated_at: Optional[datetime] = None
) -> int:
    """
    Convenience function for the binary risk flag.

    Args:
        metrics: Session metrics
        profile: Subject demographics
        evaluated_at: Reference time for the age computation (default: now)

    Returns:
        1 if the model flags the session, otherwise 0
    """
    return get_default_service().classify_risk(metrics, profile, evaluated_at)


def evaluate_criteria(bundle: Union[GameMetricsBundle, Mapping[str, Any]]) -> List[Criterion]:
    """
    Convenience function for criterion grading.

    Args:
        bundle: Per-game metrics

    Returns:
        List of 18 graded Criterion objects, in catalogue order
    """
    return get_default_service().evaluate_criteria(bundle)
