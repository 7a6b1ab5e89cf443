"""
Core data models for the cognitive-game screening core.

Inputs (subject profile and per-game telemetry) arrive as loosely-typed
mappings from the storage or HTTP layer. Every numeric field is coerced
with `coerce_metric`: absent, null, non-numeric or non-finite values become
0.0 so sparse telemetry flows through scoring instead of being rejected.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np

from .enums import Domain, EvidenceLevel

logger = logging.getLogger(__name__)


def coerce_metric(value: Any, default: float = 0.0) -> float:
    """
    Convert a raw telemetry value to a finite float.

    Args:
        value: Raw value (number, numeric string, None, ...)
        default: Value used when the input is unusable

    Returns:
        Finite float, or `default`
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (ValueError, TypeError):
        logger.debug(f"Non-numeric metric value {value!r} treated as {default}")
        return default
    if not np.isfinite(number):
        logger.debug(f"Non-finite metric value {value!r} treated as {default}")
        return default
    return number


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present key among snake_case/camelCase aliases."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            logger.warning(f"Unparseable birth date {value!r}")
    return None


@dataclass(frozen=True)
class SubjectProfile:
    """Demographics needed by the risk model."""
    birth_date: Optional[date] = None
    sex: str = ""  # Free text, matched case-insensitively

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'SubjectProfile':
        """Build a profile from a storage row or request body."""
        data = data or {}
        birth = _parse_date(_pick(data, 'birth_date', 'birthDate', 'fecha_nacimiento'))
        sex = _pick(data, 'sex', 'gender', 'genero')
        return cls(birth_date=birth, sex='' if sex is None else str(sex))


@dataclass(frozen=True)
class SessionMetrics:
    """Summary statistics of one game session, as consumed by the risk model."""
    n_trials: float = 0.0
    n_correct: float = 0.0
    n_incorrect: float = 0.0
    responded_rate: float = 0.0
    accuracy: float = 0.0
    fail_rate: float = 0.0
    mean_rt: float = 0.0
    median_rt: float = 0.0
    p95_rt: float = 0.0
    std_rt: float = 0.0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'SessionMetrics':
        data = data or {}
        return cls(**{
            name: coerce_metric(data.get(name))
            for name in cls.__dataclass_fields__
        })


@dataclass(frozen=True)
class GoNoGoMetrics:
    """Go/No-Go session metrics (rates in 0-1, times in seconds)."""
    accuracy: float = 0.0
    commission_rate: float = 0.0
    omission_rate: float = 0.0
    median_rt: float = 0.0
    p95_rt: float = 0.0
    cv_rt: float = 0.0  # std / mean of response time
    fast_guess_rate: float = 0.0
    lapses_rate: float = 0.0
    vigilance_decrement: float = 0.0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'GoNoGoMetrics':
        data = data or {}
        return cls(
            accuracy=coerce_metric(_pick(data, 'accuracy')),
            commission_rate=coerce_metric(_pick(data, 'commission_rate', 'commissionRate')),
            omission_rate=coerce_metric(_pick(data, 'omission_rate', 'omissionRate')),
            median_rt=coerce_metric(_pick(data, 'median_rt', 'medianRT')),
            p95_rt=coerce_metric(_pick(data, 'p95_rt', 'p95RT')),
            cv_rt=coerce_metric(_pick(data, 'cv_rt', 'cvRT')),
            fast_guess_rate=coerce_metric(_pick(data, 'fast_guess_rate', 'fastGuessRate')),
            lapses_rate=coerce_metric(_pick(data, 'lapses_rate', 'lapsesRate')),
            vigilance_decrement=coerce_metric(_pick(data, 'vigilance_decrement', 'vigilanceDecrement')),
        )


@dataclass(frozen=True)
class StopSignalMetrics:
    """Stop-Signal task session metrics."""
    accuracy: float = 0.0
    commission_rate: float = 0.0
    omission_rate: float = 0.0
    median_rt: float = 0.0
    p95_rt: float = 0.0
    cv_rt: float = 0.0
    stop_failure_rate: float = 0.0
    ssrt: float = 0.0  # Stop-signal reaction time (s)
    ssd_average: float = 0.0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'StopSignalMetrics':
        data = data or {}
        return cls(
            accuracy=coerce_metric(_pick(data, 'accuracy')),
            commission_rate=coerce_metric(_pick(data, 'commission_rate', 'commissionRate')),
            omission_rate=coerce_metric(_pick(data, 'omission_rate', 'omissionRate')),
            median_rt=coerce_metric(_pick(data, 'median_rt', 'medianRT')),
            p95_rt=coerce_metric(_pick(data, 'p95_rt', 'p95RT')),
            cv_rt=coerce_metric(_pick(data, 'cv_rt', 'cvRT')),
            stop_failure_rate=coerce_metric(_pick(data, 'stop_failure_rate', 'stopFailureRate')),
            ssrt=coerce_metric(_pick(data, 'ssrt')),
            ssd_average=coerce_metric(_pick(data, 'ssd_average', 'ssdAverage')),
        )


@dataclass(frozen=True)
class TowerOfLondonMetrics:
    """Tower-of-London planning task metrics."""
    plan_latency: float = 0.0  # Seconds before the first move
    excess_moves: float = 0.0
    rule_violations: float = 0.0
    decision_time: float = 0.0
    planning_score: Optional[float] = None  # 0-1 efficiency, when reported
    frenetic_movement_rate: float = 0.0  # Share of non-functional cursor motion

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'TowerOfLondonMetrics':
        data = data or {}
        planning_score = _pick(data, 'planning_score', 'planningScore')
        frenetic = _pick(data, 'frenetic_movement_rate', 'freneticMovement')
        if frenetic is None:
            # Game clients report cursor motion under a nested section
            frenetic = _pick(data.get('hyperactivity') or {}, 'frenetic_movement_rate', 'freneticMovement')
        return cls(
            plan_latency=coerce_metric(_pick(data, 'plan_latency', 'planLatency')),
            excess_moves=coerce_metric(_pick(data, 'excess_moves', 'excessMoves')),
            rule_violations=coerce_metric(_pick(data, 'rule_violations', 'ruleViolations')),
            decision_time=coerce_metric(_pick(data, 'decision_time', 'decisionTime')),
            planning_score=None if planning_score is None else coerce_metric(planning_score),
            frenetic_movement_rate=coerce_metric(frenetic),
        )


@dataclass(frozen=True)
class GameMetricsBundle:
    """Latest session of each mini-game for one subject."""
    go_no_go: GoNoGoMetrics = field(default_factory=GoNoGoMetrics)
    stop_signal: StopSignalMetrics = field(default_factory=StopSignalMetrics)
    tower_of_london: Optional[TowerOfLondonMetrics] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'GameMetricsBundle':
        data = data or {}
        tol = _pick(data, 'tower_of_london', 'towerOfLondon', 'tol')
        return cls(
            go_no_go=GoNoGoMetrics.from_dict(_pick(data, 'go_no_go', 'goNoGo')),
            stop_signal=StopSignalMetrics.from_dict(_pick(data, 'stop_signal', 'stopSignal')),
            tower_of_london=None if tol is None else TowerOfLondonMetrics.from_dict(tol),
        )


@dataclass(frozen=True)
class Criterion:
    """A diagnostic criterion graded against the game telemetry."""
    id: str
    domain: Domain
    label: str
    measured_by: Tuple[str, ...]
    evidence: EvidenceLevel = EvidenceLevel.NONE
    note: Optional[str] = None

    @property
    def is_measured(self) -> bool:
        """False for criteria without an instrumented proxy."""
        return bool(self.measured_by)

    def to_dict(self) -> Dict[str, Any]:
        """Convert criterion to dictionary for serialization."""
        return {
            'id': self.id,
            'domain': self.domain.value,
            'label': self.label,
            'measured_by': list(self.measured_by),
            'evidence': self.evidence.value,
            'note': self.note,
        }
