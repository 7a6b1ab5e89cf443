"""
Core data model for the cognitive-game screening system.

Telemetry from three mini-games (Go/No-Go, Stop-Signal, Tower-of-London)
is scored two independent ways:
1. Risk model: 16-feature vector -> logistic regression -> 0/1 flag
2. Evidence rules: game metrics -> 18 graded diagnostic criteria

The service facade lives in `core.service`; it is not re-exported here so
the leaf packages can import the data model without a cycle.
"""

from .enums import EvidenceLevel, Domain, RiskBand, GameType
from .data_models import (
    SubjectProfile,
    SessionMetrics,
    GoNoGoMetrics,
    StopSignalMetrics,
    TowerOfLondonMetrics,
    GameMetricsBundle,
    Criterion,
    coerce_metric,
)

__all__ = [
    'EvidenceLevel',
    'Domain',
    'RiskBand',
    'GameType',
    'SubjectProfile',
    'SessionMetrics',
    'GoNoGoMetrics',
    'StopSignalMetrics',
    'TowerOfLondonMetrics',
    'GameMetricsBundle',
    'Criterion',
    'coerce_metric',
]
