"""
Evidence-rule module.

Grades a fixed catalogue of 18 diagnostic indicator criteria (9 Inattention,
9 Hyperactivity-Impulsivity) against Go/No-Go, Stop-Signal and
Tower-of-London metrics:
- Each behavioral signal is graded none / weak / moderate / strong
- A criterion takes the strongest grade among its signals
- Criteria without an instrumented proxy are always reported as none

Outputs are indicators for a clinician, not a diagnosis.
"""

from .levels import ThresholdBands, DEFAULT_BANDS, max_evidence, resolve_bands
from .catalogue import CRITERIA, SIGNALS, CriterionTemplate, EvidenceSignal
from .rule_engine import EvidenceRuleEngine, get_default_engine, infer_criteria, summarize_by_domain
from .narrative import generate_clinical_summary

__all__ = [
    'ThresholdBands',
    'DEFAULT_BANDS',
    'max_evidence',
    'resolve_bands',
    'CRITERIA',
    'SIGNALS',
    'CriterionTemplate',
    'EvidenceSignal',
    'EvidenceRuleEngine',
    'get_default_engine',
    'infer_criteria',
    'summarize_by_domain',
    'generate_clinical_summary',
]
