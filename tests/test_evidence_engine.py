"""
Unit tests for the evidence-rule engine.

Tests cover:
- Band grading and monotonicity
- Planning organization rule
- Max (not mean) combination across signals
- Catalogue completeness and ordering
- Configuration overrides
- Narrative summary
"""

import unittest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.data_models import (
    GameMetricsBundle,
    GoNoGoMetrics,
    StopSignalMetrics,
    TowerOfLondonMetrics,
)
from core.enums import Domain, EvidenceLevel
from evidence import (
    CRITERIA,
    DEFAULT_BANDS,
    EvidenceRuleEngine,
    get_default_engine,
    ThresholdBands,
    generate_clinical_summary,
    infer_criteria,
    max_evidence,
    resolve_bands,
    summarize_by_domain,
)
from evidence.catalogue import NOT_MEASURED_NOTE, grade_planning_organization

UNMEASURED_IDS = {'A1-7', 'A1-9', 'A2-1', 'A2-2', 'A2-3', 'A2-4', 'A2-6', 'A2-9'}


def _by_id(criteria):
    return {c.id: c for c in criteria}


def _tol_bundle(excess_moves: float, plan_latency: float) -> GameMetricsBundle:
    return GameMetricsBundle(
        tower_of_london=TowerOfLondonMetrics(excess_moves=excess_moves, plan_latency=plan_latency)
    )


class TestThresholdBands(unittest.TestCase):
    """Test band grading."""

    def test_grades(self):
        bands = DEFAULT_BANDS['commission_rate']
        self.assertEqual(bands.grade(0.0), EvidenceLevel.NONE)
        self.assertEqual(bands.grade(0.119), EvidenceLevel.NONE)
        self.assertEqual(bands.grade(0.12), EvidenceLevel.WEAK)
        self.assertEqual(bands.grade(0.18), EvidenceLevel.MODERATE)
        self.assertEqual(bands.grade(0.28), EvidenceLevel.STRONG)
        self.assertEqual(bands.grade(0.9), EvidenceLevel.STRONG)

    def test_shipped_cutoffs(self):
        self.assertEqual(DEFAULT_BANDS['omission_rate'], ThresholdBands(0.10, 0.18, 0.28))
        self.assertEqual(DEFAULT_BANDS['rt_cv'], ThresholdBands(0.18, 0.24, 0.30))
        self.assertEqual(DEFAULT_BANDS['vigilance_decrement'], ThresholdBands(0.06, 0.10, 0.16))
        self.assertEqual(DEFAULT_BANDS['stop_failure_rate'], ThresholdBands(0.30, 0.40, 0.50))
        self.assertEqual(DEFAULT_BANDS['excess_moves'], ThresholdBands(1, 2, 4))
        self.assertEqual(DEFAULT_BANDS['plan_latency'], ThresholdBands(2.5, 4.0, 6.0))

    def test_monotonic(self):
        for name, bands in DEFAULT_BANDS.items():
            previous = EvidenceLevel.NONE
            for step in range(0, 101):
                level = bands.grade(step * 0.1)
                self.assertGreaterEqual(level, previous, name)
                previous = level

    def test_rejects_descending_cutoffs(self):
        with self.assertRaises(ValueError):
            ThresholdBands(weak=0.3, moderate=0.2, strong=0.4)

    def test_max_evidence(self):
        self.assertEqual(max_evidence([]), EvidenceLevel.NONE)
        self.assertEqual(
            max_evidence([EvidenceLevel.WEAK, EvidenceLevel.STRONG, EvidenceLevel.MODERATE]),
            EvidenceLevel.STRONG
        )


class TestPlanningOrganization(unittest.TestCase):
    """Test the Tower-of-London planning rule."""

    def test_no_excess_moves_is_none(self):
        for latency in (0.0, 3.0, 5.0, 30.0):
            level = grade_planning_organization(_tol_bundle(0, latency), DEFAULT_BANDS)
            self.assertEqual(level, EvidenceLevel.NONE)

    def test_many_excess_moves_is_strong(self):
        for latency in (0.0, 1.0, 10.0):
            level = grade_planning_organization(_tol_bundle(5, latency), DEFAULT_BANDS)
            self.assertEqual(level, EvidenceLevel.STRONG)

    def test_takes_higher_of_moves_and_latency(self):
        self.assertEqual(
            grade_planning_organization(_tol_bundle(1, 4.5), DEFAULT_BANDS),
            EvidenceLevel.MODERATE
        )
        self.assertEqual(
            grade_planning_organization(_tol_bundle(2, 6.5), DEFAULT_BANDS),
            EvidenceLevel.STRONG
        )
        self.assertEqual(
            grade_planning_organization(_tol_bundle(1, 0.5), DEFAULT_BANDS),
            EvidenceLevel.WEAK
        )

    def test_missing_session_is_none(self):
        level = grade_planning_organization(GameMetricsBundle(), DEFAULT_BANDS)
        self.assertEqual(level, EvidenceLevel.NONE)


class TestInferCriteria(unittest.TestCase):
    """Test catalogue grading."""

    def test_always_eighteen_in_catalogue_order(self):
        criteria = infer_criteria(GameMetricsBundle())
        self.assertEqual(len(criteria), 18)
        self.assertEqual([c.id for c in criteria], [t.id for t in CRITERIA])
        self.assertEqual(sum(1 for c in criteria if c.domain is Domain.INATTENTION), 9)
        self.assertEqual(sum(1 for c in criteria if c.domain is Domain.HYPERACTIVITY_IMPULSIVITY), 9)

    def test_empty_input_is_all_none(self):
        for criterion in infer_criteria({}):
            self.assertEqual(criterion.evidence, EvidenceLevel.NONE)

    def test_unmeasured_criteria_stay_none(self):
        saturated = GameMetricsBundle(
            go_no_go=GoNoGoMetrics(
                commission_rate=1.0, omission_rate=1.0, cv_rt=1.0,
                vigilance_decrement=1.0, fast_guess_rate=1.0
            ),
            stop_signal=StopSignalMetrics(
                commission_rate=1.0, omission_rate=1.0, cv_rt=1.0, stop_failure_rate=1.0
            ),
            tower_of_london=TowerOfLondonMetrics(excess_moves=10, plan_latency=20),
        )
        for criterion in infer_criteria(saturated):
            if criterion.id in UNMEASURED_IDS:
                self.assertEqual(criterion.evidence, EvidenceLevel.NONE)
                self.assertEqual(criterion.note, NOT_MEASURED_NOTE)
                self.assertFalse(criterion.is_measured)
            else:
                self.assertEqual(criterion.evidence, EvidenceLevel.STRONG, criterion.id)

    def test_commission_uses_mean_of_games(self):
        bundle = GameMetricsBundle(
            go_no_go=GoNoGoMetrics(commission_rate=0.30),
            stop_signal=StopSignalMetrics(commission_rate=0.0),
        )
        criteria = _by_id(infer_criteria(bundle))
        self.assertEqual(criteria['A1-1'].evidence, EvidenceLevel.WEAK)

    def test_rt_variability_uses_worst_game(self):
        bundle = GameMetricsBundle(
            go_no_go=GoNoGoMetrics(cv_rt=0.10),
            stop_signal=StopSignalMetrics(cv_rt=0.26),
        )
        criteria = _by_id(infer_criteria(bundle))
        self.assertEqual(criteria['A1-8'].evidence, EvidenceLevel.MODERATE)

    def test_multi_signal_takes_maximum(self):
        bundle = GameMetricsBundle(
            go_no_go=GoNoGoMetrics(commission_rate=0.0),
            stop_signal=StopSignalMetrics(commission_rate=0.0, stop_failure_rate=0.55),
        )
        criteria = _by_id(infer_criteria(bundle))
        self.assertEqual(criteria['A2-7'].evidence, EvidenceLevel.STRONG)
        self.assertEqual(criteria['A2-8'].evidence, EvidenceLevel.STRONG)
        self.assertEqual(criteria['A1-1'].evidence, EvidenceLevel.NONE)

    def test_sustained_attention_combines_variability_and_vigilance(self):
        bundle = GameMetricsBundle(go_no_go=GoNoGoMetrics(cv_rt=0.19, vigilance_decrement=0.12))
        criteria = _by_id(infer_criteria(bundle))
        self.assertEqual(criteria['A1-2'].evidence, EvidenceLevel.MODERATE)
        self.assertEqual(criteria['A1-4'].evidence, EvidenceLevel.MODERATE)
        self.assertEqual(criteria['A1-8'].evidence, EvidenceLevel.WEAK)

    def test_fast_guesses_inform_motor_criterion(self):
        bundle = GameMetricsBundle(go_no_go=GoNoGoMetrics(fast_guess_rate=0.08))
        criteria = _by_id(infer_criteria(bundle))
        self.assertEqual(criteria['A2-5'].evidence, EvidenceLevel.MODERATE)

    def test_camel_case_payload(self):
        payload = {
            'goNoGo': {'commissionRate': 0.2, 'omissionRate': 0.2, 'cvRT': 0.2, 'vigilanceDecrement': 0.0},
            'stopSignal': {'commissionRate': 0.2, 'omissionRate': 0.2, 'cvRT': 0.2, 'stopFailureRate': 0.45},
            'tol': {'planLatency': 3.4, 'excessMoves': 2, 'ruleViolations': 0},
        }
        criteria = _by_id(infer_criteria(payload))
        self.assertEqual(criteria['A1-1'].evidence, EvidenceLevel.MODERATE)
        self.assertEqual(criteria['A1-3'].evidence, EvidenceLevel.MODERATE)
        self.assertEqual(criteria['A1-5'].evidence, EvidenceLevel.MODERATE)
        self.assertEqual(criteria['A2-8'].evidence, EvidenceLevel.MODERATE)

    def test_idempotent(self):
        bundle = GameMetricsBundle(go_no_go=GoNoGoMetrics(commission_rate=0.2, cv_rt=0.3))
        self.assertEqual(infer_criteria(bundle), infer_criteria(bundle))

    def test_default_engine_is_shared(self):
        self.assertIs(get_default_engine(), get_default_engine())
        self.assertIs(get_default_engine().bands, DEFAULT_BANDS)

    def test_explicit_engine_is_used(self):
        bands = resolve_bands({'evidence': {'bands': {'stop_failure_rate': {'weak': 0.1, 'moderate': 0.2, 'strong': 0.3}}}})
        bundle = GameMetricsBundle(stop_signal=StopSignalMetrics(stop_failure_rate=0.35))
        self.assertEqual(_by_id(infer_criteria(bundle))['A2-8'].evidence, EvidenceLevel.WEAK)
        self.assertEqual(
            _by_id(infer_criteria(bundle, EvidenceRuleEngine(bands)))['A2-8'].evidence,
            EvidenceLevel.STRONG
        )

    def test_summarize_by_domain(self):
        bundle = GameMetricsBundle(stop_signal=StopSignalMetrics(stop_failure_rate=0.6))
        summary = summarize_by_domain(infer_criteria(bundle))
        self.assertEqual(summary['Hyperactivity-Impulsivity']['strong'], 2)
        self.assertEqual(summary['Inattention']['none'], 9)

    def test_to_dict(self):
        record = infer_criteria(GameMetricsBundle())[0].to_dict()
        self.assertEqual(record['id'], 'A1-1')
        self.assertEqual(record['domain'], 'Inattention')
        self.assertEqual(record['evidence'], 'none')


class TestTowerOfLondonPayload(unittest.TestCase):
    """Test parsing of raw Tower-of-London payloads."""

    def test_top_level_frenetic_rate(self):
        bundle = GameMetricsBundle.from_dict({
            'tower_of_london': {'plan_latency': 5.0, 'excess_moves': 1, 'frenetic_movement_rate': 0.5}
        })
        self.assertEqual(bundle.tower_of_london.frenetic_movement_rate, 0.5)

    def test_top_level_camel_case(self):
        tol = TowerOfLondonMetrics.from_dict({'freneticMovement': 0.25})
        self.assertEqual(tol.frenetic_movement_rate, 0.25)

    def test_nested_hyperactivity_section(self):
        bundle = GameMetricsBundle.from_dict({'tol': {'hyperactivity': {'freneticMovement': 0.5}}})
        self.assertEqual(bundle.tower_of_london.frenetic_movement_rate, 0.5)

    def test_top_level_takes_precedence(self):
        tol = TowerOfLondonMetrics.from_dict({
            'frenetic_movement_rate': 0.4,
            'hyperactivity': {'frenetic_movement_rate': 0.1},
        })
        self.assertEqual(tol.frenetic_movement_rate, 0.4)

    def test_top_level_rate_reaches_summary(self):
        bundle = GameMetricsBundle.from_dict({
            'tower_of_london': {'plan_latency': 5.0, 'excess_moves': 1, 'frenetic_movement_rate': 0.5}
        })
        self.assertIn("MOTOR ACTIVITY", generate_clinical_summary(bundle))


class TestBandOverrides(unittest.TestCase):
    """Test configuration of the band tables."""

    def test_override_applies(self):
        bands = resolve_bands({'evidence': {'bands': {'stop_failure_rate': {'weak': 0.2, 'moderate': 0.3, 'strong': 0.35}}}})
        engine = EvidenceRuleEngine(bands)
        criteria = _by_id(engine.infer(GameMetricsBundle(stop_signal=StopSignalMetrics(stop_failure_rate=0.36))))
        self.assertEqual(criteria['A2-8'].evidence, EvidenceLevel.STRONG)
        self.assertEqual(DEFAULT_BANDS['stop_failure_rate'].strong, 0.50)

    def test_unknown_metric(self):
        with self.assertRaises(ValueError):
            resolve_bands({'evidence': {'bands': {'stroop_delta': {'weak': 0.1, 'moderate': 0.2, 'strong': 0.3}}}})

    def test_incomplete_bands(self):
        with self.assertRaises(ValueError):
            resolve_bands({'evidence': {'bands': {'rt_cv': {'weak': 0.1}}}})

    def test_missing_planning_bands(self):
        bands = dict(DEFAULT_BANDS)
        del bands['plan_latency']
        with self.assertRaises(ValueError):
            EvidenceRuleEngine(bands)


class TestClinicalSummary(unittest.TestCase):
    """Test the narrative summary."""

    def test_balanced_profile(self):
        text = generate_clinical_summary(GameMetricsBundle(), "Ana")
        self.assertIn("Ana", text)
        self.assertIn("within the expected range", text)
        self.assertIn("Overall performance is balanced", text)

    def test_flags_inattention_and_inhibition(self):
        bundle = GameMetricsBundle(
            go_no_go=GoNoGoMetrics(omission_rate=0.2, commission_rate=0.25, cv_rt=0.35),
            stop_signal=StopSignalMetrics(stop_failure_rate=0.5, ssrt=0.4),
        )
        text = generate_clinical_summary(bundle)
        self.assertIn("the student", text)
        self.assertIn("omission rate of 20%", text)
        self.assertIn("CV=0.35", text)
        self.assertIn("stop failures: 50%", text)
        self.assertIn("400ms", text)
        self.assertIn("clinical evaluation is recommended", text)

    def test_planning_section(self):
        bundle = GameMetricsBundle(
            tower_of_london=TowerOfLondonMetrics(
                plan_latency=1.2, excess_moves=3, planning_score=0.4, frenetic_movement_rate=0.3
            )
        )
        text = generate_clinical_summary(bundle)
        self.assertIn("Impulsive solving style", text)
        self.assertIn("score: 40%", text)
        self.assertIn("MOTOR ACTIVITY", text)

    def test_no_planning_score_no_efficiency_claim(self):
        bundle = GameMetricsBundle(tower_of_london=TowerOfLondonMetrics(plan_latency=5.0))
        text = generate_clinical_summary(bundle)
        self.assertNotIn("PLANNING:", text)
        self.assertNotIn("efficiency", text)


if __name__ == '__main__':
    unittest.main()
