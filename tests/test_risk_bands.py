"""
Unit tests for per-game risk banding.
"""

import pytest # pyright: ignore[reportMissingImports]
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.data_models import GameMetricsBundle, GoNoGoMetrics, StopSignalMetrics, TowerOfLondonMetrics
from core.enums import EvidenceLevel, GameType, RiskBand
from scoring.risk_bands import (
    RiskCutoffs,
    assess_game_risks,
    band_from_evidence,
    band_from_triad,
    go_no_go_risk,
    stop_signal_risk,
)


class TestBandFromTriad:
    """Test triad bucketing."""

    def test_reference_points(self):
        assert band_from_triad(0.5, 0.5, 0.5) == RiskBand.HIGH
        assert band_from_triad(0.3, 0.3, 0.3) == RiskBand.MEDIUM
        assert band_from_triad(0.1, 0.1, 0.1) == RiskBand.LOW

    def test_boundaries(self):
        assert band_from_triad(0.4, 0.4, 0.4) == RiskBand.HIGH
        assert band_from_triad(0.25, 0.25, 0.25) == RiskBand.MEDIUM
        assert band_from_triad(0.0, 0.0, 0.0) == RiskBand.LOW

    def test_unweighted_mean(self):
        assert band_from_triad(1.5, 0.0, 0.0) == RiskBand.HIGH
        assert band_from_triad(0.0, 0.0, 0.75) == RiskBand.MEDIUM

    def test_custom_cutoffs(self):
        cutoffs = RiskCutoffs(medium=0.1, high=0.2)
        assert band_from_triad(0.15, 0.15, 0.15, cutoffs) == RiskBand.MEDIUM

    def test_invalid_cutoffs(self):
        with pytest.raises(ValueError):
            RiskCutoffs(medium=0.5, high=0.4)

    def test_cutoffs_from_config(self):
        cutoffs = RiskCutoffs.from_config({'risk_bands': {'high': 0.5}})
        assert cutoffs.high == 0.5
        assert cutoffs.medium == 0.25


class TestGameRisks:
    """Test per-game triads."""

    def test_go_no_go_triad(self):
        gng = GoNoGoMetrics(commission_rate=0.6, cv_rt=0.4, vigilance_decrement=0.3, omission_rate=1.0)
        assert go_no_go_risk(gng) == RiskBand.HIGH

    def test_stop_signal_triad(self):
        sst = StopSignalMetrics(stop_failure_rate=0.46, cv_rt=0.26, commission_rate=0.22)
        assert stop_signal_risk(sst) == RiskBand.MEDIUM

    def test_tower_follows_planning_evidence(self):
        bundle = GameMetricsBundle(tower_of_london=TowerOfLondonMetrics(excess_moves=5))
        risks = assess_game_risks(bundle, EvidenceLevel.STRONG)
        assert risks[GameType.TOWER_OF_LONDON] == RiskBand.HIGH

    def test_tower_omitted_without_session(self):
        risks = assess_game_risks(GameMetricsBundle(), EvidenceLevel.NONE)
        assert set(risks) == {GameType.GO_NO_GO, GameType.STOP_SIGNAL}

    @pytest.mark.parametrize("level,band", [
        (EvidenceLevel.NONE, RiskBand.LOW),
        (EvidenceLevel.WEAK, RiskBand.LOW),
        (EvidenceLevel.MODERATE, RiskBand.MEDIUM),
        (EvidenceLevel.STRONG, RiskBand.HIGH),
    ])
    def test_band_from_evidence(self, level, band):
        assert band_from_evidence(level) == band


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
