"""
Risk scoring module.

This package scores game telemetry:
1. Model parameters: shipped scaler + logistic-regression constants
2. Standardized linear scorer: probability and 0/1 risk flag
3. Risk bands: low/medium/high bucket per mini-game

All outputs are:
- Deterministic (pure functions over immutable parameters)
- Explainable (linear predictor and input vector are exposed)
- Non-diagnostic (screening signal, not a medical diagnosis)
"""

from .model_parameters import (
    ModelParameters,
    SHIPPED_MODEL_PARAMETERS,
    load_model_parameters,
    parameters_from_dict,
)
from .linear_scorer import StandardizedLinearScorer, ScoreResult, score_features
from .risk_bands import RiskCutoffs, band_from_triad, assess_game_risks

__all__ = [
    'ModelParameters',
    'SHIPPED_MODEL_PARAMETERS',
    'load_model_parameters',
    'parameters_from_dict',
    'StandardizedLinearScorer',
    'ScoreResult',
    'score_features',
    'RiskCutoffs',
    'band_from_triad',
    'assess_game_risks',
]
