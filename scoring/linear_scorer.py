"""
Standardized linear scorer.

Applies the standard-scaler transform and the logistic-regression model to
a feature vector:

    z_i = (x_i - mean_i) / scale_i        (0 where scale_i == 0)
    L   = intercept + sum(z_i * coef_i)
    p   = 1 / (1 + exp(-L))
    classification = 1 if p >= threshold else 0

The scorer holds no state beyond its immutable parameters, so a single
instance can be shared across threads and requests.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence, Union

import numpy as np

from features.vector_builder import FeatureVector, as_feature_vector
from .model_parameters import ModelParameters, SHIPPED_MODEL_PARAMETERS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreResult:
    """Model output for one feature vector."""
    linear_predictor: float
    probability: float
    classification: int  # 0 or 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'linear_predictor': self.linear_predictor,
            'probability': self.probability,
            'classification': self.classification,
        }


def standardize(values: np.ndarray, means: np.ndarray, scales: np.ndarray) -> np.ndarray:
    """Standard-scale values, mapping zero-scale features to 0."""
    centered = values - means
    safe_scales = np.where(scales == 0.0, 1.0, scales)
    return np.where(scales == 0.0, 0.0, centered / safe_scales)


def sigmoid(x: float) -> float:
    """Logistic function; saturates to 0.0/1.0 instead of overflowing."""
    with np.errstate(over='ignore'):
        return float(1.0 / (1.0 + np.exp(-np.float64(x))))


class StandardizedLinearScorer:
    """
    Logistic-regression scorer over standardized features.

    Usage:
        scorer = StandardizedLinearScorer(parameters)
        result = scorer.score(features)
    """

    def __init__(self, parameters: ModelParameters = SHIPPED_MODEL_PARAMETERS):
        self.parameters = parameters
        self._coefficients = np.asarray(parameters.coefficients, dtype=np.float64)
        self._means = np.asarray(parameters.scaler_means, dtype=np.float64)
        self._scales = np.asarray(parameters.scaler_scales, dtype=np.float64)
        self._coefficients.setflags(write=False)
        self._means.setflags(write=False)
        self._scales.setflags(write=False)

        zero_scales = int(np.sum(self._scales == 0.0))
        if zero_scales:
            logger.warning(f"{zero_scales} feature(s) have zero scale and will not contribute")

        logger.info(
            f"Linear scorer initialized: version={parameters.version}, "
            f"threshold={parameters.threshold}"
        )

    @property
    def threshold(self) -> float:
        return self.parameters.threshold

    def linear_predictor(
        self,
        features: Union[FeatureVector, Sequence[float], Mapping[str, float]]
    ) -> float:
        """
        Intercept plus the coefficient-weighted standardized features.

        Raises:
            ValueError: If the input is not a complete 16-feature vector
        """
        vector = as_feature_vector(features)
        z = standardize(vector.to_array(), self._means, self._scales)
        return self.parameters.intercept + float(np.dot(z, self._coefficients))

    def score(
        self,
        features: Union[FeatureVector, Sequence[float], Mapping[str, float]]
    ) -> ScoreResult:
        """
        Score a feature vector.

        Args:
            features: FeatureVector, ordered sequence of 16 values, or a
                mapping containing every model column

        Returns:
            ScoreResult with linear predictor, probability and 0/1 class
        """
        lp = self.linear_predictor(features)
        probability = sigmoid(lp)
        classification = 1 if probability >= self.parameters.threshold else 0

        logger.debug(
            f"Scored vector: L={lp:.4f}, p={probability:.4f}, class={classification}"
        )

        return ScoreResult(
            linear_predictor=lp,
            probability=probability,
            classification=classification,
        )


def score_features(
    features: Union[FeatureVector, Sequence[float], Mapping[str, float]],
    parameters: ModelParameters = SHIPPED_MODEL_PARAMETERS
) -> ScoreResult:
    """
    Convenience function for one-off scoring.

    Args:
        features: Feature vector to score
        parameters: Model parameters (default: shipped set)

    Returns:
        ScoreResult
    """
    return StandardizedLinearScorer(parameters).score(features)
