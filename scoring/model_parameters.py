"""
Logistic-regression model parameters.

The shipped parameter set comes from the trained scaler + classifier pair
and must be reproduced exactly: the server scorer and any client-side
preview read this single definition so they can never disagree.

A replacement parameter set can be supplied as a YAML file
(`model.parameters_file` in the configuration). It is validated when the
scoring service is built; a corrupt table fails at startup, never mid-call.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, Union

import numpy as np
import yaml

from features.vector_builder import FEATURE_COLUMNS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelParameters:
    """Standard-scaler statistics and logistic-regression weights."""
    coefficients: Tuple[float, ...]
    intercept: float
    scaler_means: Tuple[float, ...]
    scaler_scales: Tuple[float, ...]
    threshold: float
    version: str = "unversioned"

    def __post_init__(self):
        for name in ('coefficients', 'scaler_means', 'scaler_scales'):
            object.__setattr__(self, name, tuple(float(v) for v in getattr(self, name)))
        object.__setattr__(self, 'intercept', float(self.intercept))
        object.__setattr__(self, 'threshold', float(self.threshold))

        errors = self.validate()
        if errors:
            raise ValueError(f"Invalid model parameters: {errors}")

    def validate(self) -> List[str]:
        """Check table shapes and values; return any errors."""
        errors = []
        n_features = len(FEATURE_COLUMNS)
        for name in ('coefficients', 'scaler_means', 'scaler_scales'):
            values = getattr(self, name)
            if len(values) != n_features:
                errors.append(f"{name} must have {n_features} entries, got {len(values)}")
            elif not np.all(np.isfinite(values)):
                errors.append(f"{name} contains non-finite values")
        if not np.isfinite(self.intercept):
            errors.append("intercept must be finite")
        if not 0.0 < self.threshold < 1.0:
            errors.append("threshold must be between 0.0 and 1.0 (exclusive)")
        if any(scale < 0 for scale in self.scaler_scales):
            errors.append("scaler_scales must be non-negative")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': self.version,
            'coefficients': list(self.coefficients),
            'intercept': self.intercept,
            'scaler_means': list(self.scaler_means),
            'scaler_scales': list(self.scaler_scales),
            'threshold': self.threshold,
        }


SHIPPED_MODEL_PARAMETERS = ModelParameters(
    coefficients=(
        -3.8135472409751108, 0.0, 3.3655277981956595, 0.402634242110309,
        1.4431032983970766, 0.415677509110848, 0.0, -0.5758817587898222,
        3.386762082054547, 1.6835862368801215, 0.3023652790048167, 1.4267719077370473,
        1.8859665887857608, 0.5682283978320876, -1.688652367108186, 1.688652367108186,
    ),
    intercept=0.562454514484786,
    scaler_means=(
        2.08, 1.0, 10.88, 1.5,
        1.0866666666666667, 2.2466666666666666, 160.0, 0.8638200000000003,
        0.8591616666666666, 0.1425883333333333, 0.4980619987759016, 0.47591,
        0.7071693333333333, 0.11748110551753975, 137.19333333333333, 22.80666666666667,
    ),
    scaler_scales=(
        1.852997571504075, 1.0, 0.9724196624914575, 0.5,
        0.2813459712801226, 0.4310710176087256, 1.0, 0.044694184185417235,
        0.0588348120918975, 0.05861613214143543, 0.06436330426093971, 0.05134319396635417,
        0.14950741372773313, 0.04244874518410925, 9.384879091152722, 9.384879091152722,
    ),
    # Below 0.5 on purpose: trades specificity for fewer missed positives
    threshold=0.3,
    version="adhd-logreg-160-v1",
)

_REQUIRED_KEYS = ('coefficients', 'intercept', 'scaler_means', 'scaler_scales', 'threshold')


def parameters_from_dict(data: Mapping[str, Any]) -> ModelParameters:
    """
    Build parameters from a plain mapping (e.g. parsed YAML).

    Raises:
        ValueError: If keys are missing or the tables are malformed
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"Model parameter table must be a mapping, got {type(data).__name__}")
    missing = [key for key in _REQUIRED_KEYS if key not in data]
    if missing:
        raise ValueError(f"Model parameter table missing keys: {missing}")
    try:
        return ModelParameters(
            coefficients=tuple(data['coefficients']),
            intercept=data['intercept'],
            scaler_means=tuple(data['scaler_means']),
            scaler_scales=tuple(data['scaler_scales']),
            threshold=data['threshold'],
            version=str(data.get('version', 'unversioned')),
        )
    except TypeError as e:
        raise ValueError(f"Malformed model parameter table: {e}") from e


def load_model_parameters(parameters_path: Union[str, Path]) -> ModelParameters:
    """
    Load and validate a parameter set from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the table is malformed
    """
    parameters_path = Path(parameters_path)
    if not parameters_path.exists():
        raise FileNotFoundError(f"Model parameter file not found: {parameters_path}")

    with open(parameters_path, 'r') as f:
        data = yaml.safe_load(f)

    parameters = parameters_from_dict(data or {})
    logger.info(f"Loaded model parameters {parameters.version} from {parameters_path}")
    return parameters


def resolve_model_parameters(config: Mapping[str, Any]) -> ModelParameters:
    """Parameters named by `model.parameters_file`, else the shipped set."""
    parameters_file = (config.get('model') or {}).get('parameters_file')
    if parameters_file:
        return load_model_parameters(parameters_file)
    return SHIPPED_MODEL_PARAMETERS
