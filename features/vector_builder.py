"""
Feature vector construction for the ADHD risk model.

Turns one game session plus the subject's demographics into the fixed
16-column vector the logistic-regression model was trained on:

1. Identifier placeholders (visit, session, runid1, runid2) fixed at 1
2. Age in years (365.25-day year), floored to 10.0 below 9 years
3. Gender code (2 = female synonyms, 1 = everything else)
4. Trial counts projected onto the 160-trial protocol
5. Rate and response-time statistics passed through

Model limitations:
- The model was not calibrated below 9 years; younger subjects are scored
  as 10-year-olds instead of being extrapolated.
- Gender is a closed two-valued code inherited from the training data. It
  cannot represent other identities and unrecognized values fall back to 1.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterator, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from core.data_models import SessionMetrics, SubjectProfile, coerce_metric

logger = logging.getLogger(__name__)

# Column order expected by the trained model
FEATURE_COLUMNS: Tuple[str, ...] = (
    'visit', 'session', 'age', 'gender', 'runid1', 'runid2',
    'n_trials', 'responded_rate', 'accuracy', 'fail_rate',
    'mean_rt', 'median_rt', 'p95_rt', 'std_rt',
    'n_correct', 'n_incorrect',
)

PROTOCOL_TRIALS = 160
DAYS_PER_YEAR = 365.25
MIN_CALIBRATED_AGE = 9.0
AGE_FLOOR_VALUE = 10.0

MALE_CODE = 1
FEMALE_CODE = 2
FEMALE_SYNONYMS = frozenset({'F', 'FEMENINO', 'FEMALE', 'MUJER', 'NIÑA'})

IDENTIFIER_COLUMNS = ('visit', 'session', 'runid1', 'runid2')
PASS_THROUGH_COLUMNS = (
    'responded_rate', 'accuracy', 'fail_rate',
    'mean_rt', 'median_rt', 'p95_rt', 'std_rt',
)


@dataclass(frozen=True)
class FeatureVector:
    """Immutable model input in `FEATURE_COLUMNS` order."""
    values: Tuple[float, ...]

    def __post_init__(self):
        if len(self.values) != len(FEATURE_COLUMNS):
            raise ValueError(
                f"Feature vector must have {len(FEATURE_COLUMNS)} entries, "
                f"got {len(self.values)}"
            )
        object.__setattr__(self, 'values', tuple(float(v) for v in self.values))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, float]) -> 'FeatureVector':
        """
        Build a vector from named features.

        Raises:
            ValueError: If any model column is missing or an unknown name is given
        """
        missing = [name for name in FEATURE_COLUMNS if name not in mapping]
        unknown = [name for name in mapping if name not in FEATURE_COLUMNS]
        if missing or unknown:
            raise ValueError(
                f"Invalid feature mapping: missing={missing}, unknown={unknown}"
            )
        return cls(tuple(mapping[name] for name in FEATURE_COLUMNS))

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)

    def __getitem__(self, name: str) -> float:
        return self.values[FEATURE_COLUMNS.index(name)]

    def as_dict(self) -> Dict[str, float]:
        """Named features, in model order."""
        return dict(zip(FEATURE_COLUMNS, self.values))

    def to_array(self) -> np.ndarray:
        return np.asarray(self.values, dtype=np.float64)


def compute_age_years(
    birth_date: Optional[date],
    evaluated_at: Optional[datetime] = None
) -> float:
    """
    Fractional age in years using a 365.25-day year.

    A missing birth date yields 0.0 (and therefore the age floor).
    """
    now = evaluated_at or datetime.now()
    if birth_date is None:
        return 0.0
    if isinstance(birth_date, datetime):
        birth = birth_date
    else:
        birth = datetime(birth_date.year, birth_date.month, birth_date.day)
    if now.tzinfo is not None and birth.tzinfo is None:
        now = now.replace(tzinfo=None)
    elapsed_days = (now - birth).total_seconds() / 86400.0
    return elapsed_days / DAYS_PER_YEAR


def normalize_age(age_years: float) -> float:
    """Apply the calibration floor, otherwise round to 2 decimals."""
    if age_years < MIN_CALIBRATED_AGE:
        return AGE_FLOOR_VALUE
    return round(age_years, 2)


def encode_gender(sex: Optional[str]) -> int:
    """Map free-text sex to the model's binary code (female=2, default=1)."""
    if sex is None:
        return MALE_CODE
    return FEMALE_CODE if str(sex).strip().upper() in FEMALE_SYNONYMS else MALE_CODE


def project_trials(n_trials: float, n_correct: float, n_incorrect: float) -> Tuple[float, float, float]:
    """
    Rescale count metrics onto the 160-trial protocol.

    Returns:
        (n_trials, n_correct, n_incorrect) after projection. A zero trial
        count uses a factor of 0 so the counts collapse to 0.
    """
    factor = PROTOCOL_TRIALS / n_trials if n_trials > 0 else 0.0
    return float(PROTOCOL_TRIALS), n_correct * factor, n_incorrect * factor


def build_features(
    metrics: Union[SessionMetrics, Mapping[str, float]],
    profile: Union[SubjectProfile, Mapping[str, object]],
    evaluated_at: Optional[datetime] = None
) -> FeatureVector:
    """
    Build the model feature vector for one session.

    Args:
        metrics: Session metrics (dataclass or raw mapping)
        profile: Subject demographics (dataclass or raw mapping)
        evaluated_at: Reference time for the age computation (default: now)

    Returns:
        FeatureVector in `FEATURE_COLUMNS` order
    """
    if not isinstance(metrics, SessionMetrics):
        metrics = SessionMetrics.from_dict(metrics)
    if not isinstance(profile, SubjectProfile):
        profile = SubjectProfile.from_dict(profile)

    raw_age = compute_age_years(profile.birth_date, evaluated_at)
    age = normalize_age(raw_age)
    if age != round(raw_age, 2):
        logger.debug(f"Age {raw_age:.2f} below calibrated range, scored as {age}")

    n_trials, n_correct, n_incorrect = project_trials(
        metrics.n_trials, metrics.n_correct, metrics.n_incorrect
    )

    named = {name: 1.0 for name in IDENTIFIER_COLUMNS}
    named.update({
        'age': age,
        'gender': float(encode_gender(profile.sex)),
        'n_trials': n_trials,
        'n_correct': n_correct,
        'n_incorrect': n_incorrect,
    })
    for name in PASS_THROUGH_COLUMNS:
        named[name] = coerce_metric(getattr(metrics, name))

    return FeatureVector.from_mapping(named)


def as_feature_vector(features: Union[FeatureVector, Sequence[float], Mapping[str, float]]) -> FeatureVector:
    """Normalize scorer input to a FeatureVector, rejecting malformed shapes."""
    if isinstance(features, FeatureVector):
        return features
    if isinstance(features, Mapping):
        return FeatureVector.from_mapping(features)
    return FeatureVector(tuple(features))
