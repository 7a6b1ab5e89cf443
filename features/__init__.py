"""
Feature construction module.

Builds the fixed-order 16-feature vector consumed by the risk model from a
game session and the subject's demographics (age floor, binary gender
code, projection onto the 160-trial protocol).
"""

from .vector_builder import (
    FEATURE_COLUMNS,
    FeatureVector,
    build_features,
    as_feature_vector,
    compute_age_years,
    encode_gender,
    project_trials,
)

__all__ = [
    'FEATURE_COLUMNS',
    'FeatureVector',
    'build_features',
    'as_feature_vector',
    'compute_age_years',
    'encode_gender',
    'project_trials',
]
