"""
Ensemble uncertainty module.

This package measures how far the fused score can be trusted:
1. Point estimate, 2-sigma bounds and a z-score confidence interval
2. Aleatoric / epistemic / total uncertainty decomposition
3. Agreement statistics and outlier detectors
4. Reliability score, level and human-review flag
5. Discrete recommendation code for the report
6. Disagreement-aware calibration (informational calibrated score and trust)

All outputs are:
- Pure functions of the weighted detector list
- Explainable (each reliability penalty has a named factor)
- Heuristic (documented constants, not a probabilistic model)
"""

from .ensemble_uncertainty import (
    UncertaintyQuantifier,
    calculate_ensemble_uncertainty,
    z_score_for_level,
    format_uncertainty,
    describe_uncertainty_level,
    simulate_dropout_samples
)
from .reliability import assess_reliability, classify_reliability, get_recommendation
from .calibration import (
    calibrate_confidence,
    calculate_disagreement,
    detect_conflicts,
    classify_disagreement,
    calibration_metrics
)

__all__ = [
    'UncertaintyQuantifier',
    'calculate_ensemble_uncertainty',
    'z_score_for_level',
    'format_uncertainty',
    'describe_uncertainty_level',
    'simulate_dropout_samples',
    'assess_reliability',
    'classify_reliability',
    'get_recommendation',
    'calibrate_confidence',
    'calculate_disagreement',
    'detect_conflicts',
    'classify_disagreement',
    'calibration_metrics',
]
