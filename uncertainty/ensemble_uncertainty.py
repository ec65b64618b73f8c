"""
Ensemble uncertainty quantification.

Treats the weighted detector set as an ensemble and uses its disagreement
to bound the fused prediction:
- Weighted mean and variance -> point estimate and standard deviation
- Fixed 2-sigma bounds and a z-score confidence interval
- Epistemic uncertainty from detector spread (range-weighted)
- Aleatoric uncertainty from proximity to the 0.5 decision boundary
- Outlier detection (> 2 sigma from the weighted mean)

The decomposition constants (0.7 range / 0.3 spread, 0.5 boundary scale)
are heuristics; total uncertainty is the orthogonal-components
approximation sqrt(aleatoric^2 + epistemic^2), not a
probabilistic derivation.
"""

import logging
import time
from typing import List, Dict, Optional, Sequence

import numpy as np
from scipy import stats

from core.data_models import (
    AgreementStats, ConfidenceInterval, DetectorObservation, EnsembleDetails,
    EnsemblePrediction, UncertaintyDecomposition, UncertaintyResult
)
from core.exceptions import EmptyEnsembleError
from .calibration import calibrate_confidence
from .reliability import assess_reliability, get_recommendation

logger = logging.getLogger(__name__)


# Conventional two-sided multipliers; other levels use the normal quantile.
Z_SCORES = {
    0.90: 1.645,
    0.95: 1.96,
    0.99: 2.576,
}

# Absorbs rounding noise when every member reports the same score.
_FLOAT_TOLERANCE = 1e-12


def z_score_for_level(level: float) -> float:
    """
    Two-sided z multiplier for a confidence level.

    Raises:
        ValueError: If level is not strictly between 0 and 1
    """
    if not 0.0 < level < 1.0:
        raise ValueError(f"Confidence level must be in (0, 1), got {level}")

    for known, z in Z_SCORES.items():
        if abs(level - known) < 1e-9:
            return z

    return float(stats.norm.ppf(0.5 + level / 2.0))


class UncertaintyQuantifier:
    """
    Disagreement-based uncertainty for a weighted detector ensemble.

    A pure function of the input list: it recomputes its own weighted mean
    and only relies on the weights being non-negative.

    Usage:
        quantifier = UncertaintyQuantifier(config)
        result = quantifier.quantify(fusion_result.weighted_observations())
    """

    def __init__(self, config: Optional[Dict] = None):
        self.config = config or {}

        unc_config = self.config.get('uncertainty', {})
        self.confidence_level = unc_config.get('confidence_level', 0.95)
        self.bound_sigma = unc_config.get('bound_sigma', 2.0)
        self.outlier_sigma = unc_config.get('outlier_sigma', 2.0)

        epistemic_config = unc_config.get('epistemic', {})
        self.range_weight = epistemic_config.get('range_weight', 0.7)
        self.spread_weight = epistemic_config.get('spread_weight', 0.3)
        self.aleatoric_scale = unc_config.get('aleatoric_scale', 0.5)

        self.z_score = z_score_for_level(self.confidence_level)

    def quantify(self, observations: Sequence[DetectorObservation]) -> UncertaintyResult:
        """
        Quantify uncertainty of the weighted ensemble.

        Args:
            observations: Weighted detector observations (at least one)

        Returns:
            UncertaintyResult

        Raises:
            EmptyEnsembleError: If no observations are supplied
        """
        start = time.perf_counter()

        observations = list(observations)
        if not observations:
            raise EmptyEnsembleError()

        scores = np.array([o.score for o in observations], dtype=float)
        weights = self._normalized_weights(observations)

        mean = float(np.clip(np.dot(weights, scores), 0.0, 1.0))
        variance = float(np.dot(weights, (scores - mean) ** 2))
        std = float(np.sqrt(variance))

        lower_bound = max(0.0, mean - self.bound_sigma * std)
        upper_bound = min(1.0, mean + self.bound_sigma * std)

        interval = ConfidenceInterval(
            lower=max(0.0, mean - self.z_score * std),
            upper=min(1.0, mean + self.z_score * std),
            level=self.confidence_level,
        )

        decomposition = self._decompose(scores, mean, std)
        agreement = self._agreement(scores, mean, variance)
        outliers = self._detect_outliers(observations, mean, std)
        degraded = [o.name for o in observations if o.is_degraded]

        reliability = assess_reliability(agreement, outliers, degraded, self.config)
        recommendation = get_recommendation(mean, reliability, self.config)
        calibration = calibrate_confidence(mean, observations, self.config)

        elapsed_ms = (time.perf_counter() - start) * 1000.0

        logger.info(
            f"Uncertainty: {format_prediction(mean, std)} "
            f"reliability={reliability.level.value} recommendation={recommendation.value}"
        )

        return UncertaintyResult(
            prediction=mean,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
            standard_deviation=std,
            confidence_interval=interval,
            decomposition=decomposition,
            reliability=reliability,
            ensemble=EnsembleDetails(
                num_members=len(observations),
                predictions=tuple(
                    EnsemblePrediction(o.name, o.score, float(w))
                    for o, w in zip(observations, weights)
                ),
                agreement=agreement,
                outliers=tuple(outliers),
            ),
            recommendation=recommendation,
            calibration=calibration,
            processing_time_ms=elapsed_ms,
        )

    def _normalized_weights(self, observations: Sequence[DetectorObservation]) -> np.ndarray:
        """Weights scaled to sum to 1; equal weights when they sum to zero."""
        weights = np.array([o.weight for o in observations], dtype=float)
        total = weights.sum()
        if total <= 0.0:
            logger.warning("Ensemble weights sum to zero; using equal weights")
            return np.full(len(observations), 1.0 / len(observations))
        return weights / total

    def _decompose(self, scores: np.ndarray, mean: float, std: float) -> UncertaintyDecomposition:
        """
        Split uncertainty into aleatoric and epistemic parts.

        Epistemic grows with detector disagreement; aleatoric is largest when
        the mean sits on the 0.5 decision boundary.
        """
        score_range = float(scores.max() - scores.min())
        epistemic = self.range_weight * score_range + self.spread_weight * std
        aleatoric = self.aleatoric_scale * (0.5 - abs(mean - 0.5))

        epistemic = float(np.clip(epistemic, 0.0, 1.0))
        aleatoric = float(np.clip(aleatoric, 0.0, 1.0))
        total = float(np.clip(np.sqrt(epistemic ** 2 + aleatoric ** 2), 0.0, 1.0))

        return UncertaintyDecomposition(aleatoric=aleatoric, epistemic=epistemic, total=total)

    def _agreement(self, scores: np.ndarray, mean: float, variance: float) -> AgreementStats:
        std = np.sqrt(variance)
        return AgreementStats(
            mean_prediction=mean,
            variance=variance,
            coefficient_of_variation=float(std / mean) if mean > 0 else 0.0,
            max_disagreement=float(scores.max() - scores.min()),
        )

    def _detect_outliers(
        self,
        observations: Sequence[DetectorObservation],
        mean: float,
        std: float
    ) -> List[str]:
        """Names of members more than outlier_sigma deviations from the mean."""
        threshold = self.outlier_sigma * std + _FLOAT_TOLERANCE
        return [o.name for o in observations if abs(o.score - mean) > threshold]


def calculate_ensemble_uncertainty(
    observations: Sequence[DetectorObservation],
    config: Optional[Dict] = None
) -> UncertaintyResult:
    """
    Convenience function for ensemble uncertainty.

    Args:
        observations: Weighted detector observations
        config: Configuration dictionary

    Returns:
        UncertaintyResult
    """
    return UncertaintyQuantifier(config).quantify(observations)


def format_prediction(prediction: float, std: float) -> str:
    return f"{prediction * 100:.1f}% ± {std * 100:.1f}%"


def format_uncertainty(result: UncertaintyResult) -> str:
    """Format as 'xx.x% ± yy.y%' for display."""
    return format_prediction(result.prediction, result.standard_deviation)


def describe_uncertainty_level(std: float) -> Dict[str, str]:
    """
    Bucket a standard deviation into a qualitative uncertainty level.

    Returns:
        Dictionary with 'level' and 'description'
    """
    if std < 0.05:
        return {'level': 'low', 'description': 'Very low uncertainty - detectors strongly agree'}
    elif std < 0.1:
        return {'level': 'moderate', 'description': 'Moderate uncertainty - some detector disagreement'}
    elif std < 0.2:
        return {'level': 'high', 'description': 'High uncertainty - significant detector disagreement'}
    return {'level': 'very_high', 'description': 'Very high uncertainty - detectors strongly disagree'}


def simulate_dropout_samples(
    base_score: float,
    num_samples: int = 10,
    seed: int = 0,
    spread: float = 0.15
) -> List[float]:
    """
    Simulated Monte Carlo dropout samples around a score.

    Stands in for real model dropout: uniform noise of width `spread`,
    seeded so repeated calls return the same samples.
    """
    rng = np.random.default_rng(seed)
    noise = (rng.random(num_samples) - 0.5) * spread
    return [float(v) for v in np.clip(base_score + noise, 0.0, 1.0)]
