"""
Disagreement-aware confidence calibration.

Calibration measures how far the detectors disagree and pulls the fused
score toward the 0.5 neutral point in proportion to it:

    disagreement     = min(1, (2 * weighted_sigma + range) / 2)
    calibrated_score = 0.5 + (raw - 0.5) * (1 - lambda * disagreement)
    trust_score      = 1 - disagreement

Disagreement bands (default thresholds):
- > 0.35 with opposite-side detectors: conflict
- > 0.35: severe
- > 0.25: moderate
- > 0.15: mild
- otherwise: agreement

The result is informational; the fused final score is never replaced.
"""

import logging
from typing import List, Dict, Optional, Sequence

import numpy as np

from core.data_models import CalibrationResult, DetectorObservation, DisagreementAnalysis
from core.enums import CalibrationRecommendation, DisagreementType

logger = logging.getLogger(__name__)


def _calibration_config(config: Optional[Dict]) -> Dict:
    return (config or {}).get('uncertainty', {}).get('calibration', {})


def calculate_disagreement(
    observations: Sequence[DetectorObservation],
    config: Optional[Dict] = None
) -> DisagreementAnalysis:
    """
    Measure disagreement across a weighted detector set.

    Args:
        observations: Weighted detector observations
        config: Configuration dict with 'uncertainty.calibration' section

    Returns:
        DisagreementAnalysis (agreement for fewer than two detectors)
    """
    observations = list(observations)
    if len(observations) < 2:
        return DisagreementAnalysis(
            disagreement_score=0.0,
            standard_deviation=0.0,
            score_range=0.0,
            disagreement_type=DisagreementType.AGREEMENT,
            conflicting_detectors=(),
            explanation='Insufficient detectors for disagreement analysis',
        )

    scores = np.array([o.score for o in observations], dtype=float)
    weights = np.array([o.weight for o in observations], dtype=float)
    if weights.sum() <= 0.0:
        weights = np.ones(len(observations))
    weights = weights / weights.sum()

    std = float(np.std(scores))
    score_range = float(scores.max() - scores.min())

    weighted_mean = float(np.dot(weights, scores))
    weighted_std = float(np.sqrt(np.dot(weights, (scores - weighted_mean) ** 2)))
    disagreement = min(1.0, (weighted_std * 2.0 + score_range) / 2.0)

    conflicts = detect_conflicts(observations, config)
    disagreement_type = classify_disagreement(disagreement, bool(conflicts), config)

    return DisagreementAnalysis(
        disagreement_score=disagreement,
        standard_deviation=std,
        score_range=score_range,
        disagreement_type=disagreement_type,
        conflicting_detectors=tuple(conflicts),
        explanation=_disagreement_explanation(observations, disagreement_type, conflicts, std),
    )


def detect_conflicts(
    observations: Sequence[DetectorObservation],
    config: Optional[Dict] = None
) -> List[str]:
    """
    Pairs of detectors confidently on opposite sides of the neutral point.

    A detector leans AI above neutral + margin and real below
    neutral - margin (strict comparisons).

    Returns:
        "A vs B" labels in input order
    """
    cal_config = _calibration_config(config)
    neutral = cal_config.get('neutral_point', 0.5)
    margin = cal_config.get('conflict_margin', 0.4)

    def side(score):
        if score > neutral + margin:
            return 'ai'
        if score < neutral - margin:
            return 'real'
        return None

    conflicts = []
    for i, first in enumerate(observations):
        for second in observations[i + 1:]:
            sides = {side(first.score), side(second.score)}
            if sides == {'ai', 'real'}:
                conflicts.append(f"{first.name} vs {second.name}")
    return conflicts


def classify_disagreement(
    disagreement: float,
    has_conflicts: bool,
    config: Optional[Dict] = None
) -> DisagreementType:
    """Map a disagreement score onto its band."""
    thresholds = _calibration_config(config).get('thresholds', {})
    severe = thresholds.get('severe', 0.35)

    if has_conflicts and disagreement > severe:
        return DisagreementType.CONFLICT
    if disagreement > severe:
        return DisagreementType.SEVERE
    if disagreement > thresholds.get('moderate', 0.25):
        return DisagreementType.MODERATE
    if disagreement > thresholds.get('mild', 0.15):
        return DisagreementType.MILD
    return DisagreementType.AGREEMENT


def _disagreement_explanation(
    observations: Sequence[DetectorObservation],
    disagreement_type: DisagreementType,
    conflicts: Sequence[str],
    std: float
) -> str:
    ranked = sorted(observations, key=lambda o: o.score, reverse=True)
    highest, lowest = ranked[0], ranked[-1]

    if disagreement_type == DisagreementType.CONFLICT:
        return (
            f"Critical disagreement detected: {', '.join(conflicts)}. "
            f"{highest.name} suggests AI ({highest.score * 100:.0f}%) while "
            f"{lowest.name} suggests real ({lowest.score * 100:.0f}%). "
            f"Human review is strongly recommended."
        )
    if disagreement_type == DisagreementType.SEVERE:
        return (
            f"Significant disagreement between detectors (σ={std:.2f}). "
            f"Scores range from {lowest.score * 100:.0f}% to {highest.score * 100:.0f}%. "
            f"Results should be interpreted with caution."
        )
    if disagreement_type == DisagreementType.MODERATE:
        return (
            f"Moderate disagreement detected. {highest.name} is most confident about "
            f"AI-generation while {lowest.name} is least certain. "
            f"Consider the individual detector scores."
        )
    if disagreement_type == DisagreementType.MILD:
        return (
            "Minor variation between detectors, but general consensus on the "
            "classification. Results are reasonably reliable."
        )
    return "All detectors show strong agreement. High confidence in the classification."


def calibrate_confidence(
    raw_score: float,
    observations: Sequence[DetectorObservation],
    config: Optional[Dict] = None
) -> CalibrationResult:
    """
    Calibrate a fused score against detector disagreement.

    Args:
        raw_score: Fused score (0-1)
        observations: Weighted detector observations behind the score
        config: Configuration dictionary

    Returns:
        CalibrationResult
    """
    cal_config = _calibration_config(config)
    sensitivity = cal_config.get('disagreement_lambda', 0.35)
    neutral = cal_config.get('neutral_point', 0.5)

    disagreement = calculate_disagreement(observations, config)

    factor = 1.0 - sensitivity * disagreement.disagreement_score
    calibrated = neutral + (raw_score - neutral) * factor
    trust = 1.0 - disagreement.disagreement_score

    recommendation = _calibration_recommendation(trust, disagreement.disagreement_type, cal_config)

    logger.debug(
        f"Calibration: raw={raw_score:.3f} calibrated={calibrated:.3f} "
        f"trust={trust:.3f} type={disagreement.disagreement_type.value}"
    )

    return CalibrationResult(
        raw_score=raw_score,
        calibrated_score=calibrated,
        trust_score=trust,
        disagreement=disagreement,
        recommendation=recommendation,
        explanation=_calibration_explanation(raw_score, calibrated, trust, recommendation),
    )


def _calibration_recommendation(
    trust: float,
    disagreement_type: DisagreementType,
    cal_config: Dict
) -> CalibrationRecommendation:
    trust_thresholds = cal_config.get('trust_thresholds', {})

    if disagreement_type == DisagreementType.CONFLICT:
        return CalibrationRecommendation.HUMAN_REVIEW_RECOMMENDED
    if trust < trust_thresholds.get('low', 0.5) or disagreement_type == DisagreementType.SEVERE:
        return CalibrationRecommendation.LOW_CONFIDENCE
    if trust < trust_thresholds.get('high', 0.75) or disagreement_type == DisagreementType.MODERATE:
        return CalibrationRecommendation.MODERATE_CONFIDENCE
    return CalibrationRecommendation.HIGH_CONFIDENCE


_RECOMMENDATION_NOTES = {
    CalibrationRecommendation.HUMAN_REVIEW_RECOMMENDED:
        'IMPORTANT: Detectors fundamentally disagree. Manual verification is strongly recommended.',
    CalibrationRecommendation.LOW_CONFIDENCE:
        'Confidence is low due to detector disagreement. Treat results with caution.',
    CalibrationRecommendation.MODERATE_CONFIDENCE:
        'Results are reasonably reliable but some detector variation exists.',
    CalibrationRecommendation.HIGH_CONFIDENCE:
        'High confidence - all detection methods agree on the classification.',
}


def _calibration_explanation(
    raw_score: float,
    calibrated: float,
    trust: float,
    recommendation: CalibrationRecommendation
) -> str:
    explanation = f"Original score: {raw_score * 100:.1f}% → Calibrated: {calibrated * 100:.1f}% "

    if abs(raw_score - calibrated) > 0.01:
        explanation += (
            f"({(raw_score - calibrated) * 100:.1f}% adjustment due to detector disagreement). "
        )
    else:
        explanation += "(minimal adjustment - detectors agree). "

    explanation += f"Trust level: {trust * 100:.0f}%. "
    explanation += _RECOMMENDATION_NOTES[recommendation]
    return explanation


def calibration_metrics(results: Sequence[CalibrationResult]) -> Dict[str, float]:
    """
    Aggregate calibration behaviour over many analyses.

    Effectiveness is the share of results where an adjustment (> 0.02)
    happened exactly when disagreement exceeded 0.15.

    Returns:
        Dictionary with average_trust_score, conflict_rate,
        average_adjustment and calibration_effectiveness
    """
    if not results:
        return {
            'average_trust_score': 0.0,
            'conflict_rate': 0.0,
            'average_adjustment': 0.0,
            'calibration_effectiveness': 0.0,
        }

    adjustments = [abs(r.raw_score - r.calibrated_score) for r in results]
    conflicts = sum(
        1 for r in results if r.disagreement.disagreement_type == DisagreementType.CONFLICT
    )
    effective = sum(
        1 for r, adj in zip(results, adjustments)
        if (r.disagreement.disagreement_score > 0.15) == (adj > 0.02)
    )

    return {
        'average_trust_score': float(np.mean([r.trust_score for r in results])),
        'conflict_rate': conflicts / len(results),
        'average_adjustment': float(np.mean(adjustments)),
        'calibration_effectiveness': effective / len(results),
    }
