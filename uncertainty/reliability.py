"""
Reliability assessment and recommendation mapping.

Reliability score:
    R = 1 - min(cap, scale * variance) - outlier_penalty * n_outliers
          - boundary_scale * (0.5 - |mean - 0.5|)
    clamped to [0, 1]

Score interpretation:
- >= 0.8: high (trust the verdict)
- >= 0.6: moderate
- >= 0.4: low (human review recommended)
- <  0.4: very_low (human review required)

Factors explain each term: detector agreement, outliers, proximity to the
0.5 decision boundary, and (informational only) degraded detectors.
"""

import logging
from typing import List, Dict, Optional, Sequence

from core.data_models import AgreementStats, ReliabilityAssessment, ReliabilityFactor
from core.enums import FactorImpact, Recommendation, ReliabilityLevel

logger = logging.getLogger(__name__)


def assess_reliability(
    agreement: AgreementStats,
    outliers: Sequence[str],
    degraded: Sequence[str] = (),
    config: Optional[Dict] = None
) -> ReliabilityAssessment:
    """
    Assess reliability of a fused prediction.

    Args:
        agreement: Agreement statistics of the ensemble
        outliers: Names of outlier detectors
        degraded: Names of detectors in fallback mode (no score effect)
        config: Configuration dict with 'uncertainty.reliability' section

    Returns:
        ReliabilityAssessment with at least one factor
    """
    rel_config = (config or {}).get('uncertainty', {}).get('reliability', {})
    variance_scale = rel_config.get('variance_penalty_scale', 4.0)
    variance_cap = rel_config.get('variance_penalty_cap', 0.4)
    outlier_penalty = rel_config.get('outlier_penalty', 0.1)
    boundary_scale = rel_config.get('boundary_penalty_scale', 0.3)
    agreement_variance = rel_config.get('agreement_variance', 0.02)
    disagreement_variance = rel_config.get('disagreement_variance', 0.1)

    mean = agreement.mean_prediction
    factors = _collect_factors(
        agreement, outliers, degraded, agreement_variance, disagreement_variance
    )

    score = 1.0
    score -= min(variance_cap, agreement.variance * variance_scale)
    score -= len(outliers) * outlier_penalty
    score -= (0.5 - abs(mean - 0.5)) * boundary_scale
    score = max(0.0, min(1.0, score))

    level = classify_reliability(score, config)
    human_review = level.needs_human_review

    if human_review:
        negative = [f.description for f in factors if f.impact == FactorImpact.NEGATIVE]
        reason = "; ".join(negative) if negative else "Multiple uncertainty factors present"
    else:
        reason = "Prediction meets confidence threshold"

    logger.debug(f"Reliability score={score:.3f} level={level.value} review={human_review}")

    return ReliabilityAssessment(
        score=score,
        level=level,
        factors=tuple(factors),
        human_review_recommended=human_review,
        reason=reason,
    )


def _collect_factors(
    agreement: AgreementStats,
    outliers: Sequence[str],
    degraded: Sequence[str],
    agreement_variance: float,
    disagreement_variance: float
) -> List[ReliabilityFactor]:
    factors = []

    if agreement.variance < agreement_variance:
        factors.append(ReliabilityFactor(
            'Detector Agreement', FactorImpact.POSITIVE,
            'All detectors show strong agreement'
        ))
    elif agreement.variance > disagreement_variance:
        factors.append(ReliabilityFactor(
            'Detector Disagreement', FactorImpact.NEGATIVE,
            'Significant disagreement between detection methods'
        ))
    else:
        factors.append(ReliabilityFactor(
            'Partial Agreement', FactorImpact.NEUTRAL,
            'Detectors broadly agree with some spread'
        ))

    if outliers:
        factors.append(ReliabilityFactor(
            'Outlier Detectors', FactorImpact.NEGATIVE,
            f"{len(outliers)} detector(s) gave outlier predictions"
        ))

    if 0.4 < agreement.mean_prediction < 0.6:
        factors.append(ReliabilityFactor(
            'Boundary Case', FactorImpact.NEGATIVE,
            'Prediction near decision boundary (uncertain)'
        ))
    else:
        factors.append(ReliabilityFactor(
            'Clear Prediction', FactorImpact.POSITIVE,
            'Prediction far from decision boundary'
        ))

    if degraded:
        factors.append(ReliabilityFactor(
            'Degraded Detectors', FactorImpact.NEUTRAL,
            f"{len(degraded)} detector(s) ran in fallback mode: {', '.join(degraded)}"
        ))

    return factors


def classify_reliability(score: float, config: Optional[Dict] = None) -> ReliabilityLevel:
    """Map a reliability score onto its level using the 0.8/0.6/0.4 thresholds."""
    thresholds = (config or {}).get('uncertainty', {}).get('reliability', {}).get('thresholds', {})

    if score >= thresholds.get('high', 0.8):
        return ReliabilityLevel.HIGH
    elif score >= thresholds.get('moderate', 0.6):
        return ReliabilityLevel.MODERATE
    elif score >= thresholds.get('low', 0.4):
        return ReliabilityLevel.LOW
    return ReliabilityLevel.VERY_LOW


def get_recommendation(
    prediction: float,
    reliability: ReliabilityAssessment,
    config: Optional[Dict] = None
) -> Recommendation:
    """
    Map reliability level and prediction onto a discrete recommendation.

    High reliability only yields a directional verdict when the prediction
    is clearly on one side (>= 0.7 AI, <= 0.3 real).
    """
    rec_config = (config or {}).get('uncertainty', {}).get('recommendation', {})
    ai_threshold = rec_config.get('ai_threshold', 0.7)
    real_threshold = rec_config.get('real_threshold', 0.3)

    if reliability.level == ReliabilityLevel.VERY_LOW:
        return Recommendation.VERY_UNCERTAIN_HUMAN_REQUIRED
    if reliability.level == ReliabilityLevel.LOW:
        return Recommendation.LOW_CONFIDENCE_NEEDS_REVIEW
    if reliability.level == ReliabilityLevel.MODERATE:
        return Recommendation.MODERATE_CONFIDENCE

    if prediction >= ai_threshold:
        return Recommendation.HIGH_CONFIDENCE_AI
    elif prediction <= real_threshold:
        return Recommendation.HIGH_CONFIDENCE_REAL

    return Recommendation.MODERATE_CONFIDENCE
