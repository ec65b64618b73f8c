"""
Core data models for the Authenticity Scope analysis engine.

All results are request-scoped: a fresh instance per analysis call, owned by
the caller. Processing durations are excluded from equality so identical
inputs compare equal.
"""

import math
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple, Union

from .enums import (
    DetectorStatus, ReliabilityLevel, Recommendation, FactorImpact,
    XAICategory, FindingImpact, FactorDirection, AttentionDistribution,
    DisagreementType, CalibrationRecommendation
)


def _check_unit_interval(name: str, value: float) -> float:
    value = float(value)
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must lie in [0, 1], got {value}")
    return value


@dataclass(frozen=True)
class DetectorObservation:
    """One upstream detector's output for a single image."""
    name: str
    score: float  # AI likelihood (0-1)
    weight: float  # Base or applied fusion weight (0-1)
    status: Union[DetectorStatus, str] = DetectorStatus.SUCCESS
    processing_time_ms: float = 0.0
    error_message: Optional[str] = None

    def __post_init__(self):
        """Validate ranges and normalize status strings."""
        object.__setattr__(self, 'score', _check_unit_interval('score', self.score))
        object.__setattr__(self, 'weight', _check_unit_interval('weight', self.weight))
        if not isinstance(self.status, DetectorStatus):
            try:
                object.__setattr__(self, 'status', DetectorStatus(str(self.status).lower()))
            except ValueError:
                raise ValueError(f"Unknown detector status: {self.status!r}") from None

    @property
    def is_error(self) -> bool:
        return self.status == DetectorStatus.ERROR

    @property
    def is_degraded(self) -> bool:
        return self.status == DetectorStatus.FALLBACK


@dataclass(frozen=True)
class WeightAdjustment:
    """How one detector's base weight became its applied weight."""
    detector: str
    base_weight: float
    applied_weight: float
    reason: str

    @property
    def shift(self) -> float:
        return self.applied_weight - self.base_weight


@dataclass(frozen=True)
class FusionResult:
    """
    Fused detector score.

    Attributes:
        final_score: Weighted combination of surviving detector scores (0-1)
        per_detector_weight: Detector name -> applied weight (errored = 0.0)
        observations: Observations as received
        degraded_detectors: Names of detectors in fallback mode
        failed_detectors: Names of detectors that errored
        adjustments: Per-detector weight adjustment records
        equal_weight_fallback: True when the equal-weight safe default was used
        explanation: Human-readable summary of weight changes
    """
    final_score: float
    per_detector_weight: Dict[str, float]
    observations: Tuple[DetectorObservation, ...] = ()
    degraded_detectors: Tuple[str, ...] = ()
    failed_detectors: Tuple[str, ...] = ()
    adjustments: Tuple[WeightAdjustment, ...] = ()
    equal_weight_fallback: bool = False
    explanation: str = ""

    @property
    def surviving_detectors(self) -> List[str]:
        return [o.name for o in self.observations if not o.is_error]

    def weighted_observations(self) -> List[DetectorObservation]:
        """Surviving observations carrying their applied weights."""
        return [
            DetectorObservation(
                name=o.name,
                score=o.score,
                weight=self.per_detector_weight[o.name],
                status=o.status,
                processing_time_ms=o.processing_time_ms,
                error_message=o.error_message,
            )
            for o in self.observations
            if not o.is_error
        ]


@dataclass(frozen=True)
class ConfidenceInterval:
    """Two-sided interval at a named confidence level."""
    lower: float
    upper: float
    level: float = 0.95

    @property
    def width(self) -> float:
        return self.upper - self.lower


@dataclass(frozen=True)
class UncertaintyDecomposition:
    aleatoric: float  # Inherent ambiguity (0-1)
    epistemic: float  # Detector disagreement (0-1)
    total: float  # sqrt(aleatoric^2 + epistemic^2), clamped (0-1)


@dataclass(frozen=True)
class ReliabilityFactor:
    name: str
    impact: FactorImpact
    description: str


@dataclass(frozen=True)
class ReliabilityAssessment:
    """Quantitative and qualitative trust judgment for a prediction."""
    score: float
    level: ReliabilityLevel
    factors: Tuple[ReliabilityFactor, ...]
    human_review_recommended: bool
    reason: str

    def negative_factors(self) -> List[ReliabilityFactor]:
        return [f for f in self.factors if f.impact == FactorImpact.NEGATIVE]


@dataclass(frozen=True)
class EnsemblePrediction:
    name: str
    score: float
    weight: float


@dataclass(frozen=True)
class AgreementStats:
    mean_prediction: float
    variance: float
    coefficient_of_variation: float
    max_disagreement: float


@dataclass(frozen=True)
class EnsembleDetails:
    num_members: int
    predictions: Tuple[EnsemblePrediction, ...]
    agreement: AgreementStats
    outliers: Tuple[str, ...]


@dataclass(frozen=True)
class DisagreementAnalysis:
    """
    How strongly the detectors disagree.

    Attributes:
        disagreement_score: (2 * weighted sigma + score range) / 2, capped at 1
        standard_deviation: Unweighted standard deviation of the scores
        score_range: Highest minus lowest score
        disagreement_type: Severity band
        conflicting_detectors: "A vs B" pairs on opposite sides of 0.5
        explanation: Human-readable description
    """
    disagreement_score: float
    standard_deviation: float
    score_range: float
    disagreement_type: DisagreementType
    conflicting_detectors: Tuple[str, ...]
    explanation: str


@dataclass(frozen=True)
class CalibrationResult:
    """
    Score pulled toward 0.5 in proportion to detector disagreement.

    Informational: the fused final score is never replaced by it.
    """
    raw_score: float
    calibrated_score: float
    trust_score: float
    disagreement: DisagreementAnalysis
    recommendation: CalibrationRecommendation
    explanation: str


@dataclass(frozen=True)
class UncertaintyResult:
    """Disagreement-based uncertainty for a weighted detector ensemble."""
    prediction: float
    lower_bound: float
    upper_bound: float
    standard_deviation: float
    confidence_interval: ConfidenceInterval
    decomposition: UncertaintyDecomposition
    reliability: ReliabilityAssessment
    ensemble: EnsembleDetails
    recommendation: Recommendation
    calibration: CalibrationResult
    processing_time_ms: float = field(default=0.0, compare=False)


@dataclass(frozen=True)
class RegionHint:
    """Image-derived hint (percent coordinates) feeding the attention grid."""
    x: float
    y: float
    score: float


@dataclass(frozen=True)
class XAIRegion:
    """Synthetic region of interest, coordinates in percent of the image."""
    id: str
    x: float
    y: float
    width: float
    height: float
    importance: float
    category: XAICategory
    finding: str
    confidence: float

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)


@dataclass(frozen=True)
class AttentionHotspot:
    x: float
    y: float
    value: float


@dataclass(frozen=True)
class AttentionMap:
    grid: Tuple[Tuple[float, ...], ...]
    hotspots: Tuple[AttentionHotspot, ...]
    distribution: AttentionDistribution


@dataclass(frozen=True)
class XAIFinding:
    id: str
    type: XAICategory
    description: str
    impact: FindingImpact
    confidence: float
    location: Optional[str] = None
    technical_detail: Optional[str] = None


@dataclass(frozen=True)
class KeyFactor:
    name: str
    contribution: float  # How much this factor influenced the decision (0-1)
    direction: FactorDirection
    explanation: str


@dataclass(frozen=True)
class XAIExplanation:
    """Narrative and spatial justification for a fused score."""
    summary: str
    findings: Tuple[XAIFinding, ...]
    attention_map: AttentionMap
    regions: Tuple[XAIRegion, ...]
    explanation_confidence: float
    key_factors: Tuple[KeyFactor, ...]
    detector_scores: Dict[str, float] = field(default_factory=dict)
    processing_time_ms: float = field(default=0.0, compare=False)
