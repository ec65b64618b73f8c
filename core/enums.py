"""
Enumerations for the Authenticity Scope analysis engine.
"""

from enum import Enum


class DetectorStatus(Enum):
    """Outcome reported by an upstream detector call."""
    SUCCESS = "success"
    FALLBACK = "fallback"  # Degraded: heuristic or demo-mode score
    ERROR = "error"  # No usable score


class ReliabilityLevel(Enum):
    """Qualitative reliability bands for a fused prediction."""
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"
    VERY_LOW = "very_low"

    @property
    def needs_human_review(self) -> bool:
        return self in (ReliabilityLevel.LOW, ReliabilityLevel.VERY_LOW)


class Recommendation(Enum):
    """Discrete, UI-facing recommendation codes."""
    HIGH_CONFIDENCE_AI = "high_confidence_ai"
    HIGH_CONFIDENCE_REAL = "high_confidence_real"
    MODERATE_CONFIDENCE = "moderate_confidence"
    LOW_CONFIDENCE_NEEDS_REVIEW = "low_confidence_needs_review"
    VERY_UNCERTAIN_HUMAN_REQUIRED = "very_uncertain_human_required"


class FactorImpact(Enum):
    """Direction in which a reliability factor moves trust."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class XAICategory(Enum):
    """Categories of synthetic explanation regions and findings."""
    ANATOMICAL = "anatomical"  # Face/body issues
    TEXTURE = "texture"  # Skin/surface texture
    LIGHTING = "lighting"  # Light/shadow issues
    FREQUENCY = "frequency"  # Spectral anomalies
    SEMANTIC = "semantic"  # Logical impossibilities
    EDGE = "edge"  # Boundary artifacts
    BACKGROUND = "background"  # Background issues
    COLOR = "color"  # Color distribution


class FindingImpact(Enum):
    """Impact bucket of an explanation finding."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FactorDirection(Enum):
    """Which verdict a key factor leans toward."""
    AI = "ai"
    REAL = "real"
    NEUTRAL = "neutral"


class AttentionDistribution(Enum):
    """Shape of the attention grid, from its value range."""
    CONCENTRATED = "concentrated"
    DISTRIBUTED = "distributed"
    UNIFORM = "uniform"


class Verdict(Enum):
    """Five-band verdict derived from the final score."""
    AI_GENERATED = "AI_GENERATED"
    LIKELY_AI = "LIKELY_AI"
    UNCERTAIN = "UNCERTAIN"
    LIKELY_REAL = "LIKELY_REAL"
    REAL = "REAL"


class DisagreementType(Enum):
    """Severity of detector disagreement used for calibration."""
    AGREEMENT = "agreement"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    CONFLICT = "conflict"  # Severe, with detectors on opposite sides


class CalibrationRecommendation(Enum):
    """Trust advice attached to a calibrated score."""
    HIGH_CONFIDENCE = "high_confidence"
    MODERATE_CONFIDENCE = "moderate_confidence"
    LOW_CONFIDENCE = "low_confidence"
    HUMAN_REVIEW_RECOMMENDED = "human_review_recommended"
