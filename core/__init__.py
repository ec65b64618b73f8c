"""
Shared types for the Authenticity Scope engine.

Holds the enums, immutable result models and typed errors used by the
fusion, uncertainty, explainability and reporting packages.
"""

from .enums import (
    DetectorStatus,
    ReliabilityLevel,
    Recommendation,
    FactorImpact,
    XAICategory,
    FindingImpact,
    FactorDirection,
    AttentionDistribution,
    Verdict,
    DisagreementType,
    CalibrationRecommendation
)

from .data_models import (
    DetectorObservation,
    WeightAdjustment,
    FusionResult,
    ConfidenceInterval,
    UncertaintyDecomposition,
    ReliabilityFactor,
    ReliabilityAssessment,
    EnsemblePrediction,
    AgreementStats,
    EnsembleDetails,
    DisagreementAnalysis,
    CalibrationResult,
    UncertaintyResult,
    RegionHint,
    XAIRegion,
    AttentionHotspot,
    AttentionMap,
    XAIFinding,
    KeyFactor,
    XAIExplanation
)

from .exceptions import (
    AuthenticityEngineError,
    NoValidDetectorsError,
    EmptyEnsembleError
)

__all__ = [
    'DetectorStatus',
    'ReliabilityLevel',
    'Recommendation',
    'FactorImpact',
    'XAICategory',
    'FindingImpact',
    'FactorDirection',
    'AttentionDistribution',
    'Verdict',
    'DisagreementType',
    'CalibrationRecommendation',
    'DetectorObservation',
    'WeightAdjustment',
    'FusionResult',
    'ConfidenceInterval',
    'UncertaintyDecomposition',
    'ReliabilityFactor',
    'ReliabilityAssessment',
    'EnsemblePrediction',
    'AgreementStats',
    'EnsembleDetails',
    'DisagreementAnalysis',
    'CalibrationResult',
    'UncertaintyResult',
    'RegionHint',
    'XAIRegion',
    'AttentionHotspot',
    'AttentionMap',
    'XAIFinding',
    'KeyFactor',
    'XAIExplanation',
    'AuthenticityEngineError',
    'NoValidDetectorsError',
    'EmptyEnsembleError',
]
