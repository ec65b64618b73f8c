"""
Authenticity report assembly and export.

Combines the fusion, uncertainty and explanation results into the single
structure the presentation layer renders, and serializes it to JSON.
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Tuple

from core.data_models import (
    FusionResult, UncertaintyResult, XAIExplanation, XAIFinding, XAIRegion
)
from core.enums import DisagreementType, Recommendation, ReliabilityLevel, Verdict
from .labels import verdict_from_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticityReport:
    """
    Container for a complete authenticity analysis.

    Attributes:
        content_hash: Hash of the content identifier the analysis ran on
        final_score: Fused AI-likelihood score (0-1)
        verdict: Five-band verdict for the final score
        confidence_lower: Lower confidence-interval bound
        confidence_upper: Upper confidence-interval bound
        reliability_level: Reliability band of the prediction
        human_review_recommended: True for low / very_low reliability
        recommendation: Discrete recommendation code
        calibrated_score: Disagreement-calibrated score (informational)
        trust_score: 1 - disagreement score
        disagreement_type: Disagreement band of the detectors
        summary: Natural-language summary
        findings: Ordered findings for rendering
        regions: Regions ordered by importance
        fusion: Full fusion result
        uncertainty: Full uncertainty result
        explanation: Full explanation
    """
    content_hash: int
    final_score: float
    verdict: Verdict
    confidence_lower: float
    confidence_upper: float
    reliability_level: ReliabilityLevel
    human_review_recommended: bool
    recommendation: Recommendation
    calibrated_score: float
    trust_score: float
    disagreement_type: DisagreementType
    summary: str
    findings: Tuple[XAIFinding, ...]
    regions: Tuple[XAIRegion, ...]
    fusion: FusionResult = field(repr=False)
    uncertainty: UncertaintyResult = field(repr=False)
    explanation: XAIExplanation = field(repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-compatible dictionary (enums become their values)."""
        return _to_plain(asdict(self))


def build_report(
    fusion: FusionResult,
    uncertainty: UncertaintyResult,
    explanation: XAIExplanation,
    content_hash: int = 0
) -> AuthenticityReport:
    """
    Assemble the report from the three component results.

    Args:
        fusion: FusionResult from the fusion engine
        uncertainty: UncertaintyResult for the same request
        explanation: XAIExplanation for the fused score
        content_hash: Hash of the content identifier

    Returns:
        AuthenticityReport
    """
    report = AuthenticityReport(
        content_hash=content_hash,
        final_score=fusion.final_score,
        verdict=verdict_from_score(fusion.final_score),
        confidence_lower=uncertainty.confidence_interval.lower,
        confidence_upper=uncertainty.confidence_interval.upper,
        reliability_level=uncertainty.reliability.level,
        human_review_recommended=uncertainty.reliability.human_review_recommended,
        recommendation=uncertainty.recommendation,
        calibrated_score=uncertainty.calibration.calibrated_score,
        trust_score=uncertainty.calibration.trust_score,
        disagreement_type=uncertainty.calibration.disagreement.disagreement_type,
        summary=explanation.summary,
        findings=explanation.findings,
        regions=explanation.regions,
        fusion=fusion,
        uncertainty=uncertainty,
        explanation=explanation,
    )

    logger.info(
        f"Report assembled: verdict={report.verdict.value}, "
        f"score={report.final_score:.3f}, review={report.human_review_recommended}"
    )

    return report


def save_report_json(report: AuthenticityReport, output_path) -> str:
    """
    Write the report as indented JSON.

    Args:
        report: AuthenticityReport to export
        output_path: Destination file path

    Returns:
        Path to the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)

    logger.info(f"Report saved: {output_path}")
    return str(output_path)


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {_to_plain(k): _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    return value
