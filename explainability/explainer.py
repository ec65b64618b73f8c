"""
Explainability engine.

Produces the spatial and narrative justification for a fused score:
1. Score-gated synthetic regions, jittered by the content hash
2. 5x5 attention grid from the hash, the regions and any region hints
3. Findings, ranked key factors and a summary

The content identifier only seeds the hash; pixels are never read. The same
identifier and score always produce the same explanation.
"""

import logging
import time
from typing import Dict, Mapping, Optional, Sequence, Union

from core.data_models import RegionHint, XAIExplanation
from utils.content_hash import simple_hash
from .attention_map import generate_attention_map
from .narrative import generate_findings, generate_key_factors, generate_summary
from .regions import generate_regions

logger = logging.getLogger(__name__)


class ExplainabilityEngine:
    """
    Builds XAIExplanation objects for fused scores.

    Usage:
        engine = ExplainabilityEngine(config)
        explanation = engine.explain(image_id, fusion_result.final_score)
    """

    def __init__(self, config: Optional[Dict] = None):
        self.config = config or {}

    def explain(
        self,
        content_id: Union[str, bytes],
        fused_score: float,
        detector_scores: Optional[Mapping[str, float]] = None,
        region_hints: Optional[Sequence[RegionHint]] = None
    ) -> XAIExplanation:
        """
        Generate an explanation for one fused score.

        Args:
            content_id: Image content identifier (seed only)
            fused_score: Final fused score (0-1)
            detector_scores: Optional detector name -> score, carried through
            region_hints: Optional hints that add attention sources

        Returns:
            XAIExplanation
        """
        start = time.perf_counter()

        if not 0.0 <= fused_score <= 1.0:
            raise ValueError(f"fused_score must lie in [0, 1], got {fused_score}")

        content_hash = simple_hash(content_id)
        regions = generate_regions(content_hash, fused_score)

        sources = [(*r.center, r.importance) for r in regions]
        sources.extend((h.x, h.y, h.score) for h in (region_hints or ()))

        attention = generate_attention_map(content_hash, fused_score, sources, self.config)
        findings = generate_findings(regions, fused_score)
        key_factors = generate_key_factors(fused_score, regions)
        summary = generate_summary(fused_score, findings, key_factors)

        if regions:
            explanation_confidence = sum(r.confidence for r in regions) / len(regions)
        else:
            explanation_confidence = fused_score

        elapsed_ms = (time.perf_counter() - start) * 1000.0

        logger.info(
            f"Explanation: {len(regions)} regions, {len(findings)} findings, "
            f"attention {attention.distribution.value}"
        )

        return XAIExplanation(
            summary=summary,
            findings=tuple(findings),
            attention_map=attention,
            regions=tuple(regions),
            explanation_confidence=explanation_confidence,
            key_factors=tuple(key_factors),
            detector_scores=dict(detector_scores or {}),
            processing_time_ms=elapsed_ms,
        )


def generate_xai_explanation(
    content_id: Union[str, bytes],
    fused_score: float,
    detector_scores: Optional[Mapping[str, float]] = None,
    region_hints: Optional[Sequence[RegionHint]] = None,
    config: Optional[Dict] = None
) -> XAIExplanation:
    """
    Convenience function for explanation generation.

    Args:
        content_id: Image content identifier
        fused_score: Final fused score (0-1)
        detector_scores: Optional per-detector scores
        region_hints: Optional region hints
        config: Configuration dictionary

    Returns:
        XAIExplanation
    """
    return ExplainabilityEngine(config).explain(
        content_id, fused_score, detector_scores, region_hints
    )
