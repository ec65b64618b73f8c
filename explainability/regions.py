"""
Synthetic region-of-interest generation.

Regions are not measured from pixels. Each template is switched on once the
fused score crosses its threshold, placed with deterministic jitter taken
from the content hash, and weighted by the score:

    threshold  template             category
    > 0.30     face-texture         texture
    > 0.40     eye-detail           anatomical
    > 0.50     background-artifact  background
    > 0.55     freq-anomaly         frequency
    > 0.60     lighting-issue       lighting

Thresholds and geometry are fixed presentation constants.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from core.data_models import XAIRegion
from core.enums import XAICategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionTemplate:
    """
    Fixed geometry and wording for one region type.

    Position is base + (hash % modulus) on each axis; importance and
    confidence are the fused score times their factors.
    """
    region_id: str
    category: XAICategory
    threshold: float
    x_base: int
    x_modulus: int
    y_base: int
    y_modulus: int
    width: float
    height: float
    importance_factor: float
    confidence_factor: float
    finding: str
    strong_finding: Optional[str] = None
    strong_above: float = 1.0

    def finding_for(self, score: float) -> str:
        if self.strong_finding is not None and score > self.strong_above:
            return self.strong_finding
        return self.finding

    def build(self, content_hash: int, score: float) -> XAIRegion:
        return XAIRegion(
            id=self.region_id,
            x=float(self.x_base + content_hash % self.x_modulus),
            y=float(self.y_base + content_hash % self.y_modulus),
            width=self.width,
            height=self.height,
            importance=score * self.importance_factor,
            category=self.category,
            finding=self.finding_for(score),
            confidence=score * self.confidence_factor,
        )


# Ordered by threshold; output is re-sorted by importance.
REGION_TEMPLATES = (
    RegionTemplate(
        region_id='face-texture',
        category=XAICategory.TEXTURE,
        threshold=0.3,
        x_base=35, x_modulus=10,
        y_base=20, y_modulus=15,
        width=30, height=35,
        importance_factor=0.8,
        confidence_factor=1.0,
        finding='Minor texture inconsistencies in facial region',
        strong_finding='Facial texture appears artificially smooth, lacking natural skin pores',
        strong_above=0.6,
    ),
    RegionTemplate(
        region_id='eye-detail',
        category=XAICategory.ANATOMICAL,
        threshold=0.4,
        x_base=30, x_modulus=5,
        y_base=25, y_modulus=5,
        width=15, height=8,
        importance_factor=0.9,
        confidence_factor=0.85,
        finding='Eye region shows potential asymmetry or reflection anomalies',
    ),
    RegionTemplate(
        region_id='background-artifact',
        category=XAICategory.BACKGROUND,
        threshold=0.5,
        x_base=5, x_modulus=10,
        y_base=60, y_modulus=20,
        width=25, height=30,
        importance_factor=0.6,
        confidence_factor=0.7,
        finding='Background contains subtle artifacts or inconsistencies',
    ),
    RegionTemplate(
        region_id='freq-anomaly',
        category=XAICategory.FREQUENCY,
        threshold=0.55,
        x_base=70, x_modulus=15,
        y_base=40, y_modulus=20,
        width=20, height=25,
        importance_factor=0.75,
        confidence_factor=0.8,
        finding='High-frequency spectral anomalies detected in this region',
    ),
    RegionTemplate(
        region_id='lighting-issue',
        category=XAICategory.LIGHTING,
        threshold=0.6,
        x_base=50, x_modulus=10,
        y_base=30, y_modulus=10,
        width=35, height=40,
        importance_factor=0.7,
        confidence_factor=0.75,
        finding='Lighting direction inconsistencies between elements',
    ),
)


def generate_regions(content_hash: int, score: float) -> List[XAIRegion]:
    """
    Generate the score-gated region set.

    Args:
        content_hash: Non-negative content hash (see utils.simple_hash)
        score: Fused AI-likelihood score (0-1)

    Returns:
        Regions sorted by descending importance (stable for ties)
    """
    regions = [
        template.build(content_hash, score)
        for template in REGION_TEMPLATES
        if score > template.threshold
    ]

    regions.sort(key=lambda r: r.importance, reverse=True)

    logger.debug(f"Generated {len(regions)} regions for score {score:.3f}")

    return regions
