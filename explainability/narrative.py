"""
Findings, key factors and natural-language summary.

Turns the synthetic regions and the fused score into the text a reader
sees: one finding per region (plus an overall assessment at the extremes),
ranked key factors with an AI/real lean, and a summary chosen from four
score bands.
"""

import logging
from types import MappingProxyType
from typing import List, Sequence

from core.data_models import KeyFactor, XAIFinding, XAIRegion
from core.enums import FactorDirection, FindingImpact, XAICategory

logger = logging.getLogger(__name__)


TECHNICAL_DETAILS = MappingProxyType({
    XAICategory.ANATOMICAL: 'Facial landmark geometry and proportions analyzed using dlib 68-point model',
    XAICategory.TEXTURE: 'Local Binary Pattern (LBP) and Gray-Level Co-occurrence Matrix (GLCM) analysis',
    XAICategory.LIGHTING: 'Light source estimation using shadow direction and specular highlight analysis',
    XAICategory.FREQUENCY: 'DCT coefficient distribution and high-frequency energy ratio analysis',
    XAICategory.SEMANTIC: 'Object relationship and scene consistency verification',
    XAICategory.EDGE: 'Canny edge detection with consistency analysis across zoom levels',
    XAICategory.BACKGROUND: 'Region segmentation and context consistency check',
    XAICategory.COLOR: 'Color histogram analysis and unnatural saturation detection',
})

CATEGORY_COLORS = MappingProxyType({
    XAICategory.ANATOMICAL: '#ef4444',
    XAICategory.TEXTURE: '#f59e0b',
    XAICategory.LIGHTING: '#eab308',
    XAICategory.FREQUENCY: '#6366f1',
    XAICategory.SEMANTIC: '#8b5cf6',
    XAICategory.EDGE: '#06b6d4',
    XAICategory.BACKGROUND: '#22c55e',
    XAICategory.COLOR: '#ec4899',
})

CATEGORY_ICONS = MappingProxyType({
    XAICategory.ANATOMICAL: '👤',
    XAICategory.TEXTURE: '🔲',
    XAICategory.LIGHTING: '💡',
    XAICategory.FREQUENCY: '📊',
    XAICategory.SEMANTIC: '🧠',
    XAICategory.EDGE: '📐',
    XAICategory.BACKGROUND: '🏞️',
    XAICategory.COLOR: '🎨',
})


def get_technical_detail(category: XAICategory) -> str:
    return TECHNICAL_DETAILS[XAICategory(category)]


def get_category_color(category: XAICategory) -> str:
    return CATEGORY_COLORS[XAICategory(category)]


def get_category_icon(category: XAICategory) -> str:
    return CATEGORY_ICONS[XAICategory(category)]


def impact_from_importance(importance: float) -> FindingImpact:
    """> 0.7 high, > 0.4 medium, else low."""
    if importance > 0.7:
        return FindingImpact.HIGH
    elif importance > 0.4:
        return FindingImpact.MEDIUM
    return FindingImpact.LOW


def generate_findings(regions: Sequence[XAIRegion], score: float) -> List[XAIFinding]:
    """
    Project regions into findings, then add an overall assessment.

    The overall assessment only appears when the score is decisive
    (> 0.7 toward AI, < 0.3 toward authentic).
    """
    findings = [
        XAIFinding(
            id=region.id,
            type=region.category,
            description=region.finding,
            impact=impact_from_importance(region.importance),
            confidence=region.confidence,
            location=f"Region at ({region.x:.0f}%, {region.y:.0f}%)",
            technical_detail=get_technical_detail(region.category),
        )
        for region in regions
    ]

    if score > 0.7:
        findings.append(XAIFinding(
            id='overall-assessment',
            type=XAICategory.SEMANTIC,
            description='Multiple AI-generation indicators present across the image',
            impact=FindingImpact.HIGH,
            confidence=score,
            technical_detail='Ensemble of spatial and frequency domain anomalies suggest synthetic origin',
        ))
    elif score < 0.3:
        findings.append(XAIFinding(
            id='overall-assessment',
            type=XAICategory.SEMANTIC,
            description='Image exhibits characteristics consistent with authentic photography',
            impact=FindingImpact.LOW,
            confidence=1.0 - score,
            technical_detail='Natural noise patterns and realistic feature distribution observed',
        ))

    return findings


def generate_key_factors(score: float, regions: Sequence[XAIRegion]) -> List[KeyFactor]:
    """
    Rank the named signals behind the decision.

    Returns:
        KeyFactor list sorted by contribution, descending (stable for ties)
    """
    factors = []

    texture = [r for r in regions if r.category == XAICategory.TEXTURE]
    if texture:
        avg_importance = sum(r.importance for r in texture) / len(texture)
        leans_ai = avg_importance > 0.5
        factors.append(KeyFactor(
            name='Texture Analysis',
            contribution=avg_importance,
            direction=FactorDirection.AI if leans_ai else FactorDirection.REAL,
            explanation=(
                'Surface textures show artificial smoothness' if leans_ai
                else 'Natural texture patterns observed'
            ),
        ))

    has_frequency = any(r.category == XAICategory.FREQUENCY for r in regions)
    factors.append(KeyFactor(
        name='Frequency Domain',
        contribution=0.7 if has_frequency else 0.3,
        direction=FactorDirection.AI if has_frequency else FactorDirection.NEUTRAL,
        explanation=(
            'Spectral fingerprint anomalies detected' if has_frequency
            else 'Frequency distribution within normal range'
        ),
    ))

    anatomical = [r for r in regions if r.category == XAICategory.ANATOMICAL]
    if anatomical:
        factors.append(KeyFactor(
            name='Anatomical Consistency',
            contribution=anatomical[0].importance,
            direction=FactorDirection.AI,
            explanation='Facial geometry shows potential anomalies',
        ))

    leans_ai = score > 0.5
    factors.append(KeyFactor(
        name='Overall Coherence',
        contribution=score,
        direction=FactorDirection.AI if leans_ai else FactorDirection.REAL,
        explanation=(
            'Multiple detection signals align towards AI generation' if leans_ai
            else 'Image shows coherent natural characteristics'
        ),
    ))

    factors.sort(key=lambda f: f.contribution, reverse=True)
    return factors


def generate_summary(
    score: float,
    findings: Sequence[XAIFinding],
    key_factors: Sequence[KeyFactor]
) -> str:
    """Generate the natural-language summary for one of four score bands."""
    high_impact = [f for f in findings if f.impact == FindingImpact.HIGH]
    ai_factors = [f for f in key_factors if f.direction == FactorDirection.AI]

    if score > 0.7:
        summary = "This image shows strong indicators of AI generation. "
        if high_impact:
            concerns = "; ".join(f.description.lower() for f in high_impact[:2])
            summary += f"Key concerns include: {concerns}. "
        summary += f"{len(ai_factors)} detection methods flagged anomalies."
    elif score > 0.5:
        summary = (
            "This image shows moderate indicators that may suggest AI generation. "
            "Some areas of concern were identified, but certainty is limited. "
            "Human review recommended for definitive assessment."
        )
    elif score > 0.3:
        summary = (
            "Analysis is inconclusive. "
            "Minor anomalies detected but within range of natural variation. "
            "Image may be authentic with post-processing or partially AI-generated."
        )
    else:
        summary = (
            "This image appears to be an authentic photograph. "
            "Natural noise patterns, realistic textures, and consistent lighting observed. "
            "No significant AI-generation artifacts detected."
        )

    return summary
