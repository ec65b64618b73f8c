"""Verdict bands and display text for report codes."""

from types import MappingProxyType
from typing import Dict

from core.enums import Recommendation, Verdict


VERDICT_LABELS = MappingProxyType({
    Verdict.AI_GENERATED: {'label': 'AI Generated', 'color': '#ef4444'},
    Verdict.LIKELY_AI: {'label': 'Likely AI', 'color': '#f97316'},
    Verdict.UNCERTAIN: {'label': 'Uncertain', 'color': '#eab308'},
    Verdict.LIKELY_REAL: {'label': 'Likely Real', 'color': '#22c55e'},
    Verdict.REAL: {'label': 'Real Photo', 'color': '#10b981'},
})

RECOMMENDATION_TEXT = MappingProxyType({
    Recommendation.HIGH_CONFIDENCE_AI: {
        'title': 'High Confidence: AI Generated',
        'description': 'Strong agreement across all detection methods. High certainty this is AI-generated.',
        'color': '#ef4444',
    },
    Recommendation.HIGH_CONFIDENCE_REAL: {
        'title': 'High Confidence: Authentic',
        'description': 'Strong agreement across all detection methods. High certainty this is a real photograph.',
        'color': '#22c55e',
    },
    Recommendation.MODERATE_CONFIDENCE: {
        'title': 'Moderate Confidence',
        'description': 'Detection methods show reasonable agreement. Result is likely accurate but not certain.',
        'color': '#f59e0b',
    },
    Recommendation.LOW_CONFIDENCE_NEEDS_REVIEW: {
        'title': 'Low Confidence - Review Recommended',
        'description': 'Significant uncertainty in detection. Human review is recommended for verification.',
        'color': '#f97316',
    },
    Recommendation.VERY_UNCERTAIN_HUMAN_REQUIRED: {
        'title': 'Very Uncertain - Human Review Required',
        'description': 'Detection methods strongly disagree. Result should not be relied upon without human verification.',
        'color': '#dc2626',
    },
})


def verdict_from_score(score: float) -> Verdict:
    """
    Map a final score onto the five verdict bands.

    >= 0.85 AI_GENERATED, >= 0.65 LIKELY_AI, >= 0.35 UNCERTAIN,
    >= 0.15 LIKELY_REAL, else REAL.
    """
    if score >= 0.85:
        return Verdict.AI_GENERATED
    if score >= 0.65:
        return Verdict.LIKELY_AI
    if score >= 0.35:
        return Verdict.UNCERTAIN
    if score >= 0.15:
        return Verdict.LIKELY_REAL
    return Verdict.REAL


def get_verdict_label(verdict: Verdict) -> Dict[str, str]:
    return dict(VERDICT_LABELS[Verdict(verdict)])


def get_recommendation_text(recommendation: Recommendation) -> Dict[str, str]:
    return dict(RECOMMENDATION_TEXT[Recommendation(recommendation)])


def format_confidence(score: float) -> str:
    return f"{score * 100:.1f}%"
