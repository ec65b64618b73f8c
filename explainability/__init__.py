"""
Explainability module.

This package justifies a fused authenticity score:
- Synthetic regions of interest, gated on the score
- A coarse attention grid with hotspots
- Findings, ranked key factors and a natural-language summary

Regions and attention are a deterministic presentation layer seeded by a
content hash, not pixel analysis.
"""

from .explainer import ExplainabilityEngine, generate_xai_explanation
from .regions import generate_regions, REGION_TEMPLATES
from .attention_map import generate_attention_map, classify_distribution
from .narrative import (
    generate_findings,
    generate_key_factors,
    generate_summary,
    get_technical_detail,
    get_category_color,
    get_category_icon
)

__all__ = [
    'ExplainabilityEngine',
    'generate_xai_explanation',
    'generate_regions',
    'REGION_TEMPLATES',
    'generate_attention_map',
    'classify_distribution',
    'generate_findings',
    'generate_key_factors',
    'generate_summary',
    'get_technical_detail',
    'get_category_color',
    'get_category_icon',
]
