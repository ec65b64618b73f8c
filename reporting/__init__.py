"""
Authenticity reporting module.

This package assembles the final analysis report:
- run_analysis: fusion -> {uncertainty, explanation} -> report
- AuthenticityReport: flattened fields for rendering plus full results
- JSON export and verdict / recommendation display text
"""

from .analysis import run_analysis
from .report_builder import AuthenticityReport, build_report, save_report_json
from .labels import (
    verdict_from_score,
    get_verdict_label,
    get_recommendation_text,
    format_confidence
)

__all__ = [
    'run_analysis',
    'AuthenticityReport',
    'build_report',
    'save_report_json',
    'verdict_from_score',
    'get_verdict_label',
    'get_recommendation_text',
    'format_confidence',
]
