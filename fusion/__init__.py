"""
Detector score fusion module.

This package combines per-detector authenticity scores into one fused score:
- Configurable base weights per detector
- Failed detectors are dropped and their weight redistributed
- Degraded (fallback) detectors are kept but recorded
- Every weight change carries a reason for the report

Rationale:
- A single failed detector should not sink the whole analysis
- Weight changes must stay traceable for the reader of the report
"""

from .weighted_fusion import (
    FusionEngine,
    fuse_detector_scores,
    build_observations,
    DEFAULT_BASE_WEIGHTS
)

__all__ = [
    'FusionEngine',
    'fuse_detector_scores',
    'build_observations',
    'DEFAULT_BASE_WEIGHTS',
]
