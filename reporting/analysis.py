"""
End-to-end analysis for one image.

Stage order:
1. Fusion (must finish first; the explanation needs the fused score)
2. Uncertainty and explanation (independent of each other; optionally run
   on two worker threads)
3. Report assembly

Terminal failures (EmptyEnsembleError, NoValidDetectorsError) propagate to
the caller; there is no partial report.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, Optional, Sequence, Union

from core.data_models import DetectorObservation, RegionHint
from explainability import ExplainabilityEngine
from fusion import FusionEngine
from uncertainty import UncertaintyQuantifier
from utils.content_hash import simple_hash
from .report_builder import AuthenticityReport, build_report

logger = logging.getLogger(__name__)


def run_analysis(
    observations: Iterable[DetectorObservation],
    content_id: Union[str, bytes],
    config: Optional[Dict] = None,
    region_hints: Optional[Sequence[RegionHint]] = None,
    parallel: Optional[bool] = None
) -> AuthenticityReport:
    """
    Run fusion, uncertainty and explanation for one image.

    Args:
        observations: Detector observations (at least one non-error)
        content_id: Image content identifier, used as a deterministic seed
        config: Configuration dictionary
        region_hints: Optional image-derived region hints
        parallel: Run uncertainty and explanation concurrently; defaults to
            the 'pipeline.parallel' config value

    Returns:
        AuthenticityReport
    """
    config = config or {}
    if parallel is None:
        parallel = config.get('pipeline', {}).get('parallel', False)

    observations = list(observations)
    logger.info(f"Starting analysis of {len(observations)} detector observations")

    fusion = FusionEngine(config).fuse(observations)

    weighted = fusion.weighted_observations()
    detector_scores = {o.name: o.score for o in weighted}
    quantifier = UncertaintyQuantifier(config)
    explainer = ExplainabilityEngine(config)

    if parallel:
        with ThreadPoolExecutor(max_workers=2) as pool:
            uncertainty_future = pool.submit(quantifier.quantify, weighted)
            explanation_future = pool.submit(
                explainer.explain, content_id, fusion.final_score,
                detector_scores, region_hints
            )
            uncertainty = uncertainty_future.result()
            explanation = explanation_future.result()
    else:
        uncertainty = quantifier.quantify(weighted)
        explanation = explainer.explain(
            content_id, fusion.final_score, detector_scores, region_hints
        )

    return build_report(fusion, uncertainty, explanation, simple_hash(content_id))
