"""
Failure-aware weighted fusion of detector scores.

Fusion strategy:
- Weighted: each detector contributes score * weight
- Failure-aware: errored detectors are dropped and their weight is
  redistributed proportionally over the survivors
- Degradation-tolerant: fallback detectors keep their base weight but are
  recorded as degraded
- Traceable: every weight change is recorded with a reason

Decision rules:
1. At least one detector succeeded: renormalize surviving base weights to 1
2. Only degraded detectors survive (or base weights sum to 0): equal weights
3. Every detector errored: NoValidDetectorsError

Engineering approach:
- Base weights configurable per detector name
- Weighted combination computed with numpy
- Explanation text preserved for the report
"""

import logging
from typing import List, Dict, Iterable, Mapping, Optional

import numpy as np

from core.data_models import DetectorObservation, FusionResult, WeightAdjustment
from core.enums import DetectorStatus
from core.exceptions import EmptyEnsembleError, NoValidDetectorsError

logger = logging.getLogger(__name__)


DEFAULT_BASE_WEIGHTS = {
    'classifier': 0.6,
    'vision_language': 0.3,
    'frequency': 0.1,
}


class FusionEngine:
    """
    Weighted fusion engine for detector observations.

    Fusion logic:
    - applied_i = base_i / sum(base over non-error detectors)
    - final_score = sum(score_i * applied_i)
    - Equal weights when no detector fully succeeded

    Usage:
        engine = FusionEngine(config)
        fused = engine.fuse(observations)
    """

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize fusion engine.

        Args:
            config: Configuration dict with a 'fusion' section
        """
        self.config = config or {}

        fusion_config = self.config.get('fusion', {})
        self.base_weights = dict(fusion_config.get('base_weights', DEFAULT_BASE_WEIGHTS))
        self.significant_shift = fusion_config.get('significant_shift', 0.05)

        total = sum(self.base_weights.values())
        if self.base_weights and abs(total - 1.0) > 1e-6:
            logger.warning(
                f"Configured base weights sum to {total:.4f}, not 1.0; "
                f"they will be renormalized per request"
            )

        logger.debug(f"Fusion engine initialized: base_weights={self.base_weights}")

    def resolve_base_weight(self, observation: DetectorObservation) -> float:
        """Configured weight for this detector name, else the observation's own."""
        return float(self.base_weights.get(observation.name, observation.weight))

    def fuse(self, observations: Iterable[DetectorObservation]) -> FusionResult:
        """
        Fuse detector observations into one score.

        Args:
            observations: DetectorObservation objects, one per detector

        Returns:
            FusionResult with applied weights and adjustment records

        Raises:
            EmptyEnsembleError: No observations supplied
            NoValidDetectorsError: Every observation has status 'error'
            ValueError: Two observations share a detector name
        """
        observations = tuple(observations)
        if not observations:
            raise EmptyEnsembleError()

        names = [o.name for o in observations]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate detector names in observations: {names}")

        failed = [o for o in observations if o.is_error]
        surviving = [o for o in observations if not o.is_error]
        degraded = [o for o in surviving if o.is_degraded]

        if not surviving:
            logger.error(f"All {len(observations)} detectors reported errors")
            raise NoValidDetectorsError(names)

        for o in failed:
            logger.warning(f"Detector '{o.name}' failed: {o.error_message or 'no message'}")

        base = {o.name: self.resolve_base_weight(o) for o in observations}
        applied, equal_weights = self._compute_applied_weights(surviving, base)

        weights = {name: 0.0 for name in names}
        weights.update(applied)

        scores = np.array([o.score for o in surviving])
        weight_vector = np.array([applied[o.name] for o in surviving])
        final_score = float(np.clip(np.dot(scores, weight_vector), 0.0, 1.0))

        adjustments = tuple(
            WeightAdjustment(
                detector=o.name,
                base_weight=base[o.name],
                applied_weight=weights[o.name],
                reason=self._adjustment_reason(o, bool(failed), equal_weights),
            )
            for o in observations
        )

        result = FusionResult(
            final_score=final_score,
            per_detector_weight=weights,
            observations=observations,
            degraded_detectors=tuple(o.name for o in degraded),
            failed_detectors=tuple(o.name for o in failed),
            adjustments=adjustments,
            equal_weight_fallback=equal_weights,
            explanation=self._generate_weight_explanation(adjustments, weights),
        )

        logger.info(
            f"Fused {len(surviving)}/{len(observations)} detectors: "
            f"final_score={final_score:.3f}, degraded={len(degraded)}, failed={len(failed)}"
        )

        return result

    def _compute_applied_weights(
        self,
        surviving: List[DetectorObservation],
        base: Mapping[str, float]
    ):
        """
        Renormalize surviving base weights, or fall back to equal weights.

        Returns:
            Tuple of (name -> applied weight, equal_weights_used)
        """
        any_success = any(o.status == DetectorStatus.SUCCESS for o in surviving)
        total = sum(base[o.name] for o in surviving)

        if not any_success or total <= 0.0:
            if not any_success:
                logger.warning("No detector fully succeeded; using equal weights")
            else:
                logger.warning("Surviving base weights sum to zero; using equal weights")
            equal = 1.0 / len(surviving)
            return {o.name: equal for o in surviving}, True

        return {o.name: base[o.name] / total for o in surviving}, False

    def _adjustment_reason(
        self,
        observation: DetectorObservation,
        any_failed: bool,
        equal_weights: bool
    ) -> str:
        """Short reason for one detector's weight change."""
        if observation.is_error:
            return "Removed due to detector error"
        if equal_weights:
            return "Equal weight applied (no fully successful detector)"
        if observation.is_degraded:
            return "Kept at base weight despite fallback mode"
        if any_failed:
            return "Redistributed from failed detectors"
        return "Base weight applied"

    def _generate_weight_explanation(
        self,
        adjustments: Iterable[WeightAdjustment],
        weights: Mapping[str, float]
    ) -> str:
        """Generate human-readable explanation of weight adjustments."""
        significant = [a for a in adjustments if abs(a.shift) > self.significant_shift]

        split = ", ".join(f"{name}={w * 100:.0f}%" for name, w in weights.items())

        if not significant:
            return f"All detectors kept weights close to baseline. Final weights: {split}."

        explanation = "Weight adjustment applied: "
        for adj in significant:
            direction = "increased" if adj.shift > 0 else "decreased"
            explanation += (
                f"{adj.detector} {direction} by {abs(adj.shift) * 100:.0f}% ({adj.reason}). "
            )
        explanation += f"Final weights: {split}."

        return explanation


def fuse_detector_scores(
    observations: Iterable[DetectorObservation],
    config: Optional[Dict] = None
) -> FusionResult:
    """
    Convenience function for weighted fusion.

    Args:
        observations: DetectorObservation objects
        config: Configuration dictionary

    Returns:
        FusionResult
    """
    engine = FusionEngine(config)
    return engine.fuse(observations)


def build_observations(
    scores: Mapping[str, float],
    statuses: Optional[Mapping[str, str]] = None,
    config: Optional[Dict] = None
) -> List[DetectorObservation]:
    """
    Build observations from raw scores using the configured base weights.

    Args:
        scores: Detector name -> score (0-1)
        statuses: Optional detector name -> status string (default 'success')
        config: Configuration dictionary

    Returns:
        List of DetectorObservation objects in the order of `scores`
    """
    statuses = statuses or {}
    base_weights = (config or {}).get('fusion', {}).get('base_weights', DEFAULT_BASE_WEIGHTS)
    equal = 1.0 / len(scores) if scores else 0.0

    return [
        DetectorObservation(
            name=name,
            score=score,
            weight=base_weights.get(name, equal),
            status=statuses.get(name, DetectorStatus.SUCCESS),
        )
        for name, score in scores.items()
    ]
