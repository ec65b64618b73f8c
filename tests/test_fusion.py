"""
Unit tests for the fusion module.

Tests cover:
- Weighted fusion with default base weights
- Weight redistribution when detectors fail
- Fallback (degraded) detectors and the equal-weight default
- Terminal failures (empty input, all detectors errored)
- Observation validation
"""

import pytest # pyright: ignore[reportMissingImports]
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.data_models import DetectorObservation
from core.enums import DetectorStatus
from core.exceptions import EmptyEnsembleError, NoValidDetectorsError
from fusion import FusionEngine, fuse_detector_scores, build_observations


def make_observations(scores, statuses=None, weights=(0.6, 0.3, 0.1)):
    names = ('classifier', 'vision_language', 'frequency')
    statuses = statuses or ('success',) * len(scores)
    return [
        DetectorObservation(name=n, score=s, weight=w, status=st)
        for n, s, w, st in zip(names, scores, weights, statuses)
    ]


class TestDetectorObservation:
    """Test DetectorObservation validation."""

    def test_status_string_normalized(self):
        """Test status strings become enum members."""
        obs = DetectorObservation('classifier', 0.5, 0.6, status='FALLBACK')
        assert obs.status == DetectorStatus.FALLBACK
        assert obs.is_degraded

    def test_score_out_of_range(self):
        """Test scores outside [0, 1] are rejected."""
        with pytest.raises(ValueError):
            DetectorObservation('classifier', 1.5, 0.6)

    def test_nan_weight_rejected(self):
        """Test NaN weights are rejected."""
        with pytest.raises(ValueError):
            DetectorObservation('classifier', 0.5, float('nan'))

    def test_unknown_status(self):
        """Test unknown status strings are rejected."""
        with pytest.raises(ValueError):
            DetectorObservation('classifier', 0.5, 0.6, status='timeout')

    def test_immutable(self):
        """Test observations cannot be modified after creation."""
        obs = DetectorObservation('classifier', 0.5, 0.6)
        with pytest.raises(AttributeError):
            obs.score = 0.9


class TestWeightedFusion:
    """Test fusion with all detectors succeeding."""

    def test_agreeing_detectors(self):
        """Test the default weighting on agreeing detectors."""
        result = fuse_detector_scores(make_observations((0.8, 0.75, 0.82)))

        assert result.final_score == pytest.approx(0.787, abs=1e-9)
        assert result.per_detector_weight['classifier'] == pytest.approx(0.6)
        assert result.per_detector_weight['vision_language'] == pytest.approx(0.3)
        assert result.per_detector_weight['frequency'] == pytest.approx(0.1)
        assert sum(result.per_detector_weight.values()) == pytest.approx(1.0, abs=1e-9)
        assert result.failed_detectors == ()
        assert result.degraded_detectors == ()
        assert not result.equal_weight_fallback

    def test_monotonic_in_single_score(self):
        """Test final score never decreases when one detector's score rises."""
        engine = FusionEngine()
        previous = -1.0
        for score in (0.0, 0.2, 0.4, 0.6, 0.8, 1.0):
            result = engine.fuse(make_observations((0.5, score, 0.3)))
            assert result.final_score >= previous
            previous = result.final_score

    def test_score_bounds(self):
        """Test extreme inputs stay in [0, 1]."""
        engine = FusionEngine()
        assert engine.fuse(make_observations((1.0, 1.0, 1.0))).final_score <= 1.0
        assert engine.fuse(make_observations((0.0, 0.0, 0.0))).final_score == 0.0

    def test_configured_base_weights_override(self):
        """Test config base weights take precedence over observation weights."""
        config = {'fusion': {'base_weights': {
            'classifier': 0.5, 'vision_language': 0.5, 'frequency': 0.0
        }}}
        result = FusionEngine(config).fuse(make_observations((1.0, 0.0, 1.0)))

        assert result.final_score == pytest.approx(0.5)
        assert result.per_detector_weight['frequency'] == 0.0

    def test_unconfigured_detector_uses_observation_weight(self):
        """Test detectors missing from config keep their own weight."""
        observations = [
            DetectorObservation('alpha', 1.0, 0.7),
            DetectorObservation('beta', 0.0, 0.3),
        ]
        result = FusionEngine().fuse(observations)

        assert result.final_score == pytest.approx(0.7)

    def test_duplicate_names_rejected(self):
        """Test duplicate detector names are rejected."""
        observations = [
            DetectorObservation('classifier', 0.4, 0.5),
            DetectorObservation('classifier', 0.6, 0.5),
        ]
        with pytest.raises(ValueError):
            FusionEngine().fuse(observations)

    def test_explanation_baseline(self):
        """Test explanation when no weight moved."""
        result = fuse_detector_scores(make_observations((0.8, 0.75, 0.82)))
        assert result.explanation.startswith("All detectors kept weights close to baseline")


class TestFailureAwareWeighting:
    """Test weight redistribution for errored detectors."""

    def test_classifier_error_renormalizes(self):
        """Test surviving weights renormalize to sum to 1."""
        observations = make_observations(
            (0.9, 0.6, 0.4), statuses=('error', 'success', 'success')
        )
        result = fuse_detector_scores(observations)

        assert result.per_detector_weight['classifier'] == 0.0
        assert result.per_detector_weight['vision_language'] == pytest.approx(0.75)
        assert result.per_detector_weight['frequency'] == pytest.approx(0.25)
        assert sum(result.per_detector_weight.values()) == pytest.approx(1.0, abs=1e-9)
        assert result.final_score == pytest.approx(0.55)
        assert result.failed_detectors == ('classifier',)

    def test_single_survivor(self):
        """Test a lone survivor gets weight 1 and its own score."""
        observations = make_observations(
            (0.9, 0.6, 0.35), statuses=('error', 'error', 'success')
        )
        result = fuse_detector_scores(observations)

        assert result.per_detector_weight['frequency'] == pytest.approx(1.0)
        assert result.final_score == pytest.approx(0.35)

    def test_all_errors_raise(self):
        """Test fusion fails when every detector errored."""
        observations = make_observations((0.5, 0.5, 0.5), statuses=('error',) * 3)

        with pytest.raises(NoValidDetectorsError) as excinfo:
            fuse_detector_scores(observations)

        assert excinfo.value.detector_names == ['classifier', 'vision_language', 'frequency']

    def test_empty_input_raises(self):
        """Test fusion fails on an empty observation list."""
        with pytest.raises(EmptyEnsembleError):
            fuse_detector_scores([])

    def test_adjustment_reasons(self):
        """Test each detector records why its weight changed."""
        observations = make_observations(
            (0.9, 0.6, 0.4), statuses=('error', 'success', 'success')
        )
        result = fuse_detector_scores(observations)
        reasons = {a.detector: a.reason for a in result.adjustments}

        assert reasons['classifier'] == "Removed due to detector error"
        assert reasons['vision_language'] == "Redistributed from failed detectors"
        assert "classifier decreased by 60%" in result.explanation

    def test_weighted_observations_exclude_failures(self):
        """Test the uncertainty input carries applied weights only for survivors."""
        observations = make_observations(
            (0.9, 0.6, 0.4), statuses=('error', 'success', 'success')
        )
        weighted = fuse_detector_scores(observations).weighted_observations()

        assert [o.name for o in weighted] == ['vision_language', 'frequency']
        assert sum(o.weight for o in weighted) == pytest.approx(1.0)


class TestDegradedDetectors:
    """Test fallback-mode handling."""

    def test_fallback_keeps_base_weight(self):
        """Test a fallback detector keeps its weight but is recorded."""
        observations = make_observations(
            (0.8, 0.75, 0.82), statuses=('fallback', 'success', 'success')
        )
        result = fuse_detector_scores(observations)

        assert result.per_detector_weight['classifier'] == pytest.approx(0.6)
        assert result.degraded_detectors == ('classifier',)
        assert result.final_score == pytest.approx(0.787, abs=1e-9)

    def test_all_fallback_uses_equal_weights(self):
        """Test equal weights when no detector fully succeeded."""
        observations = make_observations((0.9, 0.6, 0.3), statuses=('fallback',) * 3)
        result = fuse_detector_scores(observations)

        assert result.equal_weight_fallback
        for weight in result.per_detector_weight.values():
            assert weight == pytest.approx(1.0 / 3.0)
        assert result.final_score == pytest.approx(0.6)

    def test_fallback_and_error_mix(self):
        """Test equal weights across degraded survivors when the rest errored."""
        observations = make_observations(
            (0.9, 0.6, 0.2), statuses=('error', 'fallback', 'fallback')
        )
        result = fuse_detector_scores(observations)

        assert result.per_detector_weight['vision_language'] == pytest.approx(0.5)
        assert result.per_detector_weight['frequency'] == pytest.approx(0.5)
        assert result.final_score == pytest.approx(0.4)

    def test_zero_base_weights_use_equal_weights(self):
        """Test surviving weights summing to zero fall back to equal weights."""
        observations = [
            DetectorObservation('alpha', 0.2, 0.0),
            DetectorObservation('beta', 0.6, 0.0),
        ]
        result = FusionEngine().fuse(observations)

        assert result.equal_weight_fallback
        assert result.final_score == pytest.approx(0.4)


class TestBuildObservations:
    """Test building observations from raw scores."""

    def test_default_weights(self):
        """Test configured base weights are attached by name."""
        observations = build_observations(
            {'classifier': 0.8, 'vision_language': 0.7, 'frequency': 0.6},
            statuses={'frequency': 'fallback'}
        )

        assert [o.weight for o in observations] == [0.6, 0.3, 0.1]
        assert observations[2].status == DetectorStatus.FALLBACK
