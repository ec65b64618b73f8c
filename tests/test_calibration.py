"""
Unit tests for disagreement-aware calibration.

Tests cover:
- Disagreement score, bands and conflicting detector pairs
- Calibrated score, trust score and recommendation
- Explanation text
- Calibration carried through the uncertainty result and the report
"""

import pytest # pyright: ignore[reportMissingImports]
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.data_models import DetectorObservation
from core.enums import CalibrationRecommendation, DisagreementType
from reporting import run_analysis
from uncertainty import (
    calculate_ensemble_uncertainty,
    calibrate_confidence,
    calculate_disagreement,
    detect_conflicts,
    classify_disagreement,
    calibration_metrics
)


def ensemble(scores, weights=(0.6, 0.3, 0.1)):
    names = ('classifier', 'vision_language', 'frequency')
    return [
        DetectorObservation(name=n, score=s, weight=w)
        for n, s, w in zip(names, scores, weights)
    ]


class TestDisagreement:
    """Test disagreement measurement."""

    def test_split_detectors_are_severe(self):
        """Test the 0.9 / 0.1 / 0.5 split is a severe disagreement."""
        analysis = calculate_disagreement(ensemble((0.9, 0.1, 0.5)))

        assert analysis.disagreement_score == pytest.approx((2 * 0.36 + 0.8) / 2)
        assert analysis.score_range == pytest.approx(0.8)
        assert analysis.standard_deviation == pytest.approx((0.32 / 3) ** 0.5)
        assert analysis.disagreement_type == DisagreementType.SEVERE
        assert analysis.explanation == (
            "Significant disagreement between detectors (σ=0.33). "
            "Scores range from 10% to 90%. Results should be interpreted with caution."
        )

    def test_margin_is_strict(self):
        """Test scores exactly on 0.5 +/- 0.4 do not count as a side."""
        assert detect_conflicts(ensemble((0.9, 0.1, 0.5))) == []

    def test_opposite_sides_conflict(self):
        """Test confident detectors on opposite sides are paired."""
        analysis = calculate_disagreement(ensemble((0.95, 0.05, 0.5)))

        assert analysis.conflicting_detectors == ('classifier vs vision_language',)
        assert analysis.disagreement_type == DisagreementType.CONFLICT
        assert analysis.explanation == (
            "Critical disagreement detected: classifier vs vision_language. "
            "classifier suggests AI (95%) while vision_language suggests real (5%). "
            "Human review is strongly recommended."
        )

    def test_agreeing_detectors(self):
        """Test close scores fall in the agreement band."""
        analysis = calculate_disagreement(ensemble((0.8, 0.75, 0.82)))

        assert analysis.disagreement_score < 0.15
        assert analysis.disagreement_type == DisagreementType.AGREEMENT
        assert analysis.conflicting_detectors == ()

    def test_single_detector(self):
        """Test one detector cannot disagree."""
        analysis = calculate_disagreement([DetectorObservation('solo', 0.9, 1.0)])

        assert analysis.disagreement_score == 0.0
        assert analysis.disagreement_type == DisagreementType.AGREEMENT
        assert analysis.explanation == 'Insufficient detectors for disagreement analysis'

    def test_zero_weights(self):
        """Test all-zero weights fall back to equal weights."""
        analysis = calculate_disagreement(
            [DetectorObservation('a', 0.6, 0.0), DetectorObservation('b', 0.4, 0.0)]
        )

        assert analysis.disagreement_score == pytest.approx((2 * 0.1 + 0.2) / 2)

    @pytest.mark.parametrize("score,conflicts,expected", [
        (0.1, False, DisagreementType.AGREEMENT),
        (0.2, False, DisagreementType.MILD),
        (0.3, False, DisagreementType.MODERATE),
        (0.3, True, DisagreementType.MODERATE),
        (0.4, False, DisagreementType.SEVERE),
        (0.4, True, DisagreementType.CONFLICT),
    ])
    def test_bands(self, score, conflicts, expected):
        """Test the 0.15 / 0.25 / 0.35 bands and the conflict upgrade."""
        assert classify_disagreement(score, conflicts) == expected


class TestCalibration:
    """Test the calibrated score and trust."""

    def test_split_detectors(self):
        """Test disagreement pulls the score toward 0.5 and lowers trust."""
        result = calibrate_confidence(0.62, ensemble((0.9, 0.1, 0.5)))

        assert result.raw_score == 0.62
        assert result.calibrated_score == pytest.approx(0.5 + 0.12 * (1 - 0.35 * 0.76))
        assert result.trust_score == pytest.approx(0.24)
        assert result.recommendation == CalibrationRecommendation.LOW_CONFIDENCE
        assert result.explanation.startswith(
            "Original score: 62.0% → Calibrated: 58.8% "
            "(3.2% adjustment due to detector disagreement). Trust level: 24%."
        )

    def test_conflict_requires_review(self):
        """Test a conflict always recommends human review."""
        result = calibrate_confidence(0.635, ensemble((0.95, 0.05, 0.5)))

        assert result.recommendation == CalibrationRecommendation.HUMAN_REVIEW_RECOMMENDED
        assert result.explanation.endswith(
            "IMPORTANT: Detectors fundamentally disagree. Manual verification is strongly recommended."
        )

    def test_agreement_barely_moves(self):
        """Test agreeing detectors keep the score and high trust."""
        result = calibrate_confidence(0.787, ensemble((0.8, 0.75, 0.82)))

        assert abs(result.calibrated_score - 0.787) < 0.01
        assert result.trust_score > 0.75
        assert result.recommendation == CalibrationRecommendation.HIGH_CONFIDENCE
        assert "(minimal adjustment - detectors agree)" in result.explanation

    def test_calibration_preserves_side(self):
        """Test calibration never moves a score across 0.5."""
        for raw in (0.05, 0.3, 0.7, 0.95):
            result = calibrate_confidence(raw, ensemble((0.95, 0.05, 0.5)))
            assert (result.calibrated_score - 0.5) * (raw - 0.5) > 0
            assert abs(result.calibrated_score - 0.5) <= abs(raw - 0.5)

    def test_metrics(self):
        """Test aggregate calibration metrics."""
        severe = calibrate_confidence(0.62, ensemble((0.9, 0.1, 0.5)))
        agreeing = calibrate_confidence(0.787, ensemble((0.8, 0.75, 0.82)))

        metrics = calibration_metrics([severe, agreeing])

        assert metrics['average_trust_score'] == pytest.approx(
            (severe.trust_score + agreeing.trust_score) / 2
        )
        assert metrics['conflict_rate'] == 0.0
        assert metrics['calibration_effectiveness'] == 1.0
        assert calibration_metrics([])['average_adjustment'] == 0.0


class TestCalibrationInResults:
    """Test calibration is attached without changing the fused score."""

    def test_uncertainty_result_carries_calibration(self):
        """Test the quantifier calibrates its own prediction."""
        result = calculate_ensemble_uncertainty(ensemble((0.9, 0.1, 0.5)))

        assert result.calibration.raw_score == pytest.approx(result.prediction)
        assert result.calibration.disagreement.disagreement_type == DisagreementType.SEVERE

    def test_report_keeps_final_score(self):
        """Test the report exposes calibration next to the unchanged final score."""
        report = run_analysis(ensemble((0.9, 0.1, 0.5)), "image-005")

        assert report.final_score == pytest.approx(0.62)
        assert report.calibrated_score == pytest.approx(0.5 + 0.12 * (1 - 0.35 * 0.76))
        assert report.trust_score == pytest.approx(0.24)
        assert report.disagreement_type == DisagreementType.SEVERE

        data = report.to_dict()
        assert data['disagreement_type'] == 'severe'
        assert data['uncertainty']['calibration']['recommendation'] == 'low_confidence'

    def test_conflicting_report(self):
        """Test a conflicting ensemble is flagged in the report."""
        report = run_analysis(ensemble((0.95, 0.05, 0.5)), "image-006")

        assert report.disagreement_type == DisagreementType.CONFLICT
        assert report.final_score == pytest.approx(0.635)
