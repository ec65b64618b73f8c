#!/usr/bin/env python3
"""
Main orchestration script for Authenticity Scope.

This script runs the analysis core on detector outputs gathered elsewhere:
1. Load detector observations (JSON list) and configuration (YAML)
2. Fuse detector scores with failure-aware weights
3. Quantify ensemble uncertainty and reliability
4. Generate regions, attention map, findings and summary
5. Write the assembled report as JSON

Usage:
    python main.py --detectors observations.json --content-file image.png --output report.json

Observation JSON format:
    [
        {"name": "classifier", "score": 0.82, "weight": 0.6, "status": "success"},
        {"name": "vision_language", "score": 0.75, "weight": 0.3, "status": "fallback"},
        {"name": "frequency", "score": 0.5, "weight": 0.1, "status": "error",
         "error_message": "timeout"}
    ]
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from core.data_models import DetectorObservation, RegionHint
from core.exceptions import AuthenticityEngineError
from reporting import run_analysis, save_report_json, get_recommendation_text
from utils.config_loader import load_config

logger = logging.getLogger(__name__)


def configure_logging(log_file: Optional[str] = None, verbose: bool = False):
    """Configure root logging: stderr (stdout carries the report) plus an optional log file."""
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def load_observations(path) -> List[DetectorObservation]:
    """
    Load detector observations from a JSON file.

    Accepts snake_case or camelCase keys for the optional fields.
    """
    with open(path, 'r', encoding='utf-8') as f:
        raw = json.load(f)

    observations = []
    for item in raw:
        observations.append(DetectorObservation(
            name=item['name'],
            score=item['score'],
            weight=item.get('weight', 0.0),
            status=item.get('status', 'success'),
            processing_time_ms=item.get('processing_time_ms', item.get('processingTimeMs', 0.0)),
            error_message=item.get('error_message', item.get('errorMessage')),
        ))

    logger.info(f"Loaded {len(observations)} detector observations from {path}")
    return observations


def load_region_hints(path) -> List[RegionHint]:
    with open(path, 'r', encoding='utf-8') as f:
        raw = json.load(f)
    return [RegionHint(x=h['x'], y=h['y'], score=h['score']) for h in raw]


def run_pipeline(args: argparse.Namespace, config: Dict) -> int:
    """
    Execute the analysis and write or print the report.

    Returns:
        Process exit code
    """
    logger.info("=" * 80)
    logger.info("AUTHENTICITY SCOPE - Detector Fusion & Explanation")
    logger.info("=" * 80)

    observations = load_observations(args.detectors)

    if args.content_file:
        content_id = Path(args.content_file).read_bytes()
    else:
        content_id = args.content_id

    hints = load_region_hints(args.hints) if args.hints else None

    try:
        report = run_analysis(
            observations,
            content_id,
            config=config,
            region_hints=hints,
            parallel=True if args.parallel else None,
        )
    except AuthenticityEngineError as e:
        logger.error(f"Analysis failed: {e}")
        return 2

    rec = get_recommendation_text(report.recommendation)
    logger.info(f"Verdict: {report.verdict.value} ({report.final_score * 100:.1f}%)")
    logger.info(
        f"95% interval: [{report.confidence_lower:.3f}, {report.confidence_upper:.3f}], "
        f"reliability: {report.reliability_level.value}"
    )
    logger.info(
        f"Calibrated: {report.calibrated_score * 100:.1f}% "
        f"(trust {report.trust_score * 100:.0f}%, disagreement {report.disagreement_type.value})"
    )
    logger.info(f"Recommendation: {rec['title']}")

    if args.output:
        save_report_json(report, args.output)
    else:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))

    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Fuse image-authenticity detector scores into an explained verdict"
    )
    parser.add_argument('--detectors', required=True, help="JSON file of detector observations")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--content-id', help="Image content identifier (e.g. content hash)")
    source.add_argument('--content-file', help="Image file whose bytes seed the explanation")
    parser.add_argument('--config', default=None, help="YAML configuration file")
    parser.add_argument('--hints', default=None, help="Optional JSON file of region hints")
    parser.add_argument('--output', default=None, help="Write report JSON here instead of stdout")
    parser.add_argument('--parallel', action='store_true', help="Run uncertainty and explanation concurrently")
    parser.add_argument('--log-file', default=None, help="Also write logs to this file")
    parser.add_argument('--verbose', action='store_true', help="Debug logging")

    args = parser.parse_args()

    configure_logging(args.log_file, args.verbose)
    config = load_config(args.config)

    sys.exit(run_pipeline(args, config))


if __name__ == '__main__':
    main()
