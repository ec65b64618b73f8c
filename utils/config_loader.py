"""Configuration management utilities."""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


# Built-in defaults, mirrored by configs/engine.yaml.
DEFAULT_CONFIG: Dict[str, Any] = {
    'fusion': {
        'base_weights': {
            'classifier': 0.6,
            'vision_language': 0.3,
            'frequency': 0.1,
        },
        'significant_shift': 0.05,
    },
    'uncertainty': {
        'confidence_level': 0.95,
        'bound_sigma': 2.0,
        'outlier_sigma': 2.0,
        'epistemic': {
            'range_weight': 0.7,
            'spread_weight': 0.3,
        },
        'aleatoric_scale': 0.5,
        'reliability': {
            'variance_penalty_scale': 4.0,
            'variance_penalty_cap': 0.4,
            'outlier_penalty': 0.1,
            'boundary_penalty_scale': 0.3,
            'agreement_variance': 0.02,
            'disagreement_variance': 0.1,
            'thresholds': {
                'high': 0.8,
                'moderate': 0.6,
                'low': 0.4,
            },
        },
        'recommendation': {
            'ai_threshold': 0.7,
            'real_threshold': 0.3,
        },
        'calibration': {
            'disagreement_lambda': 0.35,
            'neutral_point': 0.5,
            'conflict_margin': 0.4,
            'thresholds': {
                'mild': 0.15,
                'moderate': 0.25,
                'severe': 0.35,
            },
            'trust_thresholds': {
                'low': 0.5,
                'high': 0.75,
            },
        },
    },
    'explainability': {
        'grid_size': 5,
        'influence_radius': 30.0,
        'baseline_weight': 0.3,
        'regional_weight': 0.7,
        'score_bias_weight': 0.2,
        'num_hotspots': 3,
    },
    'pipeline': {
        'parallel': False,
    },
}


# Name-keyed tables; an override replaces the whole table.
REPLACED_SECTIONS = frozenset({
    'fusion.base_weights',
})


def load_config(config_path=None) -> Dict[str, Any]:
    """
    Load configuration from YAML file, layered over the built-in defaults.

    Args:
        config_path: Path to YAML configuration file (str or Path), or None
            for the defaults alone

    Returns:
        Dictionary containing configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is malformed
    """
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.info(f"Loading configuration from {config_path}")

    with open(config_path, 'r') as f:
        loaded = yaml.safe_load(f) or {}

    logger.debug(f"Loaded config keys: {list(loaded.keys())}")

    return merge_config(DEFAULT_CONFIG, loaded)


def merge_config(
    base: Dict[str, Any],
    override: Dict[str, Any],
    _path: str = ''
) -> Dict[str, Any]:
    """
    Recursively merge two config dicts without mutating either.

    Nested dicts are merged key by key; any other override value replaces
    the base value outright. Sections listed in REPLACED_SECTIONS are
    name-keyed tables and are always replaced as a whole.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        path = f"{_path}.{key}" if _path else str(key)
        if (isinstance(value, dict) and isinstance(merged.get(key), dict)
                and path not in REPLACED_SECTIONS):
            merged[key] = merge_config(merged[key], value, path)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def get_nested_config(config: Optional[Dict[str, Any]], key_path: str, default: Any = None) -> Any:
    """
    Get nested configuration value using dot notation.

    Example:
        get_nested_config(config, 'uncertainty.reliability.thresholds.high', default=0.8)

    Args:
        config: Configuration dictionary
        key_path: Dot-separated path to value
        default: Default value if path not found

    Returns:
        Configuration value or default
    """
    keys = key_path.split('.')
    value = config or {}

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value
