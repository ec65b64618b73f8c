"""
Unit tests for configuration loading.
"""

import pytest # pyright: ignore[reportMissingImports]
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.data_models import DetectorObservation
from fusion import FusionEngine
from utils.config_loader import DEFAULT_CONFIG, load_config, merge_config, get_nested_config


class TestLoadConfig:
    """Test YAML loading over the defaults."""

    def test_defaults_are_copied(self):
        """Test the default config is returned as an independent copy."""
        config = load_config()
        config['fusion']['base_weights']['classifier'] = 0.0

        assert config != DEFAULT_CONFIG
        assert DEFAULT_CONFIG['fusion']['base_weights']['classifier'] == 0.6

    def test_shipped_config_matches_defaults(self):
        """Test configs/engine.yaml mirrors the built-in defaults."""
        path = Path(__file__).parent.parent / 'configs' / 'engine.yaml'
        assert load_config(path) == DEFAULT_CONFIG

    def test_partial_override(self, tmp_path):
        """Test a partial YAML file only replaces the keys it names."""
        path = tmp_path / 'override.yaml'
        path.write_text(
            "uncertainty:\n"
            "  confidence_level: 0.99\n"
            "pipeline:\n"
            "  parallel: true\n"
        )

        config = load_config(path)

        assert config['uncertainty']['confidence_level'] == 0.99
        assert config['uncertainty']['outlier_sigma'] == 2.0
        assert config['pipeline']['parallel'] is True
        assert config['fusion'] == DEFAULT_CONFIG['fusion']

    def test_empty_file(self, tmp_path):
        """Test an empty YAML file yields the defaults."""
        path = tmp_path / 'empty.yaml'
        path.write_text("")

        assert load_config(path) == DEFAULT_CONFIG

    def test_missing_file(self, tmp_path):
        """Test a missing file is reported."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'missing.yaml')

    def test_base_weights_replaced_whole(self, tmp_path):
        """Test a YAML weight table replaces the default table instead of merging."""
        path = tmp_path / 'weights.yaml'
        path.write_text(
            "fusion:\n"
            "  base_weights:\n"
            "    classifier: 0.5\n"
            "    vision_language: 0.5\n"
        )

        config = load_config(path)

        assert config['fusion']['base_weights'] == {'classifier': 0.5, 'vision_language': 0.5}
        assert config['fusion']['significant_shift'] == 0.05

    def test_replaced_weights_drive_fusion(self, tmp_path):
        """Test fusion applies exactly the configured weights."""
        path = tmp_path / 'weights.yaml'
        path.write_text(
            "fusion:\n"
            "  base_weights:\n"
            "    classifier: 0.5\n"
            "    vision_language: 0.5\n"
        )
        observations = [
            DetectorObservation('classifier', 1.0, 0.6),
            DetectorObservation('vision_language', 0.0, 0.3),
        ]

        result = FusionEngine(load_config(path)).fuse(observations)

        assert result.per_detector_weight['classifier'] == pytest.approx(0.5)
        assert result.per_detector_weight['vision_language'] == pytest.approx(0.5)
        assert result.final_score == pytest.approx(0.5)


class TestConfigHelpers:
    """Test merge and lookup helpers."""

    def test_merge_does_not_mutate(self):
        """Test neither input is modified."""
        base = {'a': {'b': 1, 'c': 2}}
        override = {'a': {'b': 5}}

        merged = merge_config(base, override)

        assert merged == {'a': {'b': 5, 'c': 2}}
        assert base == {'a': {'b': 1, 'c': 2}}
        assert override == {'a': {'b': 5}}

    def test_merge_replaces_weight_table(self):
        """Test the base weight table is swapped, other sections still merge."""
        merged = merge_config(DEFAULT_CONFIG, {'fusion': {'base_weights': {'alpha': 1.0}}})

        assert merged['fusion']['base_weights'] == {'alpha': 1.0}
        assert merged['uncertainty'] == DEFAULT_CONFIG['uncertainty']

    def test_nested_lookup(self):
        """Test dot-path lookup with a default."""
        config = load_config()

        assert get_nested_config(config, 'uncertainty.reliability.thresholds.high') == 0.8
        assert get_nested_config(config, 'uncertainty.missing.key', default='x') == 'x'
        assert get_nested_config(None, 'fusion', default={}) == {}
