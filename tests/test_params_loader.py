"""Tests for feature bundle and settings loading."""

import copy
import json
from pathlib import Path

import numpy as np
import pytest

from data_ingest import (ConfigurationError, load_feature_config, load_settings,
                         parse_feature_config)
from preprocessing import FeatureRange

CONFIG_DIR = Path(__file__).parent.parent / "configs"

MINIMAL_BUNDLE = {
    "window_size": 3,
    "interval": 0.5,
    "trim_seconds": 1.0,
    "sheets_to_load": ["Orientation"],
    "class_labels": ["slouching", "straight"],
    "feature_columns": ["df_orientation_bucketed_Pitch_deg_mean"],
    "per_feature_min_max": {
        "df_orientation_bucketed.Pitch (°)": {"min": -90, "max": 90},
    },
}


class TestParseFeatureConfig:
    """Test validation of decoded feature bundles."""

    def test_minimal_bundle(self):
        """Test parsing of a bundle without optional fields."""
        config = parse_feature_config(MINIMAL_BUNDLE)

        assert config.window_size == 3
        assert config.interval == 0.5
        assert config.orientation_features == []
        assert config.motion_pca is None
        assert config.per_feature_min_max["df_orientation_bucketed.Pitch (°)"] == \
            FeatureRange(-90.0, 90.0)

    @pytest.mark.parametrize("field", ["window_size", "interval", "trim_seconds",
                                       "sheets_to_load", "class_labels",
                                       "feature_columns", "per_feature_min_max"])
    def test_missing_required_field(self, field):
        """Test that every required field is enforced."""
        raw = copy.deepcopy(MINIMAL_BUNDLE)
        del raw[field]
        with pytest.raises(ConfigurationError, match=field):
            parse_feature_config(raw)

    @pytest.mark.parametrize("field,value", [
        ("window_size", 0),
        ("window_size", 2.5),
        ("interval", 0.0),
        ("interval", "0.2"),
        ("class_labels", "straight"),
        ("per_feature_min_max", {"a.b": {"min": 0}}),
    ])
    def test_malformed_field(self, field, value):
        """Test rejection of malformed values."""
        raw = copy.deepcopy(MINIMAL_BUNDLE)
        raw[field] = value
        with pytest.raises(ConfigurationError):
            parse_feature_config(raw)

    def test_inverted_range(self):
        """Test that a range with min above max is rejected."""
        raw = copy.deepcopy(MINIMAL_BUNDLE)
        raw["per_feature_min_max"] = {"df_gravity_bucketed.x": {"min": 5, "max": -5}}
        with pytest.raises(ConfigurationError, match="df_gravity_bucketed.x"):
            parse_feature_config(raw)

    def test_degenerate_range_accepted(self):
        """Test that a zero-span range is a valid bundle entry."""
        raw = copy.deepcopy(MINIMAL_BUNDLE)
        raw["per_feature_min_max"] = {"df_gravity_bucketed.x": {"min": 9.8, "max": 9.8}}
        ranges = parse_feature_config(raw).per_feature_min_max
        assert ranges["df_gravity_bucketed.x"] == FeatureRange(9.8, 9.8)

    def test_motion_pca(self):
        """Test parsing of the PCA bundle."""
        raw = copy.deepcopy(MINIMAL_BUNDLE)
        raw["pca"] = {"motion_pca": {
            "prefix": "motion",
            "n_components": 1,
            "columns": ["a", "b"],
            "mean": [0.5, 0.5],
            "components": [[1.0, -1.0]],
        }}

        params = parse_feature_config(raw).motion_pca

        assert params.output_columns == ["motion_pc1"]
        np.testing.assert_array_equal(params.components, [[1.0, -1.0]])

    def test_motion_pca_shape_mismatch(self):
        """Test that inconsistent PCA shapes fail fast."""
        raw = copy.deepcopy(MINIMAL_BUNDLE)
        raw["pca"] = {"motion_pca": {
            "prefix": "motion",
            "n_components": 2,
            "columns": ["a", "b"],
            "mean": [0.5, 0.5],
            "components": [[1.0, -1.0]],
        }}
        with pytest.raises(ConfigurationError):
            parse_feature_config(raw)


class TestLoadFeatureConfig:
    """Test reading bundles from disk."""

    def test_load(self, tmp_path):
        """Test loading a bundle file."""
        path = tmp_path / "model_params.json"
        path.write_text(json.dumps(MINIMAL_BUNDLE), encoding="utf-8")

        config = load_feature_config(path)

        assert config.class_labels == ["slouching", "straight"]

    def test_missing_file(self, tmp_path):
        """Test that a missing bundle raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_feature_config(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        """Test that broken JSON is a configuration error."""
        path = tmp_path / "model_params.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_feature_config(path)

    def test_shipped_bundle(self):
        """Test that the sample bundle in configs/ is valid."""
        config = load_feature_config(CONFIG_DIR / "model_params.json")

        assert len(config.feature_columns) == 10
        assert config.motion_pca.components.shape == (3, 9)


class TestLoadSettings:
    """Test OmegaConf runtime settings."""

    def test_defaults(self):
        """Test defaults without a file."""
        settings = load_settings()
        assert settings.pipeline.cycle_period_seconds == 1.0
        assert settings.pipeline.confidence_threshold == 0.3
        assert settings.classifier.model_path is None

    def test_file_and_overrides(self, tmp_path):
        """Test merging of a partial file and dotlist overrides."""
        path = tmp_path / "pipeline.yaml"
        path.write_text("pipeline:\n  cycle_period_seconds: 0.5\n", encoding="utf-8")

        settings = load_settings(path, ["classifier.apply_softmax=true"])

        assert settings.pipeline.cycle_period_seconds == 0.5
        assert settings.pipeline.buffer_retention_seconds == 60.0
        assert settings.classifier.apply_softmax is True

    def test_shipped_settings(self):
        """Test that configs/pipeline.yaml loads."""
        settings = load_settings(CONFIG_DIR / "pipeline.yaml")
        assert settings.params_path == "configs/model_params.json"

    def test_missing_file(self, tmp_path):
        """Test that a missing settings file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "absent.yaml")
