"""Configuration loading and sensor data sources."""

from .events import SensorEvent, SensorKind
from .params_loader import (ConfigurationError, FeatureConfig,
                            load_feature_config, parse_feature_config)
from .recording_reader import RecordingReader
from .settings import load_settings

__all__ = ["SensorEvent", "SensorKind", "ConfigurationError", "FeatureConfig",
           "load_feature_config", "parse_feature_config", "RecordingReader",
           "load_settings"]
