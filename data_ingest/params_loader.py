"""Loader for the feature bundle exported by the training notebook."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import numpy as np

from preprocessing.pca import MotionPcaParams
from preprocessing.scaling import FeatureRange

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when the feature bundle is missing or malformed."""


@dataclass(frozen=True)
class FeatureConfig:
    """Immutable preprocessing parameters shared with the training pipeline."""

    per_feature_min_max: Dict[str, FeatureRange]
    window_size: int
    interval: float
    trim_seconds: float
    sheets_to_load: List[str]
    class_labels: List[str]
    feature_columns: List[str]
    orientation_features: List[str] = field(default_factory=list)
    motion_pca: Optional[MotionPcaParams] = None


def _require(raw: Mapping[str, Any], key: str) -> Any:
    if key not in raw or raw[key] is None:
        raise ConfigurationError(f"Missing required field '{key}'")
    return raw[key]


def _string_list(raw: Mapping[str, Any], key: str, required: bool = True) -> List[str]:
    value = _require(raw, key) if required else raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigurationError(f"Field '{key}' must be a list of strings")
    return list(value)


def _number(raw: Mapping[str, Any], key: str) -> float:
    value = _require(raw, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"Field '{key}' must be a number, got {value!r}")
    return float(value)


def _parse_ranges(raw: Any) -> Dict[str, FeatureRange]:
    if not isinstance(raw, dict):
        raise ConfigurationError("Field 'per_feature_min_max' must be an object")

    ranges = {}
    for key, bounds in raw.items():
        try:
            ranges[key] = FeatureRange(min=float(bounds['min']), max=float(bounds['max']))
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid range for '{key}': {bounds!r}") from e
        if ranges[key].min > ranges[key].max:
            raise ConfigurationError(
                f"Range for '{key}' has min {ranges[key].min} above max {ranges[key].max}"
            )
    return ranges


def _parse_motion_pca(raw: Any) -> MotionPcaParams:
    if not isinstance(raw, dict):
        raise ConfigurationError("Field 'pca.motion_pca' must be an object")

    columns = _string_list(raw, 'columns')
    n_components = int(_number(raw, 'n_components'))
    prefix = _require(raw, 'prefix')
    if not isinstance(prefix, str):
        raise ConfigurationError("Field 'pca.motion_pca.prefix' must be a string")

    try:
        components = np.asarray(_require(raw, 'components'), dtype=float)
        mean = np.asarray(_require(raw, 'mean'), dtype=float)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Malformed PCA matrices: {e}") from e

    if components.shape != (n_components, len(columns)):
        raise ConfigurationError(
            f"PCA components shape {components.shape} does not match "
            f"({n_components}, {len(columns)})"
        )
    if mean.shape != (len(columns),):
        raise ConfigurationError(
            f"PCA mean length {mean.shape} does not match {len(columns)} columns"
        )

    return MotionPcaParams(
        columns=columns,
        components=components,
        mean=mean,
        prefix=prefix,
        n_components=n_components,
    )


def parse_feature_config(raw: Mapping[str, Any]) -> FeatureConfig:
    """
    Validate a decoded feature bundle.

    Args:
        raw: Decoded JSON object

    Returns:
        Immutable feature configuration

    Raises:
        ConfigurationError: If a required field is absent or malformed
    """
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Feature bundle must be a JSON object")

    window_size = _number(raw, 'window_size')
    if window_size < 1 or window_size != int(window_size):
        raise ConfigurationError(f"window_size must be a positive integer, got {window_size}")

    interval = _number(raw, 'interval')
    if interval <= 0:
        raise ConfigurationError(f"interval must be positive, got {interval}")

    motion_pca = None
    pca = raw.get('pca')
    if pca is not None:
        if not isinstance(pca, dict):
            raise ConfigurationError("Field 'pca' must be an object")
        if pca.get('motion_pca') is not None:
            motion_pca = _parse_motion_pca(pca['motion_pca'])

    return FeatureConfig(
        per_feature_min_max=_parse_ranges(_require(raw, 'per_feature_min_max')),
        window_size=int(window_size),
        interval=interval,
        trim_seconds=_number(raw, 'trim_seconds'),
        sheets_to_load=_string_list(raw, 'sheets_to_load'),
        class_labels=_string_list(raw, 'class_labels'),
        feature_columns=_string_list(raw, 'feature_columns'),
        orientation_features=_string_list(raw, 'orientation_features', required=False),
        motion_pca=motion_pca,
    )


def load_feature_config(path: Union[str, Path]) -> FeatureConfig:
    """
    Load the feature bundle from disk.

    Args:
        path: Path to the exported ``model_params.json``

    Returns:
        Immutable feature configuration

    Raises:
        FileNotFoundError: If the bundle does not exist
        ConfigurationError: If the bundle is not valid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Feature bundle not found: {path}")

    with open(path, 'r') as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Feature bundle {path} is not valid JSON: {e}") from e

    config = parse_feature_config(raw)
    logger.info(
        f"Loaded feature bundle from {path}: {len(config.feature_columns)} features, "
        f"{len(config.class_labels)} classes, window={config.window_size}, "
        f"interval={config.interval}s"
    )
    return config
