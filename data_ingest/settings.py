"""Runtime settings for the streaming pipeline."""

import logging
from pathlib import Path
from typing import Optional, Union

from omegaconf import DictConfig, OmegaConf

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    'params_path': 'configs/model_params.json',
    'pipeline': {
        'cycle_period_seconds': 1.0,
        'buffer_retention_seconds': 60.0,
        'confidence_threshold': 0.3,
    },
    'classifier': {
        'model_path': None,
        'apply_softmax': False,
    },
    'logging': {
        'level': 'INFO',
    },
}


def load_settings(path: Optional[Union[str, Path]] = None,
                  overrides: Optional[list] = None) -> DictConfig:
    """
    Load pipeline settings.

    Values from the YAML file and the dotlist overrides are merged over
    the defaults, so a partial file is enough.

    Args:
        path: Optional YAML settings file
        overrides: Optional dotlist overrides (e.g. ["pipeline.cycle_period_seconds=0.5"])

    Returns:
        Merged settings
    """
    config = OmegaConf.create(DEFAULT_SETTINGS)

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")
        config = OmegaConf.merge(config, OmegaConf.load(path))
        logger.info(f"Loaded settings from {path}")

    if overrides:
        config = OmegaConf.merge(config, OmegaConf.from_dotlist(overrides))

    return config
