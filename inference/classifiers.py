"""Classifier adapters producing raw probability outputs."""

import logging
from pathlib import Path
from typing import Any, Callable, Union

import numpy as np
import torch

logger = logging.getLogger(__name__)

# Any callable taking a (1, n_features) float32 array
Classifier = Callable[[np.ndarray], Any]


class TorchScriptClassifier:
    """Run a TorchScript posture model exported by training."""

    def __init__(self, model_path: Union[str, Path], apply_softmax: bool = False):
        """
        Initialize classifier.

        Args:
            model_path: Path to the ``torch.jit`` model file
            apply_softmax: Whether to turn logits into probabilities
        """
        model_path = Path(model_path)
        if not model_path.exists():
            raise FileNotFoundError(f"Model not found: {model_path}")

        self.model = torch.jit.load(str(model_path), map_location='cpu')
        self.model.eval()
        self.apply_softmax = apply_softmax

        logger.info(f"Loaded TorchScript classifier from {model_path}")

    def __call__(self, features: np.ndarray) -> Any:
        """
        Score one feature vector.

        Args:
            features: Array of shape (1, n_features) or (n_features,)

        Returns:
            Model output; tensors are returned as numpy arrays, dictionaries
            of tensors as dictionaries of numpy arrays
        """
        input_tensor = torch.from_numpy(
            np.asarray(features, dtype=np.float32).reshape(1, -1)
        )

        with torch.no_grad():
            output = self.model(input_tensor)

        if isinstance(output, dict):
            return {key: self._to_numpy(value) for key, value in output.items()}
        if isinstance(output, (list, tuple)):
            return [self._to_numpy(value) for value in output]
        return self._to_numpy(output)

    def _to_numpy(self, value: Any) -> Any:
        if not isinstance(value, torch.Tensor):
            return value
        if self.apply_softmax and value.is_floating_point():
            value = torch.softmax(value, dim=-1)
        return value.cpu().numpy()
