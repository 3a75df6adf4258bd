"""Decoding of the shapes a classifier may return its probabilities in."""

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Union

import numpy as np

logger = logging.getLogger(__name__)


class ClassifierOutputError(ValueError):
    """Raised when no probability vector can be recovered from a classifier result."""


@dataclass(frozen=True)
class FlatArray:
    """Probabilities as one ordered sequence."""

    values: Sequence[float]

    def to_vector(self, class_labels: List[str]) -> np.ndarray:
        return np.asarray(self.values, dtype=np.float32).reshape(-1)


@dataclass(frozen=True)
class NestedArray:
    """Probabilities as the first row of a batch (e.g. shape (1, n_classes))."""

    rows: Sequence[Sequence[float]]

    def to_vector(self, class_labels: List[str]) -> np.ndarray:
        return np.asarray(self.rows[0], dtype=np.float32).reshape(-1)


@dataclass(frozen=True)
class LabelMap:
    """Probabilities keyed by label name or by positional index."""

    scores: Mapping[Any, Any]

    def to_vector(self, class_labels: List[str]) -> np.ndarray:
        vector = np.zeros(len(class_labels), dtype=np.float32)
        for index, label in enumerate(class_labels):
            if label in self.scores:
                value = self.scores[label]
            elif index in self.scores:
                value = self.scores[index]
            else:
                continue
            try:
                vector[index] = float(value)
            except (TypeError, ValueError):
                vector[index] = 0.0
        return vector


ClassifierOutput = Union[FlatArray, NestedArray, LabelMap]


def _as_array(raw: Any) -> Optional[np.ndarray]:
    # torch tensors are moved to numpy
    if hasattr(raw, 'detach'):
        raw = raw.detach().cpu().numpy()
    if isinstance(raw, np.ndarray):
        return raw
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, np.number)) and not isinstance(value, bool)


def decode_classifier_output(raw: Any) -> ClassifierOutput:
    """
    Classify a raw classifier result into one of the supported shapes.

    Accepted shapes:
        - flat numeric sequence or 1-D array -> FlatArray
        - 2-D array or sequence whose first item is a numeric sequence -> NestedArray
        - mapping of label/index to score -> LabelMap
        - a sequence of candidate outputs (e.g. [label_tensor, probabilities]),
          searched for the first decodable entry

    Args:
        raw: Result returned by the classifier

    Returns:
        Decoded output variant

    Raises:
        ClassifierOutputError: If no shape matches
    """
    decoded = _decode(raw)
    if decoded is None:
        raise ClassifierOutputError(
            f"Unable to parse classifier output of type {type(raw).__name__}"
        )
    return decoded


def _decode(raw: Any) -> Optional[ClassifierOutput]:
    if raw is None:
        return None

    if isinstance(raw, Mapping):
        if all(_is_number(value) for value in raw.values()):
            return LabelMap(dict(raw))
        # Named model outputs, e.g. {"probabilities": array}
        return _first_decodable(raw.values())

    array = _as_array(raw)
    if array is not None:
        if array.dtype.kind == 'O':
            return _decode(array.tolist())
        # Integer arrays are predicted class ids, not scores
        if array.dtype.kind != 'f':
            return None
        if array.ndim <= 1:
            return FlatArray(array.reshape(-1).tolist())
        if array.ndim == 2 and array.shape[0] >= 1:
            return NestedArray(array.tolist())
        return None

    if isinstance(raw, (list, tuple)):
        if all(_is_number(item) for item in raw):
            return FlatArray(list(raw))
        first = raw[0]
        if isinstance(first, (list, tuple)) and first and all(_is_number(item) for item in first):
            return NestedArray([list(row) for row in raw])
        # Multi-output results: take the first entry that decodes
        return _first_decodable(raw)

    return None


def _first_decodable(candidates) -> Optional[ClassifierOutput]:
    for candidate in candidates:
        decoded = _decode(candidate)
        if decoded is not None:
            return decoded
    return None


def to_probability_vector(raw: Any, class_labels: List[str]) -> np.ndarray:
    """Decode a classifier result and normalize it to one ordered vector."""
    decoded = decode_classifier_output(raw)
    vector = decoded.to_vector(class_labels)
    if len(vector) != len(class_labels):
        logger.debug(
            f"Classifier returned {len(vector)} scores for {len(class_labels)} labels"
        )
    return vector
