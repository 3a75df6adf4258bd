"""Decision policy turning class probabilities into a posture prediction."""

import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

from .prediction import UNCLASSIFIED, PosturePrediction

logger = logging.getLogger(__name__)

CONFIDENCE_THRESHOLD = 0.3


class DecisionPolicy:
    """Argmax with a fixed confidence floor."""

    def __init__(self, class_labels: List[str],
                 confidence_threshold: float = CONFIDENCE_THRESHOLD):
        """
        Initialize decision policy.

        Args:
            class_labels: Ordered class labels of the classifier output
            confidence_threshold: Confidence below which the label is withheld
        """
        self.class_labels = list(class_labels)
        self.confidence_threshold = confidence_threshold

    def rank(self, probabilities: Sequence[float]) -> Tuple[str, float]:
        """
        Pick the most probable label.

        Ties go to the lowest index and NaN never wins.

        Args:
            probabilities: Scores aligned with ``class_labels``

        Returns:
            Tuple of (label, confidence) with confidence clipped at 0
        """
        if len(probabilities) == 0:
            return UNCLASSIFIED, 0.0

        max_index = 0
        max_value = -math.inf
        for index, value in enumerate(probabilities):
            value = float(value)
            if value > max_value:
                max_value = value
                max_index = index

        label = self.class_labels[max_index] if max_index < len(self.class_labels) else UNCLASSIFIED
        # Confidence is carried at float32 precision like the classifier output
        confidence = float(np.float32(max(0.0, max_value)))
        return label, confidence

    def decide(self, probabilities: Sequence[float]) -> PosturePrediction:
        """
        Apply the confidence threshold to the ranked label.

        A confidence under the threshold turns the label into
        "unclassified" but keeps the confidence value.
        """
        label, confidence = self.rank(probabilities)
        if confidence < self.confidence_threshold:
            label = UNCLASSIFIED

        logger.debug(f"Prediction label={label} confidence={confidence:.3f}")
        return PosturePrediction(label, confidence)
