"""Posture prediction emitted once per successful processing cycle."""

from dataclasses import dataclass

COLLECTING = "collecting"
UNCLASSIFIED = "unclassified"


def readable_label(label: str) -> str:
    """Human-readable form of a class label ("leaning_back" -> "Leaning back")."""
    if label == UNCLASSIFIED:
        return "Unclassified"
    text = label.replace('_', ' ')
    return text[:1].upper() + text[1:]


@dataclass(frozen=True)
class PosturePrediction:
    """Predicted label and the classifier confidence behind it."""

    label: str
    confidence: float

    @property
    def display_label(self) -> str:
        return readable_label(self.label)

    @property
    def is_collecting(self) -> bool:
        return self.label == COLLECTING

    @classmethod
    def collecting(cls) -> 'PosturePrediction':
        return cls(COLLECTING, 0.0)
