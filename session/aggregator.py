"""Label history and duration apportionment for a posture session."""

import logging
from collections import Counter
from typing import List

from inference.prediction import PosturePrediction

from .results import PostureBreakdown, SessionResult

logger = logging.getLogger(__name__)


def apportion_seconds(counts: Counter, total_seconds: int) -> List[PostureBreakdown]:
    """
    Split whole seconds between labels in proportion to their counts.

    Largest-remainder (Hamilton) method: every label gets the floor of its
    share, then the leftover seconds go one each to the labels with the
    largest fractional remainders. Remainder ties keep first-seen order.

    Args:
        counts: Occurrences per label, in first-seen order
        total_seconds: Seconds to distribute

    Returns:
        Breakdown sorted by descending duration; durations sum to
        ``total_seconds``
    """
    event_count = sum(counts.values())

    allocations = []
    for label, occurrences in counts.items():
        # Integer division keeps floor and remainder exact
        base, remainder = divmod(occurrences * total_seconds, event_count)
        allocations.append([label, base, remainder, occurrences])

    leftover = total_seconds - sum(allocation[1] for allocation in allocations)
    for allocation in sorted(allocations, key=lambda item: -item[2]):
        if leftover <= 0:
            break
        allocation[1] += 1
        leftover -= 1

    breakdown = [
        PostureBreakdown(
            label=label,
            duration_seconds=duration,
            percentage=100.0 * occurrences / event_count
        )
        for label, duration, _, occurrences in allocations
    ]
    return sorted(breakdown, key=lambda item: -item.duration_seconds)


class SessionAggregator:
    """Append-only history of the predictions made during one session."""

    def __init__(self):
        self._history: List[PosturePrediction] = []

    def __len__(self) -> int:
        return len(self._history)

    @property
    def history(self) -> List[PosturePrediction]:
        return list(self._history)

    def append(self, prediction: PosturePrediction) -> bool:
        """Add a prediction; "collecting" placeholders are not recorded."""
        if prediction.is_collecting:
            return False
        self._history.append(prediction)
        return True

    def reset(self):
        self._history.clear()

    def summarize(self, total_duration_seconds: int) -> SessionResult:
        """
        Build the session result.

        Args:
            total_duration_seconds: Session length in whole seconds

        Returns:
            Result with an empty breakdown when no prediction was recorded
            or the session lasted zero seconds
        """
        total_duration_seconds = int(total_duration_seconds)
        if not self._history or total_duration_seconds <= 0:
            return SessionResult(max(total_duration_seconds, 0), [])

        counts = Counter(prediction.label for prediction in self._history)
        breakdown = apportion_seconds(counts, total_duration_seconds)

        logger.info(
            f"Session summary: {total_duration_seconds}s over "
            f"{len(self._history)} predictions, {len(breakdown)} labels"
        )
        return SessionResult(total_duration_seconds, breakdown)
