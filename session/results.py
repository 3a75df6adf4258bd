"""Session summary types."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from inference.prediction import readable_label


@dataclass(frozen=True)
class PostureBreakdown:
    """Time attributed to one posture label."""

    label: str
    duration_seconds: int
    percentage: float

    @property
    def display_label(self) -> str:
        return readable_label(self.label)


@dataclass(frozen=True)
class SessionResult:
    """
    Duration breakdown of a finished session.

    Durations are whole seconds and add up to ``total_duration`` whenever
    the breakdown is non-empty.
    """

    total_duration: int
    breakdown: List[PostureBreakdown] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_duration': self.total_duration,
            'breakdown': [
                {
                    'label': item.label,
                    'display_label': item.display_label,
                    'duration_seconds': item.duration_seconds,
                    'percentage': item.percentage,
                }
                for item in self.breakdown
            ],
        }

    def format_report(self) -> str:
        """
        Format the session as a printable summary.

        Returns:
            Formatted summary report string
        """
        minutes, seconds = divmod(self.total_duration, 60)

        report = []
        report.append("=" * 48)
        report.append("Posture Session Summary")
        report.append("=" * 48)
        report.append(f"Total duration: {minutes}m {seconds:02d}s")
        report.append("")

        if not self.breakdown:
            report.append("No posture predictions were recorded.")
        for item in self.breakdown:
            report.append(
                f"  {item.display_label:20} : {item.duration_seconds:5d}s "
                f"({item.percentage:5.1f}%)"
            )

        return "\n".join(report)
