"""Posture session history and duration summaries."""

from .aggregator import SessionAggregator, apportion_seconds
from .results import PostureBreakdown, SessionResult
from .tracker import SessionTracker

__all__ = ["SessionAggregator", "apportion_seconds", "PostureBreakdown",
           "SessionResult", "SessionTracker"]
