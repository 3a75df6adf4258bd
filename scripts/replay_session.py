#!/usr/bin/env python
"""Replay a recorded session through the streaming posture pipeline."""

import argparse
import json
import sys
from pathlib import Path

from tqdm import tqdm

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

from data_ingest import RecordingReader, load_feature_config, load_settings
from inference import create_pipeline
from session import SessionTracker

import logging
logger = logging.getLogger(__name__)

NANOS_PER_SECOND = 1_000_000_000


class ReplayClock:
    """Clock that follows the timestamps of the replayed events."""

    def __init__(self, start_ns: int = 0):
        self.now_ns = start_ns

    def __call__(self) -> float:
        return self.now_ns / NANOS_PER_SECOND


def replay(tracker: SessionTracker, reader: RecordingReader, clock: ReplayClock,
           cycle_period: float, show_progress: bool = True):
    """
    Feed recorded events to the pipeline and run a cycle every ``cycle_period``
    seconds of recording time.

    Returns:
        The session result
    """
    pipeline = tracker.pipeline
    period_ns = int(round(cycle_period * NANOS_PER_SECOND))

    clock.now_ns = reader.start_ns
    tracker.start(schedule=False)
    next_cycle_ns = None

    events = reader.iter_events()
    if show_progress:
        events = tqdm(events, total=reader.count_events(), desc='Replaying')

    for event in events:
        if next_cycle_ns is None:
            next_cycle_ns = event.timestamp_ns + period_ns
        while event.timestamp_ns >= next_cycle_ns:
            clock.now_ns = next_cycle_ns
            pipeline.run_cycle()
            next_cycle_ns += period_ns
        clock.now_ns = event.timestamp_ns
        pipeline.on_sensor_event(event)

    # The session ends with the last recorded reading
    return tracker.stop()


def main():
    parser = argparse.ArgumentParser(description='Replay a recorded posture session')
    parser.add_argument('recording', type=str,
                       help='Directory with the exported sensor CSV sheets')
    parser.add_argument('--settings', type=str, default=None,
                       help='Path to pipeline settings YAML')
    parser.add_argument('--params', type=str, default=None,
                       help='Feature bundle JSON (overrides settings.params_path)')
    parser.add_argument('--model', type=str, default=None,
                       help='TorchScript classifier (overrides settings.classifier.model_path)')
    parser.add_argument('--output', type=str, default=None,
                       help='Write the session summary JSON here')
    parser.add_argument('--no-progress', action='store_true',
                       help='Disable the progress bar')
    parser.add_argument('overrides', nargs='*', default=[],
                       help='Settings overrides as key=value')
    args = parser.parse_args()

    overrides = list(args.overrides)
    if args.params:
        overrides.append(f'params_path={args.params}')
    if args.model:
        overrides.append(f'classifier.model_path={args.model}')
    settings = load_settings(args.settings, overrides)

    logging.basicConfig(level=getattr(logging, str(settings.logging.level).upper(), logging.INFO))

    reader = RecordingReader(Path(args.recording))
    is_valid, issues = reader.validate_recording()
    if not is_valid:
        for issue in issues:
            logger.warning(issue)

    feature_config = load_feature_config(settings.params_path)
    pipeline = create_pipeline(settings, feature_config=feature_config)

    clock = ReplayClock(reader.start_ns)
    tracker = SessionTracker(pipeline, clock=clock)

    logger.info("=" * 60)
    logger.info("Session Replay")
    logger.info("=" * 60)
    logger.info(f"Recording: {args.recording}")
    logger.info(f"Labels: {feature_config.class_labels}")

    result = replay(
        tracker, reader, clock,
        cycle_period=settings.pipeline.cycle_period_seconds,
        show_progress=not args.no_progress
    )

    print(result.format_report())

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(result.to_dict(), f, indent=2)
        logger.info(f"Summary saved to {output_path}")


if __name__ == '__main__':
    main()
