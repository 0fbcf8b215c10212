"""Testing utilities for FeatureWalker consumers."""

from .fixtures import RecordingObserver, RecordingEventObserver, build_document

__all__ = ["RecordingObserver", "RecordingEventObserver", "build_document"]
