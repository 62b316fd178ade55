"""Application ports."""

from .event_publisher import EventPublisher, ScanEvent, ScanStage, SimpleEventPublisher

__all__ = [
    'EventPublisher',
    'ScanEvent',
    'ScanStage',
    'SimpleEventPublisher',
]
