"""
Observability sink.

Pipeline components report structured events (chunk start/end, parse
stage, error classification) to a sink passed in at construction.
"""

import logging
from typing import Any, Optional


class EventSink:
    """
    Receives structured pipeline events.

    Subclasses override emit(); the base class discards everything.
    """

    def emit(self, event: str, level: int = logging.INFO, **fields: Any) -> None:
        pass


class LoggingEventSink(EventSink):
    """
    Writes events to a stdlib logger.

    The event name and fields are rendered into the message and also
    attached to the record as `event` / `event_fields` for handlers
    that want the structured form.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("nullfake.events")

    def emit(self, event: str, level: int = logging.INFO, **fields: Any) -> None:
        rendered = " ".join(f"{key}={value}" for key, value in fields.items())
        self.logger.log(
            level,
            f"{event} {rendered}".rstrip(),
            extra={"event": event, "event_fields": fields}
        )
