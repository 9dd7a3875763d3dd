from __future__ import annotations

import logging

from rpos.application.ports.publisher import EVENTS_CHANNEL, EventPublisher

logger = logging.getLogger(__name__)


def publish_event(publisher: EventPublisher, message: str) -> None:
    """Publish a realtime envelope. Failures are logged, never raised."""
    try:
        publisher.publish(channel=EVENTS_CHANNEL, message=message)
    except Exception:
        logger.warning("event_publish_failed", exc_info=True, extra={"channel": EVENTS_CHANNEL})
