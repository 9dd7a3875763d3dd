from __future__ import annotations

import asyncio
import logging
from typing import Any

from redis import asyncio as redis_asyncio

from rpos.application.ports.publisher import EVENTS_CHANNEL
from rpos.infrastructure.messaging.redis_client import redis_url

logger = logging.getLogger(__name__)


def _decode_value(value: bytes | str | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


async def start_redis_fanout(app_state: Any) -> None:
    """Relay every envelope published on the events channel to connected terminals."""
    url = redis_url()
    if url is None:
        logger.warning("redis_fanout_not_started", extra={"reason": "REDIS_URL missing"})
        return

    backoff_seconds = 1.0
    while True:
        client: redis_asyncio.Redis | None = None
        pubsub: redis_asyncio.client.PubSub | None = None
        try:
            client = redis_asyncio.from_url(url)
            pubsub = client.pubsub()
            await pubsub.subscribe(EVENTS_CHANNEL)
            logger.info("redis_fanout_subscribed", extra={"channel": EVENTS_CHANNEL})
            backoff_seconds = 1.0

            while True:
                message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
                if message is None:
                    await asyncio.sleep(0.05)
                    continue

                payload = _decode_value(message.get("data"))
                if not payload:
                    continue

                delivered = await app_state.ws_manager.broadcast(message_json_str=payload)
                logger.debug("redis_fanout_delivered", extra={"sockets": delivered})
        except asyncio.CancelledError:
            logger.info("redis_fanout_cancelled")
            raise
        except Exception:
            logger.exception(
                "redis_fanout_error",
                extra={"backoff_seconds": backoff_seconds},
            )
            await asyncio.sleep(backoff_seconds)
            backoff_seconds = min(backoff_seconds * 2, 5.0)
        finally:
            if pubsub is not None:
                await pubsub.aclose()
            if client is not None:
                await client.aclose()
