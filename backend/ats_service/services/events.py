"""Domain event publisher for job lifecycle events."""
import asyncio
import logging
from datetime import datetime
from typing import Any, Dict

import aiohttp

from ats_service.config import settings

logger = logging.getLogger(__name__)


JOB_CREATED = "job.created"
JOB_UPDATED = "job.updated"
JOB_STATUS_CHANGED = "job.status_changed"
JOB_DELETED = "job.deleted"


class EventPublisher:
    """
    Publishes domain events in log and http modes.

    Publishing is fire-and-forget: failures are logged and reported
    through the return value, never raised into the request.
    """

    def __init__(self, mode: str = None, url: str = None, timeout_seconds: int = None):
        self.mode = mode or settings.events_mode
        self.url = url or settings.events_url
        self.timeout_seconds = timeout_seconds or settings.events_timeout_seconds
        if self.mode == "http" and not self.url:
            raise ValueError("events_url is required when events_mode is 'http'")

    async def publish(self, event_name: str, payload: Dict[str, Any]) -> bool:
        """Publish one event. Returns True when it was delivered (or logged)."""
        if self.mode != "http":
            logger.info(f"[EVENT] {event_name}: {payload}")
            return True

        body = {
            "event": event_name,
            "payload": payload,
            "published_at": datetime.utcnow().isoformat(),
        }
        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.url, json=body) as resp:
                    if 200 <= resp.status < 300:
                        logger.info(f"Published {event_name}")
                        return True
                    logger.error(f"Failed to publish {event_name}: HTTP {resp.status}")
                    return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error publishing {event_name}: {str(e)}")
            return False


# Global event publisher instance
event_publisher = EventPublisher()


def get_event_publisher() -> EventPublisher:
    """FastAPI dependency returning the process-wide publisher."""
    return event_publisher
