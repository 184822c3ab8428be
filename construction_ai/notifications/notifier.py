"""Best-effort owner notifications."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from construction_ai.core.logging import get_logger
from construction_ai.core.protocols import Notifier

logger = get_logger(__name__)

# Strong references to in-flight notification tasks until they finish
_pending_tasks: set[asyncio.Task[Any]] = set()


class LoggingNotifier:
    """Writes notifications to the application log."""

    async def notify(self, title: str, content: str) -> bool:
        logger.info("owner_notification", title=title, content=content)
        return True


class WebhookNotifier:
    """Posts ``{title, content}`` JSON to a webhook URL."""

    def __init__(self, url: str, timeout_seconds: float = 10.0, client: httpx.AsyncClient | None = None):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def notify(self, title: str, content: str) -> bool:
        payload = {"title": title, "content": content}
        try:
            if self._client is not None:
                response = await self._client.post(self.url, json=payload, timeout=self.timeout_seconds)
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await client.post(self.url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("owner_notification_failed", title=title, url=self.url, error=str(e))
            return False

        logger.info("owner_notification_sent", title=title, status_code=response.status_code)
        return True


def _log_task_failure(task: asyncio.Task[Any]) -> None:
    _pending_tasks.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error("background_notification_failed", error=str(error))


def notify_in_background(notifier: Notifier, title: str, content: str) -> asyncio.Task[bool]:
    """Schedule a notification without awaiting it.

    Must be called from within a running event loop.
    """
    task = asyncio.create_task(notifier.notify(title, content))
    _pending_tasks.add(task)
    task.add_done_callback(_log_task_failure)
    return task
