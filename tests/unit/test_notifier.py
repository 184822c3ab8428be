"""Tests for owner notifications."""

import asyncio
import json

import httpx
import pytest
from conftest import RecordingNotifier

from construction_ai.notifications.notifier import LoggingNotifier, WebhookNotifier, notify_in_background


class FailingNotifier:
    async def notify(self, title: str, content: str) -> bool:
        raise RuntimeError("transport down")


class TestWebhookNotifier:
    @pytest.mark.asyncio
    async def test_posts_title_and_content(self):
        received = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append(json.loads(request.content))
            return httpx.Response(200)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            notifier = WebhookNotifier("https://hooks.example.com/owner", client=client)
            delivered = await notifier.notify("Critical Document Uploaded", "details")

        assert delivered is True
        assert received == [{"title": "Critical Document Uploaded", "content": "details"}]

    @pytest.mark.asyncio
    async def test_server_error_returns_false(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        async with httpx.AsyncClient(transport=transport) as client:
            notifier = WebhookNotifier("https://hooks.example.com/owner", client=client)

            assert await notifier.notify("title", "content") is False

    @pytest.mark.asyncio
    async def test_connection_error_returns_false(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            notifier = WebhookNotifier("https://hooks.example.com/owner", client=client)

            assert await notifier.notify("title", "content") is False


class TestBackgroundNotification:
    @pytest.mark.asyncio
    async def test_logging_notifier(self):
        assert await LoggingNotifier().notify("title", "content") is True

    @pytest.mark.asyncio
    async def test_notify_in_background(self):
        notifier = RecordingNotifier()

        task = notify_in_background(notifier, "title", "content")
        assert await task is True

        assert notifier.sent == [("title", "content")]

    @pytest.mark.asyncio
    async def test_background_failure_does_not_propagate(self):
        task = notify_in_background(FailingNotifier(), "title", "content")
        await asyncio.gather(task, return_exceptions=True)

        assert task.done()
        assert isinstance(task.exception(), RuntimeError)
