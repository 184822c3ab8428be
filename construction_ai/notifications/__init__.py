"""Owner notification module."""

from construction_ai.notifications.notifier import LoggingNotifier, WebhookNotifier, notify_in_background

__all__ = ["LoggingNotifier", "WebhookNotifier", "notify_in_background"]
