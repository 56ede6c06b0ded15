import logging

import requests

from taskhub.client.api import TaskHubClientError

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 30.0
BADGE_LIMIT = 9


class NotificationFeed:
    """Polled view of the current user's notifications.

    There is no push channel: whatever exists on the server shows up on the
    next ``refresh``, either from the polling loop or an explicit call when
    the panel is opened.
    """

    def __init__(self, client, interval=POLL_INTERVAL_SECONDS):
        self._client = client
        self.interval = interval
        self.items = []
        self.unread_count = 0

    def refresh(self):
        body = self._client.list_notifications()
        self.items = body.get("items", [])
        self.unread_count = body.get(
            "unread_count", sum(1 for item in self.items if not item["is_read"])
        )
        return self.items

    def badge(self):
        if self.unread_count <= 0:
            return ""
        if self.unread_count > BADGE_LIMIT:
            return f"{BADGE_LIMIT}+"
        return str(self.unread_count)

    def mark_read(self, notification_id):
        self._client.mark_notification_read(notification_id)
        for item in self.items:
            if item["id"] == notification_id and not item["is_read"]:
                item["is_read"] = True
                self.unread_count = max(0, self.unread_count - 1)

    def mark_all_read(self):
        self._client.mark_all_notifications_read()
        for item in self.items:
            item["is_read"] = True
        self.unread_count = 0

    def delete(self, notification_id):
        self._client.delete_notification(notification_id)
        remaining = []
        for item in self.items:
            if item["id"] != notification_id:
                remaining.append(item)
            elif not item["is_read"]:
                self.unread_count = max(0, self.unread_count - 1)
        self.items = remaining

    def run(self, stop_event, on_update=None):
        """Poll until ``stop_event`` is set. Failed polls are logged and retried next tick."""
        while not stop_event.is_set():
            try:
                self.refresh()
            except (TaskHubClientError, requests.RequestException) as exc:
                logger.warning("Notification poll failed: %s", exc)
            else:
                if on_update is not None:
                    on_update(self)
            stop_event.wait(self.interval)
