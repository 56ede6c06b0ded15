from taskhub.client.api import TaskHubClient, TaskHubClientError
from taskhub.client.board import TaskBoard
from taskhub.client.mentions import MentionDraft, active_mention_query, extract_mentions, insert_mention
from taskhub.client.notifications import NotificationFeed

__all__ = [
    "MentionDraft",
    "NotificationFeed",
    "TaskBoard",
    "TaskHubClient",
    "TaskHubClientError",
    "active_mention_query",
    "extract_mentions",
    "insert_mention",
]
