import logging

import requests

from taskhub.client.api import TaskHubClientError
from taskhub.models.task_model import STATUS_LABELS, TaskStatus

logger = logging.getLogger(__name__)


class TaskBoard:
    """Client-side cache of the user's tasks for list, table and kanban views.

    ``move`` updates the cache before the server answers so a dragged card
    lands immediately. When the request fails the cache is rebuilt from the
    server by ``reconcile`` and the optimistic change is discarded.
    """

    def __init__(self, client):
        self._client = client
        self._tasks = {}

    def refresh(self):
        tasks = self._client.list_tasks()
        self._tasks = {task["id"]: task for task in tasks}
        return self.tasks()

    def reconcile(self):
        try:
            return self.refresh()
        except (TaskHubClientError, requests.RequestException) as exc:
            logger.warning("Could not re-fetch tasks after a failed update: %s", exc)
            return self.tasks()

    def tasks(self):
        return list(self._tasks.values())

    def get(self, task_id):
        return self._tasks.get(task_id)

    def columns(self):
        """Tasks grouped in TODO, IN_PROGRESS, DONE order with display labels."""
        columns = {
            status.value: {"label": STATUS_LABELS[status], "tasks": []} for status in TaskStatus
        }
        for task in self._tasks.values():
            column = columns.get(task["status"])
            if column is not None:
                column["tasks"].append(task)
        return columns

    def move(self, task_id, status):
        status = TaskStatus(status).value
        previous = self._tasks.get(task_id)
        if previous is None:
            raise KeyError(task_id)
        if previous["status"] == status:
            return True

        self._tasks[task_id] = {**previous, "status": status}
        try:
            updated = self._client.update_task_status(task_id, status)
        except (TaskHubClientError, requests.RequestException) as exc:
            logger.warning("Moving task %s to %s failed: %s", task_id, status, exc)
            # Keep the card where it was if the server cannot be reached either
            self._tasks[task_id] = previous
            self.reconcile()
            return False

        self._tasks[task_id] = updated
        return True
