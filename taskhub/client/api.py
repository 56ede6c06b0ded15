"""Thin HTTP client for the TaskHub JSON API, built on ``requests``."""

import requests


class TaskHubClientError(Exception):
    def __init__(self, status_code, message, field_errors=None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.field_errors = field_errors or {}


class TaskHubClient:
    def __init__(self, base_url, session=None, timeout=10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, **kwargs):
        resp = self.session.request(
            method, f"{self.base_url}/api{path}", timeout=self.timeout, **kwargs
        )
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not resp.ok:
            raise TaskHubClientError(
                resp.status_code,
                body.get("error") or resp.reason,
                body.get("field_errors"),
            )
        return body

    # --- auth ---

    def register(self, name, email, password):
        return self._request(
            "POST", "/auth/register", json={"name": name, "email": email, "password": password}
        )["item"]

    def login(self, email, password):
        body = self._request("POST", "/auth/login", json={"email": email, "password": password})
        # The session cookie is kept by requests; the header also works for non-cookie setups
        self.session.headers["Authorization"] = f"Bearer {body['access_token']}"
        return body["item"]

    def logout(self):
        self._request("POST", "/auth/logout")
        self.session.headers.pop("Authorization", None)

    # --- tasks ---

    def list_tasks(self, status=None, priority=None):
        params = {key: value for key, value in (("status", status), ("priority", priority)) if value}
        return self._request("GET", "/tasks/", params=params)["items"]

    def create_task(self, **fields):
        return self._request("POST", "/tasks/", json=fields)["item"]

    def get_task(self, task_id):
        return self._request("GET", f"/tasks/{task_id}")["item"]

    def update_task(self, task_id, **fields):
        return self._request("PUT", f"/tasks/{task_id}", json=fields)["item"]

    def delete_task(self, task_id):
        return self._request("DELETE", f"/tasks/{task_id}")

    def update_task_status(self, task_id, status):
        return self._request("PATCH", f"/tasks/{task_id}/status", json={"status": status})["item"]

    # --- comments and time ---

    def list_comments(self, task_id):
        return self._request("GET", f"/tasks/{task_id}/comments")["items"]

    def add_comment(self, task_id, content, mentioned_user_ids=()):
        payload = {"content": content, "mentioned_user_ids": list(mentioned_user_ids)}
        return self._request("POST", f"/tasks/{task_id}/comments", json=payload)["item"]

    def delete_comment(self, task_id, comment_id):
        return self._request("DELETE", f"/tasks/{task_id}/comments/{comment_id}")

    def log_time(self, task_id, hours, description=None, date=None):
        payload = {"hours": hours, "description": description}
        if date is not None:
            payload["date"] = date
        return self._request("POST", f"/tasks/{task_id}/time-entries", json=payload)["item"]

    def search_users(self, query):
        return self._request("GET", "/users/", params={"q": query})["items"]

    # --- notifications ---

    def list_notifications(self, unread_only=False):
        params = {"unread_only": "true"} if unread_only else {}
        return self._request("GET", "/notifications/", params=params)

    def mark_notification_read(self, notification_id):
        return self._request("PATCH", f"/notifications/{notification_id}/mark-read")["item"]

    def mark_all_notifications_read(self):
        return self._request("PATCH", "/notifications/mark-all-read")

    def delete_notification(self, notification_id):
        return self._request("DELETE", f"/notifications/{notification_id}")
