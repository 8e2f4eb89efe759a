"""
Google Calendar / Tasks passthrough.

One endpoint serves every action, selected by ``?action=``. Write actions
require the matching HTTP method (405 otherwise).
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from src.exceptions import (
    AppException,
    AuthenticationError,
    InvalidInputError,
    MethodNotAllowedError,
)
from src.integrations.google_api import GoogleApiClient

logger = logging.getLogger(__name__)

DEFAULT_CALENDAR_ID = "primary"
DEFAULT_MAX_RESULTS = 50
DEFAULT_WINDOW = timedelta(days=30)
DEFAULT_TASK_LIST_TITLE = "My Tasks"

ACTIONS = (
    "list-calendars",
    "list-events",
    "get-event",
    "create-event",
    "update-event",
    "delete-event",
    "get-colors",
    "list-tasks",
    "create-task",
)

# Actions bound to one HTTP method
REQUIRED_METHODS = {
    "create-event": "POST",
    "update-event": "PUT",
    "delete-event": "DELETE",
    "create-task": "POST",
}


class CalendarService:
    """
    Dispatch calendar actions to the Google API client.

    Usage:
        result = await CalendarService(access_token).dispatch(
            "list-events", "GET", dict(request.query_params), None
        )
    """

    def __init__(self, access_token: str | None, client: GoogleApiClient | None = None):
        if not access_token:
            raise AuthenticationError("Google access token required")
        self.client = client or GoogleApiClient(access_token)

    async def dispatch(
        self,
        action: str | None,
        method: str,
        params: dict[str, str],
        body: Any = None,
    ) -> Any:
        """
        Run one action.

        Args:
            action: One of ``ACTIONS``
            method: HTTP method of the incoming request
            params: Query parameters (calendarId, eventId, timeMin, ...)
            body: JSON body for create/update actions

        Raises:
            InvalidInputError: Unknown action or missing event id
            MethodNotAllowedError: Wrong HTTP method for a write action
            ExternalServiceError: Google API failure
        """
        if action not in ACTIONS:
            raise InvalidInputError(
                field="action",
                message=f"Invalid action. Use: {', '.join(ACTIONS)}",
            )

        required = REQUIRED_METHODS.get(action)
        if required and method.upper() != required:
            raise MethodNotAllowedError(required)

        calendar_id = params.get("calendarId") or DEFAULT_CALENDAR_ID
        logger.debug(f"Calendar action {action} on {calendar_id}")

        if action == "list-calendars":
            return await self.client.list_calendars()

        if action == "list-events":
            now = datetime.now(UTC)
            return await self.client.list_events(
                calendar_id,
                time_min=params.get("timeMin") or now.isoformat(),
                time_max=params.get("timeMax") or (now + DEFAULT_WINDOW).isoformat(),
                max_results=self._max_results(params.get("maxResults")),
            )

        if action == "get-colors":
            return await self.client.get_colors()

        if action == "list-tasks":
            return await self.list_tasks()

        if action == "create-task":
            return await self.create_task(params.get("tasklistId"), body or {})

        if action == "create-event":
            return await self.client.create_event(calendar_id, body or {})

        event_id = params.get("eventId")
        if not event_id:
            raise InvalidInputError(field="eventId", message="Event ID required")

        if action == "get-event":
            return await self.client.get_event(calendar_id, event_id)
        if action == "update-event":
            return await self.client.update_event(calendar_id, event_id, body or {})

        await self.client.delete_event(calendar_id, event_id)
        return {"success": True}

    @staticmethod
    def _max_results(raw: str | None) -> int:
        try:
            return int(raw) if raw else DEFAULT_MAX_RESULTS
        except ValueError:
            return DEFAULT_MAX_RESULTS

    async def list_tasks(self) -> list[dict[str, Any]]:
        """
        Every task of every task list, tagged with its list.

        Tasks are optional for the client: when the token lacks the Tasks
        scope, or any list fails, the result is empty or partial.
        """
        try:
            task_lists = await self.client.list_task_lists()
        except AppException as e:
            logger.info(f"Tasks API unavailable: {e.message}")
            return []

        tasks: list[dict[str, Any]] = []
        for task_list in task_lists:
            try:
                items = await self.client.list_tasks(task_list["id"])
            except AppException as e:
                logger.info(f"Failed to fetch tasks from list {task_list.get('id')}: {e.message}")
                continue
            tasks.extend(
                {**task, "taskListId": task_list["id"], "taskListTitle": task_list.get("title")}
                for task in items
            )
        return tasks

    async def create_task(self, task_list_id: str | None, task: dict[str, Any]) -> dict[str, Any]:
        """Create a task in the given list, else the first list, else a new "My Tasks"."""
        if not task_list_id:
            task_lists = await self.client.list_task_lists(max_results=1)
            if task_lists:
                task_list_id = task_lists[0]["id"]
            else:
                created = await self.client.create_task_list(DEFAULT_TASK_LIST_TITLE)
                task_list_id = created["id"]
        return await self.client.create_task(task_list_id, task)
