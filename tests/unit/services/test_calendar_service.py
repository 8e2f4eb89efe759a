"""
Unit tests for the Google Calendar / Tasks action dispatcher.
"""

from typing import Any

import pytest

from src.exceptions import (
    AuthenticationError,
    ExternalServiceError,
    InvalidInputError,
    MethodNotAllowedError,
)
from src.services.calendar_service import CalendarService


class FakeGoogleApi:
    """Records calls; ``task_lists`` and ``failing_lists`` shape the Tasks API."""

    def __init__(self, task_lists: list[dict[str, Any]] | None = None, tasks_enabled: bool = True):
        self.calls: list[tuple] = []
        self.task_lists = task_lists if task_lists is not None else []
        self.tasks_enabled = tasks_enabled
        self.failing_lists: set[str] = set()

    async def list_calendars(self):
        self.calls.append(("list_calendars",))
        return [{"id": "primary"}]

    async def list_events(self, calendar_id, time_min, time_max, max_results):
        self.calls.append(("list_events", calendar_id, time_min, time_max, max_results))
        return []

    async def get_event(self, calendar_id, event_id):
        self.calls.append(("get_event", calendar_id, event_id))
        return {"id": event_id}

    async def create_event(self, calendar_id, event):
        self.calls.append(("create_event", calendar_id, event))
        return {"id": "evt-1", **event}

    async def update_event(self, calendar_id, event_id, event):
        self.calls.append(("update_event", calendar_id, event_id, event))
        return {"id": event_id, **event}

    async def delete_event(self, calendar_id, event_id):
        self.calls.append(("delete_event", calendar_id, event_id))

    async def get_colors(self):
        return {"event": {}}

    async def list_task_lists(self, max_results=100):
        if not self.tasks_enabled:
            raise ExternalServiceError(message="Access denied", status_code=403)
        return self.task_lists[:max_results]

    async def create_task_list(self, title):
        self.calls.append(("create_task_list", title))
        return {"id": "new-list", "title": title}

    async def list_tasks(self, task_list_id):
        if task_list_id in self.failing_lists:
            raise ExternalServiceError(message="Calendar API error")
        return [{"id": f"{task_list_id}-task", "title": "Task"}]

    async def create_task(self, task_list_id, task):
        self.calls.append(("create_task", task_list_id, task))
        return {"id": "task-1", **task}


def make_service(api: FakeGoogleApi | None = None) -> tuple[CalendarService, FakeGoogleApi]:
    api = api or FakeGoogleApi()
    return CalendarService("google-token", client=api), api


class TestDispatch:
    def test_token_required(self):
        with pytest.raises(AuthenticationError, match="Google access token required"):
            CalendarService(None)

    async def test_unknown_action(self):
        service, _ = make_service()

        with pytest.raises(InvalidInputError, match="Invalid action"):
            await service.dispatch("list-everything", "GET", {})

    async def test_missing_action(self):
        service, _ = make_service()

        with pytest.raises(InvalidInputError):
            await service.dispatch(None, "GET", {})

    @pytest.mark.parametrize(
        ("action", "method", "required"),
        [
            ("create-event", "GET", "POST"),
            ("update-event", "POST", "PUT"),
            ("delete-event", "GET", "DELETE"),
            ("create-task", "PUT", "POST"),
        ],
    )
    async def test_write_actions_require_method(self, action, method, required):
        service, _ = make_service()

        with pytest.raises(MethodNotAllowedError) as exc_info:
            await service.dispatch(action, method, {"eventId": "e1"}, {})

        assert exc_info.value.status_code == 405
        assert exc_info.value.message == f"{required} method required"

    async def test_list_events_defaults(self):
        service, api = make_service()

        await service.dispatch("list-events", "GET", {})

        name, calendar_id, time_min, time_max, max_results = api.calls[0]
        assert name == "list_events"
        assert calendar_id == "primary"
        assert time_min < time_max
        assert max_results == 50

    async def test_list_events_explicit_params(self):
        service, api = make_service()

        await service.dispatch(
            "list-events",
            "GET",
            {
                "calendarId": "work",
                "timeMin": "2026-01-01T00:00:00Z",
                "timeMax": "2026-02-01T00:00:00Z",
                "maxResults": "10",
            },
        )

        assert api.calls[0] == (
            "list_events", "work", "2026-01-01T00:00:00Z", "2026-02-01T00:00:00Z", 10
        )

    async def test_event_id_required(self):
        service, _ = make_service()

        with pytest.raises(InvalidInputError, match="Event ID required"):
            await service.dispatch("get-event", "GET", {})

    async def test_delete_event(self):
        service, api = make_service()

        result = await service.dispatch("delete-event", "DELETE", {"eventId": "e1"})

        assert result == {"success": True}
        assert api.calls == [("delete_event", "primary", "e1")]

    async def test_create_event_passes_body(self):
        service, api = make_service()

        result = await service.dispatch("create-event", "POST", {}, {"summary": "Review"})

        assert result["summary"] == "Review"
        assert api.calls == [("create_event", "primary", {"summary": "Review"})]


class TestTasks:
    async def test_list_tasks_without_tasks_scope_is_empty(self):
        service, _ = make_service(FakeGoogleApi(tasks_enabled=False))

        assert await service.dispatch("list-tasks", "GET", {}) == []

    async def test_list_tasks_skips_failing_lists(self):
        api = FakeGoogleApi(task_lists=[{"id": "a", "title": "A"}, {"id": "b", "title": "B"}])
        api.failing_lists.add("a")
        service, _ = make_service(api)

        tasks = await service.dispatch("list-tasks", "GET", {})

        assert tasks == [{"id": "b-task", "title": "Task", "taskListId": "b", "taskListTitle": "B"}]

    async def test_create_task_uses_first_list(self):
        api = FakeGoogleApi(task_lists=[{"id": "a", "title": "A"}])
        service, _ = make_service(api)

        await service.dispatch("create-task", "POST", {}, {"title": "Pay rent"})

        assert api.calls == [("create_task", "a", {"title": "Pay rent"})]

    async def test_create_task_creates_default_list(self):
        service, api = make_service()

        await service.dispatch("create-task", "POST", {}, {"title": "Pay rent"})

        assert api.calls == [
            ("create_task_list", "My Tasks"),
            ("create_task", "new-list", {"title": "Pay rent"}),
        ]
