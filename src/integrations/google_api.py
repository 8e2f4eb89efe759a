"""
Google Calendar and Tasks REST client.

Calls are made on behalf of the signed-in user with the Google OAuth access
token the client forwards in ``X-Google-Access-Token``. Upstream status codes
are mapped to application errors:

    401 -> 401 "Invalid or expired Google token..."
    403 -> 403 "Access denied..."
    404 -> 404
    other -> 502
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from src.core.config import settings
from src.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

CALENDAR_BASE_URL = "https://www.googleapis.com/calendar/v3"
TASKS_BASE_URL = "https://tasks.googleapis.com/tasks/v1"


class GoogleApiClient:
    """
    Minimal async client for the Calendar v3 and Tasks v1 APIs.

    Usage:
        client = GoogleApiClient(access_token)
        events = await client.list_events("primary", time_min, time_max, 50)
    """

    def __init__(self, access_token: str, timeout: float | None = None):
        self.access_token = access_token
        self.timeout = timeout or settings.http_timeout_seconds

    async def request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """
        Perform one authenticated request.

        Returns:
            Decoded JSON body, or None for empty responses (204)

        Raises:
            ExternalServiceError: Transport failure or non-2xx response
        """
        headers = {"Authorization": f"Bearer {self.access_token}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method, url, params=params, json=json, headers=headers
                )
        except httpx.HTTPError as e:
            logger.error(f"Google API {method} {url} failed: {e}")
            raise ExternalServiceError(message="Google API request failed", service="google") from e

        if response.status_code >= 400:
            raise self._map_error(response)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _map_error(response: httpx.Response) -> ExternalServiceError:
        status_code = response.status_code
        logger.warning(f"Google API returned {status_code}: {response.text[:200]}")

        if status_code == 401:
            return ExternalServiceError(
                message="Invalid or expired Google token. Please re-authenticate.",
                status_code=401,
                service="google",
            )
        if status_code == 403:
            return ExternalServiceError(
                message="Access denied. Please ensure calendar permissions are granted.",
                status_code=403,
                service="google",
            )
        if status_code == 404:
            return ExternalServiceError(
                message="Calendar or event not found.",
                status_code=404,
                service="google",
            )
        return ExternalServiceError(message="Calendar API error", service="google")

    # -------------------------------------------------------------------------
    # Calendar
    # -------------------------------------------------------------------------

    @staticmethod
    def _events_url(calendar_id: str, event_id: str | None = None) -> str:
        url = f"{CALENDAR_BASE_URL}/calendars/{quote(calendar_id, safe='')}/events"
        if event_id:
            url = f"{url}/{quote(event_id, safe='')}"
        return url

    async def list_calendars(self) -> list[dict[str, Any]]:
        data = await self.request("GET", f"{CALENDAR_BASE_URL}/users/me/calendarList")
        return (data or {}).get("items", [])

    async def list_events(
        self,
        calendar_id: str,
        time_min: str,
        time_max: str,
        max_results: int,
    ) -> list[dict[str, Any]]:
        data = await self.request(
            "GET",
            self._events_url(calendar_id),
            params={
                "timeMin": time_min,
                "timeMax": time_max,
                "maxResults": max_results,
                "singleEvents": "true",
                "orderBy": "startTime",
            },
        )
        return (data or {}).get("items", [])

    async def get_event(self, calendar_id: str, event_id: str) -> dict[str, Any]:
        return await self.request("GET", self._events_url(calendar_id, event_id))

    async def create_event(self, calendar_id: str, event: dict[str, Any]) -> dict[str, Any]:
        return await self.request("POST", self._events_url(calendar_id), json=event)

    async def update_event(
        self,
        calendar_id: str,
        event_id: str,
        event: dict[str, Any],
    ) -> dict[str, Any]:
        return await self.request("PUT", self._events_url(calendar_id, event_id), json=event)

    async def delete_event(self, calendar_id: str, event_id: str) -> None:
        await self.request("DELETE", self._events_url(calendar_id, event_id))

    async def get_colors(self) -> dict[str, Any]:
        return await self.request("GET", f"{CALENDAR_BASE_URL}/colors") or {}

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    async def list_task_lists(self, max_results: int = 100) -> list[dict[str, Any]]:
        data = await self.request(
            "GET",
            f"{TASKS_BASE_URL}/users/@me/lists",
            params={"maxResults": max_results},
        )
        return (data or {}).get("items", [])

    async def create_task_list(self, title: str) -> dict[str, Any]:
        return await self.request("POST", f"{TASKS_BASE_URL}/users/@me/lists", json={"title": title})

    async def list_tasks(self, task_list_id: str, max_results: int = 100) -> list[dict[str, Any]]:
        data = await self.request(
            "GET",
            f"{TASKS_BASE_URL}/lists/{quote(task_list_id, safe='')}/tasks",
            params={"maxResults": max_results, "showCompleted": "true", "showHidden": "true"},
        )
        return (data or {}).get("items", [])

    async def create_task(self, task_list_id: str, task: dict[str, Any]) -> dict[str, Any]:
        return await self.request(
            "POST",
            f"{TASKS_BASE_URL}/lists/{quote(task_list_id, safe='')}/tasks",
            json=task,
        )
