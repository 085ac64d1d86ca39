from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Optional, Protocol

import requests

from ..core.constants import APPOINTMENT_DURATION_MINUTES
from ..core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

API_BASE_URL = "https://www.googleapis.com/calendar/v3"


class CalendarClient(Protocol):
    def create_event(self, event: dict) -> str:
        """Create an event and return its id."""

        raise NotImplementedError

    def update_event(self, event_id: str, event: dict) -> None:
        raise NotImplementedError

    def delete_event(self, event_id: str) -> None:
        raise NotImplementedError


def build_event(
    *,
    summary: str,
    on_date: date,
    at_time: time,
    employee_name: str,
    employee_email: Optional[str] = None,
    description: Optional[str] = None,
    timezone: str = "UTC",
) -> dict:
    """Calendar event body for an appointment: one hour, employee as attendee."""
    start = datetime.combine(on_date, at_time)
    end = start + timedelta(minutes=APPOINTMENT_DURATION_MINUTES)

    event: dict[str, Any] = {
        "summary": summary,
        "description": description or f"Appointment for {employee_name}",
        "start": {"dateTime": start.isoformat(timespec="seconds"), "timeZone": timezone},
        "end": {"dateTime": end.isoformat(timespec="seconds"), "timeZone": timezone},
    }
    if employee_email:
        event["attendees"] = [{"email": employee_email, "displayName": employee_name}]
    return event


class GoogleCalendarClient(CalendarClient):
    """Google Calendar v3 events over REST.

    The OAuth grant happens outside this app; `token_provider` returns a
    current bearer access token for each call.
    """

    def __init__(
        self,
        token_provider: Callable[[], Optional[str]],
        *,
        calendar_id: str = "primary",
        session: Optional[requests.Session] = None,
        timeout: float = 10,
        base_url: str = API_BASE_URL,
    ):
        self._token_provider = token_provider
        self._calendar_id = calendar_id or "primary"
        self._session = session or requests.Session()
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")

    def _events_url(self, event_id: Optional[str] = None) -> str:
        url = f"{self._base_url}/calendars/{requests.utils.quote(self._calendar_id, safe='')}/events"
        return f"{url}/{requests.utils.quote(event_id, safe='')}" if event_id else url

    def _headers(self, operation: str) -> dict:
        token = self._token_provider()
        if not token:
            raise ExternalServiceError(operation, RuntimeError("calendar access token is not configured"))
        return {"Authorization": f"Bearer {token}"}

    def _call(self, method: str, operation: str, url: str, **kwargs) -> requests.Response:
        headers = self._headers(operation)
        try:
            response = self._session.request(method, url, headers=headers, timeout=self._timeout, **kwargs)
            response.raise_for_status()
            return response
        except requests.RequestException as e:
            logger.error("%s failed: %s", operation, e)
            raise ExternalServiceError(operation, e) from e

    def create_event(self, event: dict) -> str:
        response = self._call("POST", "create calendar event", self._events_url(), json=event)
        event_id = (response.json() or {}).get("id")
        if not event_id:
            raise ExternalServiceError("create calendar event", RuntimeError("response has no event id"))
        logger.info("created calendar event %s", event_id)
        return str(event_id)

    def update_event(self, event_id: str, event: dict) -> None:
        self._call("PUT", "update calendar event", self._events_url(event_id), json=event)

    def delete_event(self, event_id: str) -> None:
        self._call("DELETE", "delete calendar event", self._events_url(event_id))


def static_token(token: Optional[str]) -> Callable[[], Optional[str]]:
    return lambda: token
