"""Google Calendar operations and their LangChain tools."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional

from langchain_core.tools import tool

from campaign_inbox.connectors.clients import (
    ResourceClientFactory,
    get_default_client_factory,
)
from campaign_inbox.schemas import (
    CalendarEventList,
    CalendarEventResult,
    CalendarEventSummary,
)
from campaign_inbox.utils import iso_now

logger = logging.getLogger(__name__)

CALENDAR_ID = "primary"
DEFAULT_TIME_ZONE = "America/Phoenix"
DEFAULT_MAX_RESULTS = 50
NO_TITLE = "(No Title)"


def _calendar(factory: ResourceClientFactory | None):
    return (factory or get_default_client_factory()).calendar()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _date_part(value: str) -> str:
    return value.split("T", 1)[0].strip()


def build_event_times(
    start_date_time: str,
    end_date_time: str,
    *,
    time_zone: str = DEFAULT_TIME_ZONE,
    all_day: bool = False,
) -> tuple[dict, dict]:
    """Return the (start, end) blocks for events.insert.

    All-day events use the date part only. Calendar end dates are exclusive,
    so an all-day end that is not after the start becomes start + 1 day.
    """

    if all_day:
        start_date = _date_part(start_date_time)
        end_date = _date_part(end_date_time)
        try:
            if date.fromisoformat(end_date) <= date.fromisoformat(start_date):
                end_date = (date.fromisoformat(start_date) + timedelta(days=1)).isoformat()
        except ValueError:
            logger.warning("Unparseable all-day dates %r/%r; sending as-is", start_date, end_date)
        return {"date": start_date}, {"date": end_date}

    tz = time_zone or DEFAULT_TIME_ZONE
    return (
        {"dateTime": start_date_time, "timeZone": tz},
        {"dateTime": end_date_time, "timeZone": tz},
    )


def create_calendar_event(
    summary: str,
    start_date_time: str,
    end_date_time: str,
    description: Optional[str] = None,
    location: Optional[str] = None,
    time_zone: str = DEFAULT_TIME_ZONE,
    all_day: bool = False,
    *,
    factory: ResourceClientFactory | None = None,
) -> CalendarEventResult:
    """Insert an event on the primary calendar. Not idempotent: repeats create duplicates."""

    logger.info(
        "create_calendar_event: summary=%r start=%s location=%r",
        summary,
        start_date_time,
        location,
    )
    start, end = build_event_times(
        start_date_time,
        end_date_time,
        time_zone=time_zone,
        all_day=all_day,
    )
    body = {"summary": summary, "start": start, "end": end}
    if description is not None:
        body["description"] = description
    if location is not None:
        body["location"] = location

    try:
        event = _calendar(factory).events().insert(calendarId=CALENDAR_ID, body=body).execute()
    except Exception:
        logger.exception("create_calendar_event failed for summary=%r", summary)
        raise

    logger.info("create_calendar_event: created %s", event.get("id"))
    return CalendarEventResult(
        event_id=event["id"],
        html_link=event.get("htmlLink") or "",
        summary=summary,
        success=True,
    )


def list_upcoming_events(
    max_results: int = DEFAULT_MAX_RESULTS,
    time_min: Optional[str] = None,
    *,
    factory: ResourceClientFactory | None = None,
    clock: Callable[[], datetime] = _utcnow,
) -> CalendarEventList:
    """List single events from `time_min` (default: now) ordered by start time."""

    effective_min = time_min or iso_now(clock())
    logger.info("list_upcoming_events: max_results=%s time_min=%s", max_results, effective_min)
    try:
        response = (
            _calendar(factory)
            .events()
            .list(
                calendarId=CALENDAR_ID,
                maxResults=max_results or DEFAULT_MAX_RESULTS,
                timeMin=effective_min,
                singleEvents=True,
                orderBy="startTime",
            )
            .execute()
        )
    except Exception:
        logger.exception("list_upcoming_events failed (time_min=%s)", effective_min)
        raise

    events = []
    for item in response.get("items") or []:
        start = item.get("start") or {}
        end = item.get("end") or {}
        events.append(
            CalendarEventSummary(
                id=item["id"],
                summary=item.get("summary") or NO_TITLE,
                start=start.get("dateTime") or start.get("date") or "",
                end=end.get("dateTime") or end.get("date") or "",
                location=item.get("location") or None,
            )
        )

    logger.info("list_upcoming_events: found %d events", len(events))
    return CalendarEventList(events=events, total_count=len(events))


# ------------------------
# LangChain tools
# ------------------------


@tool
def create_calendar_event_tool(
    summary: str,
    start_date_time: str,
    end_date_time: str,
    description: Optional[str] = None,
    location: Optional[str] = None,
    time_zone: str = DEFAULT_TIME_ZONE,
    all_day: bool = False,
) -> dict:
    """Creates a new calendar event in Google Calendar. Use this to add campaign events extracted from emails.

    start_date_time and end_date_time are ISO 8601 (e.g. 2025-01-15T10:00:00).
    time_zone defaults to America/Phoenix. Set all_day for all-day events.
    description can include a link to the original email.
    """
    return create_calendar_event(
        summary=summary,
        start_date_time=start_date_time,
        end_date_time=end_date_time,
        description=description,
        location=location,
        time_zone=time_zone,
        all_day=all_day,
    ).to_payload()


@tool
def list_upcoming_events_tool(max_results: int = DEFAULT_MAX_RESULTS, time_min: Optional[str] = None) -> dict:
    """Lists upcoming calendar events to check for existing events and avoid duplicates.

    time_min is an optional ISO 8601 lower bound; it defaults to now.
    """
    return list_upcoming_events(max_results=max_results, time_min=time_min).to_payload()


__all__ = [
    "build_event_times",
    "create_calendar_event",
    "list_upcoming_events",
    "create_calendar_event_tool",
    "list_upcoming_events_tool",
]
