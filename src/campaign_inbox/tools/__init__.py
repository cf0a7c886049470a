from campaign_inbox.tools.base import get_tools, get_tools_by_name
from campaign_inbox.tools.gmail.gmail_tools import (
    list_emails_tool,
    get_email_content_tool,
    create_or_get_label_tool,
    add_label_to_email_tool,
    create_draft_reply_tool,
)
from campaign_inbox.tools.calendar.calendar_tools import (
    create_calendar_event_tool,
    list_upcoming_events_tool,
)

__all__ = [
    "get_tools",
    "get_tools_by_name",
    "list_emails_tool",
    "get_email_content_tool",
    "create_or_get_label_tool",
    "add_label_to_email_tool",
    "create_draft_reply_tool",
    "create_calendar_event_tool",
    "list_upcoming_events_tool",
]
