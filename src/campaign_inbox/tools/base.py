from typing import Dict, List, Optional
from langchain_core.tools import BaseTool

GMAIL_TOOL_NAMES = (
    "list_emails_tool",
    "get_email_content_tool",
    "create_or_get_label_tool",
    "add_label_to_email_tool",
    "create_draft_reply_tool",
)
CALENDAR_TOOL_NAMES = (
    "create_calendar_event_tool",
    "list_upcoming_events_tool",
)


def get_tools(
    tool_names: Optional[List[str]] = None,
    *,
    include_calendar: bool = True,
) -> List[BaseTool]:
    """
    Return the requested tool objects, or all available tools when no specific names are provided.

    Parameters:
        tool_names (Optional[List[str]]): Names of tools to return; if None, all available tools are returned.
        include_calendar (bool): Include the Google Calendar tools.

    Returns:
        List[BaseTool]: Tool objects matching the requested names, in the requested order.
    """
    from campaign_inbox.tools.gmail.gmail_tools import (
        list_emails_tool,
        get_email_content_tool,
        create_or_get_label_tool,
        add_label_to_email_tool,
        create_draft_reply_tool,
    )

    all_tools = {
        "list_emails_tool": list_emails_tool,
        "get_email_content_tool": get_email_content_tool,
        "create_or_get_label_tool": create_or_get_label_tool,
        "add_label_to_email_tool": add_label_to_email_tool,
        "create_draft_reply_tool": create_draft_reply_tool,
    }

    if include_calendar:
        from campaign_inbox.tools.calendar.calendar_tools import (
            create_calendar_event_tool,
            list_upcoming_events_tool,
        )

        all_tools.update({
            "create_calendar_event_tool": create_calendar_event_tool,
            "list_upcoming_events_tool": list_upcoming_events_tool,
        })

    if tool_names is None:
        return list(all_tools.values())

    return [all_tools[name] for name in tool_names if name in all_tools]


def get_tools_by_name(tools: Optional[List[BaseTool]] = None) -> Dict[str, BaseTool]:
    """Get a dictionary of tools mapped by name."""
    if tools is None:
        tools = get_tools()

    return {tool.name: tool for tool in tools}
