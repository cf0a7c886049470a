"""Tool prompt templates for the campaign email agent."""

# Tools prompt for insertion into the agent system prompt
CAMPAIGN_TOOLS_PROMPT = """
- create_or_get_label_tool: Create the label if missing, or return the existing one.
  Inputs: label_name (str)
  Output: labelId, labelName, created
  Use when: starting a run; reuse the returned labelId for tagging.

- list_emails_tool: List recent inbox emails as summaries.
  Inputs: max_results (int, default 50), query (str, optional Gmail search)
  Output: emails[id, threadId, subject, from, date, snippet, labels], totalCount

- get_email_content_tool: Read one email in full.
  Inputs: email_id (str)
  Output: id, threadId, subject, from, to, date, body, labels
  Use when: an email looks like a campaign event and you need its details.

- add_label_to_email_tool: Tag an email.
  Inputs: email_id (str), label_id (str)
  Output: success, emailId, labelId
  Skip emails that already carry the label.

- create_draft_reply_tool: Save a plain-text draft reply in the email's thread.
  Inputs: thread_id (str), to (str), subject (str), body (str), in_reply_to (str, optional)
  Output: draftId, threadId, success
  Each call creates a new draft; do not draft twice for the same email.

- list_upcoming_events_tool: List upcoming calendar events.
  Inputs: max_results (int, default 50), time_min (ISO 8601, optional)
  Use when: checking for an existing event before creating one.

- create_calendar_event_tool: Create a calendar event.
  Inputs: summary (str), start_date_time (ISO), end_date_time (ISO), description (str, optional), location (str, optional), time_zone (str, default America/Phoenix), all_day (bool)
  Output: eventId, htmlLink, summary, success
  Each call creates a new event; check list_upcoming_events_tool first.
"""
