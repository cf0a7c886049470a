"""Gmail operations and the LangChain tools that expose them to the agent.

Each operation acquires a Gmail handle from the client factory, performs its
remote call(s) and maps the response into a fixed output model. Failures are
logged with the operation name and identifiers, then re-raised unchanged.
"""

from __future__ import annotations

import logging
from typing import Optional

from langchain_core.tools import tool

from campaign_inbox.connectors.clients import (
    ResourceClientFactory,
    get_default_client_factory,
)
from campaign_inbox.schemas import (
    AddLabelResult,
    DraftResult,
    EmailContent,
    EmailList,
    EmailSummary,
    LabelResult,
)
from campaign_inbox.utils import decode_message_body, encode_raw_message, header_value

logger = logging.getLogger(__name__)

USER_ID = "me"
DEFAULT_MAX_RESULTS = 50
NO_SUBJECT = "(No Subject)"
UNKNOWN_SENDER = "Unknown"
LABEL_VISIBILITY = {
    "labelListVisibility": "labelShow",
    "messageListVisibility": "show",
}


def _gmail(factory: ResourceClientFactory | None):
    return (factory or get_default_client_factory()).gmail()


def list_emails(
    max_results: int = DEFAULT_MAX_RESULTS,
    query: Optional[str] = None,
    *,
    factory: ResourceClientFactory | None = None,
) -> EmailList:
    """List inbox messages as summaries (subject, sender, date, snippet, labels)."""

    logger.info("list_emails: max_results=%s query=%r", max_results, query)
    try:
        gmail = _gmail(factory)
        listing = (
            gmail.users()
            .messages()
            .list(userId=USER_ID, maxResults=max_results or DEFAULT_MAX_RESULTS, q=query or "")
            .execute()
        )
        messages = listing.get("messages") or []

        emails = []
        for message in messages:
            detail = (
                gmail.users()
                .messages()
                .get(
                    userId=USER_ID,
                    id=message["id"],
                    format="metadata",
                    metadataHeaders=["Subject", "From", "Date"],
                )
                .execute()
            )
            headers = (detail.get("payload") or {}).get("headers") or []
            emails.append(
                EmailSummary(
                    id=message["id"],
                    thread_id=message.get("threadId") or detail.get("threadId") or "",
                    subject=header_value(headers, "Subject", NO_SUBJECT),
                    from_=header_value(headers, "From", UNKNOWN_SENDER),
                    date=header_value(headers, "Date", ""),
                    snippet=detail.get("snippet") or "",
                    labels=detail.get("labelIds") or [],
                )
            )
    except Exception:
        logger.exception("list_emails failed (query=%r)", query)
        raise

    logger.info("list_emails: retrieved %d emails", len(emails))
    return EmailList(emails=emails, total_count=len(emails))


def get_email_content(
    email_id: str,
    *,
    factory: ResourceClientFactory | None = None,
) -> EmailContent:
    """Fetch a full message and decode its body, preferring text/plain over text/html."""

    logger.info("get_email_content: email_id=%s", email_id)
    try:
        message = (
            _gmail(factory)
            .users()
            .messages()
            .get(userId=USER_ID, id=email_id, format="full")
            .execute()
        )
        payload = message.get("payload") or {}
        headers = payload.get("headers") or []
        body = decode_message_body(payload)
    except Exception:
        logger.exception("get_email_content failed for email_id=%s", email_id)
        raise

    return EmailContent(
        id=email_id,
        thread_id=message.get("threadId") or "",
        subject=header_value(headers, "Subject", NO_SUBJECT),
        from_=header_value(headers, "From", UNKNOWN_SENDER),
        to=header_value(headers, "To", ""),
        date=header_value(headers, "Date", ""),
        body=body,
        labels=message.get("labelIds") or [],
    )


def create_or_get_label(
    label_name: str,
    *,
    factory: ResourceClientFactory | None = None,
) -> LabelResult:
    """Return the label named exactly `label_name`, creating it when missing."""

    logger.info("create_or_get_label: label_name=%r", label_name)
    try:
        labels_api = _gmail(factory).users().labels()
        existing = labels_api.list(userId=USER_ID).execute().get("labels") or []
        for label in existing:
            if label.get("name") == label_name:
                logger.info("create_or_get_label: %r exists as %s", label_name, label.get("id"))
                return LabelResult(label_id=label["id"], label_name=label_name, created=False)

        created = labels_api.create(
            userId=USER_ID,
            body={"name": label_name, **LABEL_VISIBILITY},
        ).execute()
    except Exception:
        logger.exception("create_or_get_label failed for label_name=%r", label_name)
        raise

    logger.info("create_or_get_label: created %r as %s", label_name, created.get("id"))
    return LabelResult(label_id=created["id"], label_name=label_name, created=True)


def add_label_to_email(
    email_id: str,
    label_id: str,
    *,
    factory: ResourceClientFactory | None = None,
) -> AddLabelResult:
    logger.info("add_label_to_email: email_id=%s label_id=%s", email_id, label_id)
    try:
        (
            _gmail(factory)
            .users()
            .messages()
            .modify(userId=USER_ID, id=email_id, body={"addLabelIds": [label_id]})
            .execute()
        )
    except Exception:
        logger.exception("add_label_to_email failed for email_id=%s label_id=%s", email_id, label_id)
        raise
    return AddLabelResult(success=True, email_id=email_id, label_id=label_id)


def create_draft_reply(
    thread_id: str,
    to: str,
    subject: str,
    body: str,
    in_reply_to: Optional[str] = None,
    *,
    factory: ResourceClientFactory | None = None,
) -> DraftResult:
    """Create a plain-text draft in `thread_id`. Not idempotent: each call adds a draft."""

    logger.info("create_draft_reply: thread_id=%s to=%s subject=%r", thread_id, to, subject)
    raw = encode_raw_message(to=to, subject=subject, body=body, in_reply_to=in_reply_to)
    try:
        draft = (
            _gmail(factory)
            .users()
            .drafts()
            .create(
                userId=USER_ID,
                body={"message": {"raw": raw, "threadId": thread_id}},
            )
            .execute()
        )
    except Exception:
        logger.exception("create_draft_reply failed for thread_id=%s", thread_id)
        raise

    logger.info("create_draft_reply: draft %s created", draft.get("id"))
    return DraftResult(draft_id=draft["id"], thread_id=thread_id, success=True)


# ------------------------
# LangChain tools
# ------------------------


@tool
def list_emails_tool(max_results: int = DEFAULT_MAX_RESULTS, query: Optional[str] = None) -> dict:
    """Lists recent emails from the inbox. Use this to find campaign-related event invitations and opportunities.

    max_results caps the number of emails (default 50). query is an optional Gmail
    search query such as 'is:unread' or 'subject:invitation'.
    """
    return list_emails(max_results=max_results, query=query).to_payload()


@tool
def get_email_content_tool(email_id: str) -> dict:
    """Gets the full content/body of a specific email by its ID. Use this to read the details of event invitations."""
    return get_email_content(email_id).to_payload()


@tool
def create_or_get_label_tool(label_name: str) -> dict:
    """Creates a Gmail label if it doesn't exist, or gets it if it does. Use this to create the 'AZCorpComm_Event' tag."""
    return create_or_get_label(label_name).to_payload()


@tool
def add_label_to_email_tool(email_id: str, label_id: str) -> dict:
    """Adds a label/tag to an email. Use this to tag campaign event emails with 'AZCorpComm_Event'."""
    return add_label_to_email(email_id, label_id).to_payload()


@tool
def create_draft_reply_tool(
    thread_id: str,
    to: str,
    subject: str,
    body: str,
    in_reply_to: Optional[str] = None,
) -> dict:
    """Creates a draft reply to an email. Use this to draft confirmation requests for upcoming events or apology emails for missed events.

    thread_id is the thread of the original email, body is plain text, and
    in_reply_to is the optional Message-ID header of the email being replied to.
    """
    return create_draft_reply(
        thread_id=thread_id,
        to=to,
        subject=subject,
        body=body,
        in_reply_to=in_reply_to,
    ).to_payload()


__all__ = [
    "list_emails",
    "get_email_content",
    "create_or_get_label",
    "add_label_to_email",
    "create_draft_reply",
    "list_emails_tool",
    "get_email_content_tool",
    "create_or_get_label_tool",
    "add_label_to_email_tool",
    "create_draft_reply_tool",
]
