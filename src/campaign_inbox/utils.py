from __future__ import annotations

import base64
import binascii
from datetime import datetime
from email.mime.text import MIMEText
from typing import Any, Iterable, List, Mapping, Optional, Sequence

# Body part preference, most preferred first
BODY_MIME_PREFERENCE: Sequence[str] = ("text/plain", "text/html")


def header_value(headers: Iterable[Mapping[str, Any]] | None, name: str, default: str = "") -> str:
    """Return the first header value named `name` (exact match), or `default` when it is missing or empty."""

    for header in headers or []:
        if header.get("name") == name:
            value = header.get("value")
            return value or default
    return default


def decode_base64_text(data: str) -> str:
    """Decode Gmail body data (URL-safe or standard base64, padding optional) to text."""

    normalised = data.strip().replace("-", "+").replace("_", "/")
    normalised += "=" * (-len(normalised) % 4)
    try:
        raw = base64.b64decode(normalised)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Invalid base64 message body: {exc}") from exc
    return raw.decode("utf-8", errors="replace")


def _flatten_parts(parts: Iterable[Mapping[str, Any]] | None) -> List[Mapping[str, Any]]:
    """Depth-first list of leaf parts, so multipart/alternative inside multipart/mixed is seen."""

    flat: List[Mapping[str, Any]] = []
    for part in parts or []:
        nested = part.get("parts")
        if nested:
            flat.extend(_flatten_parts(nested))
        else:
            flat.append(part)
    return flat


def select_body_part(
    parts: Iterable[Mapping[str, Any]] | None,
    preference: Sequence[str] = BODY_MIME_PREFERENCE,
) -> Optional[Mapping[str, Any]]:
    """Pick the body part to show with a single scan over the flattened parts.

    The first part of the most-preferred MIME type wins; part ordering only
    breaks ties between parts of the same type. Parts without data are skipped.
    """

    best: Optional[Mapping[str, Any]] = None
    best_rank = len(preference)
    for part in _flatten_parts(parts):
        mime_type = part.get("mimeType")
        if mime_type not in preference:
            continue
        if not (part.get("body") or {}).get("data"):
            continue
        rank = preference.index(mime_type)
        if rank < best_rank:
            best, best_rank = part, rank
            if rank == 0:
                break
    return best


def decode_message_body(payload: Mapping[str, Any] | None) -> str:
    """Extract readable text from a Gmail `format=full` payload.

    A top-level body wins; otherwise the preferred part is decoded. Returns an
    empty string when nothing decodable is present.
    """

    if not payload:
        return ""
    data = (payload.get("body") or {}).get("data")
    if data:
        return decode_base64_text(data)
    part = select_body_part(payload.get("parts"))
    if part is None:
        return ""
    return decode_base64_text(part["body"]["data"])


def encode_raw_message(
    to: str,
    subject: str,
    body: str,
    in_reply_to: Optional[str] = None,
) -> str:
    """Build a plain-text MIME message and return it base64url-encoded without padding."""

    mime = MIMEText(body, "plain", "utf-8")
    mime["To"] = to
    mime["Subject"] = subject
    if in_reply_to:
        mime["In-Reply-To"] = in_reply_to
        mime["References"] = in_reply_to
    return base64.urlsafe_b64encode(mime.as_bytes()).decode("ascii").rstrip("=")


def extract_message_content(message: Any) -> str:
    """Return the text of a chat message whose content may be a string or a list of blocks."""

    content = getattr(message, "content", message)
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for block in content:
            if isinstance(block, str):
                texts.append(block)
            elif isinstance(block, Mapping) and block.get("type") == "text":
                texts.append(str(block.get("text") or ""))
        return "\n".join(t for t in texts if t)
    return str(content)


def format_long_date(moment: datetime) -> str:
    """e.g. 'Sunday, October 18, 2026'."""
    return f"{moment.strftime('%A')}, {moment.strftime('%B')} {moment.day}, {moment.year}"


def iso_now(moment: datetime) -> str:
    """ISO 8601 with millisecond precision and a trailing Z for UTC datetimes."""

    text = moment.isoformat(timespec="milliseconds")
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text
