# SPDX-FileCopyrightText: 2025 gmail-lister Contributors
# SPDX-License-Identifier: MIT
"""
Conversion between Gmail API message payloads and plain email records.
"""

import base64
import logging
from typing import Any, Dict, Iterable, List, Optional

from .schemas import NormalizedEmail

logger = logging.getLogger(__name__)

MARKDOWN_SEPARATOR = "\n\n---\n\n"


def decode_body(data: Optional[str]) -> str:
    """Decode a base64 body as sent by Gmail.

    Both the standard and the URL-safe alphabets are accepted, with or
    without padding. Invalid UTF-8 sequences are replaced.
    """
    if not data:
        return ""

    normalized = data.strip().replace("+", "-").replace("/", "_")
    normalized += "=" * (-len(normalized) % 4)
    return base64.urlsafe_b64decode(normalized).decode("utf-8", errors="replace")


def find_header(headers: Iterable[Dict[str, Any]], name: str) -> Optional[str]:
    """Return the value of the first header with exactly this name."""
    for header in headers:
        if header.get("name") == name:
            return header.get("value")
    return None


def _find_part(parts: List[Dict[str, Any]], mime_type: str) -> Optional[Dict[str, Any]]:
    for part in parts:
        if part.get("mimeType") == mime_type:
            return part
    return None


def extract_body(payload: Dict[str, Any]) -> str:
    """Pick the message body: plain text part, then HTML part, then top level body."""
    parts = payload.get("parts")
    if parts is not None:
        part = _find_part(parts, "text/plain") or _find_part(parts, "text/html")
        if part is None:
            return ""
        return decode_body(part.get("body", {}).get("data"))

    return decode_body(payload.get("body", {}).get("data"))


def parse_message(message: Dict[str, Any]) -> NormalizedEmail:
    """Flatten a full-format Gmail message into id, subject, sender and body."""
    payload = message.get("payload", {})
    headers = payload.get("headers", [])

    return NormalizedEmail(
        id=message.get("id", ""),
        subject=find_header(headers, "Subject"),
        sender=find_header(headers, "From"),
        body=extract_body(payload),
    )


def encode_raw_message(
    to: str, subject: str, body: str, cc: Optional[str] = None
) -> str:
    """Build an RFC 822 plain text message and base64url encode it without padding."""
    headers = [f"To: {to}"]
    if cc:
        headers.append(f"Cc: {cc}")
    headers.append(f"Subject: {subject}")
    headers.append("Content-Type: text/plain; charset=utf-8")

    message = "\r\n".join(headers) + "\r\n\r\n" + body
    encoded = base64.urlsafe_b64encode(message.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")


def render_markdown(emails: Iterable[NormalizedEmail]) -> str:
    """Render emails as Markdown blocks separated by horizontal rules."""
    blocks = []
    for email in emails:
        blocks.append(
            f"**Subject:** {email.subject or ''}\n"
            f"**From:** {email.sender or ''}\n"
            f"**Body:**\n{email.body}"
            f"{MARKDOWN_SEPARATOR}"
        )
    return "".join(blocks)
