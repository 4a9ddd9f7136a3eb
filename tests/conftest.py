# SPDX-FileCopyrightText: 2025 gmail-lister Contributors
# SPDX-License-Identifier: MIT
"""Shared fixtures: an in-memory fake of the Gmail messages API."""

import base64
import json
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from config import Gmail
from gmail_lister.gmail.dispatcher import ToolDispatcher

MESSAGES_PATH = "/gmail/v1/users/me/messages"
USER_PREFIX = re.compile(r"^/gmail/v1/users/[^/]+/")


def b64(text: str) -> str:
    """Encode text the way Gmail does: URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def make_message(
    message_id: str,
    subject: Optional[str] = None,
    sender: Optional[str] = None,
    parts: Optional[List[Tuple[str, str]]] = None,
    body: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a full-format Gmail message.

    Args:
        parts: (mimeType, text) pairs for a multipart payload
        body: Text of a single part payload
    """
    headers = [{"name": "Date", "value": "Mon, 6 Oct 2025 09:00:00 +0000"}]
    if sender is not None:
        headers.append({"name": "From", "value": sender})
    if subject is not None:
        headers.append({"name": "Subject", "value": subject})

    payload: Dict[str, Any] = {
        "mimeType": "multipart/alternative" if parts is not None else "text/plain",
        "headers": headers,
        "body": {"size": 0} if body is None else {"size": len(body), "data": b64(body)},
    }
    if parts is not None:
        payload["parts"] = [
            {"partId": str(i), "mimeType": mime_type, "body": {"data": b64(text)}}
            for i, (mime_type, text) in enumerate(parts)
        ]

    return {"id": message_id, "threadId": message_id, "payload": payload}


class FakeGmail:
    """Serves list, get and send from memory and records every request."""

    def __init__(self):
        self.messages: Dict[str, Dict[str, Any]] = {}
        self.order: List[str] = []
        self.requests: List[httpx.Request] = []
        self.sent: List[Dict[str, Any]] = []
        self.errors: Dict[str, Tuple[int, Any]] = {}

    def add(self, message: Dict[str, Any]) -> None:
        self.messages[message["id"]] = message
        self.order.append(message["id"])

    def fail(self, path: str, status_code: int, body: Any = None) -> None:
        """Answer requests to path with an error status."""
        self.errors[path] = (status_code, body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = USER_PREFIX.sub("/gmail/v1/users/me/", request.url.path)

        if path in self.errors:
            status_code, body = self.errors[path]
            if body is None:
                return httpx.Response(status_code)
            if isinstance(body, str):
                return httpx.Response(status_code, text=body)
            return httpx.Response(status_code, json=body)

        if path == MESSAGES_PATH and request.method == "GET":
            max_results = int(request.url.params.get("maxResults", 100))
            ids = self.order[:max_results]
            if not ids:
                return httpx.Response(200, json={"resultSizeEstimate": 0})
            return httpx.Response(
                200,
                json={
                    "messages": [{"id": i, "threadId": i} for i in ids],
                    "resultSizeEstimate": len(ids),
                },
            )

        if path == f"{MESSAGES_PATH}/send" and request.method == "POST":
            self.sent.append(json.loads(request.content))
            return httpx.Response(200, json={"id": "sent-1", "labelIds": ["SENT"]})

        if path.startswith(f"{MESSAGES_PATH}/") and request.method == "GET":
            message_id = path[len(MESSAGES_PATH) + 1 :]
            if message_id in self.messages:
                return httpx.Response(200, json=self.messages[message_id])
            return httpx.Response(
                404,
                json={
                    "error": {
                        "code": 404,
                        "message": "Requested entity was not found.",
                        "status": "NOT_FOUND",
                    }
                },
            )

        return httpx.Response(400, json={"error": {"message": "Unexpected request"}})


@pytest.fixture
def fake_gmail() -> FakeGmail:
    return FakeGmail()


@pytest.fixture
def settings() -> Gmail:
    return Gmail(api_key="test-token")


@pytest.fixture
def dispatcher(settings: Gmail, fake_gmail: FakeGmail) -> ToolDispatcher:
    return ToolDispatcher(settings, transport=fake_gmail.transport)
