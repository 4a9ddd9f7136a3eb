# SPDX-FileCopyrightText: 2025 gmail-lister Contributors
# SPDX-License-Identifier: MIT
"""
Gmail REST API client.

Talks to the users.messages endpoints with a static bearer token. Every
call is a single request; nothing is retried.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from google.oauth2.credentials import Credentials

from .errors import ConfigurationError, RemoteError
from .parser import encode_raw_message

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://gmail.googleapis.com/gmail/v1"
DEFAULT_TIMEOUT = 30.0


class GmailClient:
    def __init__(
        self,
        api_key: Optional[str],
        user_id: str = "me",
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ConfigurationError()

        self.user_id = user_id
        self.base_url = base_url.rstrip("/")
        self.credentials = Credentials(token=api_key)

        headers: Dict[str, str] = {}
        self.credentials.apply(headers)
        self._http = httpx.AsyncClient(
            base_url=f"{self.base_url}/users/{user_id}",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GmailClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """Send one request and return the decoded JSON body.

        Raises:
            RemoteError: On transport failure or a non-success status
        """
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Gmail request {method} {path} failed: {e}")
            raise RemoteError(str(e) or type(e).__name__) from e

        if response.is_success:
            if not response.content:
                return {}
            return response.json()

        message = _error_message(response)
        logger.error(
            f"Gmail API error on {method} {path}: {response.status_code} {message}"
        )
        raise RemoteError(message, status_code=response.status_code)

    async def list_message_ids(
        self, query: Optional[str] = None, max_results: int = 3
    ) -> List[str]:
        """List message ids, most recent first.

        Args:
            query: Gmail search query, omitted when empty
            max_results: Maximum number of ids to return

        Returns:
            Message ids in provider order, empty when nothing matched
        """
        params: Dict[str, Any] = {"maxResults": max_results}
        if query:
            params["q"] = query

        result = await self._request("GET", "/messages", params=params)
        message_ids = [message["id"] for message in result.get("messages") or []]
        logger.info(f"Listed {len(message_ids)} messages for query {query!r}")
        return message_ids

    async def fetch_message(self, message_id: str) -> Dict[str, Any]:
        """Fetch the full representation of one message."""
        return await self._request(
            "GET", f"/messages/{message_id}", params={"format": "full"}
        )

    async def send_message(
        self, to: str, subject: str, body: str, cc: Optional[str] = None
    ) -> Dict[str, Any]:
        """Send a plain text message and return Gmail's response."""
        raw = encode_raw_message(to, subject, body, cc=cc)
        result = await self._request("POST", "/messages/send", json={"raw": raw})
        logger.info(f"Email sent to {to}. Message ID: {result.get('id')}")
        return result


def _error_message(response: httpx.Response) -> str:
    """Prefer Gmail's structured error message over the status text."""
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]

    return response.reason_phrase or f"HTTP {response.status_code}"
