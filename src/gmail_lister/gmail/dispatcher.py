# SPDX-FileCopyrightText: 2025 gmail-lister Contributors
# SPDX-License-Identifier: MIT
"""
Tool dispatcher: validates a tool call, runs it against Gmail and renders
the text result.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from config import Gmail

from .client import GmailClient
from .errors import ConfigurationError, GmailToolError, NotFoundError
from .parser import parse_message, render_markdown
from .registry import REGISTRY, Tool, ToolDescriptor, list_descriptors
from .schemas import (
    MAX_RESULTS_LIMIT,
    GetEmailContentArguments,
    ListEmailsArguments,
    SendEmailArguments,
    ToolArguments,
    validate_arguments,
)

logger = logging.getLogger(__name__)

NO_MESSAGES = "No messages found."
NOT_FOUND_AT_INDEX = "Email not found at the specified index."
SENT = "Email sent successfully."


class ToolDispatcher:
    """Runs Gmail tools for a fixed configuration.

    The dispatcher keeps no state between calls; each call opens its own
    HTTP client and closes it before returning.
    """

    def __init__(
        self,
        settings: Gmail,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._transport = transport

    def list_tools(self) -> List[ToolDescriptor]:
        return list_descriptors()

    def _client(self) -> GmailClient:
        return GmailClient(
            self.settings.api_key,
            user_id=self.settings.user_id,
            base_url=self.settings.base_url,
            timeout=self.settings.timeout,
            transport=self._transport,
        )

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> str:
        """Execute a tool and return its text result.

        Failures are returned as text, never raised.
        """
        logger.debug(f"Tool call {name} with arguments {arguments}")
        try:
            tool = Tool.from_name(name)
            if not self.settings.api_key:
                raise ConfigurationError()

            args = validate_arguments(
                REGISTRY[tool].argument_schema, arguments, tool.value
            )
            return await self._run(tool, args)

        except GmailToolError as e:
            logger.warning(f"Tool {name} failed: {e}")
            return e.to_text()
        except Exception as e:
            logger.exception(f"Unexpected error in tool {name}")
            return f"Error: {e}"

    async def call_content(
        self, name: str, arguments: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, str]]:
        """Execute a tool and wrap the result as MCP text content."""
        return [{"type": "text", "text": await self.call(name, arguments)}]

    async def _run(self, tool: Tool, args: ToolArguments) -> str:
        if tool is Tool.LIST_EMAILS:
            return await self._list_emails(args)
        if tool is Tool.GET_EMAIL_CONTENT:
            return await self._get_email_content(args)
        if tool is Tool.SEND_EMAIL:
            return await self._send_email(args)
        raise AssertionError(f"Unhandled tool: {tool}")

    async def _list_emails(self, args: ListEmailsArguments) -> str:
        async with self._client() as client:
            message_ids = await client.list_message_ids(
                query=args.query, max_results=args.max_results
            )
            if not message_ids:
                return NO_MESSAGES

            emails = []
            for message_id in message_ids:
                message = await client.fetch_message(message_id)
                emails.append(parse_message(message))

        logger.info(f"Retrieved {len(emails)} emails for query {args.query!r}")
        if args.output_format == "markdown":
            return render_markdown(emails)
        return json.dumps([email.to_dict() for email in emails], ensure_ascii=False)

    async def _get_email_content(self, args: GetEmailContentArguments) -> str:
        index = args.email_index
        if index < 1:
            raise NotFoundError(NOT_FOUND_AT_INDEX)

        async with self._client() as client:
            message_ids = await client.list_message_ids(
                max_results=min(index, MAX_RESULTS_LIMIT)
            )
            if len(message_ids) < index:
                raise NotFoundError(NOT_FOUND_AT_INDEX)

            message = await client.fetch_message(message_ids[index - 1])

        return json.dumps(parse_message(message).to_dict(), ensure_ascii=False)

    async def _send_email(self, args: SendEmailArguments) -> str:
        async with self._client() as client:
            await client.send_message(args.to, args.subject, args.body, cc=args.cc)
        return SENT
