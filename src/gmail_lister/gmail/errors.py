# SPDX-FileCopyrightText: 2025 gmail-lister Contributors
# SPDX-License-Identifier: MIT
"""
Errors raised by the Gmail tools.

Every error is terminal for a single tool call only. The dispatcher turns
each of them into the text result returned to the caller.
"""

from typing import Optional


class GmailToolError(Exception):
    """Base class for failures of a single tool call."""

    def to_text(self) -> str:
        return f"Error: {self}"


class ConfigurationError(GmailToolError):
    """The API key is missing, so no request can be made."""

    def __init__(self, message: str = "API Key not set."):
        super().__init__(message)

    def to_text(self) -> str:
        return str(self)


class ValidationError(GmailToolError):
    """Tool arguments do not match the tool's schema."""


class RemoteError(GmailToolError):
    """Gmail answered with a non-success status or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(GmailToolError):
    """The requested email does not exist in the listing."""

    def to_text(self) -> str:
        return str(self)


class UnknownToolError(GmailToolError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name

    def to_text(self) -> str:
        return "Unknown tool."
