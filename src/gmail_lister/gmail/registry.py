# SPDX-FileCopyrightText: 2025 gmail-lister Contributors
# SPDX-License-Identifier: MIT
"""
Registry of the Gmail tools advertised over MCP.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Type

from .errors import UnknownToolError
from .schemas import (
    GetEmailContentArguments,
    ListEmailsArguments,
    SendEmailArguments,
    ToolArguments,
)


class Tool(str, Enum):
    LIST_EMAILS = "listEmails"
    GET_EMAIL_CONTENT = "getEmailContent"
    SEND_EMAIL = "sendEmail"

    @classmethod
    def from_name(cls, name: str) -> "Tool":
        try:
            return cls(name)
        except ValueError:
            raise UnknownToolError(name) from None


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    argument_schema: Type[ToolArguments]

    def input_schema(self) -> Dict[str, Any]:
        """JSON schema of the arguments, using the wire field names."""
        return self.argument_schema.model_json_schema(by_alias=True)


REGISTRY: Dict[Tool, ToolDescriptor] = {
    Tool.LIST_EMAILS: ToolDescriptor(
        name=Tool.LIST_EMAILS.value,
        description=(
            "List emails from Gmail with subject, sender, and body as JSON or "
            "Markdown. Optionally filter results with a Gmail search query."
        ),
        argument_schema=ListEmailsArguments,
    ),
    Tool.GET_EMAIL_CONTENT: ToolDescriptor(
        name=Tool.GET_EMAIL_CONTENT.value,
        description=(
            "Retrieve the full content of an email from Gmail by its 1-based "
            "position among the most recent messages."
        ),
        argument_schema=GetEmailContentArguments,
    ),
    Tool.SEND_EMAIL: ToolDescriptor(
        name=Tool.SEND_EMAIL.value,
        description="Send a plain text email from Gmail.",
        argument_schema=SendEmailArguments,
    ),
}


def get_descriptor(name: str) -> ToolDescriptor:
    """Look up a tool descriptor by name.

    Raises:
        UnknownToolError: If no tool has this name
    """
    return REGISTRY[Tool.from_name(name)]


def list_descriptors() -> List[ToolDescriptor]:
    return list(REGISTRY.values())
