# SPDX-FileCopyrightText: 2025 gmail-lister Contributors
# SPDX-License-Identifier: MIT
"""
Argument schemas for the Gmail tools and the normalized email record.
"""

import logging
from typing import Any, Dict, Literal, Mapping, Optional, Type, TypeVar

import pydantic
from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StrictInt,
    StrictStr,
    field_validator,
)

from .errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_QUERY = "in:inbox"
DEFAULT_MAX_RESULTS = 3
MAX_RESULTS_LIMIT = 500

QUERY_DESCRIPTION = (
    "The search query to filter emails. Use 'in:inbox', 'in:spam', 'in:unread', "
    "'in:starred', 'in:sent', 'in:all', 'in:category_social', "
    "'in:category_promotions', 'in:category_updates', 'in:category_forums', "
    "'in:primary' or 'in:draft' to filter by label."
)


class ToolArguments(BaseModel):
    """Base class for tool argument models."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class ListEmailsArguments(ToolArguments):
    query: StrictStr = Field(default=DEFAULT_QUERY, description=QUERY_DESCRIPTION)
    max_results: StrictInt = Field(
        default=DEFAULT_MAX_RESULTS,
        ge=1,
        le=MAX_RESULTS_LIMIT,
        alias="maxResults",
        description="The maximum number of emails to retrieve.",
    )
    output_format: Literal["json", "markdown"] = Field(
        default="json",
        alias="format",
        description="Render the emails as a JSON array or as Markdown.",
    )


class GetEmailContentArguments(ToolArguments):
    # Range is checked against the listing, not here, so that out of range
    # indexes report "not found" rather than a schema error.
    email_index: StrictInt = Field(
        alias="emailIndex",
        description="The 1-based index of the email, 1 being the most recent.",
    )


class SendEmailArguments(ToolArguments):
    to: EmailStr = Field(description="Recipient email address.")
    cc: Optional[EmailStr] = Field(default=None, description="Cc email address.")
    subject: StrictStr = Field(description="Email subject, a single line.")
    body: StrictStr = Field(description="Email body, plain text.")

    @field_validator("subject")
    @classmethod
    def subject_is_single_line(cls, value: str) -> str:
        if "\r" in value or "\n" in value:
            raise ValueError("must not contain line breaks")
        return value


class NormalizedEmail(BaseModel):
    """Flat view of a Gmail message."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    subject: Optional[str] = None
    sender: Optional[str] = Field(default=None, alias="from")
    body: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the wire field names, dropping absent headers."""
        return self.model_dump(by_alias=True, exclude_none=True)


ArgumentsT = TypeVar("ArgumentsT", bound=ToolArguments)


def _format_errors(error: pydantic.ValidationError) -> str:
    details = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "arguments"
        details.append(f"{location}: {item['msg']}")
    return "; ".join(details)


def validate_arguments(
    schema: Type[ArgumentsT],
    arguments: Optional[Mapping[str, Any]],
    tool_name: str,
) -> ArgumentsT:
    """Validate raw tool arguments against a schema.

    Args:
        schema: Argument model of the tool being called
        arguments: Caller supplied arguments, None meaning no arguments
        tool_name: Tool name used in the error message

    Returns:
        The validated arguments with defaults applied

    Raises:
        ValidationError: If the arguments do not match the schema
    """
    if arguments is not None and not isinstance(arguments, Mapping):
        raise ValidationError(
            f"Invalid arguments for {tool_name}: expected an object"
        )

    try:
        return schema.model_validate(dict(arguments or {}))
    except pydantic.ValidationError as e:
        message = f"Invalid arguments for {tool_name}: {_format_errors(e)}"
        logger.warning(message)
        raise ValidationError(message) from e
