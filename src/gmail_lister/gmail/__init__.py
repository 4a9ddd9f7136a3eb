# SPDX-FileCopyrightText: 2025 gmail-lister Contributors
# SPDX-License-Identifier: MIT
"""
Gmail MCP tools and services.
"""

from .client import GmailClient
from .dispatcher import ToolDispatcher
from .parser import parse_message
from .registry import Tool, ToolDescriptor

__all__ = ["GmailClient", "ToolDispatcher", "parse_message", "Tool", "ToolDescriptor"]
