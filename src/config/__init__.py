# SPDX-FileCopyrightText: 2025 gmail-lister Contributors
# SPDX-License-Identifier: MIT
"""Configuration for the Gmail MCP server."""

from .config import Gmail, Loader

__all__ = ["Gmail", "Loader"]
