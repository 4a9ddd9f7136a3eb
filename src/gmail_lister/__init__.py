# SPDX-FileCopyrightText: 2025 gmail-lister Contributors
# SPDX-License-Identifier: MIT
"""
gmail-lister: Model Context Protocol server exposing Gmail tools.
"""

__version__ = "0.1.0"
