#!/usr/bin/env python3
# SPDX-FileCopyrightText: 2025 gmail-lister Contributors
# SPDX-License-Identifier: MIT
"""
MCP server with Gmail tools supporting stdio and streamable HTTP transports.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional

import click
from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools.tool import Tool, ToolResult
from mcp.types import TextContent
from pydantic import ConfigDict, Field
from starlette.responses import JSONResponse

from config import Loader as config

from .gmail.dispatcher import ToolDispatcher
from .gmail.registry import ToolDescriptor, list_descriptors

# Set up logging
logging.basicConfig(level=logging.INFO)

logger = logging.getLogger(__name__)

SERVER_NAME = "gmail-email-lister"


async def _dispatch(
    dispatcher: ToolDispatcher, name: str, arguments: Optional[Dict[str, Any]]
) -> ToolResult:
    content = await dispatcher.call_content(name, arguments)
    return ToolResult(content=[TextContent(**block) for block in content])


class RegistryTool(Tool):
    """A registered tool whose arguments are checked by the dispatcher."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    dispatcher: ToolDispatcher = Field(exclude=True)

    @classmethod
    def from_descriptor(
        cls, descriptor: ToolDescriptor, dispatcher: ToolDispatcher
    ) -> "RegistryTool":
        return cls(
            name=descriptor.name,
            description=descriptor.description,
            parameters=descriptor.input_schema(),
            dispatcher=dispatcher,
        )

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        return await _dispatch(self.dispatcher, self.name, arguments)


class DispatchMiddleware(Middleware):
    """Hands every tool call, known or not, to the dispatcher.

    Unknown names and bad arguments then produce the dispatcher's text
    results instead of protocol errors.
    """

    def __init__(self, dispatcher: ToolDispatcher):
        self.dispatcher = dispatcher

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        params = context.message
        return await _dispatch(self.dispatcher, params.name, params.arguments)


def create_server(dispatcher: ToolDispatcher) -> FastMCP:
    """Create the MCP server whose tools forward to the dispatcher."""
    # Arguments are validated by the dispatcher, after the API key check.
    mcp = FastMCP(SERVER_NAME, strict_input_validation=False)
    mcp.add_middleware(DispatchMiddleware(dispatcher))

    for descriptor in dispatcher.list_tools():
        mcp.add_tool(RegistryTool.from_descriptor(descriptor, dispatcher))

    @mcp.custom_route("/api/health", methods=["GET"])
    async def health_check(request):
        """Health check endpoint."""
        return JSONResponse(
            {
                "status": "ok",
                "message": f"{SERVER_NAME} MCP Server is running",
                "mcp_endpoint": "/mcp",
                "tools": [tool.name for tool in dispatcher.list_tools()],
                "api_key_configured": dispatcher.settings.has_api_key,
            }
        )

    return mcp


@click.group()
def cli():
    """gmail-lister - Model Context Protocol server for Gmail."""
    pass


@cli.command()
@click.option("--config-file", help="YAML configuration file path")
@click.option(
    "--api-key", help="Gmail API bearer token (overrides GMAIL_API_KEY and config)"
)
@click.option("--user-id", help="Gmail user id (default: me)")
@click.option(
    "--mode",
    type=click.Choice(["stdio", "http"]),
    help="Transport mode for the MCP server (default: stdio)",
)
@click.option("--port", type=int, help="Port to run the server on (default: 63417)")
@click.option(
    "--addr", type=str, help="Address to bind the server to (default: localhost)"
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level",
)
def serve(
    config_file: Optional[str],
    api_key: Optional[str],
    user_id: Optional[str],
    mode: Optional[str],
    port: Optional[int],
    addr: Optional[str],
    log_level: Optional[str],
):
    """Start the MCP server.

    Examples:
        # Token from the environment or a .env file
        GMAIL_API_KEY=... gmail-lister serve

        # Using a config file with overrides
        gmail-lister serve --config-file ~/.gmail-lister.yaml --mode http --port 8080
    """
    load_dotenv()

    try:
        gmail_config = config.from_file_and_cli(
            config_file=config_file,
            api_key=api_key,
            user_id=user_id,
            mode=mode,
            port=port,
            addr=addr,
            log_level=log_level,
        )
    except ValueError as e:
        logger.error(f"Server startup failed: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(gmail_config.log_level)

    mcp = create_server(ToolDispatcher(gmail_config))

    if gmail_config.mode == "stdio":
        logger.info("Starting MCP server in stdio mode...")
        mcp.run()
    elif gmail_config.mode == "http":
        import uvicorn

        logger.info(
            f"Starting MCP server on {gmail_config.addr}:{gmail_config.port} in http mode..."
        )
        uvicorn_config = uvicorn.Config(
            mcp.http_app(), host=gmail_config.addr, port=gmail_config.port
        )
        uvicorn.Server(uvicorn_config).run()


@cli.command()
def tools():
    """Print the available tools and their argument schemas."""
    listing = [
        {
            "name": descriptor.name,
            "description": descriptor.description,
            "inputSchema": descriptor.input_schema(),
        }
        for descriptor in list_descriptors()
    ]
    click.echo(json.dumps(listing, indent=2))


def main():
    cli()


if __name__ == "__main__":
    cli()
