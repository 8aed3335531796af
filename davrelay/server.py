"""MCP server exposing the WebDAV tools over stdio."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .tools import DavTools, UnknownToolError

logger = logging.getLogger(__name__)

SERVER_NAME = "davrelay"

class ToolCallError(Exception):
    """A tool returned an error result.

    The MCP server turns exceptions raised from a tool handler into a
    result flagged ``isError`` whose text is the exception message.
    """
    pass

def _text(result: Dict[str, Any]) -> List[TextContent]:
    return [TextContent(type="text", text=item["text"]) for item in result["content"]]

async def dispatch(tools: DavTools, name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
    """Run a tool call off the event loop and convert its result.

    Raises:
        ToolCallError: If the tool reported an error
        UnknownToolError: If no tool has that name
    """
    result = await asyncio.to_thread(tools.call_tool, name, arguments)
    content = _text(result)
    if result.get("isError"):
        raise ToolCallError("\n".join(item.text for item in content))
    return content

def create_server(tools: DavTools) -> Server:
    """Build an MCP server with the dav_request and preset tools registered."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return [Tool(**definition) for definition in tools.list_tools()]

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
        try:
            return await dispatch(tools, name, arguments)
        except (ToolCallError, UnknownToolError):
            raise
        except Exception:
            logger.exception(f"Tool call {name} failed")
            raise

    return server

async def run_stdio(tools: DavTools) -> None:
    server = create_server(tools)
    logger.info("WebDAV relay running on stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("stdin closed, shutting down")

def serve(tools: DavTools) -> None:
    """Serve MCP requests on stdin/stdout until the client disconnects."""
    asyncio.run(run_stdio(tools))
