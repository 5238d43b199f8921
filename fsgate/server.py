"""MCP server exposing the gateway operations over stdio."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from pydantic import BaseModel, ValidationError

from fsgate.core.config import ServerConfig
from fsgate.core.errors import ErrorKind, GatewayError
from fsgate.tools.filesystem import FilesystemTools
from fsgate.tools.schemas import AppendFileArgs, OperationResult, ReadFileLinesArgs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    """A named operation with its argument model and handler."""

    name: str
    description: str
    args_model: type[BaseModel]
    handler: Callable[[Any], Awaitable[OperationResult]]

    def definition(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.args_model.model_json_schema(),
        )


class OperationDispatcher:
    """Decodes named tool calls, runs the matching operation, and never raises.

    Invalid arguments, unknown tools, and unexpected failures all come back as
    error results so a single bad request cannot bring the server down.
    """

    def __init__(self, tools: FilesystemTools):
        self.tools = tools
        self._specs = {
            spec.name: spec
            for spec in (
                ToolSpec(
                    name="read_file_lines",
                    description=(
                        "Reads a specified number of lines from a file, given a file path, "
                        "line offset, and line limit. Only works within allowed directories."
                    ),
                    args_model=ReadFileLinesArgs,
                    handler=self._read_file_lines,
                ),
                ToolSpec(
                    name="append_file",
                    description=(
                        "Appends content to a file. If the file does not exist, it will be created. "
                        "Only works within allowed directories."
                    ),
                    args_model=AppendFileArgs,
                    handler=self._append_file,
                ),
            )
        }

    @property
    def tool_names(self) -> list[str]:
        return list(self._specs)

    def tool_definitions(self) -> list[types.Tool]:
        return [spec.definition() for spec in self._specs.values()]

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> OperationResult:
        """Run tool ``name`` with raw ``arguments``.

        Returns:
            The operation's result, or an error result for any failure.
        """
        spec = self._specs.get(name)
        if spec is None:
            return OperationResult.failure(f"Error: Unknown tool: {name}", ErrorKind.INVALID_ARGUMENTS)

        try:
            args = spec.args_model.model_validate(arguments or {})
        except ValidationError as e:
            return OperationResult.failure(
                f"Error: Invalid arguments for {name}: {e}", ErrorKind.INVALID_ARGUMENTS
            )

        try:
            result = await spec.handler(args)
        except Exception as e:
            logger.exception(f"Unexpected failure in {name}")
            return OperationResult.failure(f"Error: {e}", ErrorKind.INTERNAL)

        if result.is_error:
            logger.info(f"{name} failed ({result.error_kind}): {result.error}")
        return result

    async def _read_file_lines(self, args: ReadFileLinesArgs) -> OperationResult:
        return await self.tools.read_file_lines(args.path, args.offset, args.limit)

    async def _append_file(self, args: AppendFileArgs) -> OperationResult:
        return await self.tools.append_file(args.path, args.content)


def create_server(tools: FilesystemTools, config: ServerConfig | None = None) -> Server:
    """Build an MCP server whose tool handlers delegate to an OperationDispatcher."""
    config = config or ServerConfig()
    server: Server = Server(config.name, version=config.version)
    dispatcher = OperationDispatcher(tools)

    @server.list_tools()  # type: ignore[misc]
    async def list_tools() -> list[types.Tool]:
        return dispatcher.tool_definitions()

    @server.call_tool()  # type: ignore[misc]
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        result = await dispatcher.dispatch(name, arguments)
        if result.is_error:
            # The low-level server reports raised errors as isError tool results.
            raise GatewayError(result.text)
        return [types.TextContent(type="text", text=result.text)]

    return server


async def run_stdio(server: Server, tools: FilesystemTools) -> None:
    """Serve over stdio until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info("MCP Read Files Server running on stdio")
        logger.info(f"Allowed directories: {tools.roots.describe()}")
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
