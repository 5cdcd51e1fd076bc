import argparse
from typing import Optional, List, Dict, Any

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.server.fastmcp.resources import FunctionResource
from mcp.types import CallToolResult, TextContent

from xcode_build_server.api import tools
from xcode_build_server.common.config.constants import (
    ToolName,
    SERVER_NAME,
    LATEST_LOG_URI,
    LATEST_LOG_NAME,
    LATEST_LOG_DESCRIPTION,
    LATEST_LOG_MIME_TYPE,
)
from xcode_build_server.common.config.settings import Settings, get_settings
from xcode_build_server.common.config.logging_config import setup_logging, get_logger
from xcode_build_server.common.exceptions.base_exceptions import ValidationException
from xcode_build_server.orchestrator.coordinator import XcodeBuildOrchestrator


logger = get_logger(__name__)


class XcodeBuildMCPServer:
    """Exposes the orchestrator over the Model Context Protocol."""

    def __init__(self, orchestrator: XcodeBuildOrchestrator):
        self._orchestrator = orchestrator
        self._latest_log_published = False
        self.mcp = FastMCP(SERVER_NAME)
        self._register_tools()

    @property
    def orchestrator(self) -> XcodeBuildOrchestrator:
        return self._orchestrator

    def _register_tools(self) -> None:
        @self.mcp.tool(
            name=ToolName.BUILD_PROJECT.value,
            description=tools.TOOL_DESCRIPTIONS[ToolName.BUILD_PROJECT],
        )
        async def build_project(
            projectPath: str,
            scheme: str,
            configuration: Optional[str] = None,
            destination: Optional[str] = None,
            includeWarnings: bool = False,
        ) -> CallToolResult:
            return await self.handle_tool_call(ToolName.BUILD_PROJECT.value, {
                "projectPath": projectPath,
                "scheme": scheme,
                "configuration": configuration,
                "destination": destination,
                "includeWarnings": includeWarnings,
            })

        @self.mcp.tool(
            name=ToolName.RUN_TESTS.value,
            description=tools.TOOL_DESCRIPTIONS[ToolName.RUN_TESTS],
        )
        async def run_tests(
            projectPath: str,
            scheme: str,
            testIdentifier: Optional[str] = None,
            skipTests: Optional[List[str]] = None,
            configuration: Optional[str] = None,
            destination: Optional[str] = None,
            includeWarnings: bool = False,
        ) -> CallToolResult:
            return await self.handle_tool_call(ToolName.RUN_TESTS.value, {
                "projectPath": projectPath,
                "scheme": scheme,
                "testIdentifier": testIdentifier,
                "skipTests": skipTests,
                "configuration": configuration,
                "destination": destination,
                "includeWarnings": includeWarnings,
            })

    async def handle_tool_call(self, name: str, arguments: Dict[str, Any]) -> CallToolResult:
        try:
            result = await tools.call_tool(self._orchestrator, name, arguments)
        except ValidationException as e:
            raise ToolError(e.message) from e
        finally:
            self._publish_latest_log()

        return CallToolResult(
            content=[TextContent(type="text", text=result.output)],
            isError=not result.success,
        )

    def _publish_latest_log(self) -> None:
        if self._latest_log_published or not self._orchestrator.latest_result.is_set():
            return

        self.mcp.add_resource(FunctionResource(
            uri=LATEST_LOG_URI,
            name=LATEST_LOG_NAME,
            description=LATEST_LOG_DESCRIPTION,
            mime_type=LATEST_LOG_MIME_TYPE,
            fn=self._read_latest_log,
        ))
        self._latest_log_published = True
        logger.debug(f"Registered resource {LATEST_LOG_URI}")

    def _read_latest_log(self) -> str:
        return self._orchestrator.read_resource(LATEST_LOG_URI)

    def run(self) -> None:
        self._orchestrator.initialize()
        logger.info("Xcode Build MCP server running on stdio")
        logger.info(f"Build logs will be stored in {self._orchestrator.log_dir}")
        self.mcp.run(transport="stdio")


def create_mcp_server(settings: Optional[Settings] = None) -> XcodeBuildMCPServer:
    settings = settings or get_settings()
    return XcodeBuildMCPServer(XcodeBuildOrchestrator(settings))


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Serve the Xcode build tools over MCP stdio")
    parser.add_argument("base_dir", nargs="?", help="Directory under which build-logs/ is created")
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.base_dir:
        settings = settings.model_copy(update={"base_dir": args.base_dir})
    if not settings.base_dir:
        parser.error("Base directory argument is required")

    setup_logging(
        log_level=settings.log_level,
        json_format=settings.log_json,
        stream="ext://sys.stderr",
    )
    create_mcp_server(settings).run()


if __name__ == "__main__":
    main()
