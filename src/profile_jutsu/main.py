from logging import Logger
from typing import Literal

import click
from fastmcp import FastMCP
from fastmcp.server.middleware.logging import LoggingMiddleware
from fastmcp.utilities.logging import get_logger

from profile_jutsu.config import Settings
from profile_jutsu.pipeline import ProfileJutsuPipeline
from profile_jutsu.servers.jutsu import JutsuServer

logger: Logger = get_logger(name=__name__)


def create_mcp(settings: Settings | None = None) -> FastMCP[None]:
    settings = settings or Settings.from_env()

    mcp: FastMCP[None] = FastMCP[None](name="GitHub Profile Jutsu MCP")

    mcp.add_middleware(middleware=LoggingMiddleware(include_payloads=True, logger=logger))

    jutsu_server: JutsuServer = JutsuServer(pipeline=ProfileJutsuPipeline.from_settings(settings=settings, logger=logger), logger=logger)
    _ = jutsu_server.register_tools(fastmcp=mcp)

    return mcp


@click.command()
@click.option(
    "--mcp-transport",
    type=click.Choice(["stdio", "streamable-http"]),
    default="stdio",
    help="The transport to run the MCP server on",
)
def run_mcp(mcp_transport: Literal["stdio", "streamable-http"]):
    create_mcp().run(transport=mcp_transport)


if __name__ == "__main__":
    run_mcp()
