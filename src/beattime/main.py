"""beattime MCP server — exposes time expression evaluation as tools."""

import logging

from fastmcp import FastMCP

from beattime.server.tools import register_tools

mcp = FastMCP(
    name="beattime",
    instructions="Musical time expressions. Call time_help for the grammar.",
)
register_tools(mcp)


def main() -> None:
    logging.basicConfig(level=logging.WARNING)
    mcp.run()


if __name__ == "__main__":
    main()
