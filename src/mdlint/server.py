"""mdlint MCP Server - Main entry point."""
import logging
import sys

from mcp.server.fastmcp import FastMCP

from mdlint.config import Config
from mdlint.tools import lint

# Configure logging to stderr (CRITICAL: stdout is reserved for JSON-RPC)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)]
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("mdlint")


def main():
    """Main entry point for the MCP server."""
    try:
        config = Config.load()

        logger.info(f"mdlint v{config.version} starting...")
        logger.info(f"Options file: {config.options_path or 'none'}")
        logger.info(f"EditorConfig overrides: {config.use_editorconfig}")

        # Register tools
        logger.info("Registering tools...")
        lint.register(mcp, config)
        logger.info(
            "Tools registered: lint_markdown, lint_text, fix_text, "
            "get_lint_rules, get_rule_info, parse_suppression"
        )

        # Run the server
        logger.info("Starting MCP server on stdio...")
        mcp.run(transport="stdio")

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
