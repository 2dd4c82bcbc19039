"""
Bandmate MCP Server - Module Entry Point

Allows running the server as a Python module:
    python -m bandmate_mcp
    python -m bandmate_mcp --port 9000 --host 127.0.0.1
    python -m bandmate_mcp --no-legacy-sse --json-response
"""
from __future__ import annotations

import argparse
import sys

import uvicorn

from bandmate_mcp.app import create_app
from bandmate_mcp.config import get_config
from bandmate_mcp.core import configure_logging, get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bandmate-mcp",
        description="Bandmate MCP Server - songs, lists, and artists over MCP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with environment configuration (.env is honored)
  BANDMATE_AUTH_TOKEN=... bandmate-mcp

  # Run on a different port with debug logging
  bandmate-mcp --port 9000 --log-level DEBUG

  # Streamable HTTP only, plain JSON replies
  bandmate-mcp --no-legacy-sse --json-response
""",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Listen address (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Listen port (default: $PORT or 8080)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--no-legacy-sse",
        action="store_true",
        default=False,
        help="Do not expose the legacy /sse and /messages endpoints",
    )
    parser.add_argument(
        "--json-response",
        action="store_true",
        default=False,
        help="Answer /mcp POSTs with JSON instead of an SSE stream",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the Bandmate MCP server."""
    args = build_parser().parse_args(argv)

    config = get_config()

    # Apply CLI overrides
    if args.host is not None:
        config.server.host = args.host
    if args.port is not None:
        config.server.port = args.port
    if args.log_level is not None:
        config.server.log_level = args.log_level
    if args.no_legacy_sse:
        config.server.legacy_sse = False
    if args.json_response:
        config.server.json_response = True

    configure_logging(
        level=config.server.log_level,
        json_format=config.server.log_json,
        service_name=config.server.name,
    )
    logger = get_logger("bandmate-mcp")

    app = create_app(config)

    base = f"http://{config.server.host}:{config.server.port}"
    logger.info(
        "Starting Bandmate MCP server",
        version=config.server.version,
        api_url=config.backend.api_url,
        auth_token_configured=config.backend.has_token,
        auth_policy=config.backend.auth_policy.value,
    )
    logger.info(f"Listening on {config.server.host}:{config.server.port}")
    logger.info(f"Health check: {base}/health")
    logger.info(f"MCP endpoint: {base}/mcp")
    if config.server.legacy_sse:
        logger.info(f"Legacy SSE endpoint: {base}/sse")

    try:
        uvicorn.run(
            app,
            host=config.server.host,
            port=config.server.port,
            log_level=config.server.log_level.lower(),
        )
    except KeyboardInterrupt:
        print("\nBandmate MCP server stopped.", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    main()
