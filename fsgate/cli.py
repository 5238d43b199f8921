"""CLI interface for fsgate."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import yaml
from dotenv import load_dotenv

from fsgate.core.config import Config, load_config
from fsgate.core.errors import ConfigError
from fsgate.core.logging import setup_logging
from fsgate.core.roots import build_allowed_roots
from fsgate.server import create_server, run_stdio
from fsgate.tools.filesystem import FilesystemTools

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsgate",
        description="fsgate - sandboxed read/append file server over MCP stdio",
    )
    parser.add_argument(
        "directories",
        nargs="*",
        metavar="DIR",
        help="Allowed directory (repeatable); added to any listed in the config file",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> Config:
    """Load the config file if given, then append directories from the command line."""
    config = load_config(args.config) if args.config else Config()
    if args.directories:
        config = config.model_copy(
            update={"allowed_directories": [*config.allowed_directories, *args.directories]}
        )
    return config


async def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv()
    config = resolve_config(args)

    setup_logging(
        level="DEBUG" if args.verbose else config.logging.level,
        directory=config.logging.directory,
        max_size_mb=config.logging.max_size_mb,
        backup_count=config.logging.backup_count,
    )

    if not config.allowed_directories:
        parser.print_usage(sys.stderr)
        raise ConfigError("Usage: fsgate [allowed-directory...]")

    roots = await build_allowed_roots(config.allowed_directories)
    tools = FilesystemTools(roots)
    server = create_server(tools, config.server)
    await run_stdio(server, tools)


def run() -> None:
    """Entry point for the fsgate console script."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in config file: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.debug("Startup failure", exc_info=True)
        print(f"Startup failed: {e}. Rerun with -v for details.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
