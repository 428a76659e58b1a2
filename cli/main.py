"""CLI entry point."""

import argparse
import os
import shlex
import sys
from pathlib import Path
from typing import List, Optional

from common.logging_config import setup_logging
from cli.commands import CONFIG_PATH, use_config
from cli.repl import repl_loop, run_line
from cli.utils import is_error_message


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="file-gateway-cli",
        description="Interactive client for the file gateway. "
                    "Pass a command to run it once instead of starting the REPL."
    )
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--config", type=Path, default=CONFIG_PATH, help="config file path")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="command to run once, e.g. info report_pdf")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for CLI.

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)

    log_level = 'DEBUG' if args.debug else os.getenv('LOG_LEVEL', 'WARNING')
    logger = setup_logging('cli', log_level=log_level)
    logger.debug("Debug logging enabled")

    use_config(args.config)

    if args.command:
        result = run_line(shlex.join(args.command))
        print(result)
        return 1 if is_error_message(result) else 0

    try:
        repl_loop()
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        logger.info("CLI exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())
