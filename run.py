#!/usr/bin/env python3
"""
Bingo Board Launcher

This script can:
1. Run the board and its control channel (default)
2. Send one address to an already running board (--send)
"""

import sys
import argparse
import logging
from pathlib import Path

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Bingo Board Launcher")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("bingo_config.json"),
        help="Path to the JSON config file (created with defaults if missing)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level",
    )
    parser.add_argument(
        "--send",
        metavar="ADDRESS",
        help="Toggle a cell on a running board (e.g. 'a1') and exit",
    )

    args = parser.parse_args(argv)

    # Set logging level
    logging.getLogger().setLevel(getattr(logging, args.log_level))

    from bingoboard.common.config import ConfigManager
    from bingoboard.ipc.listener import ListenerBindError, send_address

    config = ConfigManager(args.config)

    if args.send:
        try:
            send_address(config.get_pipe_path(), args.send)
            logger.info(f"Sent {args.send!r} to {config.get_pipe_path()}")
        except OSError as e:
            logger.error(f"Could not reach the board at {config.get_pipe_path()}: {e}")
            sys.exit(1)
        return

    from bingoboard.main import BingoApp

    try:
        logger.info("Starting bingo board...")
        BingoApp(config).run_main_loop()
    except ListenerBindError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
