"""
Bingo Board Application

Headless host for the board: loads the configuration, builds the board,
serves the control channel and ticks at the configured frame rate. Drawing
and mouse input belong to whatever front end embeds the board; this loop only
reports changes.
"""

import logging
import time
import typing as t
from pathlib import Path

from bingoboard.common.config import ConfigManager, get_config
from bingoboard.common.constants import LISTENER_INTERVAL
from bingoboard.controller.address import encode_address
from bingoboard.controller.board_controller import BoardController
from bingoboard.ipc.listener import AddressListener

logger = logging.getLogger(__name__)


class BingoApp:
    """
    Coordinates the board and its control channel listener.
    """

    def __init__(self, config: t.Optional[ConfigManager] = None):
        self.config = config or get_config()
        self.board = BoardController.from_config(self.config)
        self.listener = AddressListener(
            self.board,
            self.config.get_pipe_path(),
            interval=float(self.config.data.get("listener_interval", LISTENER_INTERVAL)),
            read_timeout=self.config.data.get("read_timeout"),
        )
        self.tick_interval = 1.0 / self.config.get_fps()
        self.running = False

        self._changed = False
        self.board.on_cell_toggled = self._handle_cell_toggled

    # ============================================================================
    # LIFECYCLE
    # ============================================================================

    def initialize(self) -> None:
        """Build the cells and start listening.

        Raises:
            ListenerBindError: If the control channel cannot be opened
        """
        self.board.initialize()
        self.listener.start()
        logger.info("✅ Bingo board initialized")

    def run_main_loop(self) -> None:
        """Main loop."""
        self.initialize()
        self.running = True

        logger.info("Bingo board running. Press Ctrl+C to exit.")

        try:
            while self.running:
                self.update()
                time.sleep(self.tick_interval)
        except KeyboardInterrupt:
            logger.info("Shutting down...")
        finally:
            self.cleanup()

    def update(self) -> None:
        """Report the marked cells once per tick if anything changed."""
        if not self._changed:
            return
        self._changed = False

        marked = []
        for index in self.board.marked_indices():
            column, row = self.board.grid.column_row_from_index(index)
            marked.append(encode_address(column, row) or f"({column},{row})")
        logger.info(f"Marked cells: {', '.join(marked) if marked else 'none'}")

    def cleanup(self) -> None:
        """Clean up resources."""
        self.running = False
        self.listener.stop()
        logger.info("Cleanup complete")

    def _handle_cell_toggled(self, index: int, marked: bool) -> None:
        self._changed = True


def main(config_file: t.Optional[Path] = None) -> None:
    """Main entry point."""
    config = ConfigManager(config_file) if config_file else get_config()
    app = BingoApp(config)
    app.run_main_loop()


if __name__ == "__main__":
    main()
