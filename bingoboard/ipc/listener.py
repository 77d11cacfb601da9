"""
Address Listener

Local control channel that lets another process (for example a chat bot)
toggle bingo cells. Clients connect to a Unix domain socket, write a single
line holding a two-character address, and disconnect. One client is served
at a time:

    IDLE -> AWAITING_CONNECTION -> CONNECTED -> DRAINING -> AWAITING_CONNECTION ...
"""

import logging
import os
import socket
import threading
import typing as t
from pathlib import Path

from bingoboard.common.constants import ACCEPT_POLL_INTERVAL, ADDRESS_LENGTH, LISTENER_INTERVAL
from bingoboard.common.enums import ListenerState

if t.TYPE_CHECKING:
    from bingoboard.controller.board_controller import BoardController

logger = logging.getLogger(__name__)


class ListenerBindError(RuntimeError):
    """Raised when the control channel cannot be created."""


class AddressListener:
    """
    Serves the control channel on a dedicated background thread.
    """

    def __init__(
        self,
        board: "BoardController",
        path: t.Union[str, Path],
        interval: float = LISTENER_INTERVAL,
        read_timeout: t.Optional[float] = None,
    ):
        """
        Initialize the listener.

        Args:
            board: Board that receives the decoded toggles
            path: Filesystem path of the control socket
            interval: Seconds to rest after each connection before accepting another
            read_timeout: Seconds to wait for a client's line, None to wait forever
        """
        self.board = board
        self.path = Path(path)
        self.interval = interval
        self.read_timeout = read_timeout

        self.state = ListenerState.IDLE
        self.connections_served = 0

        self._server: t.Optional[socket.socket] = None
        self._thread: t.Optional[threading.Thread] = None
        self._stop_event = threading.Event()

        # External callback (GUI, tests)
        self.on_state_changed: t.Optional[t.Callable[[ListenerState], None]] = None

    def _set_state(self, state: ListenerState) -> None:
        self.state = state
        if self.on_state_changed:
            self.on_state_changed(state)

    # ============================================================================
    # LIFECYCLE
    # ============================================================================

    def bind(self) -> None:
        """Create the control socket.

        Raises:
            ListenerBindError: If the socket cannot be created at the path
        """
        if self._server is not None:
            return

        if not hasattr(socket, "AF_UNIX"):
            raise ListenerBindError("Unix domain sockets are not available on this platform")

        try:
            self._remove_stale_socket()

            server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                server.bind(str(self.path))
                server.listen(1)
                server.settimeout(ACCEPT_POLL_INTERVAL)
            except OSError:
                server.close()
                raise
        except OSError as e:
            raise ListenerBindError(f"Unable to open control channel at {self.path}: {e}") from e

        self._server = server
        logger.info(f"Bingo pipe started at \"{self.path}\". Now available for clients!")

    def _remove_stale_socket(self) -> None:
        """Remove a socket left behind by a previous run.

        Raises:
            ListenerBindError: If the path holds something other than a socket,
                or a board is still listening on it
        """
        if not (self.path.exists() or self.path.is_symlink()):
            return

        if not self.path.is_socket():
            raise ListenerBindError(
                f"Unable to open control channel at {self.path}: path exists and is not a socket"
            )

        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as probe:
            probe.settimeout(1.0)
            try:
                probe.connect(str(self.path))
            except ConnectionRefusedError:
                logger.info(f"Removing stale control socket at {self.path}")
                self.path.unlink()
                return
            except FileNotFoundError:
                return

        raise ListenerBindError(
            f"Unable to open control channel at {self.path}: another board is already listening"
        )

    def start(self) -> None:
        """Bind if needed and serve on a background thread."""
        if self._thread and self._thread.is_alive():
            logger.warning("Address listener already running")
            return

        self.bind()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.serve_forever, name="BingoBoard-Listener", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop serving and remove the control socket."""
        self._stop_event.set()

        if self._thread and self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=5.0)
        self._thread = None

        if self._server is not None:
            self._server.close()
            self._server = None
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(f"Could not remove control socket {self.path}: {e}")

        self._set_state(ListenerState.STOPPED)
        logger.info("Address listener stopped")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # ============================================================================
    # SERVING
    # ============================================================================

    def serve_forever(self) -> None:
        """Accept and handle clients one at a time until stopped."""
        self.bind()
        server = self._server

        while not self._stop_event.is_set():
            self._set_state(ListenerState.AWAITING_CONNECTION)
            try:
                conn, _ = server.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._stop_event.is_set():
                    break
                logger.error(f"Error waiting for a control channel client: {e}")
                self._stop_event.wait(timeout=self.interval)
                continue

            self._set_state(ListenerState.CONNECTED)
            self.handle_connection(conn)
            self.connections_served += 1

            # Rest a little after each client to avoid high CPU usage
            self._set_state(ListenerState.DRAINING)
            self._stop_event.wait(timeout=self.interval)

        logger.debug("Address listener loop ended")

    def handle_connection(self, conn: socket.socket) -> None:
        """Read one line from a client, apply it and close the connection."""
        # An address, an optional "\r\n" and one spare character
        limit = ADDRESS_LENGTH + 3
        try:
            conn.settimeout(self.read_timeout)
            with conn.makefile("r", encoding="utf-8", newline="") as reader:
                line = reader.readline(limit)
            if len(line) >= limit and not line.endswith("\n"):
                logger.debug(f"Ignoring control message longer than {limit - 1} characters")
                return
            self.handle_line(line)
        except UnicodeDecodeError as e:
            logger.debug(f"Ignoring undecodable control message: {e}")
        except OSError as e:
            # Broken pipe or client went away mid-read
            logger.error(f"Control channel read failed: {e}")
        finally:
            try:
                conn.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            conn.close()

    def handle_line(self, line: str) -> None:
        """Forward a received line to the board if it holds an address."""
        text = line.rstrip("\r\n")
        if len(text) != ADDRESS_LENGTH:
            logger.debug(f"Ignoring control message of length {len(text)}")
            return
        self.board.toggle_by_address(text)


def send_address(path: t.Union[str, Path], address: str, timeout: float = 5.0) -> None:
    """Send one address to a running board, the way an external client does.

    Raises:
        OSError: If the control channel cannot be reached
    """
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as client:
        client.settimeout(timeout)
        client.connect(os.fspath(path))
        client.sendall(f"{address}\n".encode("utf-8"))
