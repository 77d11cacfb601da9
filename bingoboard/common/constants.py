"""Shared constants for the bingo board."""

# Sentinel returned for coordinates or indices outside the grid
INVALID_INDEX = -1

# Control channel
ADDRESS_LENGTH = 2
DEFAULT_PIPE_NAME = "BingoPipe"
LISTENER_INTERVAL = 0.1  # seconds to rest between connections
ACCEPT_POLL_INTERVAL = 0.5  # seconds between stop checks while waiting for a client

# Board defaults
DEFAULT_COLUMNS = 5
DEFAULT_ROWS = 5
MIN_FPS = 1.0
