from enum import Enum


class GridPivot(str, Enum):
    """Named anchor points of a grid or of a cell within it."""

    UPPER_LEFT = "upper_left"
    UPPER_CENTER = "upper_center"
    UPPER_RIGHT = "upper_right"
    CENTER_LEFT = "center_left"
    CENTER = "center"
    CENTER_RIGHT = "center_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_CENTER = "bottom_center"
    BOTTOM_RIGHT = "bottom_right"


class ListenerState(str, Enum):
    """States of the control channel listener."""

    IDLE = "idle"
    AWAITING_CONNECTION = "awaiting_connection"
    CONNECTED = "connected"
    DRAINING = "draining"
    STOPPED = "stopped"
