"""Test that all modules can be imported correctly"""


def test_import_common_modules():
    """Test importing common modules"""
    from bingoboard.common.config import get_config, ConfigManager
    from bingoboard.common.enums import GridPivot, ListenerState
    from bingoboard.common.utils import pivot_offset, vec2

    assert GridPivot.CENTER is not None
    assert ListenerState.AWAITING_CONNECTION is not None


def test_import_layout_modules():
    """Test importing layout modules"""
    from bingoboard.layout import Grid, GridSlot, Padding

    assert Grid is not None
    assert Padding().total.tolist() == [0.0, 0.0]


def test_import_controller_modules():
    """Test importing controller modules"""
    from bingoboard.controller.board_controller import BoardController, Cell
    from bingoboard.controller.address import decode_address, encode_address

    assert Cell().marked is False


def test_import_ipc_modules():
    """Test importing IPC modules"""
    from bingoboard.ipc.listener import AddressListener, ListenerBindError, send_address

    assert issubclass(ListenerBindError, RuntimeError)
