"""Test control channel address decoding"""
import pytest

from bingoboard.common.constants import INVALID_INDEX
from bingoboard.controller.address import decode_address, decode_address_char, encode_address


@pytest.mark.parametrize(
    "char,expected",
    [("a", 0), ("e", 4), ("z", 25), ("A", 0), ("Z", 25), ("1", 0), ("9", 8), ("0", INVALID_INDEX)],
)
def test_decode_char(char, expected):
    """Test letters and digits decode to zero-based positions"""
    assert decode_address_char(char) == expected


@pytest.mark.parametrize("char", ["!", " ", "\n", "é", "", "ab"])
def test_decode_char_invalid(char):
    """Test anything but a single letter or digit is rejected"""
    assert decode_address_char(char) == INVALID_INDEX


def test_decode_address():
    """Test the first character is the column and the second the row"""
    assert decode_address("a1") == (0, 0)
    assert decode_address("b2") == (1, 1)
    assert decode_address("E5") == (4, 4)
    assert decode_address("c1") == (2, 0)
    assert decode_address("1c") == (0, 2)


@pytest.mark.parametrize("address", [None, "", "a", "a1b", "0a", "a0", "?1", "a?"])
def test_decode_address_malformed(address):
    """Test malformed addresses decode to None"""
    assert decode_address(address) is None


def test_encode_address():
    """Test building addresses for clients"""
    assert encode_address(0, 0) == "a1"
    assert encode_address(4, 2) == "e3"
    assert encode_address(25, 8) == "z9"
    assert encode_address(26, 0) is None
    assert encode_address(0, 9) is None
    assert decode_address(encode_address(3, 7)) == (3, 7)
