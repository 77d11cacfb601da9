"""
Address Decoding

Two-character cell addresses used by the control channel ("a1" is the
upper-left cell). The first character selects the column, the second the row.
Letters a-z map to 0-25 and digits map to one less than their value, so "1"
is the first column or row and "0" never matches anything.
"""

import typing as t

from bingoboard.common.constants import ADDRESS_LENGTH, INVALID_INDEX


def decode_address_char(char: str) -> int:
    """Decode one address character to a zero-based column or row.

    Returns INVALID_INDEX for characters outside a-z and 0-9.
    """
    if len(char) != 1:
        return INVALID_INDEX

    char = char.lower()
    if "a" <= char <= "z":
        return ord(char) - ord("a")
    if "0" <= char <= "9":
        return ord(char) - ord("0") - 1
    return INVALID_INDEX


def decode_address(address: t.Optional[str]) -> t.Optional[t.Tuple[int, int]]:
    """Decode an address to (column, row), or None if it is malformed."""
    if not address or len(address) != ADDRESS_LENGTH:
        return None

    column = decode_address_char(address[0])
    row = decode_address_char(address[1])
    if column < 0 or row < 0:
        return None
    return column, row


def encode_address(column: int, row: int) -> t.Optional[str]:
    """Build the address for a column (0-25) and row (0-8), letter column and digit row."""
    if not (0 <= column < 26 and 0 <= row < 9):
        return None
    return f"{chr(ord('a') + column)}{row + 1}"
