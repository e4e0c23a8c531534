"""Bech32 helpers for addresses and keys.

The checksum and bit conversion come from the ``bech32`` package. Its own
``bech32_decode`` refuses strings longer than 90 characters, which excludes
group addresses and extended secret keys, so the string is split here before
the checksum is verified.
"""

from typing import Tuple

from bech32 import CHARSET, bech32_encode, bech32_verify_checksum, convertbits

from pychainlibs.exception import DecodingException

__all__ = ["encode", "decode"]


def encode(hrp: str, data: bytes) -> str:
    """Encode ``data`` as a bech32 string with the human readable prefix ``hrp``.

    Args:
        hrp (str): Human readable prefix, e.g. "ta" or "ed25519_pk".
        data (bytes): Payload.

    Returns:
        str: Bech32 string.
    """
    five_bit = convertbits(data, 8, 5)
    if five_bit is None:
        raise DecodingException(f"Cannot convert {data.hex()} to 5-bit groups")
    return bech32_encode(hrp, five_bit)


def decode(bech: str) -> Tuple[str, bytes]:
    """Split a bech32 string into its prefix and payload.

    Args:
        bech (str): Bech32 string.

    Returns:
        Tuple[str, bytes]: The human readable prefix and the decoded payload.

    Raises:
        DecodingException: When the string is malformed or the checksum does not match.
    """
    if any(ord(c) < 33 or ord(c) > 126 for c in bech):
        raise DecodingException(f"Invalid character in bech32 string: {bech}")
    if bech.lower() != bech and bech.upper() != bech:
        raise DecodingException(f"Mixed case bech32 string: {bech}")

    bech = bech.lower()
    pos = bech.rfind("1")
    if pos < 1 or pos + 7 > len(bech):
        raise DecodingException(f"Missing bech32 separator or checksum: {bech}")

    hrp = bech[:pos]
    if not all(c in CHARSET for c in bech[pos + 1 :]):
        raise DecodingException(f"Invalid bech32 data part: {bech}")
    data = [CHARSET.find(c) for c in bech[pos + 1 :]]

    if not bech32_verify_checksum(hrp, data):
        raise DecodingException(f"Invalid bech32 checksum: {bech}")

    decoded = convertbits(data[:-6], 5, 8, False)
    if decoded is None:
        raise DecodingException(f"Invalid bech32 padding: {bech}")
    return hrp, bytes(decoded)
