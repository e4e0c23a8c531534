"""Addresses that outputs pay to.

The binary form is one header byte followed by the key material. The low bits of
the header carry the :class:`AddressKind`, the high bit is set for test
discrimination. The readable form is bech32 with the prefix ``ca`` on
production and ``ta`` on test.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Type, Union

from pychainlibs.crypto.bech32 import decode, encode
from pychainlibs.exception import (
    DecodingException,
    InvalidAddressInputException,
    InvalidDataException,
)
from pychainlibs.key import VerificationKey
from pychainlibs.network import Discrimination
from pychainlibs.serialization import CBORSerializable, limit_primitive_type

__all__ = ["AddressKind", "Address", "PRODUCTION_HRP", "TEST_HRP"]

PRODUCTION_HRP = "ca"
TEST_HRP = "ta"

KEY_SIZE = 32
TEST_DISCRIMINATION_BIT = 0x80


class AddressKind(Enum):
    """
    Address kind definition.
    """

    SINGLE = 0x3
    """Spending key only"""

    GROUP = 0x4
    """Spending key + account key of a group"""

    ACCOUNT = 0x5
    """Account key, spent with account witnesses"""

    MULTISIG = 0x6
    """Multisig account identifier"""

    @property
    def payload_size(self) -> int:
        if self == AddressKind.GROUP:
            return KEY_SIZE * 2
        return KEY_SIZE


class Address(CBORSerializable):
    """An address of any kind.

    Args:
        kind (AddressKind): Kind of the address.
        payload (bytes): Key material following the header byte. 64 bytes for group
            addresses (spending key then account key), 32 bytes otherwise.
        discrimination (Discrimination): Network the address belongs to.
    """

    def __init__(
        self,
        kind: AddressKind,
        payload: bytes,
        discrimination: Discrimination = Discrimination.PRODUCTION,
    ):
        if len(payload) != kind.payload_size:
            raise InvalidAddressInputException(
                f"{kind.name} address expects {kind.payload_size} bytes of payload, got {len(payload)}."
            )
        self._kind = kind
        self._payload = bytes(payload)
        self._discrimination = discrimination

    @classmethod
    def single(
        cls,
        spending_key: VerificationKey,
        discrimination: Discrimination = Discrimination.PRODUCTION,
    ) -> Address:
        return cls(AddressKind.SINGLE, spending_key.payload, discrimination)

    @classmethod
    def group(
        cls,
        spending_key: VerificationKey,
        account_key: VerificationKey,
        discrimination: Discrimination = Discrimination.PRODUCTION,
    ) -> Address:
        return cls(
            AddressKind.GROUP,
            spending_key.payload + account_key.payload,
            discrimination,
        )

    @classmethod
    def account(
        cls,
        account_key: Union[VerificationKey, bytes],
        discrimination: Discrimination = Discrimination.PRODUCTION,
    ) -> Address:
        return cls(AddressKind.ACCOUNT, bytes(account_key), discrimination)

    @classmethod
    def multisig(
        cls,
        identifier: bytes,
        discrimination: Discrimination = Discrimination.PRODUCTION,
    ) -> Address:
        return cls(AddressKind.MULTISIG, identifier, discrimination)

    @property
    def kind(self) -> AddressKind:
        """Kind of the address."""
        return self._kind

    @property
    def payload(self) -> bytes:
        """Key material without the header byte."""
        return self._payload

    @property
    def discrimination(self) -> Discrimination:
        """Network this address belongs to."""
        return self._discrimination

    @property
    def is_account(self) -> bool:
        return self.kind == AddressKind.ACCOUNT

    @property
    def spending_key(self) -> Optional[VerificationKey]:
        """Spending key of single and group addresses, None for the other kinds."""
        if self.kind in (AddressKind.SINGLE, AddressKind.GROUP):
            return VerificationKey(self.payload[:KEY_SIZE])
        return None

    @property
    def account_key(self) -> Optional[VerificationKey]:
        """Account key of account and group addresses, None for the other kinds."""
        if self.kind == AddressKind.ACCOUNT:
            return VerificationKey(self.payload)
        elif self.kind == AddressKind.GROUP:
            return VerificationKey(self.payload[KEY_SIZE:])
        return None

    @property
    def header_byte(self) -> bytes:
        """Header byte that identifies the kind and discrimination of the address."""
        header = self.kind.value
        if self.discrimination == Discrimination.TEST:
            header |= TEST_DISCRIMINATION_BIT
        return header.to_bytes(1, byteorder="big")

    @property
    def hrp(self) -> str:
        """Human-readable prefix for bech32 encoder."""
        if self.discrimination == Discrimination.TEST:
            return TEST_HRP
        return PRODUCTION_HRP

    def __bytes__(self):
        return self.header_byte + self.payload

    def encode(self) -> str:
        """Encode the address in Bech32 format.

        Returns:
            str: Encoded address in Bech32.
        """
        return encode(self.hrp, bytes(self))

    @classmethod
    def decode(cls, data: str) -> Address:
        """Decode a bech32 string into an address object.

        Any human readable prefix is accepted, the header byte decides the
        discrimination.

        Args:
            data (str): Bech32-encoded string.

        Returns:
            Address: Decoded address.

        Raises:
            DecodingException: When the input string is not a valid address.
        """
        return cls.from_primitive(data)

    def to_string(self) -> str:
        return self.encode()

    @classmethod
    def from_string(cls, data: str) -> Address:
        return cls.decode(data)

    def to_primitive(self) -> bytes:
        return bytes(self)

    @classmethod
    @limit_primitive_type(bytes, str)
    def from_primitive(cls: Type[Address], value: Union[bytes, str]) -> Address:
        if isinstance(value, str):
            _, value = decode(value)

        if not value:
            raise DecodingException("Empty address payload.")

        header = value[0]
        if header & TEST_DISCRIMINATION_BIT:
            discrimination = Discrimination.TEST
        else:
            discrimination = Discrimination.PRODUCTION

        try:
            kind = AddressKind(header & 0x7F)
        except ValueError as e:
            raise DecodingException(f"Unknown address kind in header {header:#x}") from e

        try:
            return cls(kind, value[1:], discrimination)
        except (InvalidAddressInputException, InvalidDataException) as e:
            raise DecodingException(f"Cannot decode {kind.name} address: {e}") from e

    def __eq__(self, other):
        if not isinstance(other, Address):
            return False
        else:
            return (
                other.kind == self.kind
                and other.payload == self.payload
                and other.discrimination == self.discrimination
            )

    def __hash__(self):
        return hash(bytes(self))

    def __str__(self):
        return self.encode()

    def __repr__(self):
        return f"{self.encode()}"
