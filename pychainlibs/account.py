"""Account-model identities and their replay-protection counter."""

from __future__ import annotations

from typing import Type

from pychainlibs.address import Address, AddressKind
from pychainlibs.exception import (
    InvalidAddressInputException,
    InvalidArgumentException,
    InvalidOperationException,
)
from pychainlibs.hash import ConstrainedBytes
from pychainlibs.key import VerificationKey
from pychainlibs.network import Discrimination
from pychainlibs.serialization import CBORSerializable, limit_primitive_type

__all__ = [
    "ACCOUNT_IDENTIFIER_SIZE",
    "MAX_SPENDING_COUNTER",
    "AccountIdentifier",
    "SpendingCounter",
]

ACCOUNT_IDENTIFIER_SIZE = 32
MAX_SPENDING_COUNTER = 2**32 - 1


class AccountIdentifier(ConstrainedBytes):
    """Public key of an account, used by account inputs."""

    MAX_SIZE = MIN_SIZE = ACCOUNT_IDENTIFIER_SIZE

    @classmethod
    def from_address(cls, address: Address) -> AccountIdentifier:
        """Extract the account from an account address.

        Raises:
            InvalidAddressInputException: When the address is not an account address.
        """
        if address.kind != AddressKind.ACCOUNT:
            raise InvalidAddressInputException("Address is not account")
        return cls(address.payload)

    @classmethod
    def from_verification_key(cls, key: VerificationKey) -> AccountIdentifier:
        return cls(key.payload)

    def to_verification_key(self) -> VerificationKey:
        return VerificationKey(self.payload)

    def to_address(
        self, discrimination: Discrimination = Discrimination.PRODUCTION
    ) -> Address:
        return Address.account(self.payload, discrimination)


class SpendingCounter(CBORSerializable):
    """Per-account nonce carried by account witnesses.

    The counter is supplied by the caller; nothing in this package stores or
    advances it.

    Args:
        counter (int): Unsigned 32-bit value.
    """

    __slots__ = "_counter"

    def __init__(self, counter: int = 0):
        if not 0 <= counter <= MAX_SPENDING_COUNTER:
            raise InvalidArgumentException(
                f"Spending counter must be in [0, {MAX_SPENDING_COUNTER}], got {counter}."
            )
        self._counter = counter

    @classmethod
    def zero(cls) -> SpendingCounter:
        return cls(0)

    @classmethod
    def from_u32(cls, counter: int) -> SpendingCounter:
        return cls(counter)

    @property
    def counter(self) -> int:
        return self._counter

    def increment(self) -> SpendingCounter:
        """Counter to use for the next transaction of the same account.

        Raises:
            InvalidOperationException: When the counter is already at its maximum.
        """
        if self._counter == MAX_SPENDING_COUNTER:
            raise InvalidOperationException("Spending counter cannot be incremented further.")
        return SpendingCounter(self._counter + 1)

    def to_bytes(self) -> bytes:
        """Big endian encoding appended to the signed message of account witnesses."""
        return self._counter.to_bytes(4, byteorder="big")

    def to_primitive(self) -> int:
        return self._counter

    @classmethod
    @limit_primitive_type(int)
    def from_primitive(cls: Type[SpendingCounter], value: int) -> SpendingCounter:
        return cls(value)

    def __int__(self):
        return self._counter

    def __eq__(self, other):
        if isinstance(other, SpendingCounter):
            return self._counter == other._counter
        return False

    def __hash__(self):
        return hash(self._counter)

    def __repr__(self):
        return f"SpendingCounter({self._counter})"
