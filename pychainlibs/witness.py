"""Per-input transaction witnesses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from pprintpp import pformat

from pychainlibs.account import SpendingCounter
from pychainlibs.exception import DeserializeException, InvalidDataException
from pychainlibs.hash import Hash, TransactionId
from pychainlibs.key import ExtendedSigningKey, SigningKey, VerificationKey
from pychainlibs.serialization import CodedSerializable, ImmutableMixin, Primitive

__all__ = [
    "SIGNATURE_SIZE",
    "UtxoWitness",
    "AccountWitness",
    "Witness",
    "for_utxo",
    "for_account",
    "witness_from_primitive",
]

SIGNATURE_SIZE = 64


def _utxo_message(genesis_hash: Hash, transaction_id: TransactionId) -> bytes:
    return genesis_hash.payload + transaction_id.payload


def _account_message(
    genesis_hash: Hash,
    transaction_id: TransactionId,
    spending_counter: SpendingCounter,
) -> bytes:
    return _utxo_message(genesis_hash, transaction_id) + spending_counter.to_bytes()


def _check_signature(signature: bytes):
    if len(signature) != SIGNATURE_SIZE:
        raise InvalidDataException(
            f"Signature must be {SIGNATURE_SIZE} bytes, got {len(signature)}."
        )


@dataclass(repr=False)
class UtxoWitness(ImmutableMixin, CodedSerializable):
    """Proof that the owner of a UTXO input authorized the transaction.

    The signature covers ``genesis_hash || transaction_id``.
    """

    _CODE: int = field(init=False, default=0)
    signature: bytes

    def __post_init__(self):
        _check_signature(self.signature)

    @classmethod
    def sign(
        cls,
        genesis_hash: Hash,
        transaction_id: TransactionId,
        signing_key: Union[SigningKey, ExtendedSigningKey],
    ) -> UtxoWitness:
        return cls(signing_key.sign(_utxo_message(genesis_hash, transaction_id)))

    def verify(
        self,
        verification_key: VerificationKey,
        genesis_hash: Hash,
        transaction_id: TransactionId,
    ) -> bool:
        return verification_key.verify(
            self.signature, _utxo_message(genesis_hash, transaction_id)
        )

    def __repr__(self):
        return pformat({"kind": "utxo", "signature": self.signature.hex()}, indent=2)


@dataclass(repr=False)
class AccountWitness(ImmutableMixin, CodedSerializable):
    """Proof that the owner of an account input authorized the transaction.

    The signature covers ``genesis_hash || transaction_id || spending_counter`` with the counter
    as 4 big endian bytes, so a witness cannot be replayed once the account counter moved on.
    """

    _CODE: int = field(init=False, default=1)
    signature: bytes
    spending_counter: SpendingCounter

    def __post_init__(self):
        _check_signature(self.signature)

    @classmethod
    def sign(
        cls,
        genesis_hash: Hash,
        transaction_id: TransactionId,
        signing_key: Union[SigningKey, ExtendedSigningKey],
        spending_counter: SpendingCounter,
    ) -> AccountWitness:
        message = _account_message(genesis_hash, transaction_id, spending_counter)
        return cls(signing_key.sign(message), spending_counter)

    def verify(
        self,
        verification_key: VerificationKey,
        genesis_hash: Hash,
        transaction_id: TransactionId,
    ) -> bool:
        message = _account_message(genesis_hash, transaction_id, self.spending_counter)
        return verification_key.verify(self.signature, message)

    def __repr__(self):
        return pformat(
            {
                "kind": "account",
                "signature": self.signature.hex(),
                "spending_counter": self.spending_counter.counter,
            },
            indent=2,
        )


Witness = Union[UtxoWitness, AccountWitness]


def for_utxo(
    genesis_hash: Hash,
    transaction_id: TransactionId,
    signing_key: Union[SigningKey, ExtendedSigningKey],
) -> UtxoWitness:
    """Witness for a UTXO input of the transaction ``transaction_id``."""
    return UtxoWitness.sign(genesis_hash, transaction_id, signing_key)


def for_account(
    genesis_hash: Hash,
    transaction_id: TransactionId,
    signing_key: Union[SigningKey, ExtendedSigningKey],
    spending_counter: SpendingCounter,
) -> AccountWitness:
    """Witness for an account input of the transaction ``transaction_id``."""
    return AccountWitness.sign(
        genesis_hash, transaction_id, signing_key, spending_counter
    )


def witness_from_primitive(value: Primitive) -> Witness:
    """Restore a witness of either kind from its ``[code, ...]`` form.

    Raises:
        DeserializeException: When the value is not a list or carries an unknown code.
    """
    if not isinstance(value, (list, tuple)) or not value:
        raise DeserializeException(f"Expect a non-empty list for a witness, got {value}")
    if value[0] == UtxoWitness._CODE:
        return UtxoWitness.from_primitive(value)
    elif value[0] == AccountWitness._CODE:
        return AccountWitness.from_primitive(value)
    raise DeserializeException(f"Unknown witness type {value[0]}")
