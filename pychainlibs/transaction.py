"""Definitions of transaction-related data types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Type, Union

from pychainlibs.account import AccountIdentifier
from pychainlibs.address import Address
from pychainlibs.certificate import Certificate
from pychainlibs.exception import (
    DeserializeException,
    InvalidArgumentException,
    InvalidTransactionException,
)
from pychainlibs.fee import TransactionShape
from pychainlibs.hash import TransactionId
from pychainlibs.serialization import (
    ArrayCBORSerializable,
    CBORSerializable,
    ImmutableMixin,
    Primitive,
    limit_primitive_type,
    list_hook,
)
from pychainlibs.value import Balance, Value
from pychainlibs.witness import (
    AccountWitness,
    UtxoWitness,
    Witness,
    witness_from_primitive,
)

__all__ = [
    "MAX_OUTPUT_INDEX",
    "InputKind",
    "PayloadKind",
    "UtxoPointer",
    "Input",
    "Output",
    "Transaction",
    "GeneratedTransaction",
]

MAX_OUTPUT_INDEX = 255


class InputKind(Enum):
    UTXO = 0
    ACCOUNT = 1


class PayloadKind(Enum):
    """Extra payload carried by a transaction besides inputs and outputs."""

    NO_EXTRA = 0
    CERTIFICATE = 1


@dataclass(repr=False)
class UtxoPointer(ImmutableMixin, ArrayCBORSerializable):
    """Reference to an output of a previous transaction, with the value it holds."""

    transaction_id: TransactionId

    output_index: int

    value: Value

    def __post_init__(self):
        if isinstance(self.value, int):
            object.__setattr__(self, "value", Value(self.value))
        if (
            not isinstance(self.output_index, int)
            or not 0 <= self.output_index <= MAX_OUTPUT_INDEX
        ):
            raise InvalidArgumentException(
                f"Output index must be in [0, {MAX_OUTPUT_INDEX}], got {self.output_index}."
            )

    def __hash__(self):
        return hash((self.transaction_id, self.output_index, self.value))


@dataclass(frozen=True, repr=False)
class Input(CBORSerializable):
    """Spendable value referenced by a transaction.

    Use :meth:`from_utxo` or :meth:`from_account` rather than the constructor.
    """

    kind: InputKind

    value: Value

    utxo_pointer: Optional[UtxoPointer] = None

    account: Optional[AccountIdentifier] = None

    def __post_init__(self):
        if self.kind == InputKind.UTXO:
            if self.utxo_pointer is None or self.account is not None:
                raise InvalidArgumentException("UTXO input needs a pointer and no account.")
            if self.utxo_pointer.value != self.value:
                raise InvalidArgumentException(
                    "UTXO input value must equal the value of its pointer."
                )
        elif self.kind == InputKind.ACCOUNT:
            if self.account is None or self.utxo_pointer is not None:
                raise InvalidArgumentException("Account input needs an account and no pointer.")
        else:
            raise InvalidArgumentException(f"Unknown input kind {self.kind}")

    @classmethod
    def from_utxo(cls, utxo_pointer: UtxoPointer) -> Input:
        return cls(InputKind.UTXO, utxo_pointer.value, utxo_pointer=utxo_pointer)

    @classmethod
    def from_account(cls, account: AccountIdentifier, value: Union[Value, int]) -> Input:
        return cls(InputKind.ACCOUNT, Value(int(value)), account=account)

    def accepts(self, witness: Witness) -> bool:
        """Whether ``witness`` is of the kind that can authorize this input."""
        if self.kind == InputKind.UTXO:
            return isinstance(witness, UtxoWitness)
        elif self.kind == InputKind.ACCOUNT:
            return isinstance(witness, AccountWitness)
        return False

    def to_shallow_primitive(self) -> list:
        if self.kind == InputKind.UTXO:
            return [
                self.kind.value,
                self.utxo_pointer.transaction_id,
                self.utxo_pointer.output_index,
                self.value,
            ]
        else:
            return [self.kind.value, self.account, self.value]

    @classmethod
    @limit_primitive_type(list, tuple)
    def from_primitive(cls: Type[Input], values: Union[list, tuple]) -> Input:
        if values and values[0] == InputKind.UTXO.value and len(values) == 4:
            pointer = UtxoPointer(
                TransactionId.from_primitive(values[1]),
                values[2],
                Value.from_primitive(values[3]),
            )
            return cls.from_utxo(pointer)
        elif values and values[0] == InputKind.ACCOUNT.value and len(values) == 3:
            return cls.from_account(
                AccountIdentifier.from_primitive(values[1]),
                Value.from_primitive(values[2]),
            )
        raise DeserializeException(f"Invalid input {values}")

    def __repr__(self):
        if self.kind == InputKind.UTXO:
            return (
                f"Input(utxo={self.utxo_pointer.transaction_id}#{self.utxo_pointer.output_index}, "
                f"value={self.value})"
            )
        return f"Input(account={self.account}, value={self.value})"


@dataclass(repr=False)
class Output(ImmutableMixin, ArrayCBORSerializable):
    """Value paid to an address."""

    address: Address

    value: Value

    def __post_init__(self):
        if isinstance(self.address, str):
            object.__setattr__(self, "address", Address.from_primitive(self.address))
        if isinstance(self.value, int):
            object.__setattr__(self, "value", Value(self.value))

    def __hash__(self):
        return hash((self.address, self.value))


@dataclass(repr=False)
class Transaction(ImmutableMixin, ArrayCBORSerializable):
    """Finalized, unwitnessed transaction.

    Inputs and outputs are stored as tuples of immutable objects and never change after construction,
    so :attr:`id` is stable for the lifetime of the object.
    """

    inputs: Sequence[Input] = field(
        default_factory=tuple, metadata={"object_hook": list_hook(Input)}
    )

    outputs: Sequence[Output] = field(
        default_factory=tuple, metadata={"object_hook": list_hook(Output)}
    )

    certificate: Optional[Certificate] = field(
        default=None, metadata={"optional": True}
    )

    def __post_init__(self):
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))

    @property
    def id(self) -> TransactionId:
        """Blake2b-256 digest of the CBOR encoding of the transaction."""
        return TransactionId.hash_bytes(self.to_cbor())

    @property
    def payload_kind(self) -> PayloadKind:
        if self.certificate is None:
            return PayloadKind.NO_EXTRA
        return PayloadKind.CERTIFICATE

    @property
    def shape(self) -> TransactionShape:
        return TransactionShape(
            inputs=len(self.inputs),
            outputs=len(self.outputs),
            has_certificate=self.certificate is not None,
        )

    def total_input(self) -> Value:
        return Value.sum(i.value for i in self.inputs)

    def total_output(self) -> Value:
        return Value.sum(o.value for o in self.outputs)

    def balance(self, fee: Union[Value, int] = 0) -> Balance:
        """Balance of the transaction once ``fee`` is paid."""
        return Balance.compute(self.total_input(), self.total_output() + fee)

    def __hash__(self):
        return hash(self.id)


def _witness_list_hook(values: Primitive) -> list:
    if not isinstance(values, (list, tuple)):
        raise DeserializeException(f"Expected type list but got {type(values)}")
    return [witness_from_primitive(v) for v in values]


@dataclass(repr=False)
class GeneratedTransaction(ImmutableMixin, ArrayCBORSerializable):
    """A transaction with one witness per input, ready for submission."""

    transaction: Transaction

    witnesses: Sequence[Witness] = field(
        default_factory=tuple, metadata={"object_hook": _witness_list_hook}
    )

    def __post_init__(self):
        object.__setattr__(self, "witnesses", tuple(self.witnesses))
        inputs = self.transaction.inputs
        if len(self.witnesses) != len(inputs):
            raise InvalidTransactionException(
                f"Transaction has {len(inputs)} inputs but {len(self.witnesses)} witnesses."
            )
        for i, (tx_input, witness) in enumerate(zip(inputs, self.witnesses)):
            if not tx_input.accepts(witness):
                raise InvalidTransactionException(
                    f"Witness at index {i} ({type(witness).__name__}) does not match "
                    f"{tx_input.kind.name} input."
                )

    @property
    def id(self) -> TransactionId:
        """Identifier of the wrapped transaction. Witnesses are not part of it."""
        return self.transaction.id

    def __hash__(self):
        return hash((self.id, tuple(w.to_cbor() for w in self.witnesses)))
