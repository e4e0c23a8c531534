from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from pychainlibs.address import Address
from pychainlibs.certificate import Certificate
from pychainlibs.exception import (
    CertificateAlreadySetException,
    InsufficientFundsException,
    InvalidArgumentException,
    MissingWitnessException,
    TransactionBuilderConsumedException,
    WitnessAlreadySetException,
    WitnessIndexOutOfRangeException,
    WitnessKindMismatchException,
)
from pychainlibs.fee import FeeAlgorithm, TransactionShape
from pychainlibs.hash import TransactionId
from pychainlibs.logging import log_state, logger
from pychainlibs.transaction import (
    GeneratedTransaction,
    Input,
    Output,
    PayloadKind,
    Transaction,
)
from pychainlibs.value import Balance, Value
from pychainlibs.witness import Witness

__all__ = [
    "OutputPolicyKind",
    "OutputPolicy",
    "TransactionBuilder",
    "TransactionFinalizer",
]


class OutputPolicyKind(Enum):
    FORGET = "forget"
    """Surplus is left to the ledger as extra fee"""

    ONE = "one"
    """Surplus is paid back to one change address"""


@dataclass(frozen=True)
class OutputPolicy:
    """What happens to the surplus of a balanced transaction at finalization.

    Build it with :meth:`forget` or :meth:`one`.
    """

    kind: OutputPolicyKind

    address: Optional[Address] = None

    def __post_init__(self):
        if self.kind == OutputPolicyKind.ONE and self.address is None:
            raise InvalidArgumentException("Output policy ONE needs a change address.")
        if self.kind == OutputPolicyKind.FORGET and self.address is not None:
            raise InvalidArgumentException("Output policy FORGET takes no address.")

    @classmethod
    def forget(cls) -> OutputPolicy:
        return cls(OutputPolicyKind.FORGET)

    @classmethod
    def one(cls, address: Union[Address, str]) -> OutputPolicy:
        if isinstance(address, str):
            address = Address.from_primitive(address)
        return cls(OutputPolicyKind.ONE, address)

    def apply(self, outputs: List[Output], surplus: Value) -> List[Output]:
        """Outputs of the finalized transaction given the caller outputs and a positive surplus."""
        if self.kind == OutputPolicyKind.FORGET:
            logger.debug(f"Forgetting surplus of {surplus}, it is paid as extra fee.")
            return list(outputs)
        elif self.kind == OutputPolicyKind.ONE:
            return list(outputs) + [Output(self.address, surplus)]
        raise InvalidArgumentException(f"Unknown output policy {self.kind}")


@dataclass
class TransactionBuilder:
    """A class builder that accumulates a transaction draft and finalizes it into a :class:`Transaction`.

    Inputs, outputs and the certificate are appended in call order, which is the order they have in the
    transaction. :meth:`finalize` and :meth:`unchecked_finalize` consume the builder: every later call on it
    raises :class:`TransactionBuilderConsumedException`.
    """

    _inputs: List[Input] = field(init=False, default_factory=lambda: [])

    _outputs: List[Output] = field(init=False, default_factory=lambda: [])

    _certificate: Optional[Certificate] = field(init=False, default=None)

    _consumed: bool = field(init=False, default=False)

    def _ensure_usable(self):
        if self._consumed:
            raise TransactionBuilderConsumedException(
                "Transaction builder was already finalized."
            )

    def _consume(self):
        self._ensure_usable()
        self._consumed = True

    def set_certificate(self, certificate: Certificate) -> TransactionBuilder:
        """Attach a certificate to the transaction.

        Args:
            certificate (Certificate): Certificate to carry.

        Returns:
            TransactionBuilder: Current transaction builder.

        Raises:
            CertificateAlreadySetException: When a certificate was set before.
        """
        self._ensure_usable()
        if self._certificate is not None:
            raise CertificateAlreadySetException("There is already one certificate")
        self._certificate = certificate
        return self

    def add_input(self, tx_input: Input) -> TransactionBuilder:
        """Add an input.

        Args:
            tx_input (Input): UTXO or account input to be added.

        Returns:
            TransactionBuilder: Current transaction builder.
        """
        self._ensure_usable()
        self._inputs.append(tx_input)
        return self

    def add_output(
        self, address: Union[Address, str], value: Union[Value, int]
    ) -> TransactionBuilder:
        """Add an output paying ``value`` to ``address``.

        Returns:
            TransactionBuilder: Current transaction builder.
        """
        self._ensure_usable()
        self._outputs.append(Output(address, Value(int(value))))
        return self

    @property
    def inputs(self) -> Tuple[Input, ...]:
        return tuple(self._inputs)

    @property
    def outputs(self) -> Tuple[Output, ...]:
        return tuple(self._outputs)

    @property
    def certificate(self) -> Optional[Certificate]:
        return self._certificate

    @property
    def payload_kind(self) -> PayloadKind:
        if self._certificate is None:
            return PayloadKind.NO_EXTRA
        return PayloadKind.CERTIFICATE

    @property
    def shape(self) -> TransactionShape:
        return TransactionShape(
            inputs=len(self._inputs),
            outputs=len(self._outputs),
            has_certificate=self._certificate is not None,
        )

    def _estimate_fee(self, fee_algorithm: FeeAlgorithm) -> Value:
        return fee_algorithm.calculate(self.shape)

    def _balance(self, fee: Value) -> Balance:
        provided = Value.sum(i.value for i in self._inputs)
        requested = Value.sum(o.value for o in self._outputs) + fee
        return Balance.compute(provided, requested)

    def estimate_fee(self, fee_algorithm: FeeAlgorithm) -> Value:
        """Fee the current draft owes under ``fee_algorithm``."""
        self._ensure_usable()
        return self._estimate_fee(fee_algorithm)

    def get_balance(self, fee_algorithm: FeeAlgorithm) -> Balance:
        """Balance of ``inputs - outputs - fee`` for the current draft.

        Raises:
            ValueOverflowException: When the inputs or the outputs plus fee overflow.
        """
        self._ensure_usable()
        return self._balance(self._estimate_fee(fee_algorithm))

    def get_balance_without_fee(self) -> Balance:
        """Balance of ``inputs - outputs`` for the current draft."""
        self._ensure_usable()
        return self._balance(Value(0))

    @log_state
    def finalize(
        self, fee_algorithm: FeeAlgorithm, output_policy: OutputPolicy
    ) -> Transaction:
        """Check the balance, settle the surplus and produce the transaction.

        The builder is consumed even when this raises.

        Args:
            fee_algorithm (FeeAlgorithm): Fee the transaction has to pay.
            output_policy (OutputPolicy): What to do with a positive balance.

        Returns:
            Transaction: The finalized transaction.

        Raises:
            InsufficientFundsException: When inputs cannot cover outputs plus fee.
            TransactionBuilderConsumedException: When the builder was already finalized.
        """
        self._consume()

        fee = self._estimate_fee(fee_algorithm)
        balance = self._balance(fee)

        outputs = list(self._outputs)
        if balance.is_negative:
            raise InsufficientFundsException(
                f"Not enough funds: inputs are short of outputs and fee ({fee}) by {balance.value}.",
                balance=balance,
            )
        elif balance.is_positive:
            outputs = output_policy.apply(outputs, balance.value)

        return Transaction(list(self._inputs), outputs, self._certificate)

    @log_state
    def unchecked_finalize(self) -> Transaction:
        """Produce the transaction from the draft as is.

        No fee is computed and the balance is not checked, the result may spend more than its
        inputs provide. Only use it when the balance was validated elsewhere.

        Raises:
            TransactionBuilderConsumedException: When the builder was already finalized.
        """
        self._consume()
        return Transaction(list(self._inputs), list(self._outputs), self._certificate)


class TransactionFinalizer:
    """Collects one witness per input of a finalized transaction.

    Args:
        transaction (Transaction): Transaction to witness.
        allow_overwrite (bool): Whether :meth:`set_witness` may replace a witness that was already set.
            Defaults to True, the last write wins.
    """

    def __init__(self, transaction: Transaction, allow_overwrite: bool = True):
        self._transaction = transaction
        self._payload_kind = transaction.payload_kind
        self._witnesses: List[Optional[Witness]] = [None] * len(transaction.inputs)
        self.allow_overwrite = allow_overwrite

    @property
    def transaction(self) -> Transaction:
        return self._transaction

    @property
    def payload_kind(self) -> PayloadKind:
        return self._payload_kind

    @property
    def witnesses(self) -> Tuple[Optional[Witness], ...]:
        return tuple(self._witnesses)

    def set_witness(self, index: int, witness: Witness) -> TransactionFinalizer:
        """Set the witness of the input at ``index``.

        Raises:
            WitnessIndexOutOfRangeException: When ``index`` is not the index of an input.
            WitnessKindMismatchException: When the witness kind does not match the input kind.
            WitnessAlreadySetException: When the slot is filled and overwriting is not allowed.
        """
        inputs = self._transaction.inputs
        if (
            isinstance(index, bool)
            or not isinstance(index, int)
            or not 0 <= index < len(inputs)
        ):
            raise WitnessIndexOutOfRangeException(
                f"Witness index {index} out of range, transaction has {len(inputs)} inputs."
            )

        tx_input = inputs[index]
        if not tx_input.accepts(witness):
            raise WitnessKindMismatchException(
                f"{type(witness).__name__} cannot witness {tx_input.kind.name} input at index {index}."
            )

        if self._witnesses[index] is not None:
            if not self.allow_overwrite:
                raise WitnessAlreadySetException(
                    f"Witness at index {index} is already set."
                )
            logger.warning(f"Overwriting witness at index {index}.")

        self._witnesses[index] = witness
        return self

    def get_txid(self) -> TransactionId:
        return self._transaction.id

    def missing_witnesses(self) -> List[int]:
        """Indices of inputs that have no witness yet."""
        return [i for i, w in enumerate(self._witnesses) if w is None]

    @log_state
    def build(self) -> GeneratedTransaction:
        """Bind the witnesses to the transaction.

        Calling it again returns an equal result.

        Raises:
            MissingWitnessException: When an input has no witness, the indices are in ``missing``.
        """
        missing = self.missing_witnesses()
        if missing:
            raise MissingWitnessException(
                f"Missing witnesses for inputs at indices {missing}.", missing=missing
            )
        return GeneratedTransaction(self._transaction, list(self._witnesses))
