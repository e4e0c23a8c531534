"""
Fee algorithms. A fee algorithm only sees the shape of a draft (how many inputs and outputs, whether a
certificate is attached), never its content.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pychainlibs.value import Value

__all__ = ["TransactionShape", "FeeAlgorithm", "LinearFee"]


@dataclass(frozen=True)
class TransactionShape:
    """Counts a fee algorithm is allowed to depend on."""

    inputs: int = 0

    outputs: int = 0

    has_certificate: bool = False


class FeeAlgorithm:
    """FeeAlgorithm defines an interface through which the fee owed by a transaction draft is computed."""

    def calculate(self, shape: TransactionShape) -> Value:
        """Fee required by a transaction of the given shape.

        Args:
            shape (TransactionShape): Input count, output count and certificate presence of the draft.

        Returns:
            Value: The fee.

        Raises:
            ValueOverflowException: When the fee does not fit into a :class:`Value`.
        """
        raise NotImplementedError()


class LinearFee(FeeAlgorithm):
    """
    Linear fee: ``constant + coefficient * inputs``, plus ``certificate`` when the draft carries a certificate.

    The input count is the size proxy, so the change output that an output policy may append at finalization
    does not change the fee that was estimated for the draft.

    Args:
        constant (Union[Value, int]): Flat part of the fee.
        coefficient (Union[Value, int]): Fee per input.
        certificate (Union[Value, int]): Extra fee for a transaction carrying a certificate.
    """

    def __init__(
        self,
        constant: Union[Value, int],
        coefficient: Union[Value, int],
        certificate: Union[Value, int] = 0,
    ):
        self.constant = Value(int(constant))
        self.coefficient = Value(int(coefficient))
        self.certificate = Value(int(certificate))

    def calculate(self, shape: TransactionShape) -> Value:
        fee = self.constant + self.coefficient * shape.inputs
        if shape.has_certificate:
            fee = fee + self.certificate
        return fee

    def __eq__(self, other):
        if not isinstance(other, LinearFee):
            return False
        return (
            self.constant == other.constant
            and self.coefficient == other.coefficient
            and self.certificate == other.certificate
        )

    def __repr__(self):
        return (
            f"LinearFee(constant={self.constant}, coefficient={self.coefficient}, "
            f"certificate={self.certificate})"
        )
