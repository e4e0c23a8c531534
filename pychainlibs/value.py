"""Amounts and the signed balance of a transaction draft."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Type, Union

from pychainlibs.exception import (
    InvalidArgumentException,
    ValueOverflowException,
    ValueUnderflowException,
)
from pychainlibs.serialization import CBORSerializable, limit_primitive_type
from pychainlibs.types import typechecked

__all__ = ["MAX_VALUE", "Value", "BalanceSign", "Balance"]

MAX_VALUE = 2**64 - 1


@typechecked
@dataclass(frozen=True, repr=False)
class Value(CBORSerializable):
    """Non-negative amount bounded by the unsigned 64-bit range.

    Arithmetic is checked: it raises instead of wrapping or going negative.
    """

    coin: int = 0

    def __post_init__(self):
        if self.coin < 0:
            raise ValueUnderflowException(f"Value cannot be negative, got {self.coin}.")
        if self.coin > MAX_VALUE:
            raise ValueOverflowException(
                f"Value cannot exceed {MAX_VALUE}, got {self.coin}."
            )

    @classmethod
    def sum(cls, values: Iterable[Union[Value, int]]) -> Value:
        """Checked sum of ``values``.

        Raises:
            ValueOverflowException: When a partial sum leaves the u64 range.
        """
        total = cls(0)
        for v in values:
            total = total + v
        return total

    def __add__(self, other: Union[Value, int]) -> Value:
        if isinstance(other, int):
            other = Value(other)
        result = self.coin + other.coin
        if result > MAX_VALUE:
            raise ValueOverflowException(f"{self.coin} + {other.coin} overflows.")
        return Value(result)

    def __radd__(self, other: int) -> Value:
        return self + other

    def __sub__(self, other: Union[Value, int]) -> Value:
        if isinstance(other, int):
            other = Value(other)
        if other.coin > self.coin:
            raise ValueUnderflowException(f"{self.coin} - {other.coin} underflows.")
        return Value(self.coin - other.coin)

    def __mul__(self, other: Union[Value, int]) -> Value:
        if isinstance(other, Value):
            other = other.coin
        result = self.coin * other
        if result > MAX_VALUE:
            raise ValueOverflowException(f"{self.coin} * {other} overflows.")
        return Value(result)

    def __eq__(self, other):
        if isinstance(other, int):
            return self.coin == other
        elif isinstance(other, Value):
            return self.coin == other.coin
        return False

    def __hash__(self):
        return hash(self.coin)

    def __le__(self, other: Union[Value, int]):
        return self.coin <= int(other)

    def __lt__(self, other: Union[Value, int]):
        return self.coin < int(other)

    def __ge__(self, other: Union[Value, int]):
        return self.coin >= int(other)

    def __gt__(self, other: Union[Value, int]):
        return self.coin > int(other)

    def __int__(self):
        return self.coin

    def __index__(self):
        return self.coin

    def to_primitive(self) -> int:
        return self.coin

    @classmethod
    @limit_primitive_type(int)
    def from_primitive(cls: Type[Value], value: int) -> Value:
        return cls(value)

    def __repr__(self):
        return f"Value({self.coin})"

    def __str__(self):
        return str(self.coin)


class BalanceSign(Enum):
    POSITIVE = "positive"
    """Inputs exceed outputs plus fee"""

    NEGATIVE = "negative"
    """Inputs cannot cover outputs plus fee"""

    ZERO = "zero"
    """Inputs match outputs plus fee exactly"""


@dataclass(frozen=True)
class Balance:
    """Signed difference between what a draft provides and what it requests.

    The magnitude is always a non-negative :class:`Value`, the direction is carried by
    :attr:`sign`, so callers have to branch on it.
    """

    sign: BalanceSign
    value: Value = field(default_factory=Value)

    def __post_init__(self):
        if (self.sign == BalanceSign.ZERO) != (self.value.coin == 0):
            raise InvalidArgumentException(
                f"Balance sign {self.sign.value} does not agree with magnitude {self.value}."
            )

    @classmethod
    def positive(cls, value: Union[Value, int]) -> Balance:
        return cls(BalanceSign.POSITIVE, Value(int(value)))

    @classmethod
    def negative(cls, value: Union[Value, int]) -> Balance:
        return cls(BalanceSign.NEGATIVE, Value(int(value)))

    @classmethod
    def zero(cls) -> Balance:
        return cls(BalanceSign.ZERO, Value(0))

    @classmethod
    def compute(cls, provided: Value, requested: Value) -> Balance:
        """Balance of ``provided - requested``."""
        if provided > requested:
            return cls.positive(provided - requested)
        elif provided < requested:
            return cls.negative(requested - provided)
        return cls.zero()

    def get_sign(self) -> str:
        return self.sign.value

    def get_value(self) -> Value:
        return self.value

    @property
    def is_positive(self) -> bool:
        return self.sign == BalanceSign.POSITIVE

    @property
    def is_negative(self) -> bool:
        return self.sign == BalanceSign.NEGATIVE

    @property
    def is_zero(self) -> bool:
        return self.sign == BalanceSign.ZERO
