import pytest
from typeguard import TypeCheckError

from pychainlibs.exception import (
    InvalidArgumentException,
    ValueArithmeticException,
    ValueOverflowException,
    ValueUnderflowException,
)
from pychainlibs.value import MAX_VALUE, Balance, BalanceSign, Value
from test.pychainlibs.util import check_two_way_cbor


def test_value_arithmetic():
    assert Value(10) + Value(5) == Value(15)
    assert Value(10) + 5 == 15
    assert 5 + Value(10) == Value(15)
    assert Value(10) - 4 == Value(6)
    assert Value(3) * 4 == Value(12)
    assert int(Value(42)) == 42


def test_value_comparison():
    assert Value(1) < Value(2)
    assert Value(2) <= 2
    assert Value(3) > 2
    assert Value(3) >= Value(3)
    assert Value(3) != Value(4)
    assert Value(3) != "3"


def test_value_bounds():
    with pytest.raises(ValueUnderflowException):
        Value(-1)
    with pytest.raises(ValueOverflowException):
        Value(MAX_VALUE + 1)
    Value(MAX_VALUE)


def test_value_overflow():
    with pytest.raises(ValueOverflowException):
        Value(MAX_VALUE) + 1
    with pytest.raises(ValueOverflowException):
        Value(MAX_VALUE) * 2


def test_value_underflow():
    with pytest.raises(ValueUnderflowException):
        Value(1) - Value(2)


def test_arithmetic_errors_share_base():
    with pytest.raises(ValueArithmeticException):
        Value(0) - 1


def test_value_sum():
    assert Value.sum([Value(1), 2, Value(3)]) == Value(6)
    assert Value.sum([]) == Value(0)
    with pytest.raises(ValueOverflowException):
        Value.sum([Value(MAX_VALUE), Value(1)])


def test_value_hashable():
    assert len({Value(1), Value(1), Value(2)}) == 2


def test_value_cbor():
    assert Value(1000).to_primitive() == 1000
    assert Value.from_primitive(1000) == Value(1000)
    check_two_way_cbor(Value(MAX_VALUE))


def test_balance_compute():
    assert Balance.compute(Value(10), Value(3)) == Balance.positive(7)
    assert Balance.compute(Value(3), Value(10)) == Balance.negative(7)
    assert Balance.compute(Value(5), Value(5)) == Balance.zero()


def test_balance_accessors():
    positive = Balance.positive(289)
    assert positive.get_sign() == "positive"
    assert positive.get_value() == Value(289)
    assert positive.is_positive and not positive.is_negative and not positive.is_zero

    negative = Balance.negative(50)
    assert negative.get_sign() == "negative"
    assert negative.sign == BalanceSign.NEGATIVE
    assert negative.get_value() == Value(50)

    zero = Balance.zero()
    assert zero.get_sign() == "zero"
    assert zero.get_value() == Value(0)
    assert zero.is_zero


def test_balance_sign_must_agree_with_magnitude():
    with pytest.raises(InvalidArgumentException):
        Balance(BalanceSign.POSITIVE, Value(0))
    with pytest.raises(InvalidArgumentException):
        Balance(BalanceSign.ZERO, Value(1))


def test_value_operand_type_checked():
    with pytest.raises(TypeCheckError):
        Value(1) + "1"
    with pytest.raises(TypeCheckError):
        Value(1) - 1.5
