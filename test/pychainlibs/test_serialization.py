import json
import pathlib
import tempfile
from dataclasses import dataclass, field
from typing import List, Optional, Union

import pytest

from pychainlibs.exception import DeserializeException
from pychainlibs.serialization import (
    ArrayCBORSerializable,
    CBORSerializable,
    CodedSerializable,
    limit_primitive_type,
    list_hook,
)
from pychainlibs.transaction import Output
from pychainlibs.value import Value
from test.pychainlibs.util import check_two_way_cbor


@dataclass
class Inner(ArrayCBORSerializable):
    a: int
    b: Optional[bytes] = field(default=None, metadata={"optional": True})


@dataclass
class Outer(ArrayCBORSerializable):
    name: str
    inner: Inner
    items: List[Inner] = field(
        default_factory=list, metadata={"object_hook": list_hook(Inner)}
    )


@dataclass
class First(CodedSerializable):
    _CODE: int = field(init=False, default=0)
    value: int


@dataclass
class Second(CodedSerializable):
    _CODE: int = field(init=False, default=1)
    value: str


@dataclass
class Holder(ArrayCBORSerializable):
    choice: Union[First, Second]


def test_array_serializable():
    outer = Outer("x", Inner(1), [Inner(2, b"\x01")])
    assert outer.to_primitive() == ["x", [1], [[2, b"\x01"]]]
    check_two_way_cbor(outer)


def test_array_too_many_items():
    with pytest.raises(DeserializeException):
        Inner.from_primitive([1, b"", 3])


def test_array_wrong_type():
    with pytest.raises(DeserializeException):
        Inner.from_primitive("abc")


def test_coded_serializable():
    assert First(5).to_primitive() == [0, 5]
    assert First.from_primitive([0, 5]) == First(5)
    with pytest.raises(DeserializeException):
        First.from_primitive([1, 5])


def test_union_restored_by_code():
    check_two_way_cbor(Holder(First(3)))
    check_two_way_cbor(Holder(Second("three")))
    assert Holder.from_primitive([[1, "x"]]).choice == Second("x")


def test_validate_rejects_wrong_type():
    with pytest.raises(TypeError):
        Inner("not an int").validate()


def test_from_cbor_invalid_payload():
    with pytest.raises(DeserializeException):
        Value.from_cbor("zz")
    with pytest.raises(DeserializeException):
        Value.from_cbor(b"\xff\xff")


def test_limit_primitive_type():
    class Test(CBORSerializable):
        @classmethod
        @limit_primitive_type(int)
        def from_primitive(cls, value):
            return value

    assert Test.from_primitive(1) == 1
    with pytest.raises(DeserializeException):
        Test.from_primitive("1")


def test_cbor_hex(address):
    output = Output(address, 10)
    assert Output.from_cbor(output.to_cbor_hex()) == output


def test_json_envelope(address):
    output = Output(address, 10)
    obj = json.loads(output.to_json())
    assert obj["type"] == "Output"
    assert obj["cborHex"] == output.to_cbor_hex()
    assert Output.from_json(output.to_json()) == output


def test_save_load(address):
    output = Output(address, 10)
    with tempfile.TemporaryDirectory() as tmpdir:
        path = str(pathlib.Path(tmpdir) / "output.json")
        output.save(path)
        assert Output.load(path) == output
        with pytest.raises(IOError):
            output.save(path)
