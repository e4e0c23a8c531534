"""Defines CBOR serialization interfaces and provides useful serialization classes."""

from __future__ import annotations

import json
import os
import typing
from collections import OrderedDict, defaultdict
from dataclasses import Field, dataclass, field, fields
from functools import wraps
from inspect import getfullargspec, isclass
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    List,
    Optional,
    Type,
    TypeVar,
    Union,
    cast,
    get_type_hints,
)

from cbor2 import CBOREncoder, CBORTag, FrozenDict, dumps
from frozenlist import FrozenList
from pprintpp import pformat

from pychainlibs.cbor import cbor2
from pychainlibs.exception import DeserializeException, InvalidOperationException
from pychainlibs.types import typechecked

__all__ = [
    "default_encoder",
    "Primitive",
    "CBORBase",
    "CBORSerializable",
    "ArrayCBORSerializable",
    "CodedSerializable",
    "ImmutableMixin",
    "list_hook",
    "limit_primitive_type",
]

Primitive = Union[
    bytes,
    bytearray,
    str,
    int,
    bool,
    None,
    tuple,
    list,
    dict,
    defaultdict,
    OrderedDict,
    CBORTag,
    FrozenDict,
    FrozenList,
]

PRIMITIVE_TYPES = (
    bytes,
    bytearray,
    str,
    int,
    bool,
    type(None),
    tuple,
    list,
    dict,
    defaultdict,
    OrderedDict,
    CBORTag,
    FrozenDict,
    FrozenList,
)
"""
A list of types that could be encoded by
`Cbor2 encoder <https://cbor2.readthedocs.io/en/latest/modules/encoder.html>`_ directly.
"""


def limit_primitive_type(*allowed_types):
    """
    A helper function to validate primitive type given to from_primitive class methods

    Not exposed to public by intention.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(cls, value: Primitive):
            if not isinstance(value, allowed_types):
                allowed_types_str = [
                    allowed_type.__name__ for allowed_type in allowed_types
                ]
                raise DeserializeException(
                    f"{allowed_types_str} typed value is required for deserialization. Got {type(value)}: {value}"
                )
            return func(cls, value)

        return wrapper

    return decorator


CBORBase = TypeVar("CBORBase", bound="CBORSerializable")


def default_encoder(encoder: CBOREncoder, value: Union[CBORSerializable, FrozenList]):
    """A fallback function that encodes CBORSerializable to CBOR"""
    assert isinstance(value, (CBORSerializable, FrozenList, FrozenDict)), (
        f"Type of input value is not CBORSerializable, " f"got {type(value)} instead."
    )
    if isinstance(value, FrozenList):
        encoder.encode(list(value))
    elif isinstance(value, FrozenDict):
        encoder.encode(dict(value))
    else:
        encoder.encode(value.to_validated_primitive())


@typechecked
class CBORSerializable:
    """
    CBORSerializable standardizes the interfaces a class should implement in order for it to be serialized to and
    deserialized from CBOR.

    Two required interfaces to implement are :meth:`to_primitive` and :meth:`from_primitive`.
    :meth:`to_primitive` converts an object to a CBOR primitive type (see :const:`Primitive`), which could be then
    encoded by CBOR library. :meth:`from_primitive` restores an object from a CBOR primitive type.

    To convert a CBORSerializable to CBOR, use :meth:`to_cbor`.
    To restore a CBORSerializable from CBOR, use :meth:`from_cbor`.

    .. note::
        An alternative to implementing :meth:`to_primitive` is to implement :meth:`to_shallow_primitive`, which may
        return child :class:`CBORSerializable` objects that are converted recursively.
    """

    def to_shallow_primitive(self) -> Union[Primitive, CBORSerializable]:
        """
        Convert the instance to a CBOR primitive. If the primitive is a container, e.g. list, dict, the type of
        its elements could be either a Primitive or a CBORSerializable.

        Returns:
            :const:`Primitive`: A CBOR primitive.
        """
        raise NotImplementedError(
            f"'to_shallow_primitive()' is not implemented by {self.__class__}."
        )

    def to_primitive(self) -> Primitive:
        """Convert the instance and its elements to CBOR primitives recursively.

        Returns:
            :const:`Primitive`: A CBOR primitive.
        """
        result = self.to_shallow_primitive()

        def _dfs(value, freeze=False):
            if isinstance(value, CBORSerializable):
                return _dfs(value.to_primitive(), freeze)
            elif isinstance(value, (dict, OrderedDict, defaultdict)):
                _dict = type(value)()
                for k, v in value.items():
                    _dict[_dfs(k, freeze=True)] = _dfs(v, freeze)
                if freeze:
                    return FrozenDict(_dict)
                return _dict
            elif isinstance(value, tuple):
                return tuple(_dfs(v, freeze) for v in value)
            elif isinstance(value, (FrozenList, list)):
                _list = [_dfs(v, freeze) for v in value]
                if not (freeze or isinstance(value, FrozenList)):
                    return _list
                fl = FrozenList(_list)
                fl.freeze()
                return fl
            elif isinstance(value, CBORTag):
                return CBORTag(value.tag, _dfs(value.value, freeze))
            else:
                return value

        return _dfs(result)

    def validate(self):
        """Validate the data stored in the current instance against its type hints.

        Raises:
            TypeError: When a field does not match its declared type.
        """
        type_hints = get_type_hints(self.__class__)

        def _check_recursive(value, type_hint):
            if type_hint is Any:
                return True

            if isinstance(value, CBORSerializable):
                value.validate()

            origin = getattr(type_hint, "__origin__", None)
            if origin is None:
                return isinstance(value, type_hint)
            elif origin is ClassVar:
                return _check_recursive(value, type_hint.__args__[0])
            elif origin is Union:
                return any(_check_recursive(value, arg) for arg in type_hint.__args__)
            elif origin is list:
                return all(_check_recursive(item, type_hint.__args__[0]) for item in value)
            return True  # We don't know how to check this type

        for field_name, field_type in type_hints.items():
            field_value = getattr(self, field_name)
            if not _check_recursive(field_value, field_type):
                raise TypeError(
                    f"Field '{field_name}' should be of type {field_type}, "
                    f"got {repr(field_value)} instead."
                )

    def to_validated_primitive(self) -> Primitive:
        """Convert the instance and its elements to CBOR primitives recursively with data validated by :meth:`validate`
        method.

        Returns:
            :const:`Primitive`: A CBOR primitive.
        """
        self.validate()
        return self.to_primitive()

    @classmethod
    def from_primitive(
        cls: Type[CBORBase], value: Any, type_args: Optional[tuple] = None
    ) -> CBORBase:
        """Turn a CBOR primitive to its original class type.

        Args:
            cls (CBORBase): The original class type.
            value (:const:`Primitive`): A CBOR primitive.
            type_args (Optional[tuple]): Type arguments for the class.

        Returns:
            CBORBase: A CBOR serializable object.

        Raises:
            DeserializeException: When the object could not be restored from primitives.
        """
        raise NotImplementedError(
            f"'from_primitive()' is not implemented by {cls.__name__}."
        )

    def to_cbor(self) -> bytes:
        """Encode a Python object into CBOR bytes.

        Returns:
            bytes: Python object encoded in cbor bytes.
        """
        return dumps(self, default=default_encoder)

    def to_cbor_hex(self) -> str:
        """Encode a Python object into CBOR hex.

        Returns:
            str: Python object encoded in cbor hex string.
        """
        return self.to_cbor().hex()

    @classmethod
    def from_cbor(cls: Type[CBORBase], payload: Union[str, bytes]) -> CBORBase:
        """Restore a CBORSerializable object from a CBOR.

        Args:
            payload (Union[str, bytes]): CBOR bytes or hex string to restore from.

        Returns:
            CBORBase: Restored CBORSerializable object of the specific subclass type.

        Raises:
            DeserializeException: When the payload is not valid CBOR (or CBOR hex) for this type.
        """
        if type(payload) is str:
            try:
                payload = bytes.fromhex(payload)
            except ValueError as e:
                raise DeserializeException(f"Invalid CBOR hex: {e}") from e

        assert isinstance(payload, bytes)

        try:
            value = cbor2.loads(payload)
        except cbor2.CBORDecodeError as e:
            raise DeserializeException(f"Invalid CBOR payload: {e}") from e

        return cls.from_primitive(value)

    def __repr__(self):
        return pformat(vars(self), indent=2)

    @property
    def json_type(self) -> str:
        """Class name used as the "type" field of the JSON envelope."""
        return self.__class__.__name__

    @property
    def json_description(self) -> str:
        """Class docstring used as the "description" field of the JSON envelope."""
        return self.__class__.__doc__ or "Generated with PyChainLibs"

    def to_json(
        self,
        key_type: Optional[str] = None,
        description: Optional[str] = None,
        **kwargs,
    ) -> str:
        """
        Convert the CBORSerializable object to a JSON string containing type, description, and CBOR hex.

        Args:
            key_type (str): The type to use in the JSON output. Defaults to the class name.
            description (str): The description to use in the JSON output. Defaults to the class docstring.
            **kwargs: Extra key word arguments to be passed to `json.dumps()`

        Returns:
            str: The JSON string representation of the object.
        """
        if "indent" not in kwargs:
            kwargs["indent"] = 2

        return json.dumps(
            {
                "type": key_type or self.json_type,
                "description": description or self.json_description,
                "cborHex": self.to_cbor_hex(),
            },
            **kwargs,
        )

    @classmethod
    def from_json(cls: Type[CBORBase], data: str) -> CBORBase:
        """
        Load a CBORSerializable object from a JSON string containing its CBOR hex representation.

        Args:
            data (str): The JSON string to load the object from.

        Returns:
            CBORSerializable: The loaded CBORSerializable object.

        Raises:
            DeserializeException: If the loaded object is not of the expected type.
        """
        obj = json.loads(data)

        k = cls.from_cbor(obj["cborHex"])

        if not isinstance(k, cls):
            raise DeserializeException(
                f"Expected type {cls.__name__} but got {type(k).__name__}."
            )

        return k

    def save(
        self,
        path: str,
        key_type: Optional[str] = None,
        description: Optional[str] = None,
        **kwargs,
    ):
        """
        Save the CBORSerializable object to a file in JSON format.

        Args:
            path (str): The file path to save the object to.
            key_type (str, optional): The type to use in the JSON output. Defaults to the class name.
            description (str, optional): The description to use in the JSON output. Defaults to the class docstring.
            **kwargs: Extra key word arguments to be passed to `json.dumps()`

        Raises:
            IOError: If the file already exists and is not empty.
        """
        if os.path.isfile(path) and os.stat(path).st_size > 0:
            raise IOError(f"File {path} already exists!")
        with open(path, "w") as f:
            f.write(self.to_json(key_type=key_type, description=description, **kwargs))

    @classmethod
    def load(cls, path: str):
        """
        Load a CBORSerializable object from a file containing its JSON representation.

        Args:
            path (str): The file path to load the object from.

        Returns:
            CBORSerializable: The loaded CBORSerializable object.
        """
        with open(path) as f:
            return cls.from_json(f.read())


def _restore_dataclass_field(
    f: Field, v: Primitive
) -> Union[Primitive, CBORSerializable]:
    """Try to restore a value back to its original type based on information given in field.

    Args:
        f (dataclass_field): A data class field.
        v (:const:`Primitive`): A CBOR primitive.

    Returns:
        Union[:const:`Primitive`, CBORSerializable]: A CBOR primitive or a CBORSerializable.
    """

    if "object_hook" in f.metadata:
        return f.metadata["object_hook"](v)
    return _restore_typed_primitive(cast(Any, f.type), v)


def _restore_typed_primitive(
    t: typing.Type, v: Primitive
) -> Union[Primitive, CBORSerializable]:
    """Try to restore a value back to its original type.

    Args:
        t (type): A type
        v (:const:`Primitive`): A CBOR primitive.

    Returns:
        Union[:const:`Primitive`, CBORSerializable]: A CBOR primitive or a CBORSerializable.
    """
    is_cbor_serializable = False
    try:
        is_cbor_serializable = issubclass(t, CBORSerializable)
    except TypeError:
        pass

    if t is Any or (t in PRIMITIVE_TYPES and isinstance(v, t)):
        return v
    elif is_cbor_serializable:
        if "type_args" in getfullargspec(t.from_primitive).args:
            args = typing.get_args(t)
            return t.from_primitive(v, type_args=args)
        else:
            return t.from_primitive(v)
    elif hasattr(t, "__origin__") and (t.__origin__ is list):
        t_args = t.__args__
        if len(t_args) != 1:
            raise DeserializeException(
                f"List types need exactly one type argument, but got {t_args}"
            )
        if not isinstance(v, list):
            raise DeserializeException(f"Expected type list but got {type(v)}")
        return [_restore_typed_primitive(t_args[0], w) for w in v]
    elif hasattr(t, "__origin__") and (t.__origin__ is Union):
        t_args = t.__args__
        for t in t_args:
            try:
                return _restore_typed_primitive(t, v)
            except DeserializeException:
                pass
        raise DeserializeException(
            f"Cannot deserialize object: \n{v}\n in any valid type from {t_args}."
        )
    raise DeserializeException(f"Cannot deserialize object: \n{v}\n to type {t}.")


ArrayBase = TypeVar("ArrayBase", bound="ArrayCBORSerializable")
"""A generic type that is bounded by ArrayCBORSerializable."""


@dataclass(repr=False)
class ArrayCBORSerializable(CBORSerializable):
    """
    A base class that can serialize its child `dataclass <https://docs.python.org/3/library/dataclasses.html>`_
    into a `CBOR array <https://datatracker.ietf.org/doc/html/rfc8610#section-3.4>`_.

    The class is useful when the position of each item in a list have its own semantic meaning.

    Examples:

        >>> from dataclasses import dataclass, field
        >>> @dataclass
        ... class Test1(ArrayCBORSerializable):
        ...     a: str
        ...     b: str=field(default=None, metadata={"optional": True})
        >>> @dataclass
        ... class Test2(ArrayCBORSerializable):
        ...     c: str
        ...     test1: Test1
        >>> t = Test2(c="c", test1=Test1(a="a"))
        >>> t.to_primitive() # Notice below that attribute "b" is not included in converted primitive.
        ['c', ['a']]

        A field whose metadata has "optional" set to True is left out of the array when its value is `None`.

        .. Note::
            In ArrayCBORSerializable, all non-optional fields have to be declared before any optional field.
    """

    def to_shallow_primitive(self) -> Primitive:
        primitives = []
        for f in fields(self):
            val = getattr(self, f.name)
            if val is None and f.metadata.get("optional"):
                continue
            primitives.append(val)
        return primitives

    @classmethod
    @limit_primitive_type(list, tuple)
    def from_primitive(
        cls: Type[ArrayBase], values: Union[list, tuple]
    ) -> ArrayBase:
        """Restore a primitive value to its original class type.

        Args:
            cls (ArrayBase): The original class type.
            values (List[Primitive]): A list whose elements are CBOR primitives.

        Returns:
            :const:`ArrayBase`: Restored object.

        Raises:
            DeserializeException: When the object could not be restored from primitives.
        """
        all_fields = [f for f in fields(cls) if f.init]
        if len(values) > len(all_fields):
            raise DeserializeException(
                f"{cls.__name__} expects at most {len(all_fields)} items, got {len(values)}."
            )

        restored_vals = []
        type_hints = get_type_hints(cls)
        for f, v in zip(all_fields, values):
            if not isclass(f.type):
                f.type = type_hints[f.name]
            v = _restore_dataclass_field(f, v)
            restored_vals.append(v)
        try:
            return cls(*restored_vals)
        except TypeError as e:
            raise DeserializeException(f"Cannot restore {cls.__name__}: {e}") from e

    def __repr__(self):
        return super().__repr__()


@dataclass(repr=False)
class CodedSerializable(ArrayCBORSerializable):
    """A base class for CBORSerializable types that have a specific code.

    This class provides a mechanism to validate the type of the object based on its first element.

    Examples:
        >>> from dataclasses import dataclass, field
        >>> @dataclass
        ... class TestCoded(CodedSerializable):
        ...     _CODE: int = field(init=False, default=1)
        ...     value: str
        >>> TestCoded("hello").to_primitive()
        [1, 'hello']
        >>> TestCoded.from_primitive([1, "hello"]).value
        'hello'
    """

    _CODE: int = field(init=False)

    @classmethod
    @limit_primitive_type(list, tuple)
    def from_primitive(
        cls: Type[CodedSerializable], values: Union[list, tuple]
    ) -> CodedSerializable:
        if not values or values[0] != cls._CODE:
            raise DeserializeException(
                f"Invalid {cls.__name__} type {values[0] if values else None}"
            )
        return cast(Type[CodedSerializable], super()).from_primitive(values[1:])



class ImmutableMixin:
    """Refuses assignment to an attribute once it is set.

    Dataclasses deriving from :class:`ArrayCBORSerializable` cannot be declared frozen, so ledger objects whose
    encoding feeds a transaction id mix this in instead. Conversions in ``__post_init__`` have to go through
    ``object.__setattr__``.
    """

    def __setattr__(self, name, value):
        if name in self.__dict__:
            raise InvalidOperationException(
                f"{self.__class__.__name__} is immutable, cannot set {name}."
            )
        super().__setattr__(name, value)

    def __delattr__(self, name):
        raise InvalidOperationException(
            f"{self.__class__.__name__} is immutable, cannot delete {name}."
        )


@typechecked
def list_hook(
    cls: Type[CBORBase],
) -> Callable[[List[Primitive]], List[CBORBase]]:
    """A factory that generates a Callable which turns a list of Primitive to a list of CBORSerializables.

    Args:
        cls (CBORBase): The type of CBORSerializable the list will be converted to.

    Returns:
        Callable[[List[Primitive]], List[CBORBase]]: An Callable that restores a list of Primitive to a list of
            CBORSerializables.
    """

    def _hook(vals):
        if not isinstance(vals, (list, tuple)):
            raise DeserializeException(f"Expected type list but got {type(vals)}")
        return [cls.from_primitive(v) for v in vals]

    return _hook
