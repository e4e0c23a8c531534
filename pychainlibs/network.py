"""Address discrimination."""

from __future__ import annotations

from enum import Enum
from typing import Type

from pychainlibs.serialization import CBORSerializable, limit_primitive_type

__all__ = ["Discrimination"]


class Discrimination(CBORSerializable, Enum):
    """
    Network an address belongs to
    """

    PRODUCTION = 0
    TEST = 1

    def to_primitive(self) -> int:
        return self.value

    @classmethod
    @limit_primitive_type(int)
    def from_primitive(cls: Type[Discrimination], value: int) -> Discrimination:
        return cls(value)
