"""Certificates: non-transfer ledger actions a transaction may carry, at most one per transaction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from pychainlibs.account import AccountIdentifier
from pychainlibs.hash import PoolId
from pychainlibs.serialization import CodedSerializable, ImmutableMixin

__all__ = [
    "Certificate",
    "StakeKeyRegistration",
    "StakeKeyDeregistration",
    "StakeDelegation",
    "StakePoolRetirement",
]


@dataclass(repr=False)
class StakeKeyRegistration(ImmutableMixin, CodedSerializable):
    """Certificate for registering a stake key."""

    _CODE: int = field(init=False, default=0)
    stake_key: AccountIdentifier
    """The stake key being registered"""


@dataclass(repr=False)
class StakeKeyDeregistration(ImmutableMixin, CodedSerializable):
    """Certificate for deregistering a stake key."""

    _CODE: int = field(init=False, default=1)
    stake_key: AccountIdentifier
    """The stake key being deregistered"""


@dataclass(repr=False)
class StakeDelegation(ImmutableMixin, CodedSerializable):
    """Certificate for delegating stake to a stake pool."""

    _CODE: int = field(init=False, default=2)
    stake_key: AccountIdentifier
    """The stake key being delegated"""

    pool_id: PoolId
    """The pool to delegate to"""


@dataclass(repr=False)
class StakePoolRetirement(ImmutableMixin, CodedSerializable):
    """Certificate for retiring a stake pool."""

    _CODE: int = field(init=False, default=3)
    pool_id: PoolId
    """The pool that is being retired"""

    retirement_time: int
    """The time from which the pool stops operating"""


Certificate = Union[
    StakeKeyRegistration,
    StakeKeyDeregistration,
    StakeDelegation,
    StakePoolRetirement,
]
