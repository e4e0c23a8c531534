import pytest

from pychainlibs.account import AccountIdentifier
from pychainlibs.certificate import (
    StakeDelegation,
    StakeKeyDeregistration,
    StakeKeyRegistration,
    StakePoolRetirement,
)
from pychainlibs.exception import DeserializeException
from pychainlibs.hash import PoolId
from test.pychainlibs.util import check_two_way_cbor

STAKE_KEY = AccountIdentifier(bytes(range(32)))

POOL_ID = PoolId(bytes(range(32, 64)))


def test_stake_key_registration():
    cert = StakeKeyRegistration(STAKE_KEY)
    assert cert.to_primitive() == [0, STAKE_KEY.payload]
    check_two_way_cbor(cert)


def test_stake_key_deregistration():
    cert = StakeKeyDeregistration(STAKE_KEY)
    assert cert.to_primitive() == [1, STAKE_KEY.payload]
    check_two_way_cbor(cert)


def test_stake_delegation():
    cert = StakeDelegation(STAKE_KEY, POOL_ID)
    assert cert.to_primitive() == [2, STAKE_KEY.payload, POOL_ID.payload]
    check_two_way_cbor(cert)


def test_stake_pool_retirement():
    cert = StakePoolRetirement(POOL_ID, 1000)
    assert cert.to_primitive() == [3, POOL_ID.payload, 1000]
    check_two_way_cbor(cert)


def test_wrong_code():
    with pytest.raises(DeserializeException):
        StakeKeyRegistration.from_primitive([1, STAKE_KEY.payload])


def test_wrong_primitive_type():
    with pytest.raises(DeserializeException):
        StakeKeyRegistration.from_primitive(STAKE_KEY.payload)
