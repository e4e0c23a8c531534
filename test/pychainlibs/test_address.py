import pytest

from pychainlibs.address import Address, AddressKind
from pychainlibs.crypto.bech32 import encode
from pychainlibs.exception import DecodingException, InvalidAddressInputException
from pychainlibs.key import SigningKey
from pychainlibs.network import Discrimination
from test.pychainlibs.util import check_two_way_cbor


def test_single_address(verification_key):
    addr = Address.single(verification_key)
    assert addr.kind == AddressKind.SINGLE
    assert addr.discrimination == Discrimination.PRODUCTION
    assert addr.header_byte == b"\x03"
    assert bytes(addr) == b"\x03" + verification_key.payload
    assert addr.encode().startswith("ca1")
    assert addr.spending_key == verification_key
    assert addr.account_key is None
    assert not addr.is_account


def test_test_discrimination(verification_key):
    addr = Address.single(verification_key, Discrimination.TEST)
    assert addr.header_byte == b"\x83"
    assert addr.hrp == "ta"
    assert addr.encode().startswith("ta1")


def test_account_address(verification_key):
    addr = Address.account(verification_key, Discrimination.TEST)
    assert addr.kind == AddressKind.ACCOUNT
    assert addr.header_byte == b"\x85"
    assert addr.is_account
    assert addr.account_key == verification_key
    assert addr.spending_key is None


def test_group_address(verification_key):
    account_key = SigningKey(bytes(range(32))).to_verification_key()
    addr = Address.group(verification_key, account_key, Discrimination.TEST)
    assert addr.kind == AddressKind.GROUP
    assert len(bytes(addr)) == 65
    assert addr.spending_key == verification_key
    assert addr.account_key == account_key
    encoded = addr.encode()
    assert len(encoded) > 90
    assert Address.decode(encoded) == addr


def test_multisig_address():
    addr = Address.multisig(bytes(range(32)))
    assert addr.kind == AddressKind.MULTISIG
    assert addr.header_byte == b"\x06"
    assert addr.spending_key is None
    assert addr.account_key is None


def test_string_round_trip(address):
    encoded = address.to_string()
    restored = Address.from_string(encoded)
    assert restored == address
    assert str(restored) == encoded
    assert Address.from_primitive(encoded) == address


def test_decode_accepts_any_prefix(verification_key):
    addr = Address.single(verification_key, Discrimination.TEST)
    custom = encode("addr", bytes(addr))
    assert Address.decode(custom) == addr


def test_wrong_payload_size():
    with pytest.raises(InvalidAddressInputException):
        Address(AddressKind.SINGLE, bytes(31))
    with pytest.raises(InvalidAddressInputException):
        Address(AddressKind.GROUP, bytes(32))


def test_decode_invalid():
    with pytest.raises(DecodingException):
        Address.decode("not an address")
    with pytest.raises(DecodingException):
        Address.from_primitive(b"")
    with pytest.raises(DecodingException):
        Address.from_primitive(b"\x01" + bytes(32))
    with pytest.raises(DecodingException):
        Address.from_primitive(b"\x03" + bytes(31))


def test_equality_and_hash(verification_key):
    production = Address.single(verification_key)
    test = Address.single(verification_key, Discrimination.TEST)
    assert production != test
    assert production != bytes(production)
    assert len({production, Address.single(verification_key), test}) == 2


def test_address_cbor(address):
    assert address.to_primitive() == bytes(address)
    check_two_way_cbor(address)
