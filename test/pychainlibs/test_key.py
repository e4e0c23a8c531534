import json
import pathlib
import tempfile

import pytest

from pychainlibs.exception import DecodingException, InvalidKeyTypeException
from pychainlibs.hash import Hash
from pychainlibs.key import (
    ExtendedSigningKey,
    SigningKey,
    VerificationKey,
    signing_key_from_bech32,
)
from test.pychainlibs.util import TEST_SK_HEX, TEST_VK_HEX, check_two_way_cbor

SK = SigningKey.from_json(
    """{
        "type": "GenesisUTxOSigningKey_ed25519",
        "description": "Genesis Initial UTxO Signing Key",
        "cborHex": "5820093be5cd3987d0c9fd8854ef908f7746b69e2d73320db6dc0f780d81585b84c2"
    }"""
)

VK = VerificationKey.from_json(
    """{
        "type": "GenesisUTxOVerificationKey_ed25519",
        "description": "Genesis Initial UTxO Verification Key",
        "cborHex": "58208be8339e9f3addfa6810d59e2f072f85e64d4c024c087e0d24f8317c6544f62f"
    }"""
)


def test_key_load():
    assert SK.payload == bytes.fromhex(TEST_SK_HEX)
    assert SK.key_type == "GenesisUTxOSigningKey_ed25519"
    assert SK.description == "Genesis Initial UTxO Signing Key"


def test_verification_key_derivation():
    assert SK.to_verification_key().payload == bytes.fromhex(TEST_VK_HEX)
    assert VerificationKey.from_signing_key(SK).payload == VK.payload


def test_sign_and_verify():
    message = b"hello world"
    signature = SK.sign(message)
    assert len(signature) == 64
    assert VK.verify(signature, message)
    assert not VK.verify(signature, b"other message")
    assert not VK.verify(b"short", message)


def test_extended_sign_and_verify(extended_signing_key):
    message = b"hello world"
    signature = extended_signing_key.sign(message)
    vk = extended_signing_key.to_verification_key()
    assert isinstance(vk, VerificationKey)
    assert vk.verify(signature, message)
    assert not vk.verify(signature, message + b"!")


def test_extended_signature_is_deterministic(extended_signing_key):
    assert extended_signing_key.sign(b"abc") == extended_signing_key.sign(b"abc")


def test_generate():
    sk = SigningKey.generate()
    assert len(sk.payload) == 32
    xsk = ExtendedSigningKey.generate()
    assert len(xsk.payload) == 64
    assert xsk.to_verification_key().verify(xsk.sign(b"msg"), b"msg")


def test_wrong_payload_size():
    with pytest.raises(InvalidKeyTypeException):
        SigningKey(bytes(31))
    with pytest.raises(InvalidKeyTypeException):
        ExtendedSigningKey(bytes(32))


def test_bech32_round_trip(extended_signing_key):
    encoded = SK.to_bech32()
    assert encoded.startswith("ed25519_sk1")
    assert SigningKey.from_bech32(encoded).payload == SK.payload

    encoded = VK.to_bech32()
    assert encoded.startswith("ed25519_pk1")
    assert VerificationKey.from_bech32(encoded).payload == VK.payload

    encoded = extended_signing_key.to_bech32()
    assert encoded.startswith("ed25519e_sk1")
    assert len(encoded) > 90
    assert (
        ExtendedSigningKey.from_bech32(encoded).payload == extended_signing_key.payload
    )


def test_bech32_wrong_prefix():
    with pytest.raises(DecodingException):
        SigningKey.from_bech32(VK.to_bech32())


def test_bech32_bad_checksum():
    encoded = SK.to_bech32()
    last = "q" if encoded[-1] != "q" else "p"
    with pytest.raises(DecodingException):
        SigningKey.from_bech32(encoded[:-1] + last)


def test_signing_key_from_bech32(extended_signing_key):
    normal = signing_key_from_bech32(SK.to_bech32())
    assert isinstance(normal, SigningKey)
    assert normal.payload == SK.payload

    extended = signing_key_from_bech32(extended_signing_key.to_bech32())
    assert isinstance(extended, ExtendedSigningKey)
    assert extended.payload == extended_signing_key.payload

    with pytest.raises(DecodingException):
        signing_key_from_bech32(VK.to_bech32())


def test_key_hash():
    assert VK.hash() == Hash.hash_bytes(VK.payload)


def test_key_json():
    obj = json.loads(SK.to_json())
    assert obj["type"] == SK.key_type
    assert obj["cborHex"] == "5820" + TEST_SK_HEX
    assert SigningKey.from_json(SK.to_json()) == SK


def test_key_json_validate_type():
    with pytest.raises(InvalidKeyTypeException):
        SigningKey.from_json(SK.to_json(), validate_type=True)
    sk = SigningKey(SK.payload)
    assert SigningKey.from_json(sk.to_json(), validate_type=True) == sk


def test_key_save_load():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = str(pathlib.Path(tmpdir) / "key.skey")
        SK.save(path)
        assert SigningKey.load(path) == SK
        with pytest.raises(IOError):
            SK.save(path)


def test_key_cbor():
    check_two_way_cbor(SigningKey(SK.payload))
    check_two_way_cbor(VerificationKey(VK.payload))
    restored = SigningKey.from_cbor(SK.to_cbor())
    assert restored.payload == SK.payload
    assert restored.key_type == SigningKey.KEY_TYPE
