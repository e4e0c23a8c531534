"""Cryptographic keys used to witness transaction inputs and to build addresses."""

from __future__ import annotations

import json
import os
from typing import Type, Union

from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey as NACLSigningKey
from nacl.signing import VerifyKey

from pychainlibs.crypto.bech32 import decode, encode
from pychainlibs.crypto.ed25519 import ExtendedEd25519PrivateKey
from pychainlibs.exception import DecodingException, InvalidKeyTypeException
from pychainlibs.hash import Hash
from pychainlibs.serialization import CBORSerializable, limit_primitive_type

__all__ = [
    "Key",
    "SigningKey",
    "ExtendedSigningKey",
    "VerificationKey",
    "signing_key_from_bech32",
]


class Key(CBORSerializable):
    """A class that holds a cryptographic key and some metadata. e.g. signing key, verification key."""

    KEY_TYPE = ""
    DESCRIPTION = ""
    BECH32_HRP = ""
    PAYLOAD_SIZE = 0

    def __init__(self, payload: bytes, key_type: str = None, description: str = None):
        if self.PAYLOAD_SIZE and len(payload) != self.PAYLOAD_SIZE:
            raise InvalidKeyTypeException(
                f"{self.__class__.__name__} expects {self.PAYLOAD_SIZE} bytes, got {len(payload)}."
            )
        self._payload = payload
        self._key_type = key_type or self.KEY_TYPE
        self._description = description or self.DESCRIPTION

    @property
    def payload(self) -> bytes:
        return self._payload

    @property
    def key_type(self) -> str:
        return self._key_type

    @property
    def description(self) -> str:
        return self._description

    def to_primitive(self) -> bytes:
        return self.payload

    @classmethod
    @limit_primitive_type(bytes)
    def from_primitive(cls: Type["Key"], value: bytes) -> Key:
        return cls(value)

    def to_bech32(self) -> str:
        return encode(self.BECH32_HRP, self.payload)

    @classmethod
    def from_bech32(cls: Type["Key"], data: str) -> Key:
        """Restore a key from its bech32 form.

        Raises:
            DecodingException: When the string is not bech32, carries another key prefix,
                or has the wrong payload size.
        """
        hrp, payload = decode(data)
        if hrp != cls.BECH32_HRP:
            raise DecodingException(
                f"Expect bech32 prefix '{cls.BECH32_HRP}' for {cls.__name__}, got '{hrp}'."
            )
        try:
            return cls(payload)
        except InvalidKeyTypeException as e:
            raise DecodingException(str(e)) from e

    def to_json(self, **kwargs) -> str:
        """Serialize the key to JSON.

        The json output has three fields: "type", "description", and "cborHex".

        Returns:
            str: JSON representation of the key.
        """
        return json.dumps(
            {
                "type": self.key_type,
                "description": self.description,
                "cborHex": self.to_cbor_hex(),
            }
        )

    @classmethod
    def from_json(cls, data: str, validate_type=False) -> Key:
        """Restore a key from a JSON string.

        Args:
            data (str): JSON string.
            validate_type (bool): Checks whether the type specified in json object is the same
                as the class's default type.

        Returns:
            Key: The key restored from JSON.

        Raises:
            InvalidKeyTypeException: When `validate_type=True` and the type in json is not equal to the default type
                of the Key class used.
        """
        obj = json.loads(data)

        if validate_type and obj["type"] != cls.KEY_TYPE:
            raise InvalidKeyTypeException(
                f"Expect key type: {cls.KEY_TYPE}, got {obj['type']} instead."
            )

        return cls(
            cls.from_cbor(obj["cborHex"]).payload,
            key_type=obj["type"],
            description=obj["description"],
        )

    def save(self, path: str, **kwargs):
        if os.path.isfile(path):
            if os.stat(path).st_size > 0:
                raise IOError(f"File {path} already exists!")
        with open(path, "w") as f:
            f.write(self.to_json())

    @classmethod
    def load(cls, path: str):
        with open(path) as f:
            return cls.from_json(f.read())

    def __bytes__(self):
        return self.payload

    def __eq__(self, other):
        if not isinstance(other, Key):
            return False
        else:
            return (
                self.payload == other.payload
                and self.description == other.description
                and self.key_type == other.key_type
            )

    def __hash__(self):
        return hash(self.payload)

    def __repr__(self) -> str:
        return self.to_json()


class SigningKey(Key):
    KEY_TYPE = "SigningKeyEd25519"
    DESCRIPTION = "Signing Key"
    BECH32_HRP = "ed25519_sk"
    PAYLOAD_SIZE = 32

    def sign(self, data: bytes) -> bytes:
        signed_message = NACLSigningKey(self.payload).sign(data)
        return signed_message.signature

    def to_verification_key(self) -> VerificationKey:
        verification_key = NACLSigningKey(self.payload).verify_key
        return VerificationKey(bytes(verification_key))

    @classmethod
    def generate(cls) -> SigningKey:
        signing_key = NACLSigningKey.generate()
        return cls(bytes(signing_key))


class ExtendedSigningKey(Key):
    KEY_TYPE = "ExtendedSigningKeyEd25519"
    DESCRIPTION = "Extended Signing Key"
    BECH32_HRP = "ed25519e_sk"
    PAYLOAD_SIZE = 64

    def sign(self, data: bytes) -> bytes:
        return ExtendedEd25519PrivateKey(self.payload).sign(data)

    def to_verification_key(self) -> VerificationKey:
        return VerificationKey(ExtendedEd25519PrivateKey(self.payload).public_key)

    @classmethod
    def generate(cls) -> ExtendedSigningKey:
        return cls(ExtendedEd25519PrivateKey.generate().private_key)


class VerificationKey(Key):
    KEY_TYPE = "VerificationKeyEd25519"
    DESCRIPTION = "Verification Key"
    BECH32_HRP = "ed25519_pk"
    PAYLOAD_SIZE = 32

    def verify(self, signature: bytes, data: bytes) -> bool:
        """Check an Ed25519 signature over ``data``.

        Returns:
            bool: False when the signature does not match, instead of raising.
        """
        try:
            VerifyKey(self.payload).verify(data, signature)
        except (BadSignatureError, ValueError):
            return False
        return True

    def hash(self) -> Hash:
        """Compute a blake2b hash from the key

        Returns:
            Hash: Hash output in bytes.
        """
        return Hash.hash_bytes(self.payload)

    @classmethod
    def from_signing_key(
        cls, key: Union[SigningKey, ExtendedSigningKey]
    ) -> VerificationKey:
        return key.to_verification_key()


def signing_key_from_bech32(data: str) -> Union[SigningKey, ExtendedSigningKey]:
    """Decode a bech32 secret key of either flavour.

    The extended form is tried first, then the normal one.

    Raises:
        DecodingException: When the string is neither an extended nor a normal secret key.
    """
    try:
        return ExtendedSigningKey.from_bech32(data)
    except DecodingException:
        return SigningKey.from_bech32(data)
