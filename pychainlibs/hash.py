"""Fixed-size digests used by the ledger: transaction ids, key hashes and pool ids."""

from typing import Type, TypeVar, Union

from nacl.encoding import RawEncoder
from nacl.hash import blake2b

from pychainlibs.exception import DecodingException, InvalidDataException
from pychainlibs.serialization import CBORSerializable, limit_primitive_type

__all__ = [
    "HASH_SIZE",
    "TRANSACTION_HASH_SIZE",
    "POOL_ID_SIZE",
    "ConstrainedBytes",
    "Hash",
    "TransactionId",
    "PoolId",
]

HASH_SIZE = 32
TRANSACTION_HASH_SIZE = 32
POOL_ID_SIZE = 32


T = TypeVar("T", bound="ConstrainedBytes")


class ConstrainedBytes(CBORSerializable):
    """A wrapped class of bytes with constrained size.

    Args:
        payload (bytes): Hash in bytes.
    """

    __slots__ = "_payload"

    MAX_SIZE = 32
    MIN_SIZE = 0

    def __init__(self, payload: bytes):
        if not self.MIN_SIZE <= len(payload) <= self.MAX_SIZE:
            raise InvalidDataException(
                f"Invalid byte size: {len(payload)} for class {self.__class__.__name__}, "
                f"expected size range: [{self.MIN_SIZE}, {self.MAX_SIZE}]"
            )
        self._payload = bytes(payload)

    def __bytes__(self):
        return self.payload

    def __hash__(self):
        return hash(self.payload)

    @property
    def payload(self) -> bytes:
        return self._payload

    def to_primitive(self) -> bytes:
        return self.payload

    @classmethod
    @limit_primitive_type(bytes, str)
    def from_primitive(cls: Type[T], value: Union[bytes, str]) -> T:
        if isinstance(value, str):
            return cls.from_hex(value)
        try:
            return cls(value)
        except InvalidDataException as e:
            raise DecodingException(str(e)) from e

    @classmethod
    def from_hex(cls: Type[T], value: str) -> T:
        """Restore the digest from its hex form.

        Raises:
            DecodingException: When the string is not hex or has the wrong length.
        """
        try:
            return cls(bytes.fromhex(value))
        except (ValueError, InvalidDataException) as e:
            raise DecodingException(
                f"Cannot decode {cls.__name__} from hex string '{value}': {e}"
            ) from e

    @classmethod
    def hash_bytes(cls: Type[T], data: bytes) -> T:
        """Blake2b digest of ``data``, sized to fit the class."""
        return cls(blake2b(data, cls.MAX_SIZE, encoder=RawEncoder))

    def __eq__(self, other):
        if isinstance(other, ConstrainedBytes):
            return self.payload == other.payload
        else:
            return False

    def __repr__(self):
        return f"{self.__class__.__name__}(hex='{self.payload.hex()}')"

    def __str__(self):
        return self.payload.hex()


class Hash(ConstrainedBytes):
    """Generic Blake2b-256 digest, e.g. the genesis block hash or a key hash."""

    MAX_SIZE = MIN_SIZE = HASH_SIZE


class TransactionId(ConstrainedBytes):
    """Hash of a transaction."""

    MAX_SIZE = MIN_SIZE = TRANSACTION_HASH_SIZE


class PoolId(ConstrainedBytes):
    """Identifier of a stake pool."""

    MAX_SIZE = MIN_SIZE = POOL_ID_SIZE
