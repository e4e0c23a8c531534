import pytest

from pychainlibs import (
    AccountIdentifier,
    Address,
    Discrimination,
    ExtendedEd25519PrivateKey,
    ExtendedSigningKey,
    Hash,
    Input,
    LinearFee,
    SigningKey,
    TransactionId,
    UtxoPointer,
    VerificationKey,
)
from test.pychainlibs.util import TEST_SK_HEX, TEST_TX_ID


@pytest.fixture
def signing_key() -> SigningKey:
    return SigningKey(bytes.fromhex(TEST_SK_HEX))


@pytest.fixture
def verification_key(signing_key) -> VerificationKey:
    return signing_key.to_verification_key()


@pytest.fixture
def extended_signing_key() -> ExtendedSigningKey:
    return ExtendedSigningKey(
        ExtendedEd25519PrivateKey.from_seed(bytes(range(32))).private_key
    )


@pytest.fixture
def account_signing_key() -> SigningKey:
    return SigningKey(bytes(range(32, 64)))


@pytest.fixture
def account(account_signing_key) -> AccountIdentifier:
    return AccountIdentifier.from_verification_key(
        account_signing_key.to_verification_key()
    )


@pytest.fixture
def genesis_hash() -> Hash:
    return Hash.hash_bytes(b"genesis block")


@pytest.fixture
def tx_id() -> TransactionId:
    return TransactionId.from_hex(TEST_TX_ID)


@pytest.fixture
def address(verification_key) -> Address:
    return Address.single(verification_key, Discrimination.TEST)


@pytest.fixture
def change_address(extended_signing_key) -> Address:
    return Address.single(
        extended_signing_key.to_verification_key(), Discrimination.TEST
    )


@pytest.fixture
def utxo_input(tx_id) -> Input:
    return Input.from_utxo(UtxoPointer(tx_id, 0, 1000))


@pytest.fixture
def account_input(account) -> Input:
    return Input.from_account(account, 500)


@pytest.fixture
def linear_fee() -> LinearFee:
    return LinearFee(constant=10, coefficient=1, certificate=0)
