"""An example that demonstrates construction, balancing and witnessing of a transaction."""

from pychainlibs import (
    AccountIdentifier,
    Address,
    Discrimination,
    GeneratedTransaction,
    Hash,
    Input,
    LinearFee,
    OutputPolicy,
    SigningKey,
    SpendingCounter,
    TransactionBuilder,
    TransactionFinalizer,
    TransactionId,
    UtxoPointer,
    for_account,
    for_utxo,
)

# Hash of the genesis block of the chain the transaction is meant for
genesis_hash = Hash.from_hex(
    "adbdd5ede31637f6c9bad5c271eec0bc3d0cb9efb86a5b913bb55cba549d0770"
)

# Keys owning the funds
utxo_key = SigningKey.generate()
account_key = SigningKey.generate()

# A UTXO holding 1000 and an account holding 500
tx_id = TransactionId.from_hex(
    "732bfd67e66be8e8288349fcaaa2294973ef6271cc189a239bb431275401b8e5"
)
utxo_input = Input.from_utxo(UtxoPointer(tx_id, 0, 1000))

account = AccountIdentifier.from_verification_key(account_key.to_verification_key())
account_input = Input.from_account(account, 500)

# Receiver and change addresses
receiver = Address.single(SigningKey.generate().to_verification_key(), Discrimination.TEST)
change = Address.single(utxo_key.to_verification_key(), Discrimination.TEST)

fee_algorithm = LinearFee(constant=10, coefficient=1)

# Draft the transaction and check how it balances
builder = TransactionBuilder()
builder.add_input(utxo_input).add_input(account_input).add_output(receiver, 1200)
print("Fee:", builder.estimate_fee(fee_algorithm))
print("Balance:", builder.get_balance(fee_algorithm))

# Send the surplus back to the change address
transaction = builder.finalize(fee_algorithm, OutputPolicy.one(change))
print(transaction)

# Witness every input
finalizer = TransactionFinalizer(transaction)
txid = finalizer.get_txid()
finalizer.set_witness(0, for_utxo(genesis_hash, txid, utxo_key))
finalizer.set_witness(
    1, for_account(genesis_hash, txid, account_key, SpendingCounter.zero())
)
signed_tx = finalizer.build()

print("############### Transaction created ###############")
print(signed_tx)
print(signed_tx.to_cbor_hex())

assert GeneratedTransaction.from_cbor(signed_tx.to_cbor_hex()) == signed_tx
