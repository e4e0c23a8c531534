"""
Extended Ed25519 secret keys.

An extended secret is 64 bytes: the already clamped scalar ``kL`` followed by
the nonce key ``kR``. Signatures are plain Ed25519 signatures and verify with
any Ed25519 implementation.
"""

from __future__ import annotations

import hashlib
import os

from nacl import bindings

__all__ = ["ExtendedEd25519PrivateKey"]


class ExtendedEd25519PrivateKey:
    def __init__(self, private_key: bytes):
        self.private_key = private_key
        self.left = self.private_key[:32]
        self.right = self.private_key[32:]
        self.public_key = bindings.crypto_scalarmult_ed25519_base_noclamp(self.left)

    @classmethod
    def from_seed(cls, seed: bytes) -> ExtendedEd25519PrivateKey:
        """Expand a 32-byte seed into an extended secret the way Ed25519 does, keeping both halves."""
        extended = bytearray(hashlib.sha512(seed).digest())
        extended[0] &= 0b1111_1000
        extended[31] &= 0b0011_1111
        extended[31] |= 0b0100_0000
        return cls(bytes(extended))

    @classmethod
    def generate(cls) -> ExtendedEd25519PrivateKey:
        return cls.from_seed(os.urandom(32))

    def sign(self, message: bytes) -> bytes:
        r = bindings.crypto_core_ed25519_scalar_reduce(
            hashlib.sha512(self.right + message).digest(),
        )
        R = bindings.crypto_scalarmult_ed25519_base_noclamp(r)
        hram = bindings.crypto_core_ed25519_scalar_reduce(
            hashlib.sha512(R + self.public_key + message).digest(),
        )
        S = bindings.crypto_core_ed25519_scalar_add(
            bindings.crypto_core_ed25519_scalar_mul(hram, self.left),
            r,
        )
        return R + S
