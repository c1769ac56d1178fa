"""BLS secret keys: scalars modulo the BLS12-381 group order.

A secret key is serialized as a 32-byte big-endian integer. Keys are created
from a secure random source, derived deterministically from input keying
material with the IETF KeyGen procedure, or derived from a signature produced
by another key (for example an Ed25519 identity key).
"""
from __future__ import annotations

import hmac
import logging
import secrets
from typing import TYPE_CHECKING

from py_ecc.bls.ciphersuites import BaseG2Ciphersuite
from py_ecc.optimized_bls12_381 import curve_order, multiply

from bls_signatures.errors import FieldDecodeError, InvalidLengthError, KeyDerivationError
from bls_signatures.utils.hash import hash_message_to_point, hash_pubkey_to_point

if TYPE_CHECKING:
    from bls_signatures.proof_of_possession import ProofOfPossessionProjective
    from bls_signatures.pubkey import PubkeyProjective
    from bls_signatures.signature import SignatureProjective

logger = logging.getLogger(__name__)

# Size of a BLS secret key in bytes
BLS_SECRET_KEY_SIZE = 32

# Minimum length of the input keying material accepted by KeyGen
MIN_IKM_SIZE = 32

# Prefix of the message a signer signs to derive a BLS secret key
DERIVE_FROM_SIGNER_PREFIX = b"bls-key-derive-"


class SecretKey:
    """A BLS secret key.

    The scalar is never printed by `repr`, and equality is checked in
    constant time over the serialized form.
    """
    __slots__ = ("_scalar",)

    def __init__(self, scalar: int) -> None:
        if not 0 <= scalar < curve_order:
            raise FieldDecodeError("Secret key scalar is outside [0, group order)")
        object.__setattr__(self, "_scalar", scalar)

    def __setattr__(self, name, value):
        raise AttributeError("SecretKey is immutable")

    def __reduce__(self):
        return type(self), (self._scalar,)

    @property
    def scalar(self) -> int:
        return self._scalar

    # --- Key Generation ---

    @classmethod
    def new_random(cls) -> "SecretKey":
        """Generates a key uniformly at random from [1, group order)."""
        return cls(secrets.randbelow(curve_order - 1) + 1)

    @classmethod
    def derive(cls, ikm: bytes) -> "SecretKey":
        """Derives a key deterministically from input keying material.

        Args:
            ikm: At least 32 bytes of secret input keying material.

        Returns:
            The key produced by the IETF BLS KeyGen procedure.

        Raises:
            KeyDerivationError: If the keying material is too short or KeyGen
                rejects it.
        """
        ikm = bytes(ikm)
        if len(ikm) < MIN_IKM_SIZE:
            logger.warning("Input keying material too short for key derivation")
            raise KeyDerivationError(
                f"Input keying material must be at least {MIN_IKM_SIZE} bytes, got {len(ikm)}"
            )
        try:
            scalar = BaseG2Ciphersuite.KeyGen(ikm)
        except ValueError as e:
            logger.warning("KeyGen rejected the input keying material")
            raise KeyDerivationError(f"KeyGen failed: {e}") from e
        return cls(scalar)

    @classmethod
    def derive_from_signer(cls, signer, public_seed: bytes) -> "SecretKey":
        """Derives a key from a signature over a public seed.

        The signer signs ``b"bls-key-derive-" + public_seed`` and the signature
        becomes the keying material. Any deterministic signer works, such as
        an Ed25519 private key from `cryptography`.

        Args:
            signer: An object whose ``sign(message)`` returns signature bytes.
            public_seed: Public, application-chosen bytes.

        Raises:
            KeyDerivationError: If signing fails or returns an all-zero
                signature.
        """
        message = DERIVE_FROM_SIGNER_PREFIX + bytes(public_seed)
        try:
            signature = bytes(signer.sign(message))
        except Exception as e:
            raise KeyDerivationError(f"Signer failed to sign the derivation seed: {e}") from e
        if not any(signature):
            raise KeyDerivationError("Signer returned an empty signature")
        return cls.derive(signature)

    # --- Serialization ---

    @classmethod
    def from_bytes(cls, data: bytes) -> "SecretKey":
        """Decodes a 32-byte big-endian scalar.

        Raises:
            InvalidLengthError: If the input is not 32 bytes.
            FieldDecodeError: If the value is not below the group order.
        """
        data = bytes(data)
        if len(data) != BLS_SECRET_KEY_SIZE:
            raise InvalidLengthError(
                f"Secret key must be {BLS_SECRET_KEY_SIZE} bytes, got {len(data)}",
                expected=BLS_SECRET_KEY_SIZE,
                actual=len(data),
            )
        return cls(int.from_bytes(data, "big"))

    def __bytes__(self) -> bytes:
        return self._scalar.to_bytes(BLS_SECRET_KEY_SIZE, "big")

    def __eq__(self, other):
        if not isinstance(other, SecretKey):
            return NotImplemented
        return hmac.compare_digest(bytes(self), bytes(other))

    def __hash__(self) -> int:
        return hash(bytes(self))

    def __repr__(self) -> str:
        return "SecretKey(<redacted>)"

    # --- Signing ---

    def public_key(self) -> "PubkeyProjective":
        from bls_signatures.pubkey import PubkeyProjective

        return PubkeyProjective.from_secret(self)

    def sign(self, message: bytes) -> "SignatureProjective":
        """Signs a message as secret * H(message)."""
        from bls_signatures.signature import SignatureProjective

        return SignatureProjective(multiply(hash_message_to_point(message), self._scalar))

    def proof_of_possession(self) -> "ProofOfPossessionProjective":
        """Signs this key's own public key under the proof of possession tag."""
        from bls_signatures.proof_of_possession import ProofOfPossessionProjective

        pubkey = self.public_key()
        logger.debug("Generating proof of possession for %r", pubkey)
        return ProofOfPossessionProjective(
            multiply(hash_pubkey_to_point(pubkey.point), self._scalar)
        )


__all__ = [
    "BLS_SECRET_KEY_SIZE",
    "DERIVE_FROM_SIGNER_PREFIX",
    "SecretKey",
]
