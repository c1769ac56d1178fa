"""Hashes byte strings to points in the signature group (G2).

Both functions use the RFC 9380 hash-to-curve suite for BLS12-381 G2
(expand_message_xmd with SHA-256, simplified SWU, random oracle variant), as
implemented by `py_ecc`. They differ only in their domain separation tag:

  - HASH_TO_POINT_DST separates arbitrary signed messages.
  - POP_DST separates public keys hashed inside a proof of possession.

The tags are module constants rather than parameters. Hashing the same bytes
under the wrong tag yields a valid-looking but unrelated point, so no caller
gets to choose one.
"""
from __future__ import annotations

from Crypto.Hash import SHA256
from py_ecc.bls.hash_to_curve import hash_to_G2

from bls_signatures.utils.curve import PointG1, PointG2, g1_to_compressed_bytes

# --- Domain separation tags ---

# Ciphersuite ID recommended by
# https://datatracker.ietf.org/doc/html/draft-irtf-cfrg-bls-signature-05#section-4.2.1
HASH_TO_POINT_DST: bytes = b"BLS_SIG_BLS12381G2_XMD:SHA-256_SSWU_RO_NUL_"

# Tag for hashing public keys in proof of possession signing and verification,
# see https://datatracker.ietf.org/doc/html/draft-irtf-cfrg-bls-signature-05#section-4.2.3
POP_DST: bytes = b"BLS_SIG_BLS12381G1_XMD:SHA-256_SSWU_RO_POP_"

__all__ = [
    "HASH_TO_POINT_DST",
    "POP_DST",
    "hash_message_to_point",
    "hash_pubkey_to_point",
]


def hash_message_to_point(message: bytes) -> PointG2:
    """Hashes a message to a G2 point under the message tag.

    Args:
        message: The bytes to hash.

    Returns:
        A projective G2 point. Identical input always gives an identical point.
    """
    return hash_to_G2(bytes(message), HASH_TO_POINT_DST, SHA256.new)


def hash_pubkey_to_point(pubkey: PointG1) -> PointG2:
    """Hashes a public key to a G2 point under the proof of possession tag.

    The hash input is the 48-byte compressed encoding of the key.
    """
    return hash_to_G2(g1_to_compressed_bytes(pubkey), POP_DST, SHA256.new)
