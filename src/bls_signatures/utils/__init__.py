"""Initializes the low-level helpers of the bls_signatures package.

These modules work on raw `py_ecc` points and field elements. The public
wrapper types in the parent package are built on top of them.

Available Utilities:
  - curve: Affine and compressed encodings of G1 and G2 points with curve,
    subgroup and identity checks, plus point sums and pairing checks.
  - hash: Hashing of messages and public keys to G2 under their domain
    separation tags.
  - parallel: Process-pool versions of point sums and pairing products.
"""
from .hash import HASH_TO_POINT_DST, POP_DST, hash_message_to_point, hash_pubkey_to_point


__all__ = [
    "HASH_TO_POINT_DST",
    "POP_DST",
    "hash_message_to_point",
    "hash_pubkey_to_point",
]
