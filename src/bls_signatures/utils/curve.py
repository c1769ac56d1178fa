"""Wraps BLS12-381 group elements in their in-memory and wire representations.

This module is the only place that touches raw curve points. Public keys live
in G1 and signatures (and proofs of possession) in G2, following the
"minimal-pubkey-size" variant of the IETF BLS signature draft.

Three representations exist for every group element:
  - In-memory: the homogeneous projective (x, y, z) tuple used by
    `py_ecc.optimized_bls12_381`. Additions stay projective, so summing many
    points never pays for a field inversion until the result is encoded.
  - Affine (uncompressed) wire form: big-endian x || y, with G2 coordinates
    written imaginary part first. 96 bytes in G1, 192 bytes in G2.
  - Compressed wire form: x only, with flag bits in the top three bits of
    the first byte. 48 bytes in G1, 96 bytes in G2.

Flag bits (most significant bits of byte 0):
  - 0x80 compression flag: set in compressed encodings, clear in affine ones.
  - 0x40 infinity flag: the point at infinity; every other bit must be zero.
  - 0x20 sort flag: in compressed encodings, selects the larger y root.
    Always clear in affine encodings.

Every decoder checks length, flags, coordinate range, curve membership and
prime-order subgroup membership before returning, and rejects the identity
unless the caller passes ``allow_identity=True``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence, Tuple

from eth_typing import BLSPubkey, BLSSignature
from py_ecc.bls.point_compression import (
    compress_G1,
    compress_G2,
    decompress_G1,
    decompress_G2,
)
from py_ecc.bls.typing import G1Compressed, G2Compressed
from py_ecc.optimized_bls12_381 import (
    FQ, FQ2, FQ12,
    G1, Z1, Z2,
    b, b2, curve_order,
    add, eq, neg, multiply, normalize, pairing, final_exponentiate, is_inf, is_on_curve,
    field_modulus as q,
)

from bls_signatures.errors import (
    IdentityPointError,
    InvalidLengthError,
    InvalidPointEncodingError,
    PointConversionError,
    PointNotInSubgroupError,
    PointNotOnCurveError,
)

logger = logging.getLogger(__name__)

# --- Type Aliases ---
PointG1 = Tuple[FQ, FQ, FQ]
PointG2 = Tuple[FQ2, FQ2, FQ2]

# --- Constants ---
FP_SIZE = 48
G1_COMPRESSED_SIZE = FP_SIZE
G1_AFFINE_SIZE = 2 * FP_SIZE
G2_COMPRESSED_SIZE = 2 * FP_SIZE
G2_AFFINE_SIZE = 4 * FP_SIZE

_COMPRESSION_FLAG = 0x80
_INFINITY_FLAG = 0x40
_SORT_FLAG = 0x20
_FLAG_MASK = _COMPRESSION_FLAG | _INFINITY_FLAG | _SORT_FLAG

# Negated G1 generator, the fixed second term of every verification pairing.
NEG_G1_GENERATOR: PointG1 = neg(G1)

__all__ = [
    "PointG1", "PointG2",
    "G1_COMPRESSED_SIZE", "G1_AFFINE_SIZE", "G2_COMPRESSED_SIZE", "G2_AFFINE_SIZE",
    "Group", "G1_GROUP", "G2_GROUP",
    "g1_to_affine_bytes", "g1_from_affine_bytes",
    "g1_to_compressed_bytes", "g1_from_compressed_bytes",
    "g2_to_affine_bytes", "g2_from_affine_bytes",
    "g2_to_compressed_bytes", "g2_from_compressed_bytes",
    "subgroup_check", "points_equal", "sum_points",
    "miller_loop_product", "pairing_check", "core_verify",
]


# --- Validation ---

def subgroup_check(pt) -> bool:
    """Returns True if the point lies in the prime-order subgroup.

    A point P is in the subgroup iff r * P is the point at infinity, where r
    is the group order. This is the check `py_ecc` itself uses for key and
    signature validation.
    """
    return is_inf(multiply(pt, curve_order))


def _check_length(buf: bytes, size: int, what: str) -> None:
    if len(buf) != size:
        raise InvalidLengthError(
            f"{what} must be {size} bytes, got {len(buf)}", expected=size, actual=len(buf)
        )


def _validate(pt, curve_b, allow_identity: bool, what: str):
    """Runs the membership gates every decoded point has to pass."""
    if is_inf(pt):
        if not allow_identity:
            logger.warning("Rejected identity element while decoding %s", what)
            raise IdentityPointError(f"{what} is the identity element")
        return pt
    if not is_on_curve(pt, curve_b):
        raise PointNotOnCurveError(f"{what} is not on the curve")
    if not subgroup_check(pt):
        raise PointNotInSubgroupError(f"{what} is not in the prime-order subgroup")
    return pt


def _split_flags(buf: bytes) -> Tuple[int, bytes]:
    """Separates the flag bits of byte 0 from the coordinate bytes."""
    return buf[0] & _FLAG_MASK, bytes([buf[0] & ~_FLAG_MASK & 0xFF]) + buf[1:]


def _check_affine_flags(flags: int, body: bytes, what: str) -> bool:
    """Validates affine flags and returns whether the point is at infinity."""
    if flags & _COMPRESSION_FLAG:
        raise InvalidPointEncodingError(f"{what}: compression flag set on an affine encoding")
    if flags & _SORT_FLAG:
        raise InvalidPointEncodingError(f"{what}: sort flag set on an affine encoding")
    if flags & _INFINITY_FLAG:
        if any(body):
            raise InvalidPointEncodingError(f"{what}: infinity flag set with non-zero coordinates")
        return True
    return False


def _coordinate(chunk: bytes, what: str) -> int:
    value = int.from_bytes(chunk, "big")
    if value >= q:
        raise InvalidPointEncodingError(f"{what}: coordinate is not below the field modulus")
    return value


# --- G1 (public keys) ---

def g1_to_affine_bytes(pt: PointG1) -> bytes:
    """Serializes a G1 point into its 96-byte affine encoding."""
    if is_inf(pt):
        return bytes([_INFINITY_FLAG]) + bytes(G1_AFFINE_SIZE - 1)
    x, y = normalize(pt)
    return _int(x).to_bytes(FP_SIZE, "big") + _int(y).to_bytes(FP_SIZE, "big")


def g1_from_affine_bytes(buf: bytes, allow_identity: bool = False) -> PointG1:
    """Deserializes and validates a 96-byte affine G1 point.

    Raises:
        InvalidLengthError: If the buffer is not 96 bytes.
        PointConversionError: If flags, range, curve or subgroup checks fail,
            or the identity is decoded without ``allow_identity``.
    """
    what = "G1 affine point"
    _check_length(buf, G1_AFFINE_SIZE, what)
    flags, body = _split_flags(bytes(buf))
    if _check_affine_flags(flags, body, what):
        return _validate(Z1, b, allow_identity, what)
    x = _coordinate(body[:FP_SIZE], what)
    y = _coordinate(body[FP_SIZE:], what)
    return _validate((FQ(x), FQ(y), FQ.one()), b, allow_identity, what)


def g1_to_compressed_bytes(pt: PointG1) -> BLSPubkey:
    """Serializes a G1 point into its 48-byte compressed encoding."""
    return BLSPubkey(compress_G1(pt).to_bytes(G1_COMPRESSED_SIZE, "big"))


def g1_from_compressed_bytes(buf: bytes, allow_identity: bool = False) -> PointG1:
    """Deserializes and validates a 48-byte compressed G1 point.

    The y-coordinate is recovered from x and the sort flag; the result then
    passes through the same curve and subgroup gates as affine input.
    """
    what = "G1 compressed point"
    _check_length(buf, G1_COMPRESSED_SIZE, what)
    try:
        pt = decompress_G1(G1Compressed(int.from_bytes(bytes(buf), "big")))
    except ValueError as e:
        raise PointConversionError(f"{what}: {e}") from e
    return _validate(pt, b, allow_identity, what)


# --- G2 (signatures and proofs of possession) ---

def g2_to_affine_bytes(pt: PointG2) -> bytes:
    """Serializes a G2 point into its 192-byte affine encoding."""
    if is_inf(pt):
        return bytes([_INFINITY_FLAG]) + bytes(G2_AFFINE_SIZE - 1)
    x, y = normalize(pt)
    x_re, x_im = _pair(x)
    y_re, y_im = _pair(y)
    return b"".join(v.to_bytes(FP_SIZE, "big") for v in (x_im, x_re, y_im, y_re))


def g2_from_affine_bytes(buf: bytes, allow_identity: bool = False) -> PointG2:
    """Deserializes and validates a 192-byte affine G2 point.

    Raises:
        InvalidLengthError: If the buffer is not 192 bytes.
        PointConversionError: If flags, range, curve or subgroup checks fail,
            or the identity is decoded without ``allow_identity``.
    """
    what = "G2 affine point"
    _check_length(buf, G2_AFFINE_SIZE, what)
    flags, body = _split_flags(bytes(buf))
    if _check_affine_flags(flags, body, what):
        return _validate(Z2, b2, allow_identity, what)
    x_im, x_re, y_im, y_re = (
        _coordinate(body[i:i + FP_SIZE], what) for i in range(0, G2_AFFINE_SIZE, FP_SIZE)
    )
    pt = (FQ2([x_re, x_im]), FQ2([y_re, y_im]), FQ2.one())
    return _validate(pt, b2, allow_identity, what)


def g2_to_compressed_bytes(pt: PointG2) -> BLSSignature:
    """Serializes a G2 point into its 96-byte compressed encoding."""
    z1, z2 = compress_G2(pt)
    return BLSSignature(z1.to_bytes(FP_SIZE, "big") + z2.to_bytes(FP_SIZE, "big"))


def g2_from_compressed_bytes(buf: bytes, allow_identity: bool = False) -> PointG2:
    """Deserializes and validates a 96-byte compressed G2 point."""
    what = "G2 compressed point"
    _check_length(buf, G2_COMPRESSED_SIZE, what)
    buf = bytes(buf)
    z1 = int.from_bytes(buf[:FP_SIZE], "big")
    z2 = int.from_bytes(buf[FP_SIZE:], "big")
    # Only the first half carries flags.
    if z2 >= q:
        raise InvalidPointEncodingError(f"{what}: coordinate is not below the field modulus")
    try:
        pt = decompress_G2(G2Compressed((z1, z2)))
    except ValueError as e:
        raise PointConversionError(f"{what}: {e}") from e
    return _validate(pt, b2, allow_identity, what)


# --- Group descriptors ---

@dataclass(frozen=True)
class Group:
    """Bundles the encoders, decoders and constants of one curve group.

    Attributes:
        name: Human-readable group name ("G1" or "G2").
        identity: The point at infinity in projective form.
        affine_size: Width of the affine encoding in bytes.
        compressed_size: Width of the compressed encoding in bytes.
    """
    name: str
    identity: tuple
    affine_size: int
    compressed_size: int
    encode_affine: Callable[[tuple], bytes]
    decode_affine: Callable[..., tuple]
    encode_compressed: Callable[[tuple], bytes]
    decode_compressed: Callable[..., tuple]


G1_GROUP = Group(
    name="G1",
    identity=Z1,
    affine_size=G1_AFFINE_SIZE,
    compressed_size=G1_COMPRESSED_SIZE,
    encode_affine=g1_to_affine_bytes,
    decode_affine=g1_from_affine_bytes,
    encode_compressed=g1_to_compressed_bytes,
    decode_compressed=g1_from_compressed_bytes,
)

G2_GROUP = Group(
    name="G2",
    identity=Z2,
    affine_size=G2_AFFINE_SIZE,
    compressed_size=G2_COMPRESSED_SIZE,
    encode_affine=g2_to_affine_bytes,
    decode_affine=g2_from_affine_bytes,
    encode_compressed=g2_to_compressed_bytes,
    decode_compressed=g2_from_compressed_bytes,
)


# --- Group arithmetic ---

def points_equal(p1, p2) -> bool:
    """Compares two projective points; different z scalings are equal."""
    return eq(p1, p2)


def sum_points(points: Sequence, identity):
    """Adds points left to right without normalizing intermediate results."""
    acc = identity
    for pt in points:
        acc = add(acc, pt)
    return acc


# --- Pairings ---

def miller_loop_product(pairs: Sequence[Tuple[PointG2, PointG1]]) -> FQ12:
    """Multiplies the pairings of (G2, G1) pairs before final exponentiation.

    Partial products from independent shards can be multiplied together and
    exponentiated once, which is what the parallel verifiers rely on.
    """
    product = FQ12.one()
    for g2_point, g1_point in pairs:
        product = product * pairing(g2_point, g1_point, final_exponentiate=False)
    return product


def pairing_check(pairs: Sequence[Tuple[PointG2, PointG1]]) -> bool:
    """Returns True if the product of the given pairings is the identity in GT."""
    return final_exponentiate(miller_loop_product(pairs)) == FQ12.one()


def core_verify(pubkey: PointG1, hashed: PointG2, signature: PointG2) -> bool:
    """Checks the BLS equation e(pubkey, H(m)) == e(g1, signature).

    The check is evaluated as e(pubkey, H(m)) * e(-g1, signature) == 1 so a
    single final exponentiation suffices. An identity public key never
    verifies, since it would accept the identity signature on any message.
    """
    if is_inf(pubkey):
        return False
    return pairing_check([(hashed, pubkey), (signature, NEG_G1_GENERATOR)])


# --- Internal Mathematical Helper Functions ---

def _int(v) -> int:
    """Extracts the integer value of a prime field element."""
    return int(getattr(v, "n", v))


def _pair(z: FQ2) -> Tuple[int, int]:
    """Extracts the (real, imaginary) integer coefficients of an FQ2 element."""
    a, b_ = z.coeffs
    return _int(a), _int(b_)
