"""
BLS Signatures Package.

Aggregatable BLS signatures over BLS12-381, with public keys in G1 and
signatures in G2. The package provides secret keys and keypairs, public keys,
signatures and proofs of possession in projective, affine and compressed
form, same-message and distinct-message aggregate verification, and the
shared error hierarchy.
"""

from .errors import (
    BlsError,
    FieldDecodeError,
    EmptyAggregationError,
    KeyDerivationError,
    PointConversionError,
    InvalidPointEncodingError,
    PointNotOnCurveError,
    PointNotInSubgroupError,
    IdentityPointError,
    ParseFromStringError,
    ParseFromBytesError,
    InputLengthMismatchError,
    InvalidLengthError,
)
from .secret_key import BLS_SECRET_KEY_SIZE, SecretKey
from .pubkey import (
    BLS_PUBLIC_KEY_AFFINE_SIZE,
    BLS_PUBLIC_KEY_COMPRESSED_SIZE,
    Pubkey,
    PubkeyCompressed,
    PubkeyProjective,
)
from .signature import (
    BLS_SIGNATURE_AFFINE_SIZE,
    BLS_SIGNATURE_COMPRESSED_SIZE,
    Signature,
    SignatureCompressed,
    SignatureProjective,
)
from .proof_of_possession import (
    BLS_PROOF_OF_POSSESSION_AFFINE_SIZE,
    BLS_PROOF_OF_POSSESSION_COMPRESSED_SIZE,
    ProofOfPossession,
    ProofOfPossessionCompressed,
    ProofOfPossessionProjective,
)
from .keypair import BLS_KEYPAIR_SIZE, Keypair
from .utils.hash import HASH_TO_POINT_DST, POP_DST

__all__ = [
    # errors
    "BlsError",
    "FieldDecodeError",
    "EmptyAggregationError",
    "KeyDerivationError",
    "PointConversionError",
    "InvalidPointEncodingError",
    "PointNotOnCurveError",
    "PointNotInSubgroupError",
    "IdentityPointError",
    "ParseFromStringError",
    "ParseFromBytesError",
    "InputLengthMismatchError",
    "InvalidLengthError",
    # keys
    "BLS_SECRET_KEY_SIZE",
    "SecretKey",
    "BLS_KEYPAIR_SIZE",
    "Keypair",
    # group elements
    "BLS_PUBLIC_KEY_AFFINE_SIZE",
    "BLS_PUBLIC_KEY_COMPRESSED_SIZE",
    "PubkeyProjective",
    "Pubkey",
    "PubkeyCompressed",
    "BLS_SIGNATURE_AFFINE_SIZE",
    "BLS_SIGNATURE_COMPRESSED_SIZE",
    "SignatureProjective",
    "Signature",
    "SignatureCompressed",
    "BLS_PROOF_OF_POSSESSION_AFFINE_SIZE",
    "BLS_PROOF_OF_POSSESSION_COMPRESSED_SIZE",
    "ProofOfPossessionProjective",
    "ProofOfPossession",
    "ProofOfPossessionCompressed",
    # domain separation tags
    "HASH_TO_POINT_DST",
    "POP_DST",
]
