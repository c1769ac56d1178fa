"""Proofs of possession of BLS secret keys.

A proof of possession is a signature over the signer's own compressed public
key, hashed under `POP_DST` instead of the message tag. It lives in the same
group as a signature and has the same encodings, but the two are distinct
types: a proof is never accepted where a signature is expected, and a
signature never verifies as a proof.

Verify a key's proof once, when the key is registered, before using the key
in any same-message aggregate.
"""
from __future__ import annotations

import logging
import secrets
from typing import Sequence

from py_ecc.optimized_bls12_381 import is_inf, multiply

from bls_signatures.errors import EmptyAggregationError, InputLengthMismatchError
from bls_signatures.pubkey import PubkeyProjective
from bls_signatures.types import AffinePoint, CompressedPoint, ProjectivePoint, bind_family
from bls_signatures.utils import curve
from bls_signatures.utils.hash import POP_DST, hash_pubkey_to_point

logger = logging.getLogger(__name__)

# Size of a proof of possession in a compressed point representation
BLS_PROOF_OF_POSSESSION_COMPRESSED_SIZE = curve.G2_COMPRESSED_SIZE

# Size of a proof of possession in an affine point representation
BLS_PROOF_OF_POSSESSION_AFFINE_SIZE = curve.G2_AFFINE_SIZE

# Bit length of the random weights used by batch verification
_BATCH_WEIGHT_BITS = 128


class ProofOfPossessionProjective(ProjectivePoint):
    """A proof of possession in a projective point representation."""
    __slots__ = ()
    _group = curve.G2_GROUP

    def verify(self, pubkey) -> bool:
        """Verifies this proof against the public key it claims to cover.

        Args:
            pubkey: A `PubkeyProjective`, `Pubkey` or `PubkeyCompressed`.

        Returns:
            True if the proof is valid. An identity public key never verifies.
        """
        return PubkeyProjective.coerce(pubkey).verify_proof_of_possession(self)

    @staticmethod
    def batch_verify(pubkeys: Sequence, proofs: Sequence) -> bool:
        """Verifies many (public key, proof) pairs with one multi-pairing.

        Each pair is weighted by an independent random 128-bit scalar c_i,
        and the check is prod_i e(c_i * pk_i, H(pk_i)) == e(g1, sum_i c_i * pop_i).
        Without the weights, two invalid proofs could cancel each other out.

        Returns:
            True only if every proof is valid (up to a 2^-128 error
            probability). Any identity public key gives False.

        Raises:
            InputLengthMismatchError: If the list lengths differ.
            EmptyAggregationError: If the lists are empty.
        """
        pubkeys, proofs = list(pubkeys), list(proofs)
        if len(pubkeys) != len(proofs):
            raise InputLengthMismatchError(
                f"batch_verify: got {len(pubkeys)} public keys but {len(proofs)} proofs"
            )
        if not pubkeys:
            raise EmptyAggregationError("batch_verify: no proofs given")

        pk_points = [PubkeyProjective.coerce(pk).point for pk in pubkeys]
        pop_points = [ProofOfPossessionProjective.coerce(pop).point for pop in proofs]
        if any(is_inf(pk) for pk in pk_points):
            logger.warning("Batch proof of possession check given an identity public key")
            return False

        weights = [secrets.randbelow(2 ** _BATCH_WEIGHT_BITS - 1) + 1 for _ in pk_points]
        pairs = [
            (hash_pubkey_to_point(pk), multiply(pk, c)) for pk, c in zip(pk_points, weights)
        ]
        weighted_proof = curve.sum_points(
            [multiply(pop, c) for pop, c in zip(pop_points, weights)], curve.G2_GROUP.identity
        )
        pairs.append((weighted_proof, curve.NEG_G1_GENERATOR))
        valid = curve.pairing_check(pairs)
        logger.debug("Batch proof of possession check of %d keys: %s", len(pk_points), valid)
        return valid


class ProofOfPossession(AffinePoint):
    """A serialized proof of possession in an affine point representation."""
    SIZE = BLS_PROOF_OF_POSSESSION_AFFINE_SIZE

    def verify(self, pubkey) -> bool:
        return self.to_projective().verify(pubkey)


class ProofOfPossessionCompressed(CompressedPoint):
    """A serialized proof of possession in a compressed point representation."""
    SIZE = BLS_PROOF_OF_POSSESSION_COMPRESSED_SIZE

    def verify(self, pubkey) -> bool:
        return self.to_projective().verify(pubkey)


bind_family(ProofOfPossessionProjective, ProofOfPossession, ProofOfPossessionCompressed)

__all__ = [
    "POP_DST",
    "BLS_PROOF_OF_POSSESSION_COMPRESSED_SIZE",
    "BLS_PROOF_OF_POSSESSION_AFFINE_SIZE",
    "ProofOfPossessionProjective",
    "ProofOfPossession",
    "ProofOfPossessionCompressed",
]
