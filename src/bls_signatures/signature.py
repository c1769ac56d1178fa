"""BLS signatures: G2 points in projective, affine and compressed form.

Verification comes in several shapes:

  - `SignatureProjective.verify`: one key, one message.
  - `fast_aggregate_verify` / `verify_aggregate`: many keys, one message.
    Public keys are summed first, so every key must have a verified proof of
    possession, otherwise a rogue key can forge the aggregate.
  - `aggregate_verify` / `verify_distinct` / `verify_distinct_aggregated`:
    many keys, one message per key, checked with a single multi-pairing.

The `par_*` variants produce the same results with the heavy lifting spread
across worker processes.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from py_ecc.optimized_bls12_381 import FQ12, final_exponentiate, is_inf, pairing

from bls_signatures.errors import EmptyAggregationError, InputLengthMismatchError
from bls_signatures.pubkey import PubkeyProjective
from bls_signatures.types import AffinePoint, CompressedPoint, ProjectivePoint, bind_family
from bls_signatures.utils import curve, parallel
from bls_signatures.utils.hash import hash_message_to_point

logger = logging.getLogger(__name__)

# Size of a BLS signature in a compressed point representation
BLS_SIGNATURE_COMPRESSED_SIZE = curve.G2_COMPRESSED_SIZE

# Size of a BLS signature in an affine point representation
BLS_SIGNATURE_AFFINE_SIZE = curve.G2_AFFINE_SIZE


def _pubkey_points(pubkeys: Sequence) -> List[curve.PointG1]:
    return [PubkeyProjective.coerce(pk).point for pk in pubkeys]


def _check_distinct_inputs(pubkeys: Sequence, messages: Sequence, what: str) -> None:
    if len(pubkeys) != len(messages):
        raise InputLengthMismatchError(
            f"{what}: got {len(pubkeys)} public keys but {len(messages)} messages"
        )
    if not pubkeys:
        raise EmptyAggregationError(f"{what}: no public keys given")


class SignatureProjective(ProjectivePoint):
    """A BLS signature in a projective point representation."""
    __slots__ = ()
    _group = curve.G2_GROUP

    # --- Single signature ---

    def verify(self, pubkey, message: bytes) -> bool:
        """Verifies this signature over a message against one public key.

        Args:
            pubkey: A `PubkeyProjective`, `Pubkey` or `PubkeyCompressed`.
            message: The signed bytes.

        Returns:
            True if the signature is valid. An identity public key never
            verifies.

        Raises:
            TypeError: If ``pubkey`` is not a public key type.
            PointConversionError: If a wire public key fails decoding.
        """
        return PubkeyProjective.coerce(pubkey).verify_signature(self, message)

    # --- Same message ---

    @staticmethod
    def fast_aggregate_verify(pubkeys: Sequence, message: bytes, aggregate_signature) -> bool:
        """Verifies an aggregate signature by many keys over one message.

        The caller must have verified a proof of possession for every key in
        ``pubkeys`` beforehand. Without that, an attacker can choose a key
        that cancels the honest ones and forge the aggregate.

        Returns:
            True if the aggregate is valid, False otherwise, including for an
            empty key list.
        """
        pubkeys = list(pubkeys)
        if not pubkeys:
            logger.debug("fast_aggregate_verify called with no public keys")
            return False
        signature = SignatureProjective.coerce(aggregate_signature)
        aggregate_pubkey = PubkeyProjective.aggregate(pubkeys)
        return aggregate_pubkey.verify_signature(signature, message)

    @staticmethod
    def verify_aggregate(pubkeys: Sequence, signatures: Sequence, message: bytes) -> bool:
        """Aggregates keys and signatures over one message, then verifies.

        Subject to the same proof of possession requirement as
        `fast_aggregate_verify`.

        Raises:
            EmptyAggregationError: If either list is empty.
        """
        aggregate_pubkey = PubkeyProjective.aggregate(pubkeys)
        aggregate_signature = SignatureProjective.aggregate(signatures)
        return aggregate_pubkey.verify_signature(aggregate_signature, message)

    @staticmethod
    def par_verify_aggregate(
        pubkeys: Sequence,
        signatures: Sequence,
        message: bytes,
        *,
        max_workers: Optional[int] = None,
    ) -> bool:
        """Same as `verify_aggregate`, with both sums spread over worker processes."""
        aggregate_pubkey = PubkeyProjective.par_aggregate(pubkeys, max_workers=max_workers)
        aggregate_signature = SignatureProjective.par_aggregate(signatures, max_workers=max_workers)
        return aggregate_pubkey.verify_signature(aggregate_signature, message)

    # --- Distinct messages ---

    @staticmethod
    def aggregate_verify(pubkeys: Sequence, messages: Sequence[bytes], aggregate_signature) -> bool:
        """Verifies an aggregate signature where each key signed its own message.

        Checks prod_i e(pk_i, H(m_i)) == e(g1, aggregate_signature) with one
        final exponentiation.

        Returns:
            True if the aggregate is valid. Fails closed: mismatched lengths,
            empty input or an identity public key give False.
        """
        pubkeys, messages = list(pubkeys), list(messages)
        try:
            return SignatureProjective.verify_distinct_aggregated(
                pubkeys, aggregate_signature, messages
            )
        except (InputLengthMismatchError, EmptyAggregationError) as e:
            logger.debug("aggregate_verify rejected its input: %s", e)
            return False

    @staticmethod
    def verify_distinct_aggregated(
        pubkeys: Sequence, aggregate_signature, messages: Sequence[bytes]
    ) -> bool:
        """Verifies a pre-aggregated signature over one message per key.

        Raises:
            InputLengthMismatchError: If the key and message counts differ.
            EmptyAggregationError: If no keys are given.
        """
        pubkeys, messages = list(pubkeys), list(messages)
        _check_distinct_inputs(pubkeys, messages, "verify_distinct_aggregated")
        signature = SignatureProjective.coerce(aggregate_signature)
        points = _pubkey_points(pubkeys)
        if any(is_inf(pk) for pk in points):
            logger.warning("Distinct-message verification given an identity public key")
            return False
        pairs: List[Tuple[curve.PointG2, curve.PointG1]] = [
            (hash_message_to_point(msg), pk) for pk, msg in zip(points, messages)
        ]
        pairs.append((signature.point, curve.NEG_G1_GENERATOR))
        valid = curve.pairing_check(pairs)
        logger.debug("Distinct-message verification of %d signers: %s", len(points), valid)
        return valid

    @staticmethod
    def verify_distinct(pubkeys: Sequence, signatures: Sequence, messages: Sequence[bytes]) -> bool:
        """Aggregates one signature per key, then verifies over distinct messages.

        Raises:
            InputLengthMismatchError: If the key, signature and message counts
                differ.
            EmptyAggregationError: If no keys are given.
        """
        pubkeys, signatures, messages = list(pubkeys), list(signatures), list(messages)
        _check_distinct_inputs(pubkeys, messages, "verify_distinct")
        if len(signatures) != len(pubkeys):
            raise InputLengthMismatchError(
                f"verify_distinct: got {len(pubkeys)} public keys but {len(signatures)} signatures"
            )
        aggregate_signature = SignatureProjective.aggregate(signatures)
        return SignatureProjective.verify_distinct_aggregated(pubkeys, aggregate_signature, messages)

    @staticmethod
    def par_verify_distinct_aggregated(
        pubkeys: Sequence,
        aggregate_signature,
        messages: Sequence[bytes],
        *,
        max_workers: Optional[int] = None,
    ) -> bool:
        """Same as `verify_distinct_aggregated`, hashing and pairing in worker processes."""
        pubkeys, messages = list(pubkeys), list(messages)
        _check_distinct_inputs(pubkeys, messages, "par_verify_distinct_aggregated")
        signature = SignatureProjective.coerce(aggregate_signature)
        points = _pubkey_points(pubkeys)
        if any(is_inf(pk) for pk in points):
            logger.warning("Distinct-message verification given an identity public key")
            return False
        product = parallel.par_distinct_message_product(points, messages, max_workers)
        product = product * pairing(signature.point, curve.NEG_G1_GENERATOR, final_exponentiate=False)
        valid = final_exponentiate(product) == FQ12.one()
        logger.debug("Parallel distinct-message verification of %d signers: %s", len(points), valid)
        return valid

    @staticmethod
    def par_verify_distinct(
        pubkeys: Sequence,
        signatures: Sequence,
        messages: Sequence[bytes],
        *,
        max_workers: Optional[int] = None,
    ) -> bool:
        """Same as `verify_distinct`, with aggregation and pairings in worker processes."""
        pubkeys, signatures, messages = list(pubkeys), list(signatures), list(messages)
        _check_distinct_inputs(pubkeys, messages, "par_verify_distinct")
        if len(signatures) != len(pubkeys):
            raise InputLengthMismatchError(
                f"par_verify_distinct: got {len(pubkeys)} public keys but {len(signatures)} signatures"
            )
        aggregate_signature = SignatureProjective.par_aggregate(signatures, max_workers=max_workers)
        return SignatureProjective.par_verify_distinct_aggregated(
            pubkeys, aggregate_signature, messages, max_workers=max_workers
        )


class Signature(AffinePoint):
    """A serialized BLS signature in an affine point representation."""
    SIZE = BLS_SIGNATURE_AFFINE_SIZE

    def verify(self, pubkey, message: bytes) -> bool:
        return self.to_projective().verify(pubkey, message)


class SignatureCompressed(CompressedPoint):
    """A serialized BLS signature in a compressed point representation."""
    SIZE = BLS_SIGNATURE_COMPRESSED_SIZE

    def verify(self, pubkey, message: bytes) -> bool:
        return self.to_projective().verify(pubkey, message)


bind_family(SignatureProjective, Signature, SignatureCompressed)

__all__ = [
    "BLS_SIGNATURE_COMPRESSED_SIZE",
    "BLS_SIGNATURE_AFFINE_SIZE",
    "SignatureProjective",
    "Signature",
    "SignatureCompressed",
]
