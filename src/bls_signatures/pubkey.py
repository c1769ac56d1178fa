"""BLS public keys: G1 points in projective, affine and compressed form."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from py_ecc.optimized_bls12_381 import G1, multiply

from bls_signatures.errors import KeyDerivationError
from bls_signatures.types import AffinePoint, CompressedPoint, ProjectivePoint, bind_family
from bls_signatures.utils import curve
from bls_signatures.utils.hash import hash_message_to_point, hash_pubkey_to_point

if TYPE_CHECKING:
    from bls_signatures.secret_key import SecretKey

logger = logging.getLogger(__name__)

# Size of a BLS public key in a compressed point representation
BLS_PUBLIC_KEY_COMPRESSED_SIZE = curve.G1_COMPRESSED_SIZE

# Size of a BLS public key in an affine point representation
BLS_PUBLIC_KEY_AFFINE_SIZE = curve.G1_AFFINE_SIZE


class PubkeyProjective(ProjectivePoint):
    """A BLS public key in a projective point representation."""
    __slots__ = ()
    _group = curve.G1_GROUP

    @classmethod
    def from_secret(cls, secret: "SecretKey") -> "PubkeyProjective":
        """Derives the public key of a secret key as secret * g1.

        Raises:
            KeyDerivationError: If the secret key is zero, whose public key
                would be the identity.
        """
        if secret.scalar == 0:
            logger.warning("Refusing to derive a public key from a zero secret key")
            raise KeyDerivationError("Secret key is zero; its public key would be the identity")
        return cls(multiply(G1, secret.scalar))

    def verify_signature(self, signature, message: bytes) -> bool:
        """Verifies a signature over a message against this key.

        Args:
            signature: A `SignatureProjective`, `Signature` or
                `SignatureCompressed`.
            message: The signed bytes.

        Returns:
            True if e(pubkey, H(message)) == e(g1, signature).

        Raises:
            TypeError: If ``signature`` is not a signature type.
            PointConversionError: If a wire signature fails decoding.
        """
        from bls_signatures.signature import SignatureProjective

        signature = SignatureProjective.coerce(signature)
        valid = curve.core_verify(self.point, hash_message_to_point(message), signature.point)
        logger.debug("Signature verification result: %s", valid)
        return valid

    def verify_proof_of_possession(self, proof) -> bool:
        """Verifies a proof of possession against this key.

        The proof must be this key's own compressed encoding, hashed under
        the proof of possession tag and multiplied by the secret key.

        Raises:
            TypeError: If ``proof`` is not a proof of possession type.
            PointConversionError: If a wire proof fails decoding.
        """
        from bls_signatures.proof_of_possession import ProofOfPossessionProjective

        proof = ProofOfPossessionProjective.coerce(proof)
        if self.is_identity():
            return False
        valid = curve.core_verify(self.point, hash_pubkey_to_point(self.point), proof.point)
        logger.debug("Proof of possession verification result: %s", valid)
        return valid


class Pubkey(AffinePoint):
    """A serialized BLS public key in an affine point representation."""
    SIZE = BLS_PUBLIC_KEY_AFFINE_SIZE

    def verify_signature(self, signature, message: bytes) -> bool:
        """Decodes this key and verifies a signature with it."""
        return self.to_projective().verify_signature(signature, message)

    def verify_proof_of_possession(self, proof) -> bool:
        """Decodes this key and verifies a proof of possession with it."""
        return self.to_projective().verify_proof_of_possession(proof)


class PubkeyCompressed(CompressedPoint):
    """A serialized BLS public key in a compressed point representation."""
    SIZE = BLS_PUBLIC_KEY_COMPRESSED_SIZE

    def verify_signature(self, signature, message: bytes) -> bool:
        """Decodes this key and verifies a signature with it."""
        return self.to_projective().verify_signature(signature, message)

    def verify_proof_of_possession(self, proof) -> bool:
        """Decodes this key and verifies a proof of possession with it."""
        return self.to_projective().verify_proof_of_possession(proof)


bind_family(PubkeyProjective, Pubkey, PubkeyCompressed)

__all__ = [
    "BLS_PUBLIC_KEY_COMPRESSED_SIZE",
    "BLS_PUBLIC_KEY_AFFINE_SIZE",
    "PubkeyProjective",
    "Pubkey",
    "PubkeyCompressed",
]
