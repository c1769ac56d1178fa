"""BLS keypairs and their on-disk JSON form.

A keypair serializes to 128 bytes: the 32-byte secret key followed by the
96-byte affine public key. On disk it is stored as a JSON array of those 128
byte values, the same layout used by common validator key files.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import IO, Annotated, List, Union

from pydantic import Field, RootModel, ValidationError

from bls_signatures.errors import InvalidLengthError, ParseFromBytesError
from bls_signatures.proof_of_possession import ProofOfPossessionProjective
from bls_signatures.pubkey import BLS_PUBLIC_KEY_AFFINE_SIZE, Pubkey, PubkeyProjective
from bls_signatures.secret_key import BLS_SECRET_KEY_SIZE, SecretKey
from bls_signatures.signature import SignatureProjective

logger = logging.getLogger(__name__)

# Size of a BLS keypair in bytes
BLS_KEYPAIR_SIZE = BLS_SECRET_KEY_SIZE + BLS_PUBLIC_KEY_AFFINE_SIZE

# Permissions of keypair files created by `write_json_file`
KEYPAIR_FILE_MODE = 0o600

StrPath = Union[str, "os.PathLike[str]"]


_ByteValue = Annotated[int, Field(ge=0, le=255, strict=True)]


class KeypairJson(RootModel):
    """The JSON document of a keypair file: a list of 128 byte values."""
    root: Annotated[
        List[_ByteValue],
        Field(min_length=BLS_KEYPAIR_SIZE, max_length=BLS_KEYPAIR_SIZE),
    ]


class Keypair:
    """A BLS secret key together with its public key.

    The public key is always computed from the secret key, never taken from
    the caller, so the two cannot drift apart.

    Attributes:
        secret: The `SecretKey`.
        public: The matching `PubkeyProjective`.

    Raises:
        KeyDerivationError: If the secret key is zero.
    """
    __slots__ = ("secret", "public")

    def __init__(self, secret: SecretKey) -> None:
        object.__setattr__(self, "secret", secret)
        object.__setattr__(self, "public", PubkeyProjective.from_secret(secret))

    def __setattr__(self, name, value):
        raise AttributeError("Keypair is immutable")

    def __reduce__(self):
        return type(self), (self.secret,)

    # --- Construction ---

    @classmethod
    def new(cls) -> "Keypair":
        """Generates a keypair from a fresh random secret key."""
        return cls(SecretKey.new_random())

    @classmethod
    def derive(cls, ikm: bytes) -> "Keypair":
        """Derives a keypair from input keying material (see `SecretKey.derive`)."""
        return cls(SecretKey.derive(ikm))

    @classmethod
    def derive_from_signer(cls, signer, public_seed: bytes) -> "Keypair":
        """Derives a keypair from a signer (see `SecretKey.derive_from_signer`)."""
        return cls(SecretKey.derive_from_signer(signer, public_seed))

    @classmethod
    def from_secret(cls, secret: SecretKey) -> "Keypair":
        return cls(secret)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Keypair":
        """Decodes the 128-byte keypair encoding.

        Raises:
            InvalidLengthError: If the input is not 128 bytes.
            FieldDecodeError: If the secret key is not a valid scalar.
            KeyDerivationError: If the secret key is zero.
            PointConversionError: If the public key is not a valid point.
            ParseFromBytesError: If the public key does not match the secret key.
        """
        data = bytes(data)
        if len(data) != BLS_KEYPAIR_SIZE:
            raise InvalidLengthError(
                f"Keypair must be {BLS_KEYPAIR_SIZE} bytes, got {len(data)}",
                expected=BLS_KEYPAIR_SIZE,
                actual=len(data),
            )
        keypair = cls(SecretKey.from_bytes(data[:BLS_SECRET_KEY_SIZE]))
        stored = Pubkey(data[BLS_SECRET_KEY_SIZE:]).to_projective()
        if stored != keypair.public:
            raise ParseFromBytesError("Keypair public key does not match its secret key")
        return keypair

    def __bytes__(self) -> bytes:
        return bytes(self.secret) + bytes(self.public.to_affine())

    def __eq__(self, other):
        if not isinstance(other, Keypair):
            return NotImplemented
        return self.secret == other.secret

    def __hash__(self) -> int:
        return hash(self.secret)

    def __repr__(self) -> str:
        return f"Keypair(public={self.public!r})"

    # --- Signing ---

    def sign(self, message: bytes) -> SignatureProjective:
        return self.secret.sign(message)

    def proof_of_possession(self) -> ProofOfPossessionProjective:
        """Signs this keypair's public key under the proof of possession tag."""
        return self.secret.proof_of_possession()

    generate_proof_of_possession = proof_of_possession

    def verify(self, signature, message: bytes) -> bool:
        """Verifies a signature over a message against this keypair's public key."""
        return self.public.verify_signature(signature, message)

    # --- JSON I/O ---

    @classmethod
    def from_json(cls, document: Union[str, bytes]) -> "Keypair":
        """Parses a keypair from its JSON array form.

        Raises:
            ParseFromBytesError: If the document is not a JSON array of 128
                integers in [0, 255], or the bytes are not a valid keypair.
        """
        try:
            values = KeypairJson.model_validate_json(document).root
        except ValidationError as e:
            raise ParseFromBytesError(f"Invalid keypair JSON: {e}") from e
        return cls.from_bytes(bytes(values))

    def to_json(self) -> str:
        return json.dumps(list(bytes(self)), separators=(",", ":"))

    @classmethod
    def read_json(cls, reader: IO) -> "Keypair":
        """Reads a keypair from an open text or binary stream."""
        return cls.from_json(reader.read())

    @classmethod
    def read_json_file(cls, path: StrPath) -> "Keypair":
        """Reads a keypair from a JSON file."""
        with open(path, "rb") as f:
            keypair = cls.read_json(f)
        logger.debug("Read keypair %r from %s", keypair.public, path)
        return keypair

    def write_json(self, writer: IO[str]) -> str:
        """Writes the JSON form to an open text stream and returns it."""
        document = self.to_json()
        writer.write(document)
        return document

    def write_json_file(self, path: StrPath) -> str:
        """Writes the JSON form to a file and returns it.

        Missing parent directories are created. The file ends up with mode
        0o600 so that only its owner can read the secret key, including when
        an existing file is overwritten.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, KEYPAIR_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            os.fchmod(f.fileno(), KEYPAIR_FILE_MODE)
            document = self.write_json(f)
        logger.debug("Wrote keypair %r to %s", self.public, path)
        return document


__all__ = [
    "BLS_KEYPAIR_SIZE",
    "KEYPAIR_FILE_MODE",
    "Keypair",
]
