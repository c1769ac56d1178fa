"""Defines the value types shared by every BLS group element wrapper.

Each group element family (public keys, signatures, proofs of possession)
comes as three classes:

  - a projective class, holding a `py_ecc` point in the form that is cheap
    to add (subclasses of `ProjectivePoint`);
  - an affine wire class and a compressed wire class, fixed-width `bytes`
    subclasses whose length is checked at construction (subclasses of
    `AffinePoint` and `CompressedPoint`).

Wire objects hold bytes only. They are validated as curve points when
converted to the projective form, never implicitly, so callers decide when
to pay for decoding. The human-readable form of every wire object is its
multibase (base58btc) string.

Families never mix: a proof of possession is rejected with `TypeError`
wherever a signature is expected, even though both live in the same group.
"""
from __future__ import annotations

import logging
from typing import ClassVar, Iterable, Optional, Type, TypeVar

import multibase
from py_ecc.optimized_bls12_381 import is_inf

from bls_signatures.errors import EmptyAggregationError, InvalidLengthError, ParseFromStringError
from bls_signatures.utils import curve, parallel

logger = logging.getLogger(__name__)

B = TypeVar("B", bound="FixedBytes")
P = TypeVar("P", bound="ProjectivePoint")


class FixedBytes(bytes):
    """An immutable byte string of a fixed, class-specific width.

    Constructing one with no argument yields the all-zero value. Values of
    different wire classes never compare equal, even with identical bytes.
    """
    SIZE: ClassVar[int] = 0

    def __new__(cls: Type[B], data: Optional[bytes] = None) -> B:
        if data is None:
            data = bytes(cls.SIZE)
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"{cls.__name__} must be built from bytes, got {type(data).__name__}")
        data = bytes(data)
        if len(data) != cls.SIZE:
            raise InvalidLengthError(
                f"{cls.__name__} must be {cls.SIZE} bytes, got {len(data)}",
                expected=cls.SIZE,
                actual=len(data),
            )
        return super().__new__(cls, data)

    def __eq__(self, other):
        if isinstance(other, FixedBytes) and type(other) is not type(self):
            return False
        return bytes.__eq__(self, other)

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = bytes.__hash__

    def __str__(self) -> str:
        return multibase.encode("base58btc", bytes(self)).decode("ascii")

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self}')"

    @classmethod
    def from_str(cls: Type[B], s: str) -> B:
        """Parses the multibase string produced by `str()`.

        Raises:
            ParseFromStringError: If the string is not valid multibase or does
                not decode to exactly `SIZE` bytes.
        """
        try:
            data = multibase.decode(s)
        except (ValueError, TypeError, KeyError) as e:
            raise ParseFromStringError(f"Invalid {cls.__name__} string: {e}") from e
        if len(data) != cls.SIZE:
            raise ParseFromStringError(
                f"{cls.__name__} string decodes to {len(data)} bytes, expected {cls.SIZE}"
            )
        return cls(data)


class WirePoint(FixedBytes):
    """Common base of the affine and compressed encodings of a point."""
    _projective_type: ClassVar[Type["ProjectivePoint"]]

    def to_projective(self, *, allow_identity: bool = False) -> "ProjectivePoint":
        """Decodes and validates the point.

        Raises:
            PointConversionError: If the bytes are not a valid subgroup point,
                or encode the identity and ``allow_identity`` is False.
        """
        return self._projective_type.from_bytes(self, allow_identity=allow_identity)


class AffinePoint(WirePoint):
    """An uncompressed (affine) wire encoding."""

    def to_compressed(self, *, allow_identity: bool = False) -> "CompressedPoint":
        """Re-encodes the point in compressed form after validating it."""
        return self.to_projective(allow_identity=allow_identity).to_compressed()


class CompressedPoint(WirePoint):
    """A compressed wire encoding."""

    def to_affine(self, *, allow_identity: bool = False) -> AffinePoint:
        """Re-encodes the point in affine form after validating it."""
        return self.to_projective(allow_identity=allow_identity).to_affine()


class ProjectivePoint:
    """A validated group element in projective coordinates.

    Instances are immutable. Aggregation and conversion always return new
    objects.
    """
    __slots__ = ("_point",)

    _group: ClassVar[curve.Group]
    _affine_type: ClassVar[Type[AffinePoint]]
    _compressed_type: ClassVar[Type[CompressedPoint]]

    def __init__(self, point) -> None:
        object.__setattr__(self, "_point", point)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        return type(self), (self._point,)

    @property
    def point(self):
        """The underlying `py_ecc` projective point."""
        return self._point

    # --- Construction and conversion ---

    @classmethod
    def identity(cls: Type[P]) -> P:
        """Creates the identity element.

        The identity is not a valid key or signature. It only serves as the
        starting point of an aggregation.
        """
        return cls(cls._group.identity)

    @classmethod
    def from_bytes(cls: Type[P], data: bytes, *, allow_identity: bool = False) -> P:
        """Decodes an affine or compressed encoding, picked by its width.

        Raises:
            InvalidLengthError: If the width matches neither encoding.
            PointConversionError: If any curve, subgroup or identity check fails.
        """
        data = bytes(data)
        group = cls._group
        if len(data) == group.affine_size:
            return cls(group.decode_affine(data, allow_identity))
        if len(data) == group.compressed_size:
            return cls(group.decode_compressed(data, allow_identity))
        raise InvalidLengthError(
            f"{cls.__name__} must be {group.affine_size} or {group.compressed_size} bytes, "
            f"got {len(data)}",
            expected=group.affine_size,
            actual=len(data),
        )

    @classmethod
    def coerce(cls: Type[P], value, *, allow_identity: bool = False) -> P:
        """Converts any representation of this family to the projective form.

        Raises:
            TypeError: If the value belongs to a different family.
            PointConversionError: If a wire value fails decoding.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, (cls._affine_type, cls._compressed_type)):
            return cls.from_bytes(value, allow_identity=allow_identity)
        raise TypeError(
            f"Expected {cls.__name__}, {cls._affine_type.__name__} or "
            f"{cls._compressed_type.__name__}, got {type(value).__name__}"
        )

    def to_affine(self) -> AffinePoint:
        return self._affine_type(self._group.encode_affine(self._point))

    def to_compressed(self) -> CompressedPoint:
        return self._compressed_type(self._group.encode_compressed(self._point))

    def __bytes__(self) -> bytes:
        return bytes(self.to_affine())

    def is_identity(self) -> bool:
        return is_inf(self._point)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return curve.points_equal(self._point, other._point)

    def __hash__(self) -> int:
        return hash((type(self).__name__, bytes(self.to_compressed())))

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.to_compressed()}')"

    # --- Aggregation ---

    @classmethod
    def aggregate(cls: Type[P], values: Iterable) -> P:
        """Sums a non-empty list of elements of this family.

        Elements may be given in any mix of projective, affine and compressed
        form. The order of the list does not affect the result.

        Raises:
            EmptyAggregationError: If the list is empty.
            PointConversionError: If a wire value fails decoding.
        """
        values = list(values)
        if not values:
            raise EmptyAggregationError(f"Cannot aggregate an empty list of {cls.__name__}")
        return cls.coerce(values[0]).aggregate_with(values[1:])

    def aggregate_with(self: P, values: Iterable) -> P:
        """Returns this element plus every element in values."""
        cls = type(self)
        points = [cls.coerce(value).point for value in values]
        logger.debug("Aggregating %d %s values", len(points) + 1, cls.__name__)
        return cls(curve.sum_points(points, self._point))

    @classmethod
    def par_aggregate(cls: Type[P], values: Iterable, *, max_workers: Optional[int] = None) -> P:
        """Same as `aggregate`, with the additions spread over worker processes."""
        points = [cls.coerce(value).point for value in values]
        if not points:
            raise EmptyAggregationError(f"Cannot aggregate an empty list of {cls.__name__}")
        return cls(parallel.par_sum_points(points, cls._group.identity, max_workers))

    def par_aggregate_with(self: P, values: Iterable, *, max_workers: Optional[int] = None) -> P:
        """Same as `aggregate_with`, with the additions spread over worker processes."""
        values = list(values)
        if not values:
            return self
        aggregate = type(self).par_aggregate(values, max_workers=max_workers)
        return type(self)(curve.sum_points([aggregate.point], self._point))


def bind_family(
    projective_type: Type[ProjectivePoint],
    affine_type: Type[AffinePoint],
    compressed_type: Type[CompressedPoint],
) -> None:
    """Links the three representations of one group element family."""
    projective_type._affine_type = affine_type
    projective_type._compressed_type = compressed_type
    affine_type._projective_type = projective_type
    compressed_type._projective_type = projective_type
