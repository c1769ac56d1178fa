class BlsError(Exception):
    """
    Base class for all BLS signature errors.

    Every failure raised by this package on bad input is a subclass of this
    exception. None of them is retryable: the caller has to supply corrected
    input.
    """
    pass


class FieldDecodeError(BlsError):
    """
    Raised when bytes do not encode a valid scalar.

    For secret keys this means the value is not in ``[0, curve_order)``.
    """
    pass


class EmptyAggregationError(BlsError):
    """
    Raised when an aggregate of zero elements is requested.
    """
    pass


class KeyDerivationError(BlsError):
    """
    Raised when key derivation input is malformed.

    Examples include input keying material shorter than 32 bytes or a signer
    that fails or returns an all-zero signature.
    """
    pass


class PointConversionError(BlsError):
    """
    Raised when bytes cannot be turned into a valid group element.

    This is the parent of the more specific decode failures below; callers
    that only care about success or failure should catch this one.
    """
    pass


class InvalidPointEncodingError(PointConversionError):
    """
    Raised when the flag bits or coordinate ranges of an encoding are invalid.
    """
    pass


class PointNotOnCurveError(PointConversionError):
    """
    Raised when decoded coordinates do not satisfy the curve equation.
    """
    pass


class PointNotInSubgroupError(PointConversionError):
    """
    Raised when a point is on the curve but outside the prime-order subgroup.
    """
    pass


class IdentityPointError(PointConversionError):
    """
    Raised when the identity element is decoded where it is not permitted.
    """
    pass


class ParseFromStringError(BlsError):
    """
    Raised when a human-readable (multibase) string cannot be decoded.
    """
    pass


class ParseFromBytesError(BlsError):
    """
    Raised when a raw byte buffer cannot be decoded at the outer API.
    """
    pass


class InputLengthMismatchError(BlsError):
    """
    Raised when input lengths do not match.

    This covers parallel-array style calls (public keys vs. messages) as well
    as byte buffers whose width differs from the encoding they claim.
    """
    pass


class InvalidLengthError(InputLengthMismatchError, ParseFromBytesError):
    """
    Raised when a byte buffer is not the fixed width of its encoding.

    Attributes:
        expected: The required width in bytes.
        actual: The width that was supplied.
    """

    def __init__(self, message: str, expected: int | None = None, actual: int | None = None):
        """
        Initialize an InvalidLengthError.

        Args:
            message: Description of the error.
            expected: The required width in bytes.
            actual: The width that was supplied.
        """
        super().__init__(message)
        self.expected = expected
        self.actual = actual
