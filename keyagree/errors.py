"""
Error taxonomy for key agreement.

Every failure surfaced by this package is a KeyAgreementError. Errors from
the underlying providers (cryptography, tpm2-pytss) are translated at the
boundary and chained with `raise ... from`.
"""

from typing import Optional


class KeyAgreementError(Exception):
    """Base exception for key agreement errors"""
    pass


class CurveMismatch(KeyAgreementError):
    """Raised when a key belongs to a different curve than the keypair"""

    def __init__(self, expected, actual, message: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        if message is None:
            message = f"Curve mismatch: expected {_name(expected)}, got {_name(actual)}"
        super().__init__(message)


class CurveTypeMismatch(CurveMismatch):
    """Raised when a wire record is tagged with a different curve than the importer expects"""

    def __init__(self, expected, actual):
        super().__init__(
            expected, actual,
            f"Wire record curve type mismatch: expected {_name(expected)}, got {_name(actual)}"
        )


class MalformedKeyData(KeyAgreementError):
    """Raised when untrusted public key bytes are not a valid point on the curve"""
    pass


class WireFormatError(MalformedKeyData):
    """Raised when a serialized wire record cannot be parsed"""
    pass


class MissingPrivateKey(KeyAgreementError):
    """Raised when a shared secret is requested from a public-only or closed keypair"""
    pass


class EnclaveUnavailable(KeyAgreementError):
    """Raised when the hardware enclave is absent or refuses an operation"""
    pass


class UnsupportedVariant(KeyAgreementError):
    """Raised when no keypair variant exists for a curve/storage combination"""
    pass


def _name(curve) -> str:
    return getattr(curve, "name", None) or f"UNKNOWN_{curve!r}"
