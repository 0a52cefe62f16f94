"""
Core value types shared by every keypair variant.
"""

from enum import IntEnum
from typing import NamedTuple

from .config import (
    CURVE_TAG_P256, CURVE_TAG_CURVE25519,
    P256_UNCOMPRESSED_POINT_SIZE, CURVE25519_KEY_SIZE,
    FINGERPRINT_BYTES,
)


class CurveType(IntEnum):
    """Curve tags. The integer values are written to the wire."""

    P256 = CURVE_TAG_P256
    Curve25519 = CURVE_TAG_CURVE25519


# Canonical public key length per curve
PUBLIC_KEY_SIZES = {
    CurveType.P256: P256_UNCOMPRESSED_POINT_SIZE,
    CurveType.Curve25519: CURVE25519_KEY_SIZE,
}


class PublicKey(NamedTuple):
    """
    A public key: canonical point bytes bound to a curve.

    P-256 keys hold the 65-byte uncompressed X9.62 point, Curve25519 keys
    the 32-byte raw u-coordinate. Carries no secret material.
    """
    curve_type: CurveType
    data: bytes

    @property
    def fingerprint(self) -> str:
        """Short hex prefix of the key bytes, for logs"""
        return self.data[:FINGERPRINT_BYTES].hex()

    def __eq__(self, other) -> bool:
        # Only another PublicKey compares equal, never a WireRecord or plain tuple
        return isinstance(other, PublicKey) and tuple.__eq__(self, other)

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    __hash__ = tuple.__hash__

    def __str__(self) -> str:
        return f"PublicKey({self.curve_type.name}, {self.fingerprint}…)"


def get_curve_name(curve_type: int) -> str:
    """Get human-readable name for a curve tag"""
    try:
        return CurveType(curve_type).name
    except ValueError:
        return f"UNKNOWN_0x{curve_type:02X}"
