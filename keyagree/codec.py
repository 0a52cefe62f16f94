"""
Public-Key Wire Codec.

Converts PublicKey values to and from WireRecords. Export is a pure
mapping. Import treats its input as hostile: the curve tag is checked
against what the caller expects and the key bytes go through the curve
provider's point validation before a PublicKey is returned.

The P-256 helpers below convert between the canonical uncompressed point
(0x04 || X || Y) and the raw X || Y form that TPM agreement keys use, so
the wire only ever carries one encoding per curve.
"""

from typing import Optional

from .config import P256_RAW_POINT_SIZE, P256_UNCOMPRESSED_POINT_SIZE
from .errors import CurveTypeMismatch, MalformedKeyData
from .model import CurveType, PublicKey, PUBLIC_KEY_SIZES
from .provider import CurveProvider, DEFAULT_PROVIDER
from .wire import WireRecord

UNCOMPRESSED_POINT_PREFIX = b'\x04'


def export_public_key(public_key: PublicKey) -> WireRecord:
    """Map a public key onto its wire record"""
    return WireRecord(CurveType(public_key.curve_type), bytes(public_key.data))


def import_public_key(
    record: WireRecord,
    expected: CurveType,
    provider: Optional[CurveProvider] = None,
) -> PublicKey:
    """
    Reconstruct a public key from an untrusted wire record.

    Args:
        record: Wire record received from a peer
        expected: Curve the importing keypair works on
        provider: Curve provider performing point validation

    Returns:
        PublicKey bound to `expected`, byte-identical to the exported key

    Raises:
        CurveTypeMismatch: If the record is tagged with another curve
        MalformedKeyData: If the key bytes are not a valid point
    """
    if provider is None:
        provider = DEFAULT_PROVIDER
    expected = CurveType(expected)

    if record.curve_type != expected:
        raise CurveTypeMismatch(expected, record.curve_type)

    data = bytes(record.public_key_data)
    size = PUBLIC_KEY_SIZES[expected]
    if len(data) != size:
        raise MalformedKeyData(f"{expected.name} key must be {size} bytes, got {len(data)}")

    if not provider.validate_point(expected, data):
        raise MalformedKeyData(f"{expected.name} key is not a valid curve point")

    return PublicKey(expected, data)


# ============================================================================
# P-256 point representations
# ============================================================================

def p256_from_coordinates(raw_point: bytes, provider: Optional[CurveProvider] = None) -> bytes:
    """
    Convert a raw X || Y point to the canonical uncompressed encoding.

    Raises:
        MalformedKeyData: If the point has the wrong size or is not on P-256
    """
    if provider is None:
        provider = DEFAULT_PROVIDER

    if len(raw_point) != P256_RAW_POINT_SIZE:
        raise MalformedKeyData(
            f"Raw P-256 point must be {P256_RAW_POINT_SIZE} bytes, got {len(raw_point)}"
        )
    data = UNCOMPRESSED_POINT_PREFIX + bytes(raw_point)
    if not provider.validate_point(CurveType.P256, data):
        raise MalformedKeyData("Raw P-256 point is not on the curve")
    return data


def p256_to_coordinates(data: bytes) -> bytes:
    """Strip the 0x04 prefix from a canonical P-256 point, giving X || Y"""
    if len(data) != P256_UNCOMPRESSED_POINT_SIZE or data[:1] != UNCOMPRESSED_POINT_PREFIX:
        raise MalformedKeyData("Not an uncompressed P-256 point")
    return bytes(data[1:])
