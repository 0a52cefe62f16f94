"""
Public key wire record.

A WireRecord is the only artifact exchanged between parties. Its byte form:

    offset 0  version      (1 byte, WIRE_FORMAT_VERSION)
    offset 1  curve type   (1 byte, CurveType tag)
    offset 2  key length N (1 byte)
    offset 3  key data     (N bytes)

Parsing here only checks framing. Point validation is the codec's job.
"""

from typing import NamedTuple

from .config import WIRE_FORMAT_VERSION
from .errors import WireFormatError
from .model import CurveType, PUBLIC_KEY_SIZES, get_curve_name

HEADER_SIZE = 3


class WireRecord(NamedTuple):
    """Curve-tagged public key data as transmitted"""
    curve_type: CurveType
    public_key_data: bytes

    def to_bytes(self) -> bytes:
        """Serialize the record with its version header"""
        return bytes([
            WIRE_FORMAT_VERSION,
            int(self.curve_type),
            len(self.public_key_data),
        ]) + bytes(self.public_key_data)

    @classmethod
    def from_bytes(cls, data: bytes) -> "WireRecord":
        """
        Parse a serialized record.

        Args:
            data: Bytes produced by to_bytes()

        Returns:
            WireRecord with a known curve tag and a length matching that curve

        Raises:
            WireFormatError: If the framing is invalid
        """
        data = bytes(data)
        if len(data) < HEADER_SIZE:
            raise WireFormatError(f"Wire record too short: {len(data)} bytes")

        version, tag, length = data[0], data[1], data[2]
        if version != WIRE_FORMAT_VERSION:
            raise WireFormatError(f"Unsupported wire format version: {version}")

        try:
            curve_type = CurveType(tag)
        except ValueError:
            raise WireFormatError(f"Unknown curve type: {get_curve_name(tag)}") from None

        payload = data[HEADER_SIZE:]
        if length != len(payload):
            raise WireFormatError(
                f"Length field says {length} bytes, record carries {len(payload)}"
            )
        if length != PUBLIC_KEY_SIZES[curve_type]:
            raise WireFormatError(
                f"{curve_type.name} key must be {PUBLIC_KEY_SIZES[curve_type]} bytes, got {length}"
            )

        return cls(curve_type, payload)

    def __eq__(self, other) -> bool:
        return isinstance(other, WireRecord) and tuple.__eq__(self, other)

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    __hash__ = tuple.__hash__

    def __str__(self) -> str:
        return f"WireRecord(curve={get_curve_name(self.curve_type)}, key_len={len(self.public_key_data)})"
