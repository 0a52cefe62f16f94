"""
Curve Provider - Abstract base for the elliptic-curve primitive library

Keypair variants do no curve arithmetic of their own. They call a provider
for key generation, point validation and the Diffie-Hellman operation.
SoftwareCurveProvider is the in-process implementation on top of the
`cryptography` package.
"""

from abc import ABC, abstractmethod
import hmac
from typing import Tuple

from cryptography.hazmat.primitives.asymmetric import ec, x25519
from cryptography.hazmat.primitives import serialization

from .config import P256_UNCOMPRESSED_POINT_SIZE, CURVE25519_KEY_SIZE
from .errors import MalformedKeyData, UnsupportedVariant
from .model import CurveType

# Curve25519 public values that must never be accepted: the low-order points
# and their non-canonical encodings (>= 2^255 - 19). Little-endian.
CURVE25519_FORBIDDEN_KEYS = (
    bytes(32),
    bytes([1]) + bytes(31),
    bytes.fromhex("e0eb7a7c3b41b8ae1656e3faf19fc46ada098deb9c32b1fd866205165f49b800"),
    bytes.fromhex("5f9c95bca3508c24b1d0b1559c83ef5b04445cc4581c8e86d8224eddd09f1157"),
    bytes.fromhex("ec" + "ff" * 30 + "7f"),
    bytes.fromhex("ed" + "ff" * 30 + "7f"),
    bytes.fromhex("ee" + "ff" * 30 + "7f"),
    bytes.fromhex("cdeb7a7c3b41b8ae1656e3faf19fc46ada098deb9c32b1fd866205165f49b880"),
    bytes.fromhex("4c9c95bca3508c24b1d0b1559c83ef5b04445cc4581c8e86d8224eddd09f11d7"),
    bytes.fromhex("d9" + "ff" * 31),
    bytes.fromhex("da" + "ff" * 31),
    bytes.fromhex("db" + "ff" * 30 + "19"),
)

class CurveProvider(ABC):
    """
    Abstract interface for a trusted elliptic-curve primitive library.

    Handles returned by generate_keypair() are provider-specific private key
    objects. Callers treat them as opaque and never serialize them.
    """

    @abstractmethod
    def generate_keypair(self, curve: CurveType) -> Tuple[object, bytes]:
        """
        Generate a fresh keypair.

        Args:
            curve: Curve to generate on

        Returns:
            Tuple of (private_key_handle, public_key_bytes) with the public
            key in its canonical encoding
        """
        pass

    @abstractmethod
    def agree(self, private_key: object, public_key: bytes) -> bytes:
        """
        Compute the Diffie-Hellman shared secret.

        Args:
            private_key: Handle from generate_keypair()
            public_key: Peer's canonical public key bytes

        Returns:
            Shared secret bytes

        Raises:
            MalformedKeyData: If the peer key is not a valid point
        """
        pass

    @abstractmethod
    def validate_point(self, curve: CurveType, public_key: bytes) -> bool:
        """
        Check that bytes encode a valid, non-degenerate point on the curve.

        Returns:
            True if the point may be used for agreement
        """
        pass

class SoftwareCurveProvider(CurveProvider):
    """
    In-process provider backed by the `cryptography` package.

    Private keys live in process memory as cryptography key objects.
    """

    def generate_keypair(self, curve: CurveType) -> Tuple[object, bytes]:
        """Generate a P-256 or Curve25519 keypair"""
        if curve == CurveType.P256:
            private_key = ec.generate_private_key(ec.SECP256R1())
            public_bytes = private_key.public_key().public_bytes(
                encoding=serialization.Encoding.X962,
                format=serialization.PublicFormat.UncompressedPoint
            )
            return (private_key, public_bytes)

        if curve == CurveType.Curve25519:
            # Regenerate on the (negligible) chance of landing on a forbidden value
            while True:
                private_key = x25519.X25519PrivateKey.generate()
                public_bytes = private_key.public_key().public_bytes(
                    encoding=serialization.Encoding.Raw,
                    format=serialization.PublicFormat.Raw
                )
                if not _is_forbidden_curve25519_key(public_bytes):
                    return (private_key, public_bytes)

        raise UnsupportedVariant(f"Unsupported curve: {curve!r}")

    def agree(self, private_key: object, public_key: bytes) -> bytes:
        """Compute ECDH (P-256) or X25519 shared secret"""
        if isinstance(private_key, ec.EllipticCurvePrivateKey):
            peer = self._load_p256(public_key)
            return private_key.exchange(ec.ECDH(), peer)

        if isinstance(private_key, x25519.X25519PrivateKey):
            peer = self._load_curve25519(public_key)
            try:
                shared_secret = private_key.exchange(peer)
            except ValueError as e:
                # cryptography rejects an all-zero result
                raise MalformedKeyData(f"X25519 agreement failed: {e}") from e
            if not any(shared_secret):
                raise MalformedKeyData("X25519 agreement produced an all-zero secret")
            return shared_secret

        raise TypeError(f"Not a software private key: {type(private_key).__name__}")

    def validate_point(self, curve: CurveType, public_key: bytes) -> bool:
        """Validate P-256 or Curve25519 public key bytes"""
        try:
            if curve == CurveType.P256:
                self._load_p256(public_key)
            elif curve == CurveType.Curve25519:
                self._load_curve25519(public_key)
            else:
                return False
        except MalformedKeyData:
            return False
        return True

    # ========================================================================
    # Decoding
    # ========================================================================

    @staticmethod
    def _load_p256(public_key: bytes) -> ec.EllipticCurvePublicKey:
        if len(public_key) != P256_UNCOMPRESSED_POINT_SIZE or public_key[0] != 0x04:
            raise MalformedKeyData(
                f"P-256 key must be a {P256_UNCOMPRESSED_POINT_SIZE}-byte uncompressed point"
            )
        try:
            return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256R1(), bytes(public_key))
        except ValueError as e:
            raise MalformedKeyData(f"Invalid P-256 point: {e}") from e

    @staticmethod
    def _load_curve25519(public_key: bytes) -> x25519.X25519PublicKey:
        if len(public_key) != CURVE25519_KEY_SIZE:
            raise MalformedKeyData(
                f"Curve25519 key must be {CURVE25519_KEY_SIZE} bytes, got {len(public_key)}"
            )
        if _is_forbidden_curve25519_key(public_key):
            raise MalformedKeyData("Curve25519 key is a low-order or non-canonical point")
        try:
            return x25519.X25519PublicKey.from_public_bytes(bytes(public_key))
        except ValueError as e:
            raise MalformedKeyData(f"Invalid Curve25519 key: {e}") from e

def _is_forbidden_curve25519_key(public_key: bytes) -> bool:
    # Check every entry so timing does not depend on which one matched
    forbidden = False
    for value in CURVE25519_FORBIDDEN_KEYS:
        forbidden |= hmac.compare_digest(bytes(public_key), value)
    return forbidden

# Shared default instance; the provider holds no state
DEFAULT_PROVIDER = SoftwareCurveProvider()
