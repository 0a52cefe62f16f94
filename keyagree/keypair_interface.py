"""
Key Agreement Interface - Abstract base for keypair variants

This defines the interface that every keypair variant must follow, so
calling code can agree on secrets and exchange public keys without knowing
which curve or key storage backend it holds.

Variants:
- SoftwareP256Keypair: P-256, private key in process memory
- SoftwareCurve25519Keypair: Curve25519, private key in process memory
- EnclaveP256Keypair: P-256, private key inside a hardware enclave
"""

from abc import ABC, abstractmethod

from .errors import CurveMismatch, MissingPrivateKey
from .model import CurveType, PublicKey
from .wire import WireRecord


class KeyAgreement(ABC):
    """
    Abstract interface for an ECDH keypair.

    No method of this interface, or of any implementation, returns private
    key bytes. Instances are immutable apart from close().
    """

    #: Curve every key handled by this variant belongs to
    curve_type: CurveType

    #: Human-readable storage tier, for logs and repr
    storage: str

    # ========================================================================
    # Key Agreement
    # ========================================================================

    @abstractmethod
    def generate_public_key(self) -> PublicKey:
        """
        Get this keypair's public key.

        Returns:
            The public key (no side effects)
        """
        pass

    @abstractmethod
    def compute_shared_secret(self, peer_public_key: PublicKey) -> bytes:
        """
        Compute the ECDH shared secret with a peer.

        Args:
            peer_public_key: Peer's public key on the same curve

        Returns:
            32-byte shared secret, equal to what the peer computes with
            this keypair's public key

        Raises:
            MissingPrivateKey: If this keypair is public-only or closed
            CurveMismatch: If the peer key is on another curve
            MalformedKeyData: If the peer key is not a valid point
            EnclaveUnavailable: If the hardware backend fails
        """
        pass

    @property
    @abstractmethod
    def has_private_key(self) -> bool:
        """True while private material (or an enclave handle) is held"""
        pass

    # ========================================================================
    # Wire Codec
    # ========================================================================

    @abstractmethod
    def export_public_key(self) -> WireRecord:
        """
        Export this keypair's public key for transport.

        Returns:
            Wire record tagged with this keypair's curve
        """
        pass

    @classmethod
    @abstractmethod
    def import_public_key(cls, record: WireRecord) -> PublicKey:
        """
        Import a peer's public key for this variant's curve.

        Raises:
            CurveTypeMismatch: If the record is tagged with another curve
            MalformedKeyData: If the key bytes are not a valid point
        """
        pass

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def close(self) -> None:
        """Drop private material. Safe to call more than once."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _check_peer(self, peer_public_key: PublicKey) -> None:
        """Common preconditions for compute_shared_secret()."""
        if not self.has_private_key:
            raise MissingPrivateKey(
                f"{type(self).__name__} holds no private key (public-only or closed)"
            )
        if peer_public_key.curve_type != self.curve_type:
            raise CurveMismatch(self.curve_type, peer_public_key.curve_type)

    def __repr__(self) -> str:
        public_key = self.generate_public_key()
        mode = "keypair" if self.has_private_key else "public-only"
        return (
            f"{type(self).__name__}(curve={self.curve_type.name}, "
            f"storage={self.storage}, {mode}, pub={public_key.fingerprint})"
        )
