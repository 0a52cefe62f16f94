"""
Enclave Interface - Abstract base for hardware-isolated key storage

This defines the interface for secure hardware that generates P-256
agreement keys and runs ECDH on them without ever exporting the private
scalar.

Implementations:
- TPM2Enclave: TPM 2.0 via tpm2-pytss (keyagree.tpm2_enclave)
"""

from abc import ABC, abstractmethod
from typing import Tuple

from .model import CurveType


class EnclaveProvider(ABC):
    """
    Abstract interface for a hardware key enclave.

    Points cross this interface in the enclave's own agreement-key
    representation: 64 raw bytes X || Y, each coordinate 32 bytes
    big-endian. Handles are opaque and cannot be turned into key bytes.
    """

    @abstractmethod
    def generate_keypair(self, curve: CurveType) -> Tuple[object, bytes]:
        """
        Generate an agreement keypair inside the enclave.

        Args:
            curve: Curve to generate on (enclaves may support P-256 only)

        Returns:
            Tuple of (handle, raw_public_point)

        Raises:
            EnclaveUnavailable: If the enclave cannot be reached or refuses
            UnsupportedVariant: If the enclave does not support the curve
        """
        pass

    @abstractmethod
    def agree(self, handle: object, peer_point: bytes) -> bytes:
        """
        Run ECDH inside the enclave.

        Args:
            handle: Handle returned by generate_keypair()
            peer_point: Peer's 64-byte raw public point

        Returns:
            32-byte shared secret (X coordinate of the shared point)

        Raises:
            EnclaveUnavailable: If the enclave cannot be reached or refuses
        """
        pass

    @abstractmethod
    def release(self, handle: object) -> None:
        """
        Destroy the key behind a handle. Unknown handles are ignored.
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if this enclave is present and usable on the system.

        Returns:
            True if the enclave can be used, False otherwise
        """
        pass
