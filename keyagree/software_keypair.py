"""
Software Keypair Implementations

These variants keep the private key in process memory as a `cryptography`
key object. This is the lower-trust tier: any code with access to the
process can extract the scalar. Use EnclaveP256Keypair where the key must
survive a compromised host.
"""

from typing import Optional

from .codec import export_public_key, import_public_key
from .errors import CurveMismatch, MalformedKeyData
from .keypair_interface import KeyAgreement
from .logger import Logger
from .model import CurveType, PublicKey
from .provider import CurveProvider, DEFAULT_PROVIDER
from .wire import WireRecord


class _SoftwareKeypair(KeyAgreement):
    """
    Keypair backed by a CurveProvider.

    WARNING: the private key is resident in process memory.
    """

    storage = "software"

    def __init__(
        self,
        public_key: PublicKey,
        private_key: Optional[object] = None,
        provider: Optional[CurveProvider] = None,
    ) -> None:
        """
        Wrap existing key material. Prefer generate() or public_only().

        Args:
            public_key: Public key matching `private_key`
            private_key: Provider private key handle, None for public-only
            provider: Curve provider that created `private_key`
        """
        if public_key.curve_type != self.curve_type:
            raise CurveMismatch(self.curve_type, public_key.curve_type)
        self._public_key = PublicKey(self.curve_type, bytes(public_key.data))
        self._private_key = private_key
        self._provider = provider if provider is not None else DEFAULT_PROVIDER

    @classmethod
    def generate(cls, provider: Optional[CurveProvider] = None):
        """Generate a fresh keypair"""
        if provider is None:
            provider = DEFAULT_PROVIDER
        private_key, public_bytes = provider.generate_keypair(cls.curve_type)
        public_key = PublicKey(cls.curve_type, public_bytes)
        Logger.debug("KEYGEN", f"Generated software {cls.curve_type.name} keypair {public_key.fingerprint}")
        return cls(public_key, private_key, provider)

    @classmethod
    def public_only(cls, public_key: PublicKey, provider: Optional[CurveProvider] = None):
        """
        Build a keypair holding only a public key.

        Raises:
            CurveMismatch: If the key is on another curve
            MalformedKeyData: If the key is not a valid point
        """
        if provider is None:
            provider = DEFAULT_PROVIDER
        if public_key.curve_type != cls.curve_type:
            raise CurveMismatch(cls.curve_type, public_key.curve_type)
        if not provider.validate_point(cls.curve_type, bytes(public_key.data)):
            raise MalformedKeyData(f"{cls.curve_type.name} key is not a valid curve point")
        return cls(public_key, None, provider)

    @classmethod
    def from_wire_record(cls, record: WireRecord, provider: Optional[CurveProvider] = None):
        """Reconstruct a public-only keypair from a peer's wire record"""
        public_key = cls.import_public_key(record, provider)
        return cls(public_key, None, provider)

    # ========================================================================
    # Key Agreement
    # ========================================================================

    def generate_public_key(self) -> PublicKey:
        return self._public_key

    @property
    def has_private_key(self) -> bool:
        return self._private_key is not None

    def compute_shared_secret(self, peer_public_key: PublicKey) -> bytes:
        self._check_peer(peer_public_key)
        return self._provider.agree(self._private_key, bytes(peer_public_key.data))

    # ========================================================================
    # Wire Codec
    # ========================================================================

    def export_public_key(self) -> WireRecord:
        return export_public_key(self._public_key)

    @classmethod
    def import_public_key(cls, record: WireRecord, provider: Optional[CurveProvider] = None) -> PublicKey:
        return import_public_key(record, cls.curve_type, provider)

    def close(self) -> None:
        self._private_key = None


class SoftwareP256Keypair(_SoftwareKeypair):
    """P-256 ECDH keypair with an in-process private key"""

    curve_type = CurveType.P256


class SoftwareCurve25519Keypair(_SoftwareKeypair):
    """X25519 keypair with an in-process private key"""

    curve_type = CurveType.Curve25519
