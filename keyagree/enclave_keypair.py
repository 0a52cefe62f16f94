"""
Enclave-resident P-256 Keypair

The private key is generated by, and never leaves, an EnclaveProvider.
This object holds an opaque handle plus the public key. Public key export
and import go through a public-only SoftwareP256Keypair, which never sees
the handle.
"""

from .codec import p256_from_coordinates, p256_to_coordinates
from .enclave_interface import EnclaveProvider
from .errors import CurveMismatch, MalformedKeyData
from .keypair_interface import KeyAgreement
from .logger import Logger
from .model import CurveType, PublicKey
from .provider import DEFAULT_PROVIDER
from .software_keypair import SoftwareP256Keypair
from .wire import WireRecord


class EnclaveP256Keypair(KeyAgreement):
    """P-256 ECDH keypair whose private key lives in a hardware enclave"""

    curve_type = CurveType.P256
    storage = "enclave"

    def __init__(self, enclave: EnclaveProvider, handle: object, public_key: PublicKey) -> None:
        """
        Wrap a key that already exists in the enclave.

        Args:
            enclave: Enclave holding the key
            handle: Enclave key handle
            public_key: Canonical public key for the handle

        Raises:
            CurveMismatch: If the public key is on another curve
            MalformedKeyData: If the public key is not a valid point
        """
        if public_key.curve_type != self.curve_type:
            raise CurveMismatch(self.curve_type, public_key.curve_type)
        if not DEFAULT_PROVIDER.validate_point(self.curve_type, bytes(public_key.data)):
            raise MalformedKeyData("Enclave P256 public key is not a valid curve point")
        self._enclave = enclave
        self._handle = handle
        self._public_key = PublicKey(self.curve_type, bytes(public_key.data))

    @classmethod
    def generate(cls, enclave: EnclaveProvider) -> "EnclaveP256Keypair":
        """
        Generate a fresh keypair inside the enclave.

        Raises:
            EnclaveUnavailable: If the enclave is absent or refuses
        """
        handle, raw_point = enclave.generate_keypair(CurveType.P256)
        try:
            public_bytes = p256_from_coordinates(raw_point)
        except MalformedKeyData:
            enclave.release(handle)
            raise
        public_key = PublicKey(CurveType.P256, public_bytes)
        Logger.debug("KEYGEN", f"Generated enclave P256 keypair {public_key.fingerprint}")
        return cls(enclave, handle, public_key)

    @classmethod
    def from_wire_record(cls, record: WireRecord) -> SoftwareP256Keypair:
        """
        Reconstruct a peer's key. An enclave cannot host a foreign public
        key, so this yields a public-only software keypair.
        """
        return SoftwareP256Keypair.from_wire_record(record)

    # ========================================================================
    # Key Agreement
    # ========================================================================

    def generate_public_key(self) -> PublicKey:
        return self._public_key

    @property
    def has_private_key(self) -> bool:
        return self._handle is not None

    def compute_shared_secret(self, peer_public_key: PublicKey) -> bytes:
        self._check_peer(peer_public_key)
        peer_bytes = bytes(peer_public_key.data)
        # Invalid points surface as MalformedKeyData, never as an enclave failure
        if not DEFAULT_PROVIDER.validate_point(CurveType.P256, peer_bytes):
            raise MalformedKeyData("Peer P256 key is not a valid curve point")
        return self._enclave.agree(self._handle, p256_to_coordinates(peer_bytes))

    # ========================================================================
    # Wire Codec
    # ========================================================================

    def export_public_key(self) -> WireRecord:
        return SoftwareP256Keypair.public_only(self._public_key).export_public_key()

    @classmethod
    def import_public_key(cls, record: WireRecord) -> PublicKey:
        return SoftwareP256Keypair.import_public_key(record)

    def close(self) -> None:
        if self._handle is not None:
            handle, self._handle = self._handle, None
            self._enclave.release(handle)
