"""
TPM2-based Enclave Implementation

This implementation uses a TPM 2.0 device for P-256 agreement keys. The
private scalar is created inside the TPM (SENSITIVEDATAORIGIN, FIXEDTPM)
and only an ESYS_TR handle is ever held by the process.

Requirements:
- TPM2 hardware or software simulator (swtpm)
- tpm2-pytss library (install the `tpm2` extra)
"""

from typing import Optional, Tuple

from tpm2_pytss import (
    ESAPI, TPM2_SU, ESYS_TR,
    TPM2B_SENSITIVE_CREATE, TPM2B_PUBLIC, TPMA_OBJECT,
    TPMS_ECC_POINT, TPM2B_ECC_POINT, TPM2B_ECC_PARAMETER,
)
from tpm2_pytss.constants import TPM2_RC
from tpm2_pytss import TSS2_Exception

from .config import (
    TPM2_TCTI, TPM2_PRIMARY_HIERARCHY,
    P256_COORDINATE_SIZE, P256_RAW_POINT_SIZE, SHARED_SECRET_SIZE,
)
from .enclave_interface import EnclaveProvider
from .errors import EnclaveUnavailable, MalformedKeyData, UnsupportedVariant
from .logger import Logger
from .model import CurveType

# Agreement-only key: DECRYPT without SIGN_ENCRYPT, bound to this TPM
ECDH_KEY_ATTRIBUTES = (
    TPMA_OBJECT.USERWITHAUTH |
    TPMA_OBJECT.DECRYPT |
    TPMA_OBJECT.FIXEDTPM |
    TPMA_OBJECT.FIXEDPARENT |
    TPMA_OBJECT.SENSITIVEDATAORIGIN
)


class TPM2Enclave(EnclaveProvider):
    """
    TPM 2.0 enclave for P-256 ECDH.

    Each generated key is a transient primary object under the owner
    hierarchy. It stays loaded until release() flushes it.
    """

    def __init__(self, tcti: Optional[str] = TPM2_TCTI):
        """
        Initialize TPM2 enclave.

        Args:
            tcti: TCTI configuration string, None for the tpm2-tss default.
                  The connection is opened lazily on first use.
        """
        self.tcti = tcti
        self.esapi: Optional[ESAPI] = None
        self._handles = set()

    def _connect(self) -> ESAPI:
        """Open the TPM connection if not already open."""
        if self.esapi is not None:
            return self.esapi

        try:
            esapi = ESAPI(self.tcti)
        except Exception as e:
            Logger.warning(f"TPM2 not reachable: {e}")
            raise EnclaveUnavailable(f"Cannot connect to TPM2: {e}") from e

        try:
            esapi.startup(TPM2_SU.CLEAR)
        except TSS2_Exception as e:
            # Already started by firmware or another client
            if e.rc != TPM2_RC.INITIALIZE:
                esapi.close()
                raise EnclaveUnavailable(f"TPM2 startup failed: {e}") from e

        Logger.info("TPM2 enclave connected")
        self.esapi = esapi
        return esapi

    # ========================================================================
    # Key Operations
    # ========================================================================

    def generate_keypair(self, curve: CurveType) -> Tuple[object, bytes]:
        """Create an ECDH P-256 primary key inside the TPM"""
        if curve != CurveType.P256:
            raise UnsupportedVariant(f"TPM2 enclave supports P256 only, not {curve!r}")

        esapi = self._connect()
        try:
            in_public = TPM2B_PUBLIC.parse(
                alg='ecc256:ecdh',
                objectAttributes=ECDH_KEY_ATTRIBUTES
            )
            key_handle, pub, _, _, _ = esapi.create_primary(
                TPM2B_SENSITIVE_CREATE(),
                in_public,
                primary_handle=ESYS_TR(TPM2_PRIMARY_HIERARCHY)
            )
        except TSS2_Exception as e:
            Logger.error(f"TPM2 key generation failed: {e}")
            raise EnclaveUnavailable(f"TPM2 key generation failed: {e}") from e

        self._handles.add(key_handle)
        pubkey_point = pub.publicArea.unique.ecc
        return (key_handle, _coordinates_to_raw(pubkey_point.x, pubkey_point.y))

    def agree(self, handle: object, peer_point: bytes) -> bytes:
        """Compute ECDH via TPM2_ECDH_ZGen"""
        if len(peer_point) != P256_RAW_POINT_SIZE:
            raise MalformedKeyData(
                f"Peer point is {len(peer_point)} bytes, expected {P256_RAW_POINT_SIZE}"
            )
        if handle not in self._handles:
            raise EnclaveUnavailable("Key handle is not loaded in this TPM session")

        esapi = self._connect()
        x = TPM2B_ECC_PARAMETER(bytes(peer_point[:P256_COORDINATE_SIZE]))
        y = TPM2B_ECC_PARAMETER(bytes(peer_point[P256_COORDINATE_SIZE:]))
        peer = TPM2B_ECC_POINT(point=TPMS_ECC_POINT(x=x, y=y))

        try:
            z_point = esapi.ecdh_zgen(handle, peer)
        except TSS2_Exception as e:
            Logger.error(f"TPM2 ECDH failed: {e}")
            raise EnclaveUnavailable(f"TPM2 ECDH failed: {e}") from e

        # z_point is TPM2B_ECC_POINT wrapper - shared secret is its X coordinate
        return bytes(z_point.point.x.buffer).rjust(SHARED_SECRET_SIZE, b'\x00')

    def release(self, handle: object) -> None:
        """Flush a transient key from the TPM"""
        if handle not in self._handles:
            return
        self._handles.discard(handle)
        try:
            self.esapi.flush_context(handle)
        except TSS2_Exception as e:
            Logger.warning(f"Failed to flush TPM2 key handle: {e}")

    def is_available(self) -> bool:
        """Check if the TPM can be reached"""
        try:
            self._connect()
        except EnclaveUnavailable:
            return False
        return True

    def close(self) -> None:
        """Flush all keys and close the TPM connection."""
        for handle in list(self._handles):
            self.release(handle)
        if self.esapi is not None:
            self.esapi.close()
            self.esapi = None


def _pad_coordinate(value: bytes) -> bytes:
    # TPM2B buffers may drop leading zero bytes
    return value.rjust(P256_COORDINATE_SIZE, b'\x00')


def _coordinates_to_raw(x, y) -> bytes:
    return _pad_coordinate(bytes(x.buffer)) + _pad_coordinate(bytes(y.buffer))
