"""
Keypair variant selection.

The variant is picked explicitly from (curve, storage). An unreachable
enclave is reported as EnclaveUnavailable; there is no fallback to
software keys.
"""

from enum import Enum
from typing import Optional

from .enclave_interface import EnclaveProvider
from .enclave_keypair import EnclaveP256Keypair
from .errors import EnclaveUnavailable, UnsupportedVariant
from .keypair_interface import KeyAgreement
from .logger import Logger
from .model import CurveType
from .software_keypair import SoftwareCurve25519Keypair, SoftwareP256Keypair
from .wire import WireRecord


class KeyStorage(Enum):
    """Where the private key lives"""
    SOFTWARE = "software"
    ENCLAVE = "enclave"


SOFTWARE_VARIANTS = {
    CurveType.P256: SoftwareP256Keypair,
    CurveType.Curve25519: SoftwareCurve25519Keypair,
}


def default_enclave() -> EnclaveProvider:
    """
    Create the TPM2 enclave.

    Raises:
        EnclaveUnavailable: If tpm2-pytss is not installed
    """
    try:
        from .tpm2_enclave import TPM2Enclave
    except ImportError as e:
        raise EnclaveUnavailable(
            f"TPM2 support not installed (pip install keyagree[tpm2]): {e}"
        ) from e
    return TPM2Enclave()


def new_keypair(
    curve: CurveType,
    storage: KeyStorage = KeyStorage.SOFTWARE,
    enclave: Optional[EnclaveProvider] = None,
) -> KeyAgreement:
    """
    Generate a keypair of the requested variant.

    Args:
        curve: Curve to generate on
        storage: Private key storage tier
        enclave: Enclave to use for KeyStorage.ENCLAVE (default: TPM2)

    Raises:
        UnsupportedVariant: If no variant exists for the combination
        EnclaveUnavailable: If the enclave cannot be used
    """
    try:
        curve = CurveType(curve)
    except ValueError:
        raise UnsupportedVariant(f"Unknown curve tag: {curve!r}") from None

    if storage == KeyStorage.SOFTWARE:
        return SOFTWARE_VARIANTS[curve].generate()

    if storage == KeyStorage.ENCLAVE:
        if curve != CurveType.P256:
            raise UnsupportedVariant(f"No enclave-resident variant for {curve.name}")
        if enclave is None:
            enclave = default_enclave()
        try:
            return EnclaveP256Keypair.generate(enclave)
        except EnclaveUnavailable:
            Logger.error("Enclave key generation failed; not falling back to software keys")
            raise

    raise UnsupportedVariant(f"Unknown key storage: {storage!r}")


def public_only_keypair(record: WireRecord) -> KeyAgreement:
    """
    Reconstruct a peer's public-only keypair, dispatching on the record's curve tag.

    Raises:
        UnsupportedVariant: If the record's curve tag is unknown
        MalformedKeyData: If the key bytes are not a valid point
    """
    try:
        curve = CurveType(record.curve_type)
    except ValueError:
        raise UnsupportedVariant(f"Unknown curve tag: {record.curve_type!r}") from None
    return SOFTWARE_VARIANTS[curve].from_wire_record(record)
