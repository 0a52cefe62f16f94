"""
keyagree
ECDH key agreement over software and enclave-resident keypairs,
with one public key wire format for every variant.
"""

__version__ = '0.1.0'

from .model import CurveType, PublicKey, get_curve_name
from .wire import WireRecord
from .errors import (
    KeyAgreementError, CurveMismatch, CurveTypeMismatch, MalformedKeyData,
    WireFormatError, MissingPrivateKey, EnclaveUnavailable, UnsupportedVariant,
)
from .codec import export_public_key, import_public_key
from .provider import CurveProvider, SoftwareCurveProvider
from .enclave_interface import EnclaveProvider
from .keypair_interface import KeyAgreement
from .software_keypair import SoftwareP256Keypair, SoftwareCurve25519Keypair
from .enclave_keypair import EnclaveP256Keypair
from .factory import KeyStorage, new_keypair, public_only_keypair

__all__ = [
    'CurveType',
    'PublicKey',
    'get_curve_name',
    'WireRecord',
    'KeyAgreementError',
    'CurveMismatch',
    'CurveTypeMismatch',
    'MalformedKeyData',
    'WireFormatError',
    'MissingPrivateKey',
    'EnclaveUnavailable',
    'UnsupportedVariant',
    'export_public_key',
    'import_public_key',
    'CurveProvider',
    'SoftwareCurveProvider',
    'EnclaveProvider',
    'KeyAgreement',
    'SoftwareP256Keypair',
    'SoftwareCurve25519Keypair',
    'EnclaveP256Keypair',
    'KeyStorage',
    'new_keypair',
    'public_only_keypair',
]
