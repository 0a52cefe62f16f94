"""
keyagree Configuration Constants

Configuration values for the key agreement library.
"""

import os

# Wire Format
# Version byte written at offset 0 of a serialized WireRecord.
WIRE_FORMAT_VERSION = 1

# Curve tags carried in the wire record. These values are part of the
# wire format and must never be renumbered.
CURVE_TAG_P256 = 0
CURVE_TAG_CURVE25519 = 1

# Key Sizes (bytes)
P256_COORDINATE_SIZE = 32
P256_UNCOMPRESSED_POINT_SIZE = 1 + 2 * P256_COORDINATE_SIZE  # 0x04 || X || Y
P256_RAW_POINT_SIZE = 2 * P256_COORDINATE_SIZE  # X || Y, TPM representation
CURVE25519_KEY_SIZE = 32
SHARED_SECRET_SIZE = 32

# TPM2 Configuration
# TCTI used to reach the TPM, e.g. "device:/dev/tpmrm0" or
# "swtpm:host=localhost,port=2321". None lets tpm2-tss pick its default.
TPM2_TCTI = os.environ.get("KEYAGREE_TPM2_TCTI") or None

# Hierarchy agreement keys are created under (ESYS_TR_RH_OWNER)
TPM2_PRIMARY_HIERARCHY = 0x101

# Logging
# Number of public key bytes shown (hex) in log lines and reprs
FINGERPRINT_BYTES = 8
