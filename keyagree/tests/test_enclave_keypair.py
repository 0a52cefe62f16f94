import unittest
from unittest.mock import MagicMock

from keyagree.codec import import_public_key, p256_from_coordinates
from keyagree.config import SHARED_SECRET_SIZE
from keyagree.enclave_keypair import EnclaveP256Keypair
from keyagree.errors import (
    CurveMismatch, CurveTypeMismatch, EnclaveUnavailable,
    MalformedKeyData, MissingPrivateKey,
)
from keyagree.keypair_interface import KeyAgreement
from keyagree.logger import Logger
from keyagree.model import CurveType, PublicKey
from keyagree.software_keypair import SoftwareCurve25519Keypair, SoftwareP256Keypair
from keyagree.tests.mock_enclave import MockEnclave
from keyagree.wire import WireRecord

Logger.enabled = False


class TestEnclaveP256Keypair(unittest.TestCase):

    def setUp(self):
        self.enclave = MockEnclave()

    def test_enclave_pair_symmetric(self):
        pair_a = EnclaveP256Keypair.generate(self.enclave)
        pair_b = EnclaveP256Keypair.generate(self.enclave)
        shared_a = pair_a.compute_shared_secret(pair_b.generate_public_key())
        shared_b = pair_b.compute_shared_secret(pair_a.generate_public_key())
        self.assertEqual(shared_a, shared_b)
        self.assertEqual(len(shared_a), SHARED_SECRET_SIZE)

    def test_enclave_and_software_scenario(self):
        enclave_pair = EnclaveP256Keypair.generate(self.enclave)
        software_pair = SoftwareP256Keypair.generate()

        shared_e = enclave_pair.compute_shared_secret(software_pair.generate_public_key())
        shared_s = software_pair.compute_shared_secret(enclave_pair.generate_public_key())
        self.assertEqual(shared_e, shared_s)

        record = enclave_pair.export_public_key()
        peer = SoftwareP256Keypair.from_wire_record(record)
        self.assertFalse(peer.has_private_key)
        self.assertEqual(
            software_pair.compute_shared_secret(peer.generate_public_key()),
            shared_e,
        )

    def test_public_key_is_canonical(self):
        public_key = EnclaveP256Keypair.generate(self.enclave).generate_public_key()
        self.assertEqual(len(public_key.data), 65)
        self.assertEqual(public_key.data[0], 0x04)

    def test_export_round_trip(self):
        pair = EnclaveP256Keypair.generate(self.enclave)
        record = pair.export_public_key()
        self.assertEqual(record.curve_type, CurveType.P256)
        self.assertEqual(EnclaveP256Keypair.import_public_key(record), pair.generate_public_key())
        wire = WireRecord.from_bytes(record.to_bytes())
        self.assertEqual(import_public_key(wire, CurveType.P256), pair.generate_public_key())

    def test_export_does_not_touch_enclave(self):
        enclave = MagicMock(wraps=self.enclave)
        pair = EnclaveP256Keypair.generate(enclave)
        enclave.reset_mock()
        pair.export_public_key()
        self.assertEqual(enclave.mock_calls, [])

    def test_from_wire_record_is_software_public_only(self):
        record = EnclaveP256Keypair.generate(self.enclave).export_public_key()
        peer = EnclaveP256Keypair.from_wire_record(record)
        self.assertIsInstance(peer, SoftwareP256Keypair)
        self.assertFalse(peer.has_private_key)
        self.assertEqual(peer.export_public_key(), record)

    def test_import_curve25519_record(self):
        record = SoftwareCurve25519Keypair.generate().export_public_key()
        with self.assertRaises(CurveTypeMismatch):
            EnclaveP256Keypair.import_public_key(record)

    def test_curve_mismatch(self):
        pair = EnclaveP256Keypair.generate(self.enclave)
        other = SoftwareCurve25519Keypair.generate().generate_public_key()
        with self.assertRaises(CurveMismatch):
            pair.compute_shared_secret(other)
        self.assertEqual(self.enclave.agree_calls, 0)

    def test_malformed_peer_rejected_before_enclave(self):
        pair = EnclaveP256Keypair.generate(self.enclave)
        with self.assertRaises(MalformedKeyData):
            pair.compute_shared_secret(PublicKey(CurveType.P256, b'\x04' + bytes(64)))
        self.assertEqual(self.enclave.agree_calls, 0)

    def test_enclave_unavailable_on_generate(self):
        with self.assertRaises(EnclaveUnavailable):
            EnclaveP256Keypair.generate(MockEnclave(available=False))

    def test_enclave_unavailable_on_agree(self):
        pair = EnclaveP256Keypair.generate(self.enclave)
        peer = SoftwareP256Keypair.generate()
        self.enclave.available = False
        with self.assertRaises(EnclaveUnavailable):
            pair.compute_shared_secret(peer.generate_public_key())

    def test_close_releases_handle(self):
        pair = EnclaveP256Keypair.generate(self.enclave)
        peer = SoftwareP256Keypair.generate()
        with pair:
            self.assertTrue(pair.has_private_key)
        self.assertEqual(len(self.enclave.released), 1)
        with self.assertRaises(MissingPrivateKey):
            pair.compute_shared_secret(peer.generate_public_key())
        pair.close()
        self.assertEqual(len(self.enclave.released), 1)

    def test_bad_point_from_enclave_releases_handle(self):
        enclave = MagicMock()
        enclave.generate_keypair.return_value = ("handle", bytes(64))
        with self.assertRaises(MalformedKeyData):
            EnclaveP256Keypair.generate(enclave)
        enclave.release.assert_called_once_with("handle")

    def test_wrap_existing_enclave_key(self):
        handle, raw_point = self.enclave.generate_keypair(CurveType.P256)
        public_key = PublicKey(CurveType.P256, p256_from_coordinates(raw_point))
        pair = EnclaveP256Keypair(self.enclave, handle, public_key)
        software_pair = SoftwareP256Keypair.generate()

        self.assertTrue(pair.has_private_key)
        self.assertEqual(
            pair.compute_shared_secret(software_pair.generate_public_key()),
            software_pair.compute_shared_secret(public_key),
        )
        self.assertEqual(pair.export_public_key(), WireRecord(CurveType.P256, public_key.data))

    def test_wrap_rejects_invalid_point(self):
        handle, _ = self.enclave.generate_keypair(CurveType.P256)
        with self.assertRaises(MalformedKeyData):
            EnclaveP256Keypair(self.enclave, handle, PublicKey(CurveType.P256, b'\x04' + bytes(64)))

    def test_wrap_rejects_other_curve(self):
        public_key = SoftwareCurve25519Keypair.generate().generate_public_key()
        with self.assertRaises(CurveMismatch):
            EnclaveP256Keypair(self.enclave, object(), public_key)


class TestEnclaveIsolation(unittest.TestCase):
    """No call sequence on the public API yields the enclave's private scalar"""

    def _public_outputs(self, pair):
        outputs = [repr(pair), str(pair)]
        for name in dir(pair):
            if name.startswith('_'):
                continue
            attr = getattr(pair, name)
            if not callable(attr):
                outputs.append(attr)
        outputs.append(pair.generate_public_key())
        record = pair.export_public_key()
        outputs.append(record)
        outputs.append(record.to_bytes())
        return outputs

    @staticmethod
    def _flatten(values):
        for value in values:
            if isinstance(value, tuple):
                yield from TestEnclaveIsolation._flatten(value)
            elif isinstance(value, (bytes, bytearray)):
                yield bytes(value)
            elif isinstance(value, str):
                yield value.encode()

    def test_no_private_bytes_reachable(self):
        enclave = MockEnclave()
        pair = EnclaveP256Keypair.generate(enclave)
        scalar = enclave.private_scalar_bytes(pair._handle)
        peer = SoftwareP256Keypair.generate()
        outputs = self._public_outputs(pair)
        outputs.append(pair.compute_shared_secret(peer.generate_public_key()))

        for blob in self._flatten(outputs):
            self.assertNotIn(scalar, blob)
            self.assertNotIn(scalar.hex().encode(), blob)

    def test_interface_has_no_private_key_accessor(self):
        public_api = {name for name in dir(KeyAgreement) if not name.startswith('_')}
        self.assertEqual(
            {name for name in public_api if 'private' in name},
            {'has_private_key'},
        )
        enclave_api = {name for name in dir(EnclaveP256Keypair) if not name.startswith('_')}
        self.assertEqual(
            enclave_api - public_api,
            {'curve_type', 'storage', 'generate', 'from_wire_record'},
        )

    def test_instance_holds_no_key_bytes(self):
        pair = EnclaveP256Keypair.generate(MockEnclave())
        for name, value in vars(pair).items():
            if isinstance(value, (bytes, bytearray)):
                self.fail(f"{name} holds raw bytes")


if __name__ == '__main__':
    unittest.main()
