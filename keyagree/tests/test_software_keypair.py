import unittest
from unittest.mock import MagicMock, patch

from keyagree.config import SHARED_SECRET_SIZE
from keyagree.errors import CurveMismatch, CurveTypeMismatch, MalformedKeyData, MissingPrivateKey
from keyagree.logger import Logger
from keyagree.model import PublicKey
from keyagree.provider import SoftwareCurveProvider
from keyagree.software_keypair import SoftwareCurve25519Keypair, SoftwareP256Keypair
from keyagree.wire import WireRecord

Logger.enabled = False


class SoftwareKeypairTests:
    """Shared checks, mixed into one TestCase per curve"""

    keypair_cls = None
    other_cls = None
    key_size = 0

    def test_compute_shared_secret_symmetric(self):
        pair_a = self.keypair_cls.generate()
        pair_b = self.keypair_cls.generate()
        shared_a = pair_a.compute_shared_secret(pair_b.generate_public_key())
        shared_b = pair_b.compute_shared_secret(pair_a.generate_public_key())
        self.assertEqual(shared_a, shared_b)
        self.assertEqual(len(shared_a), SHARED_SECRET_SIZE)

    def test_independent_pairs_differ(self):
        pair_a = self.keypair_cls.generate()
        pair_b = self.keypair_cls.generate()
        pair_c = self.keypair_cls.generate()
        self.assertNotEqual(
            pair_a.compute_shared_secret(pair_b.generate_public_key()),
            pair_a.compute_shared_secret(pair_c.generate_public_key()),
        )

    def test_public_key_shape(self):
        public_key = self.keypair_cls.generate().generate_public_key()
        self.assertEqual(public_key.curve_type, self.keypair_cls.curve_type)
        self.assertEqual(len(public_key.data), self.key_size)

    def test_export_import_round_trip(self):
        pair = self.keypair_cls.generate()
        record = pair.export_public_key()
        self.assertEqual(record.curve_type, self.keypair_cls.curve_type)
        imported = self.keypair_cls.import_public_key(record)
        self.assertEqual(imported, pair.generate_public_key())

    def test_public_only_reexport_matches(self):
        pair = self.keypair_cls.generate()
        record = pair.export_public_key()
        peer = self.keypair_cls.from_wire_record(record)
        self.assertFalse(peer.has_private_key)
        self.assertEqual(peer.export_public_key(), record)

    def test_public_only_reexport_never_touches_provider_agree(self):
        provider = MagicMock(wraps=SoftwareCurveProvider())
        record = self.keypair_cls.generate().export_public_key()
        peer = self.keypair_cls.from_wire_record(record, provider=provider)
        peer.export_public_key()
        provider.agree.assert_not_called()
        provider.generate_keypair.assert_not_called()

    def test_public_only_cannot_agree(self):
        pair = self.keypair_cls.generate()
        peer = self.keypair_cls.from_wire_record(pair.export_public_key())
        with self.assertRaises(MissingPrivateKey):
            peer.compute_shared_secret(pair.generate_public_key())

    def test_agreement_with_reconstructed_key(self):
        pair_a = self.keypair_cls.generate()
        pair_b = self.keypair_cls.generate()
        peer_b = self.keypair_cls.from_wire_record(
            WireRecord.from_bytes(pair_b.export_public_key().to_bytes())
        )
        self.assertEqual(
            pair_a.compute_shared_secret(peer_b.generate_public_key()),
            pair_b.compute_shared_secret(pair_a.generate_public_key()),
        )

    def test_curve_mismatch(self):
        pair = self.keypair_cls.generate()
        other = self.other_cls.generate()
        with self.assertRaises(CurveMismatch) as ctx:
            pair.compute_shared_secret(other.generate_public_key())
        self.assertEqual(ctx.exception.expected, self.keypair_cls.curve_type)

    def test_import_from_other_curve(self):
        record = self.other_cls.generate().export_public_key()
        with self.assertRaises(CurveTypeMismatch):
            self.keypair_cls.import_public_key(record)

    def test_malformed_peer_key(self):
        pair = self.keypair_cls.generate()
        bogus = PublicKey(self.keypair_cls.curve_type, bytes(self.key_size))
        with self.assertRaises(MalformedKeyData):
            pair.compute_shared_secret(bogus)

    def test_public_only_rejects_invalid_point(self):
        with self.assertRaises(MalformedKeyData):
            self.keypair_cls.public_only(PublicKey(self.keypair_cls.curve_type, bytes(self.key_size)))

    def test_close_drops_private_key(self):
        pair = self.keypair_cls.generate()
        peer = self.keypair_cls.generate()
        with pair:
            self.assertTrue(pair.has_private_key)
        self.assertFalse(pair.has_private_key)
        with self.assertRaises(MissingPrivateKey):
            pair.compute_shared_secret(peer.generate_public_key())
        pair.close()
        self.assertEqual(pair.export_public_key().curve_type, self.keypair_cls.curve_type)

    def test_repr_shows_only_public_data(self):
        pair = self.keypair_cls.generate()
        text = repr(pair)
        self.assertIn("storage=software", text)
        self.assertIn(pair.generate_public_key().fingerprint, text)
        self.assertNotIn("_private_key", text)


class TestSoftwareP256Keypair(SoftwareKeypairTests, unittest.TestCase):
    keypair_cls = SoftwareP256Keypair
    other_cls = SoftwareCurve25519Keypair
    key_size = 65

    def test_uncompressed_encoding(self):
        public_key = SoftwareP256Keypair.generate().generate_public_key()
        self.assertEqual(public_key.data[0], 0x04)


class TestSoftwareCurve25519Keypair(SoftwareKeypairTests, unittest.TestCase):
    keypair_cls = SoftwareCurve25519Keypair
    other_cls = SoftwareP256Keypair
    key_size = 32

    def test_wrapping_key_of_other_curve(self):
        public_key = SoftwareP256Keypair.generate().generate_public_key()
        with self.assertRaises(CurveMismatch):
            SoftwareCurve25519Keypair.public_only(public_key)

    def test_generation_skips_forbidden_keys(self):
        """A generated key that lands on a forbidden value is thrown away"""
        with patch('keyagree.provider._is_forbidden_curve25519_key', side_effect=[True, False]) as check:
            pair = SoftwareCurve25519Keypair.generate()
        self.assertEqual(check.call_count, 2)
        self.assertTrue(pair.has_private_key)


if __name__ == '__main__':
    unittest.main()
