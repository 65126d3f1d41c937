"""
Tests for the keytool output parser.
"""

import pytest

from signin_doctor.models.schemas import FingerprintKind
from signin_doctor.services.fingerprint_parser import ParsedFingerprints, parse

from fakes import DEBUG_SHA1, DEBUG_SHA256, KEYTOOL_APK_OUTPUT, KEYTOOL_DEBUG_OUTPUT


class TestFingerprintParser:
    """Tests for parse()."""

    def test_parse_keystore_listing(self):
        """Test parsing a full `keytool -list -v` listing."""
        result = parse(KEYTOOL_DEBUG_OUTPUT)

        assert result.sha1 == DEBUG_SHA1
        assert result.sha256 == DEBUG_SHA256

    def test_parse_hyphenated_labels(self):
        """Test the SHA-1:/SHA-256: spelling used by older JDKs."""
        result = parse(KEYTOOL_APK_OUTPUT)

        assert result.sha1 == "ABCDEF0123456789ABCDEF0123456789ABCDEF01"
        assert result.sha256 == "0123456789ABCDEF" * 4

    @pytest.mark.parametrize("label", ["SHA1:", "SHA-1:", "sha1:", "Sha-1:"])
    def test_both_spellings_extract_identically(self, label):
        """Test that every accepted SHA-1 label yields the same digest."""
        result = parse(f"Certificate fingerprints:\n\t {label} AB:CD:EF\n")

        assert result.sha1 == "ABCDEF"
        assert result.sha256 is None

    def test_separators_are_removed(self):
        """Test that colons and spaces inside the digest are dropped."""
        result = parse("SHA256: 11 22:33  44\n")

        assert result.sha256 == "11223344"

    def test_lowercase_digest_is_uppercased(self):
        """Test case normalization of the digest."""
        assert parse("SHA1: aa:bb:cc").sha1 == "AABBCC"

    def test_no_labels(self):
        """Test text without fingerprint labels returns empty fields."""
        result = parse("keytool error: java.lang.Exception: Alias <foo> does not exist\n")

        assert result == ParsedFingerprints()
        assert result.is_empty

    @pytest.mark.parametrize("raw", ["", None])
    def test_empty_input(self, raw):
        """Test empty or missing input never raises."""
        assert parse(raw).is_empty

    def test_first_match_wins(self):
        """Test only the first certificate of a chain is reported."""
        raw = (
            "Certificate[1]:\n"
            "\t SHA1: 11:11:11\n"
            "\t SHA256: 22:22:22\n"
            "Certificate[2]:\n"
            "\t SHA1: 33:33:33\n"
            "\t SHA256: 44:44:44\n"
        )
        result = parse(raw)

        assert result.sha1 == "111111"
        assert result.sha256 == "222222"

    def test_first_match_across_spellings(self):
        """Test the first line with either spelling wins."""
        result = parse("SHA-1: 01:02\nSHA1: 03:04\n")

        assert result.sha1 == "0102"

    def test_parse_is_idempotent(self):
        """Test re-parsing the same text gives the same result."""
        assert parse(KEYTOOL_DEBUG_OUTPUT) == parse(KEYTOOL_DEBUG_OUTPUT)

    def test_signature_algorithm_is_not_a_fingerprint(self):
        """Test 'SHA256withRSA' and similar are not taken for labels."""
        result = parse("Signature algorithm name: SHA256withRSA\nDigest algorithm: SHA-256\n")

        assert result.is_empty

    def test_label_without_value(self):
        """Test a label with nothing after it yields an empty field."""
        result = parse("SHA1:   \nSHA256: 12:34\n")

        assert result.sha1 is None
        assert result.sha256 == "1234"


class TestParsedFingerprints:
    """Tests for ParsedFingerprints.to_records()."""

    def test_to_records_orders_sha1_first(self):
        records = ParsedFingerprints(sha1="AABB", sha256="CCDD").to_records("Android Debug Keystore")

        assert [(r.source_label, r.kind, r.value) for r in records] == [
            ("Android Debug Keystore", FingerprintKind.SHA1, "AABB"),
            ("Android Debug Keystore", FingerprintKind.SHA256, "CCDD"),
        ]

    def test_to_records_skips_missing(self):
        records = ParsedFingerprints(sha256="CCDD").to_records("Production Keystore")

        assert len(records) == 1
        assert records[0].kind is FingerprintKind.SHA256

    def test_to_records_empty(self):
        assert ParsedFingerprints().to_records("x") == []
