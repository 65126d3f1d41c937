"""
Tests for Pydantic schemas.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from signin_doctor.models.schemas import (
    AggregationResult,
    FingerprintKind,
    FingerprintRecord,
    ProductionKeystoreInput,
    SDKInstallation,
    normalize_digest,
)


class TestFingerprintRecord:
    """Tests for FingerprintRecord normalization and helpers."""

    def test_value_is_normalized(self):
        record = FingerprintRecord(source_label="Debug", kind=FingerprintKind.SHA1, value="aa:bb cc")
        assert record.value == "AABBCC"

    def test_colon_value(self):
        record = FingerprintRecord(source_label="Debug", kind=FingerprintKind.SHA1, value="AABBCC")
        assert record.colon_value == "AA:BB:CC"

    def test_expected_length_sha1(self):
        record = FingerprintRecord(source_label="Debug", kind=FingerprintKind.SHA1, value="AB" * 20)
        assert record.has_expected_length

    def test_expected_length_sha256(self):
        record = FingerprintRecord(source_label="Debug", kind=FingerprintKind.SHA256, value="AB" * 32)
        assert record.has_expected_length

    def test_short_digest_is_kept_but_flagged(self):
        record = FingerprintRecord(source_label="Debug", kind=FingerprintKind.SHA1, value="AABBCC")
        assert not record.has_expected_length

    def test_non_hex_digest_is_flagged(self):
        record = FingerprintRecord(source_label="Debug", kind=FingerprintKind.SHA1, value="ZZ" * 20)
        assert not record.has_expected_length

    def test_empty_value_rejected(self):
        with pytest.raises(ValidationError):
            FingerprintRecord(source_label="Debug", kind=FingerprintKind.SHA1, value=" : ")

    def test_record_is_frozen(self):
        record = FingerprintRecord(source_label="Debug", kind=FingerprintKind.SHA1, value="AA")
        with pytest.raises(ValidationError):
            record.value = "BB"

    def test_kind_from_display_value(self):
        record = FingerprintRecord(source_label="Debug", kind="SHA-256", value="AA")
        assert record.kind is FingerprintKind.SHA256

    def test_normalize_digest(self):
        assert normalize_digest(" 0a:1B \t2c ") == "0A1B2C"


class TestProductionKeystoreInput:
    """Tests for production keystore defaults."""

    def test_defaults(self):
        production = ProductionKeystoreInput(path=Path("release.jks"), store_password="pw")

        assert production.alias == "production"
        assert production.effective_key_password == "pw"

    def test_blank_alias_defaults(self):
        assert ProductionKeystoreInput(path=Path("release.jks"), alias="").alias == "production"

    def test_to_source_expands_home(self):
        source = ProductionKeystoreInput(
            path=Path("~/keys/release.jks"), alias="upload", store_password="s", key_password="k"
        ).to_source("Production Keystore")

        assert source.path == Path.home() / "keys" / "release.jks"
        assert (source.alias, source.store_password, source.key_password) == ("upload", "s", "k")
        assert source.label == "Production Keystore"


class TestSDKInstallation:
    def test_path(self):
        installation = SDKInstallation(base_path=Path("/sdk"), versions=["9.0.0", "10.0.0"], selected="10.0.0")
        assert installation.path == Path("/sdk/10.0.0")


class TestAggregationResult:
    def test_first_sha1_skips_sha256(self):
        result = AggregationResult(records=[
            FingerprintRecord(source_label="A", kind=FingerprintKind.SHA256, value="11"),
            FingerprintRecord(source_label="B", kind=FingerprintKind.SHA1, value="22"),
            FingerprintRecord(source_label="C", kind=FingerprintKind.SHA1, value="33"),
        ])

        assert result.first_sha1.source_label == "B"
        assert not result.is_empty

    def test_empty(self):
        result = AggregationResult()

        assert result.is_empty
        assert result.first_sha1 is None

    def test_json_dump(self):
        result = AggregationResult(records=[
            FingerprintRecord(source_label="A", kind=FingerprintKind.SHA1, value="aa:bb"),
        ])

        assert '"kind":"SHA-1"' in result.model_dump_json()
        assert '"value":"AABB"' in result.model_dump_json()
