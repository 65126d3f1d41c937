"""Pydantic schemas for keystore sources and extracted fingerprints."""

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

_SEPARATORS = re.compile(r"[:\s]+")


def normalize_digest(value: str) -> str:
    """Strip colon/whitespace separators from a hex digest and upper-case it."""
    return _SEPARATORS.sub("", value).upper()


# ============================================================================
# Enums
# ============================================================================


class FingerprintKind(str, Enum):
    """Certificate digest algorithm."""
    SHA1 = "SHA-1"
    SHA256 = "SHA-256"

    @property
    def hex_length(self) -> int:
        return 40 if self is FingerprintKind.SHA1 else 64


class SourceKind(str, Enum):
    """The four places fingerprints are collected from, in run order."""
    DEBUG_KEYSTORE = "debug_keystore"
    SDK_DEBUG_KEYSTORE = "sdk_debug_keystore"
    PRODUCTION_KEYSTORE = "production_keystore"
    INSTALLED_APK = "installed_apk"


class SourceStatus(str, Enum):
    """Result of attempting a single source."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    INSPECTION_FAILED = "inspection_failed"
    NO_FINGERPRINTS = "no_fingerprints"
    TRANSFER_FAILED = "transfer_failed"
    SKIPPED = "skipped"


# ============================================================================
# Fingerprint Schemas
# ============================================================================


class FingerprintRecord(BaseModel):
    """A single labeled certificate fingerprint.

    ``value`` is stored without separators and upper-cased, so
    ``"aa:bb cc"`` becomes ``"AABBCC"``. Use ``colon_value`` for the
    ``AA:BB:CC`` form that the Firebase console expects.
    """

    model_config = ConfigDict(frozen=True)

    source_label: str
    kind: FingerprintKind
    value: str = Field(..., min_length=1)

    @field_validator("value", mode="before")
    @classmethod
    def _normalize_value(cls, v):
        if isinstance(v, str):
            return normalize_digest(v)
        return v

    @property
    def colon_value(self) -> str:
        return ":".join(self.value[i:i + 2] for i in range(0, len(self.value), 2))

    @property
    def has_expected_length(self) -> bool:
        """True when the digest has 20 (SHA-1) or 32 (SHA-256) bytes of hex."""
        return (
            len(self.value) == self.kind.hex_length
            and re.fullmatch(r"[0-9A-F]+", self.value) is not None
        )


# ============================================================================
# Source Schemas
# ============================================================================


class KeystoreSource(BaseModel):
    """A keystore file plus the alias and credentials used to read it."""

    path: Path
    alias: str
    store_password: str = ""
    key_password: str = ""
    label: str


class SDKInstallation(BaseModel):
    """A versioned SDK directory tree and the version picked from it."""

    base_path: Path
    versions: list[str] = []
    selected: str

    @property
    def path(self) -> Path:
        return self.base_path / self.selected


class SourceOutcome(BaseModel):
    """What happened when a source was attempted."""

    kind: SourceKind
    label: str
    status: SourceStatus
    location: str | None = None
    detail: str | None = None
    records: list[FingerprintRecord] = []
    size_bytes: int | None = None


# ============================================================================
# Run Schemas
# ============================================================================


class ProductionKeystoreInput(BaseModel):
    """User-supplied release keystore details."""

    path: Path
    alias: str = "production"
    store_password: str = ""
    key_password: str | None = None

    @field_validator("alias", mode="before")
    @classmethod
    def _default_alias(cls, v):
        return v or "production"

    @property
    def effective_key_password(self) -> str:
        """The key password, falling back to the store password when unset."""
        return self.key_password or self.store_password

    def to_source(self, label: str) -> KeystoreSource:
        return KeystoreSource(
            path=self.path.expanduser(),
            alias=self.alias,
            store_password=self.store_password,
            key_password=self.effective_key_password,
            label=label,
        )


class RunConfiguration(BaseModel):
    """Inputs for one aggregation run."""

    production: ProductionKeystoreInput | None = None
    package_name: str | None = None


class AggregationResult(BaseModel):
    """Ordered fingerprints plus the per-source outcomes that produced them."""

    records: list[FingerprintRecord] = []
    outcomes: list[SourceOutcome] = []

    @property
    def is_empty(self) -> bool:
        return not self.records

    @property
    def first_sha1(self) -> FingerprintRecord | None:
        for record in self.records:
            if record.kind is FingerprintKind.SHA1:
                return record
        return None

    def outcome_for(self, kind: SourceKind) -> SourceOutcome | None:
        for outcome in self.outcomes:
            if outcome.kind is kind:
                return outcome
        return None
