"""Extract SHA-1 and SHA-256 fingerprints from ``keytool`` output.

``keytool -list -v`` and ``keytool -printcert`` print the certificate
digests as::

    Certificate fingerprints:
             SHA1: 5E:8F:16:06:2E:A3:CD:2C:4A:0D:54:78:76:BA:A6:F3:8C:AB:F6:25
             SHA256: FA:C6:17:45:DC:09:03:78:6F:B9:ED:E6:2A:96:2B:39:9F:73:48:F0:...

Older JDKs spell the labels ``SHA-1:`` / ``SHA-256:``. Both spellings are
accepted, case-insensitively. Only the first occurrence of each label is
used, so for a certificate chain only the leaf certificate is reported.
"""

import re
from dataclasses import dataclass

from signin_doctor.models.schemas import FingerprintKind, FingerprintRecord, normalize_digest

LABEL_PATTERNS: dict[FingerprintKind, re.Pattern] = {
    FingerprintKind.SHA1: re.compile(r"\bSHA-?1:(.*)$", re.IGNORECASE),
    FingerprintKind.SHA256: re.compile(r"\bSHA-?256:(.*)$", re.IGNORECASE),
}


@dataclass(frozen=True)
class ParsedFingerprints:
    """Digests found in one listing. ``None`` means the label was absent."""
    sha1: str | None = None
    sha256: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.sha1 and not self.sha256

    def to_records(self, label: str) -> list[FingerprintRecord]:
        """Records for the non-empty fields, SHA-1 first."""
        records = []
        if self.sha1:
            records.append(FingerprintRecord(source_label=label, kind=FingerprintKind.SHA1, value=self.sha1))
        if self.sha256:
            records.append(FingerprintRecord(source_label=label, kind=FingerprintKind.SHA256, value=self.sha256))
        return records


def _first_match(pattern: re.Pattern, lines: list[str]) -> str | None:
    for line in lines:
        match = pattern.search(line)
        if match:
            return normalize_digest(match.group(1).strip()) or None
    return None


def parse(raw_text: str | None) -> ParsedFingerprints:
    """Parse a raw certificate listing. Never raises."""
    lines = (raw_text or "").splitlines()
    return ParsedFingerprints(
        sha1=_first_match(LABEL_PATTERNS[FingerprintKind.SHA1], lines),
        sha256=_first_match(LABEL_PATTERNS[FingerprintKind.SHA256], lines),
    )
