"""Fingerprint aggregation across the four keystore sources.

Runs each source to completion, strictly in order:

    1. Android debug keystore (``~/.android/debug.keystore``)
    2. Titanium SDK debug keystore (``<sdk>/android/dev_keystore``)
    3. Production keystore (only when a path was supplied)
    4. Installed APK pulled from a connected device (only when a device is
       connected and a package name was supplied)

Per-source failures are recovered locally and reported as a
``SourceStatus``; the run always completes. The only error that escapes is
``ToolMissing``, which callers are expected to rule out up front with
``KeytoolInspector.ensure_available()``.

The aggregator does no console I/O. An optional ``listener`` receives each
``SourceOutcome`` as soon as it is known so a reporter can stream progress.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from signin_doctor.models.schemas import (
    AggregationResult,
    KeystoreSource,
    RunConfiguration,
    SourceKind,
    SourceOutcome,
    SourceStatus,
)
from signin_doctor.services.certificate_inspector import CertificateInspector
from signin_doctor.services.device_bridge import DeviceBridge
from signin_doctor.services.errors import InspectionFailed, NotFound, TransferFailed
from signin_doctor.services.filesystem import LocalFileSystem
from signin_doctor.services.fingerprint_parser import parse
from signin_doctor.services.platform_locator import PlatformLocator

logger = logging.getLogger(__name__)

DEBUG_KEYSTORE_LABEL = "Android Debug Keystore"
DEBUG_KEYSTORE_ALIAS = "androiddebugkey"
DEBUG_KEYSTORE_PASSWORD = "android"

SDK_KEYSTORE_LABEL = "Titanium Debug Keystore"
SDK_KEYSTORE_RELATIVE_PATH = Path("android") / "dev_keystore"
SDK_KEYSTORE_ALIAS = "tidev"
SDK_KEYSTORE_PASSWORD = "tirocks"

PRODUCTION_KEYSTORE_LABEL = "Production Keystore"


def installed_apk_label(package_name: str | None) -> str:
    return f"Installed APK ({package_name})" if package_name else "Installed APK"


class FingerprintAggregator:
    """Collects labeled fingerprints from every available keystore source.

    Args:
        inspector: Certificate inspection collaborator (keytool).
        device_bridge: Device collaborator (adb).
        filesystem: Filesystem collaborator.
        locator: Titanium SDK locator.
        debug_keystore_path: Location of the Android debug keystore.
    """

    def __init__(
        self,
        inspector: CertificateInspector,
        device_bridge: DeviceBridge,
        filesystem: LocalFileSystem,
        locator: PlatformLocator,
        debug_keystore_path: Path,
    ):
        self.inspector = inspector
        self.device_bridge = device_bridge
        self.filesystem = filesystem
        self.locator = locator
        self.debug_keystore_path = Path(debug_keystore_path)

    def run_all(
        self,
        configuration: RunConfiguration,
        listener: Callable[[SourceOutcome], None] | None = None,
    ) -> AggregationResult:
        """Attempt all four sources and return the records in source order."""
        result = AggregationResult()

        steps = [
            self._debug_keystore,
            self._sdk_keystore,
            self._production_keystore,
            self._installed_apk,
        ]
        for step in steps:
            outcome = step(configuration)
            result.outcomes.append(outcome)
            result.records.extend(outcome.records)
            logger.info(f"{outcome.label}: {outcome.status.value} ({len(outcome.records)} fingerprints)")
            if listener is not None:
                listener(outcome)

        return result

    # =========================================================================
    # Sources
    # =========================================================================

    def _debug_keystore(self, configuration: RunConfiguration) -> SourceOutcome:
        source = KeystoreSource(
            path=self.debug_keystore_path,
            alias=DEBUG_KEYSTORE_ALIAS,
            store_password=DEBUG_KEYSTORE_PASSWORD,
            key_password=DEBUG_KEYSTORE_PASSWORD,
            label=DEBUG_KEYSTORE_LABEL,
        )
        return self._inspect_keystore(SourceKind.DEBUG_KEYSTORE, source)

    def _sdk_keystore(self, configuration: RunConfiguration) -> SourceOutcome:
        try:
            installation = self.locator.locate()
        except NotFound as e:
            base_path = self.locator.base_path
            return SourceOutcome(
                kind=SourceKind.SDK_DEBUG_KEYSTORE,
                label=SDK_KEYSTORE_LABEL,
                status=SourceStatus.NOT_FOUND,
                location=str(base_path) if base_path else None,
                detail=str(e),
            )

        source = KeystoreSource(
            path=installation.path / SDK_KEYSTORE_RELATIVE_PATH,
            alias=SDK_KEYSTORE_ALIAS,
            store_password=SDK_KEYSTORE_PASSWORD,
            key_password=SDK_KEYSTORE_PASSWORD,
            label=SDK_KEYSTORE_LABEL,
        )
        return self._inspect_keystore(SourceKind.SDK_DEBUG_KEYSTORE, source)

    def _production_keystore(self, configuration: RunConfiguration) -> SourceOutcome:
        if configuration.production is None:
            return SourceOutcome(
                kind=SourceKind.PRODUCTION_KEYSTORE,
                label=PRODUCTION_KEYSTORE_LABEL,
                status=SourceStatus.SKIPPED,
                detail="No production keystore supplied",
            )
        source = configuration.production.to_source(PRODUCTION_KEYSTORE_LABEL)
        return self._inspect_keystore(SourceKind.PRODUCTION_KEYSTORE, source)

    def _installed_apk(self, configuration: RunConfiguration) -> SourceOutcome:
        package_name = configuration.package_name
        label = installed_apk_label(package_name)

        def outcome(status: SourceStatus, **kwargs) -> SourceOutcome:
            return SourceOutcome(kind=SourceKind.INSTALLED_APK, label=label, status=status, **kwargs)

        if not package_name:
            return outcome(SourceStatus.SKIPPED, detail="No package name supplied")

        if self.device_bridge.connected_device_count() == 0:
            return outcome(SourceStatus.SKIPPED, detail="No device connected")

        try:
            remote_path = self.device_bridge.resolve_installed_path(package_name)
        except NotFound as e:
            return outcome(SourceStatus.NOT_FOUND, detail=str(e))

        size_bytes = self.device_bridge.artifact_size(remote_path)
        logger.info(f"{remote_path}: {size_bytes if size_bytes is not None else 'unknown'} bytes")

        with self.filesystem.temporary_path(prefix="signin-doctor-apk-", suffix=".apk") as local_path:
            try:
                self.device_bridge.pull_artifact(remote_path, local_path)
                raw_text = self.inspector.inspect_artifact(local_path)
            except TransferFailed as e:
                logger.warning(f"Failed to pull {remote_path}: {e}")
                return outcome(
                    SourceStatus.TRANSFER_FAILED, location=remote_path, detail=str(e), size_bytes=size_bytes
                )
            except InspectionFailed as e:
                logger.warning(f"Failed to read signer of {remote_path}: {e}")
                return outcome(
                    SourceStatus.INSPECTION_FAILED, location=remote_path, detail=str(e), size_bytes=size_bytes
                )

        parsed = self._parsed_outcome(SourceKind.INSTALLED_APK, label, remote_path, raw_text)
        return parsed.model_copy(update={"size_bytes": size_bytes})

    # =========================================================================
    # Helpers
    # =========================================================================

    def _inspect_keystore(self, kind: SourceKind, source: KeystoreSource) -> SourceOutcome:
        if not self.filesystem.exists(source.path):
            return SourceOutcome(
                kind=kind,
                label=source.label,
                status=SourceStatus.NOT_FOUND,
                location=str(source.path),
                detail=f"Keystore not found: {source.path}",
            )

        try:
            raw_text = self.inspector.inspect_keystore(
                source.path, source.alias, source.store_password, source.key_password
            )
        except InspectionFailed as e:
            logger.warning(f"Failed to read keystore {source.path}: {e}")
            return SourceOutcome(
                kind=kind,
                label=source.label,
                status=SourceStatus.INSPECTION_FAILED,
                location=str(source.path),
                detail=str(e),
            )

        return self._parsed_outcome(kind, source.label, str(source.path), raw_text)

    def _parsed_outcome(self, kind: SourceKind, label: str, location: str, raw_text: str) -> SourceOutcome:
        parsed = parse(raw_text)
        if parsed.is_empty:
            logger.warning(f"No fingerprints in keytool output for {label}")
            return SourceOutcome(
                kind=kind,
                label=label,
                status=SourceStatus.NO_FINGERPRINTS,
                location=location,
                detail="keytool output contained no SHA-1/SHA-256 fingerprints",
            )

        records = parsed.to_records(label)
        for record in records:
            if not record.has_expected_length:
                logger.warning(
                    f"{label}: {record.kind.value} fingerprint has unexpected length "
                    f"({len(record.value)} hex chars, expected {record.kind.hex_length})"
                )
        return SourceOutcome(
            kind=kind,
            label=label,
            status=SourceStatus.FOUND,
            location=location,
            records=records,
        )
