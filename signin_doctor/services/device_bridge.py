"""ADB access for pulling an installed APK off a connected device.

Security:
    Package names and device serials are validated before being passed to
    ``adb`` to prevent shell injection on the device side (``adb shell``
    joins its arguments into a single device-side command line).
"""

import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import Protocol

from signin_doctor.services.errors import NotFound, TransferFailed

logger = logging.getLogger(__name__)

VALID_DEVICE_ID_PATTERN = re.compile(r'^[a-zA-Z0-9.:_-]+$')
VALID_PACKAGE_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9_]*(\.[A-Za-z0-9_]+)+$')
PLAY_SERVICES_PACKAGE = "com.google.android.gms"


def _validate_device_id(device_id: str) -> str:
    """Validate device serial to prevent command injection.

    Raises:
        ValueError: If the serial contains invalid characters.
    """
    if not device_id or len(device_id) > 128:
        raise ValueError("Invalid device ID length")
    if not VALID_DEVICE_ID_PATTERN.match(device_id):
        raise ValueError(f"Invalid device ID format: {device_id}")
    return device_id


def is_valid_package_name(package_name: str) -> bool:
    return bool(package_name) and len(package_name) <= 255 and bool(VALID_PACKAGE_PATTERN.match(package_name))


class DeviceBridge(Protocol):
    def connected_device_count(self) -> int:
        ...

    def resolve_installed_path(self, package_name: str) -> str:
        ...

    def artifact_size(self, remote_path: str) -> int | None:
        ...

    def pull_artifact(self, remote_path: str, local_path: Path) -> None:
        ...


class AdbDeviceBridge:
    """Device queries through the ``adb`` command-line tool.

    A missing ``adb`` binary is not an error: the bridge reports zero
    devices and the installed-APK source is skipped.
    """

    def __init__(self, adb_path: str = "adb", serial: str | None = None, timeout: float | None = None):
        self.adb_path = adb_path
        self.serial = _validate_device_id(serial) if serial else None
        self.timeout = timeout

    def is_available(self) -> bool:
        return shutil.which(self.adb_path) is not None

    def connected_device_count(self) -> int:
        """Count devices in the ``device`` state (offline/unauthorized excluded)."""
        result = self._run(["devices"], device_scoped=False)
        if result is None or result.returncode != 0:
            return 0

        count = 0
        for line in result.stdout.splitlines()[1:]:
            parts = line.split()
            if len(parts) >= 2 and parts[1] == "device":
                if self.serial is None or parts[0] == self.serial:
                    count += 1
        return count

    def describe_devices(self) -> list[str]:
        """Lines of ``adb devices -l`` without the header."""
        result = self._run(["devices", "-l"], device_scoped=False)
        if result is None:
            return []
        return [line.strip() for line in result.stdout.splitlines()[1:] if line.strip()]

    def resolve_installed_path(self, package_name: str) -> str:
        """Return the on-device path of the base APK for ``package_name``.

        Raises:
            NotFound: If the package is not installed or the name is invalid.
        """
        if not is_valid_package_name(package_name):
            raise NotFound(f"Invalid package name: {package_name}")

        result = self._run(["shell", "pm", "path", package_name])
        if result is None or result.returncode != 0:
            raise NotFound(f"Package not installed: {package_name}")

        for line in result.stdout.splitlines():
            line = line.strip()
            if line.startswith("package:"):
                path = line[len("package:"):].strip()
                if path:
                    return path
        raise NotFound(f"Package not installed: {package_name}")

    def artifact_size(self, remote_path: str) -> int | None:
        """Size in bytes of a file on the device, or None if unknown."""
        result = self._run(["shell", "stat", "-c", "%s", remote_path])
        if result is None or result.returncode != 0:
            return None
        try:
            return int(result.stdout.strip().splitlines()[0])
        except (ValueError, IndexError):
            return None

    def pull_artifact(self, remote_path: str, local_path: Path) -> None:
        """Copy ``remote_path`` from the device to ``local_path``.

        Raises:
            TransferFailed: If ``adb pull`` fails or produces no file.
        """
        result = self._run(["pull", remote_path, str(local_path)])
        if result is None:
            raise TransferFailed("adb not available")
        if result.returncode != 0 or not Path(local_path).exists():
            message = (result.stderr or result.stdout).strip()
            raise TransferFailed(message or f"adb pull exited with {result.returncode}")

    def play_services_version(self) -> str | None:
        """First ``versionName=`` line of the Google Play Services package dump."""
        result = self._run(["shell", "dumpsys", "package", PLAY_SERVICES_PACKAGE])
        if result is None:
            return None
        for line in result.stdout.splitlines():
            if "versionName" in line:
                return line.strip()
        return None

    def google_accounts(self) -> list[str]:
        """``Account {...}`` lines for Google accounts registered on the device."""
        result = self._run(["shell", "dumpsys", "account"])
        if result is None:
            return []
        return [
            line.strip()
            for line in result.stdout.splitlines()
            if "Account" in line and "com.google" in line
        ]

    def _run(self, args: list[str], device_scoped: bool = True) -> subprocess.CompletedProcess | None:
        cmd = [self.adb_path]
        if device_scoped and self.serial:
            cmd += ["-s", self.serial]
        cmd += args

        logger.debug(f"Running subprocess: {' '.join(cmd)}")
        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"ADB command timed out: {' '.join(args)}")
        except FileNotFoundError:
            logger.warning("ADB not found in PATH")
        return None
