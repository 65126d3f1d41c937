"""Certificate inspection through the JDK ``keytool`` binary.

Subprocess commands use explicit argument lists (no shell=True). Keystore
existence is checked by the caller, so a failure here always means keytool
ran and rejected the file or the credentials.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Protocol

from signin_doctor.services.errors import InspectionFailed, ToolMissing

logger = logging.getLogger(__name__)


class CertificateInspector(Protocol):
    def inspect_keystore(self, path: Path, alias: str, store_password: str, key_password: str) -> str:
        ...

    def inspect_artifact(self, path: Path) -> str:
        ...


class KeytoolInspector:
    """Runs ``keytool`` and returns its human-readable certificate listing."""

    def __init__(self, keytool_path: str = "keytool", timeout: float | None = None):
        self.keytool_path = keytool_path
        self.timeout = timeout

    def ensure_available(self) -> str:
        """Resolve the keytool binary once, before any source is attempted.

        Returns:
            Absolute path of the keytool executable.

        Raises:
            ToolMissing: If keytool cannot be found.
        """
        resolved = shutil.which(self.keytool_path)
        if resolved is None:
            raise ToolMissing("keytool")
        return resolved

    def inspect_keystore(self, path: Path, alias: str, store_password: str, key_password: str) -> str:
        """List the certificate stored under ``alias`` in a keystore.

        Raises:
            InspectionFailed: If keytool exits non-zero.
            ToolMissing: If keytool disappeared since the up-front check.
        """
        return self._run([
            self.keytool_path,
            "-list",
            "-v",
            "-keystore", str(path),
            "-alias", alias,
            "-storepass", store_password,
            "-keypass", key_password,
        ])

    def inspect_artifact(self, path: Path) -> str:
        """Print the signer certificate embedded in an APK/JAR."""
        return self._run([
            self.keytool_path,
            "-list",
            "-printcert",
            "-jarfile", str(path),
        ])

    def _run(self, cmd: list[str]) -> str:
        # Never log the full command line, it carries passwords.
        logger.debug(f"Running {cmd[0]} {cmd[1]} {cmd[2]}")
        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise ToolMissing("keytool")
        except subprocess.TimeoutExpired:
            raise InspectionFailed(f"keytool timed out after {self.timeout}s")

        if result.returncode != 0:
            message = (result.stderr or result.stdout).strip().splitlines()
            raise InspectionFailed(
                message[0] if message else f"keytool exited with {result.returncode}",
                exit_code=result.returncode,
                stderr=result.stderr,
            )
        return result.stdout
