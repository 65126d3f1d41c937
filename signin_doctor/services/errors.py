"""Error taxonomy for fingerprint discovery.

Every error except ``ToolMissing`` is recovered per source by the
aggregator and turned into a ``SourceStatus``.
"""


class FingerprintError(Exception):
    """Base class for fingerprint discovery errors."""

    pass


class NotFound(FingerprintError):
    """A keystore, SDK installation or installed package is absent."""

    pass


class InspectionFailed(FingerprintError):
    """keytool ran but rejected the credentials or the file."""

    def __init__(self, message: str, exit_code: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class TransferFailed(FingerprintError):
    """Pulling an APK from the device failed."""

    pass


class ToolMissing(FingerprintError):
    """A required external binary is not installed or not on PATH."""

    def __init__(self, tool: str):
        super().__init__(f"{tool} not found")
        self.tool = tool
