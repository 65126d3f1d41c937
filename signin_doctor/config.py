"""Configuration settings for signin-doctor.

All settings are loaded from environment variables (or a ``.env`` file) using
pydantic-settings. The ``get_settings()`` function returns a cached singleton
instance.

Environment variables carry the ``SIGNIN_DOCTOR_`` prefix and are
case-insensitive, e.g. ``SIGNIN_DOCTOR_KEYTOOL_PATH=/opt/jdk/bin/keytool``.
"""

import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["debug", "info", "warning", "error", "critical"]


class Settings(BaseSettings):
    """Tool settings loaded from environment variables.

    Attributes:
        log_level: Logging level (debug, info, warning, error, critical).
        keytool_path: Name or path of the JDK ``keytool`` binary.
        adb_path: Name or path of the ``adb`` binary.
        adb_serial: Device serial passed as ``adb -s``. Empty means the
            single connected device.
        command_timeout_seconds: Timeout for each external command. ``None``
            waits until the command returns.
        debug_keystore_path: Location of the Android debug keystore.
        titanium_sdk_path: Override for the Titanium ``mobilesdk/<os>``
            directory. ``None`` uses the conventional per-OS location.
        summary_dir: Directory where the fingerprint summary file is written.
        copy_to_clipboard: Copy the first SHA-1 found to the clipboard.
        guide_path: Alternative YAML file for the setup guide.
    """

    model_config = SettingsConfigDict(
        env_prefix="SIGNIN_DOCTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: LogLevel = "warning"

    # Tools
    keytool_path: str = "keytool"
    adb_path: str = "adb"
    adb_serial: str = ""
    command_timeout_seconds: float | None = None

    # Paths
    debug_keystore_path: Path = Path.home() / ".android" / "debug.keystore"
    titanium_sdk_path: Path | None = None
    summary_dir: Path = Path(tempfile.gettempdir())
    guide_path: Path | None = None

    # Output
    copy_to_clipboard: bool = True

    @field_validator("log_level", mode="before")
    @classmethod
    def lowercase_log_level(cls, v):
        return v.lower() if isinstance(v, str) else v


@lru_cache
def get_settings() -> Settings:
    """Get or create the cached settings singleton.

    Returns:
        Cached Settings instance.
    """
    return Settings()
