"""Titanium SDK location across macOS, Linux and Windows.

The Titanium CLI installs every SDK release side by side under a per-OS
``mobilesdk/<os>`` directory (``12.2.0.GA``, ``12.3.1.GA``, ...). The locator
picks the newest one using numeric, component-wise version ordering.
"""

import logging
import platform
import re
from enum import Enum
from pathlib import Path

from signin_doctor.models.schemas import SDKInstallation
from signin_doctor.services.errors import NotFound
from signin_doctor.services.filesystem import LocalFileSystem

logger = logging.getLogger(__name__)

VERSION_DIR_PATTERN = re.compile(r"^\d+\.")
_LEADING_DIGITS = re.compile(r"^(\d+)")


class OSKind(str, Enum):
    MACOS = "macos"
    LINUX = "linux"
    WINDOWS = "windows"
    UNKNOWN = "unknown"


SDK_BASE_PATHS: dict[OSKind, tuple[str, ...]] = {
    OSKind.MACOS: ("Library", "Application Support", "Titanium", "mobilesdk", "osx"),
    OSKind.LINUX: (".titanium", "mobilesdk", "linux"),
    OSKind.WINDOWS: ("AppData", "Roaming", "Titanium", "mobilesdk", "win32"),
}


def detect_os_kind(system: str | None = None) -> OSKind:
    """Map ``platform.system()`` output to an ``OSKind``."""
    system = system if system is not None else platform.system()

    if system == "Darwin":
        return OSKind.MACOS
    if system == "Linux":
        return OSKind.LINUX
    if system == "Windows" or system.upper().startswith(("CYGWIN", "MINGW", "MSYS")):
        return OSKind.WINDOWS
    return OSKind.UNKNOWN


def sdk_base_path(os_kind: OSKind, home: Path) -> Path | None:
    """Conventional SDK root for ``os_kind``, or None when the OS is unknown."""
    parts = SDK_BASE_PATHS.get(os_kind)
    if parts is None:
        return None
    return Path(home).joinpath(*parts)


def version_key(name: str) -> tuple:
    """Sort key comparing dot-separated components numerically.

    Non-numeric components (``GA``) count as 0; the raw name breaks ties so
    the ordering is total.
    """
    numbers = []
    for component in name.split("."):
        match = _LEADING_DIGITS.match(component)
        numbers.append(int(match.group(1)) if match else 0)
    return tuple(numbers), name


class PlatformLocator:
    """Finds the newest installed Titanium SDK.

    Args:
        os_kind: Host operating system.
        home: User home directory the conventional paths are rooted at.
        filesystem: Filesystem collaborator.
        base_path_override: Use this directory instead of the per-OS default.
    """

    def __init__(
        self,
        os_kind: OSKind,
        home: Path,
        filesystem: LocalFileSystem | None = None,
        base_path_override: Path | None = None,
    ):
        self.os_kind = os_kind
        self.home = Path(home)
        self.filesystem = filesystem or LocalFileSystem()
        self.base_path_override = base_path_override

    @property
    def base_path(self) -> Path | None:
        if self.base_path_override is not None:
            return Path(self.base_path_override).expanduser()
        return sdk_base_path(self.os_kind, self.home)

    def locate(self) -> SDKInstallation:
        """Return the highest installed SDK version.

        Raises:
            NotFound: If the OS is unknown, the base directory is missing, or
                it contains no version-like directories.
        """
        base_path = self.base_path
        if base_path is None:
            raise NotFound(f"No Titanium SDK location known for OS '{self.os_kind.value}'")

        if not self.filesystem.is_dir(base_path):
            raise NotFound(f"Titanium SDK directory not found: {base_path}")

        versions = [
            name
            for name in self.filesystem.list_children(base_path)
            if VERSION_DIR_PATTERN.match(name) and self.filesystem.is_dir(base_path / name)
        ]
        if not versions:
            raise NotFound(f"No Titanium SDK versions installed in {base_path}")

        selected = max(versions, key=version_key)
        logger.info(f"Selected Titanium SDK {selected} from {len(versions)} installed")
        return SDKInstallation(base_path=base_path, versions=versions, selected=selected)
