"""
Shared fixtures for the signin-doctor tests.
"""

import pytest

from signin_doctor.services.filesystem import LocalFileSystem
from signin_doctor.services.platform_locator import OSKind, PlatformLocator


@pytest.fixture
def filesystem():
    return LocalFileSystem()


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def debug_keystore(home):
    """An (opaque) debug keystore file at the conventional location."""
    path = home / ".android" / "debug.keystore"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"keystore")
    return path


@pytest.fixture
def linux_locator(home, filesystem):
    return PlatformLocator(OSKind.LINUX, home, filesystem)
