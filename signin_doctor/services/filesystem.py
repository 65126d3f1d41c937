"""Local filesystem access used by the locator and aggregator."""

import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalFileSystem:
    """Thin wrapper over ``pathlib`` so the core can be driven by fakes."""

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir()

    def list_children(self, directory: Path) -> list[str]:
        """Names of the immediate children of ``directory``, sorted.

        An unreadable or missing directory yields an empty list.
        """
        try:
            return sorted(child.name for child in Path(directory).iterdir())
        except OSError as e:
            logger.warning(f"Cannot list {directory}: {e}")
            return []

    def remove(self, path: Path) -> None:
        Path(path).unlink(missing_ok=True)

    @contextmanager
    def temporary_path(self, prefix: str = "signin-doctor-", suffix: str = "") -> Iterator[Path]:
        """Yield a not-yet-created file path inside a private temp directory.

        The file and its directory are removed on every exit path, including
        exceptions and ``KeyboardInterrupt``.
        """
        temp_dir = Path(tempfile.mkdtemp(prefix=prefix))
        path = temp_dir / f"artifact{suffix}"
        logger.debug(f"Created temp directory: {temp_dir}")
        try:
            yield path
        finally:
            self.remove(path)
            shutil.rmtree(temp_dir, ignore_errors=True)
            logger.debug(f"Removed temp directory: {temp_dir}")
