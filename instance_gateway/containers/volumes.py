"""Per-container volume directories."""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

NAME_SEPARATOR = "/"


def normalize_name(name: str) -> str:
    """Strip a single leading separator from an engine-reported name.

    Docker reports container names as ``/web``; the volume directory is
    ``web``.
    """
    if name.startswith(NAME_SEPARATOR):
        return name[1:]
    return name


class VolumeStore:
    """Volume directories kept under a single root, one per container name."""

    def __init__(self, root: str | Path):
        """Initialize volume store.

        Args:
            root: Directory holding one subdirectory per container
        """
        self.root = Path(root)

    def path_for(self, name: str) -> Path | None:
        """Get the volume directory for an engine-reported container name.

        Args:
            name: Container name as reported by the engine

        Returns:
            Directory path, or None when the name cannot map to a
            directory directly under the root
        """
        dir_name = normalize_name(name)
        if not dir_name or dir_name in (".", "..") or "/" in dir_name or "\\" in dir_name:
            logger.warning(f"Refusing to map container name {name!r} to a volume directory")
            return None
        return self.root / dir_name

    def remove(self, name: str) -> bool:
        """Remove a container's volume directory recursively.

        A missing directory is not an error.

        Args:
            name: Container name as reported by the engine

        Returns:
            True if a directory was removed
        """
        path = self.path_for(name)
        if path is None or not path.exists():
            return False
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
        logger.info(f"Deleted volume directory: {path}")
        return True

    def sweep(self) -> list[str]:
        """Remove every remaining subdirectory of the root.

        Files directly under the root are left alone. A directory that cannot
        be removed is logged and skipped.

        Returns:
            Names of the removed directories
        """
        if not self.root.is_dir():
            return []

        removed = []
        for entry in sorted(self.root.iterdir()):
            if not entry.is_dir() or entry.is_symlink():
                continue
            try:
                shutil.rmtree(entry)
            except OSError as e:
                logger.error(f"Failed to delete volume directory {entry}: {e}")
                continue
            removed.append(entry.name)
            logger.info(f"Deleted remaining volume directory: {entry}")
        return removed
