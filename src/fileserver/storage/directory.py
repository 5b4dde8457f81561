"""
=============================================================================
DIRECTORY PATH RESOLVER
=============================================================================

Serves files from a directory on disk.

=============================================================================
PATH TRAVERSAL
=============================================================================

Path traversal is the #1 security issue for anything that maps URLs onto
a filesystem:

    GET /../../../etc/passwd

    Naive:   root_dir + path → /var/www/../../../etc/passwd → /etc/passwd

Two layers stop it:

    1. normalize_path() removes ".." segments before the key ever touches
       the filesystem, so "/../../etc/passwd" becomes "/etc/passwd",
       looked up UNDER the root.

    2. The joined path is resolve()d (following symlinks) and must still
       be inside root_dir. A symlink pointing outside the root fails this
       check and is treated as missing.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   root_dir = /var/www                                               │
    │                                                                      │
    │   /index.html          → /var/www/index.html          ✓ served      │
    │   /docs/               → /var/www/docs/index.html     ✓ index file  │
    │   /../etc/passwd       → /var/www/etc/passwd          ✓ (missing)   │
    │   /link-to-etc/passwd  → /etc/passwd                  ✗ refused     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .base import PathResolver, normalize_path


logger = logging.getLogger(__name__)


class DirectoryFilesystem(PathResolver):
    """
    PathResolver backed by a directory tree.

    Content is returned as bytes, read in full on every lookup. Nothing
    is cached, so edits on disk are visible to the next request.

    Usage:
        fs = DirectoryFilesystem("/var/www")
        fs.lookup("/index.html")    # b"<html>..."
        fs.lookup("/nope.txt")      # None
    """

    def __init__(
        self,
        root_dir: Union[str, Path],
        index_file: Optional[str] = "index.html",
    ):
        """
        Initialize the resolver.

        Args:
            root_dir: Directory to serve. All files MUST be inside it.
            index_file: File served for directory paths, or None to treat
                        directories as missing.

        Raises:
            ValueError: If root_dir is not an existing directory.
        """
        # Resolve to absolute path (the containment check depends on it)
        self.root_dir = Path(root_dir).resolve()
        self.index_file = index_file

        if not self.root_dir.is_dir():
            raise ValueError(f"Root directory does not exist: {root_dir}")

    def lookup(self, path: str) -> Optional[bytes]:
        full_path = self._resolve(path)
        if full_path is None:
            return None

        try:
            return full_path.read_bytes()
        except OSError as e:
            # Vanished between the check and the read, or unreadable
            logger.warning(f"Could not read {full_path}: {e}")
            return None

    def _resolve(self, path: str) -> Optional[Path]:
        """
        Map a request path to a file under root_dir.

        Returns:
            The file to read, or None if there is nothing to serve.
        """
        key = normalize_path(path).lstrip("/")

        try:
            # resolve() follows symlinks and normalizes what is left
            full_path = (self.root_dir / key).resolve()
        except (OSError, ValueError) as e:
            # ValueError: embedded NUL byte, e.g. from "%00"
            logger.debug(f"Unresolvable path {path!r}: {e}")
            return None

        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Path traversal attempt: {path}")
            return None

        if full_path.is_dir():
            if not self.index_file:
                return None
            full_path = full_path / self.index_file

        if not full_path.is_file():
            return None

        return full_path

    def __repr__(self) -> str:
        return f"DirectoryFilesystem({str(self.root_dir)!r})"
