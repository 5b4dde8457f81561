"""
In-memory path resolver.

Holds content in a dict keyed by normalized path. Useful for tests and for
embedding a small fixed set of files in a program.
"""

import logging
from typing import Dict, Iterator, Mapping, Optional

from .base import Content, PathResolver, normalize_path


logger = logging.getLogger(__name__)


class InMemoryFilesystem(PathResolver):
    """
    Dict-backed PathResolver.

    Usage:
        fs = InMemoryFilesystem({"/index.html": "hello"})
        fs.add("/docs/readme.txt", b"read me")

        fs.lookup("/index.html")      # "hello"
        fs.lookup("index.html")       # "hello" (same normalized key)
        fs.lookup("/missing")         # None
    """

    def __init__(self, files: Optional[Mapping[str, Content]] = None):
        self._files: Dict[str, Content] = {}
        for path, content in (files or {}).items():
            self.add(path, content)

    def add(self, path: str, content: Content) -> "InMemoryFilesystem":
        """
        Store content under a path, replacing anything already there.

        Returns:
            Self for method chaining
        """
        if not isinstance(content, (bytes, str)):
            raise TypeError(f"Content must be bytes or str, got {type(content).__name__}")

        key = normalize_path(path)
        self._files[key] = content
        logger.debug(f"Added {key} ({len(content)} bytes/chars)")
        return self

    def lookup(self, path: str) -> Optional[Content]:
        return self._files.get(normalize_path(path))

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._files))
