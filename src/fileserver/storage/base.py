"""
=============================================================================
PATH RESOLVER CONTRACT
=============================================================================

The file server never touches a filesystem directly. It asks a Path
Resolver one question:

    lookup(path) → content | None

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         WHO OWNS WHAT                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Connection handler            Path resolver                       │
    │   ──────────────────            ─────────────                       │
    │   reads the request line        normalizes the path                 │
    │   decides GET / not GET         decides what exists                 │
    │   builds the response           stores / reads the content          │
    │   closes the connection                                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Because the contract is a single read-only query, in-memory, disk-backed
and remote resolvers are interchangeable without touching the listener or
the connection handler.

=============================================================================
PATH NORMALIZATION
=============================================================================

Resolvers that work with hierarchical keys share ``normalize_path``:

    "/index.html"            → "/index.html"
    "index.html"             → "/index.html"
    "//docs//./a.txt"        → "/docs/a.txt"
    "/docs/../index.html"    → "/index.html"
    "/../../etc/passwd"      → "/etc/passwd"      (can't climb above root)
    "/a%20b.txt?x=1#top"     → "/a b.txt"

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Union
from urllib.parse import unquote


Content = Union[bytes, str]


class PathResolver(ABC):
    """
    Base class for read-only path-to-content lookups.

    Implementations must be side-effect-free from the caller's point of
    view, and must return either the complete content or None. Partial
    content is never returned.

        class MyResolver(PathResolver):
            def lookup(self, path: str) -> Optional[Content]:
                return self._data.get(normalize_path(path))
    """

    @abstractmethod
    def lookup(self, path: str) -> Optional[Content]:
        """
        Resolve a request target to content.

        Args:
            path: The target path as sent by the client.

        Returns:
            The content (bytes or str), or None if nothing is there.
        """

    def __contains__(self, path: str) -> bool:
        return self.lookup(path) is not None

    @property
    def name(self) -> str:
        """Get the resolver name for logging."""
        return self.__class__.__name__


def normalize_path(target: str) -> str:
    """
    Turn a request target into a canonical path key.

    Args:
        target: Raw target from the request line.

    Returns:
        A key with exactly one leading slash and no empty, "." or ".."
        segments.
    """
    # Strip query string and fragment, they never name a file
    for sep in ("?", "#"):
        target = target.split(sep, 1)[0]

    target = unquote(target)

    parts: List[str] = []
    for segment in target.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if parts:
                parts.pop()
            continue
        parts.append(segment)

    return "/" + "/".join(parts)
