"""
=============================================================================
STORAGE MODULE
=============================================================================

Path resolvers: the read-only content sources the file server serves from.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Resolver              │ Use Case                                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │ InMemoryFilesystem    │ Tests, small embedded sites                 │
    │ DirectoryFilesystem   │ Serving a directory tree from disk          │
    │ (your own)            │ Subclass PathResolver, implement lookup()   │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .base import PathResolver, normalize_path
from .memory import InMemoryFilesystem
from .directory import DirectoryFilesystem

__all__ = [
    "PathResolver",
    "normalize_path",
    "InMemoryFilesystem",
    "DirectoryFilesystem",
]
