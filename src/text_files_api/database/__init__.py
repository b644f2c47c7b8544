"""
Metadata store for file tags.

Tags live in a single relational table keyed by filename; connections are
handed out by a bounded pool.
"""

from .pool import ConnectionPool
from .tags import TagStore

__all__ = ["ConnectionPool", "TagStore"]
