"""
Sprout - a minimal version-control engine.

A content-addressed object store plus a commit graph, staging area, branch
pointers, and a three-way merge.
"""

__version__ = "0.1.0"

# Configuration is available at top level for convenience
from sprout.config import config

__all__ = ["config", "__version__"]
