"""Type-graph construction and implementation resolution."""

from .classpath import ClasspathResolver
from .graph import ArtifactGraph, build_graph
from .resolver import find_implementations, is_realized_by
from .store import ArtifactStore

__all__ = [
    "ArtifactGraph",
    "ArtifactStore",
    "ClasspathResolver",
    "build_graph",
    "find_implementations",
    "is_realized_by",
]
