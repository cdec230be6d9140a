"""Atomic primitives, worklists, scoped token patterns and bipartite and DAG graph algorithms."""

__version__ = "0.1.0"
__all__ = ["atomic", "worklist", "scoped", "bipartite", "dag", "dag_paths"]