"""JSON value trees with insertion-ordered objects and flag-controlled encoding."""

__version__ = "2.14.1"

__all__ = ["dump", "error", "hashtable", "lookup3", "seed", "values"]