"""Type-checking lint rules backed by a persistent incremental session."""

__version__ = "0.1.0"
