"""Cichlid: purges Xcode derived data after clean builds and on demand."""

__version__ = "1.0.0"
