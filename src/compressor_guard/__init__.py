"""Compressor Guard - runtime and maintenance tracking for gas compressors."""

__version__ = "0.1.0"
