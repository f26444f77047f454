"""Typed decoding of Bazel aspect output and a class-to-artifact index."""

__version__ = "0.1.0"
