"""Shared helpers: file input/output."""

__all__ = ["file_io"]
