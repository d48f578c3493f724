"""Utility helpers."""

from .file_io import atomic_write, read_documents, to_jsonable, write_documents

__all__ = ["atomic_write", "read_documents", "to_jsonable", "write_documents"]
