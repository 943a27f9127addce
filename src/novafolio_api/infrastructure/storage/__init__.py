"""Blob storage for uploaded files."""

from .blob_store import BlobStore, StoredBlob, sanitize_filename

__all__ = ["BlobStore", "StoredBlob", "sanitize_filename"]
