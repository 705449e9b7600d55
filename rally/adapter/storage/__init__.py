"""Supabase storage adapter for avatar files."""

from .client import (
    MockSupabaseStorageClient,
    RealSupabaseStorageClient,
    StorageError,
    SupabaseStorageClient,
)

__all__ = [
    "MockSupabaseStorageClient",
    "RealSupabaseStorageClient",
    "StorageError",
    "SupabaseStorageClient",
]
