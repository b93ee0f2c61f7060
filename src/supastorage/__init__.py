"""
Python SDK for the Supabase Storage REST API
"""

__version__ = "1.0.0"

from .client import StorageClient
from .config import ClientConfig
from .files import StorageFileApi, remove_empty_folder
from .models import (
    Bucket,
    BucketMessage,
    BucketOptions,
    FileMetadata,
    FileObject,
    FileResponse,
    FileSearchOptions,
    FileUploadOptions,
    SignedDownloadURL,
    SignedUploadURL,
    SortBy,
)
from .error import (
    StorageException,
    StorageTransportException,
    StorageTimeoutException,
    StorageDecodeException,
    StorageApiException,
    NotFoundException,
    BucketNotFoundException,
    ObjectNotFoundException,
)

__all__ = [
    "StorageClient",
    "StorageFileApi",
    "ClientConfig",
    "remove_empty_folder",
    "Bucket",
    "BucketMessage",
    "BucketOptions",
    "FileMetadata",
    "FileObject",
    "FileResponse",
    "FileSearchOptions",
    "FileUploadOptions",
    "SignedDownloadURL",
    "SignedUploadURL",
    "SortBy",
    "StorageException",
    "StorageTransportException",
    "StorageTimeoutException",
    "StorageDecodeException",
    "StorageApiException",
    "NotFoundException",
    "BucketNotFoundException",
    "ObjectNotFoundException",
]
