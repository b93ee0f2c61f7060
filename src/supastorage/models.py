"""
Data models for the storage SDK
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .error import StorageDecodeException

DEFAULT_LIMIT = 100
DEFAULT_OFFSET = 0
DEFAULT_SORT_COLUMN = "name"
DEFAULT_SORT_ORDER = "asc"
DEFAULT_CACHE_CONTROL = "3600"
DEFAULT_CONTENT_TYPE = "text/plain;charset=UTF-8"
DEFAULT_UPSERT = False


def _require_object(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise StorageDecodeException(f"Expected a JSON object for {what}, got {type(data).__name__}", body=data)
    return data


def _pick(data: Dict[str, Any], key: str) -> Any:
    """Read ``key`` from a decoded body, falling back to a case-insensitive match."""
    if key in data:
        return data[key]
    lowered = key.lower()
    for name, value in data.items():
        if name.lower() == lowered:
            return value
    return None


@dataclass
class Bucket:
    """Represents a storage bucket."""
    name: Optional[str] = None
    id: Optional[str] = None
    owner: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    public: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bucket":
        data = _require_object(data, "a bucket")
        return cls(
            name=data.get("name"),
            id=data.get("id"),
            owner=data.get("owner"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            public=data.get("public"),
        )


@dataclass
class BucketOptions:
    """Payload for creating or updating a bucket."""
    id: str
    name: str
    public: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "public": self.public}


@dataclass
class BucketMessage:
    """Message returned by bucket maintenance calls."""
    message: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BucketMessage":
        return cls(message=data.get("message") or "")


@dataclass
class FileObject:
    """Represents an object entry returned by a listing."""
    name: str
    bucket_id: Optional[str] = None
    owner: Optional[str] = None
    id: Optional[str] = None
    updated_at: Optional[str] = None
    created_at: Optional[str] = None
    last_accessed_at: Optional[str] = None
    metadata: Any = None
    buckets: Optional[Bucket] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileObject":
        data = _require_object(data, "a file object")
        buckets = data.get("buckets")
        return cls(
            name=data.get("name", ""),
            bucket_id=data.get("bucket_id"),
            owner=data.get("owner"),
            id=data.get("id"),
            updated_at=data.get("updated_at"),
            created_at=data.get("created_at"),
            last_accessed_at=data.get("last_accessed_at"),
            metadata=data.get("metadata"),
            buckets=Bucket.from_dict(buckets) if buckets is not None else None,
        )


@dataclass
class FileUploadOptions:
    """Headers sent with an upload. Empty fields fall back to the defaults."""
    cache_control: str = DEFAULT_CACHE_CONTROL
    content_type: str = DEFAULT_CONTENT_TYPE
    upsert: bool = DEFAULT_UPSERT

    def merged(self) -> "FileUploadOptions":
        return FileUploadOptions(
            cache_control=self.cache_control or DEFAULT_CACHE_CONTROL,
            content_type=self.content_type or DEFAULT_CONTENT_TYPE,
            upsert=bool(self.upsert),
        )

    def to_headers(self) -> Dict[str, str]:
        merged = self.merged()
        return {
            "cache-control": merged.cache_control,
            "content-type": merged.content_type,
            "x-upsert": "true" if merged.upsert else "false",
        }


@dataclass
class SortBy:
    column: str = DEFAULT_SORT_COLUMN
    order: str = DEFAULT_SORT_ORDER


@dataclass
class FileSearchOptions:
    """Paging and ordering for object listings."""
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET
    sort_by: SortBy = field(default_factory=SortBy)

    def to_request(self, prefix: str) -> Dict[str, Any]:
        """Build the list request body, replacing zero values with defaults."""
        sort_by = self.sort_by or SortBy()
        return {
            "limit": self.limit or DEFAULT_LIMIT,
            "offset": self.offset or DEFAULT_OFFSET,
            "sortBy": {
                "column": sort_by.column or DEFAULT_SORT_COLUMN,
                "order": sort_by.order or DEFAULT_SORT_ORDER,
            },
            "prefix": prefix,
        }


@dataclass
class FileResponse:
    """Key and message returned by object write calls."""
    key: str = ""
    message: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileResponse":
        return cls(key=_pick(data, "key") or "", message=_pick(data, "message") or "")


@dataclass
class SignedUploadURL:
    """Absolute URL and token for uploading without credentials."""
    signed_url: str
    token: Optional[str] = None


@dataclass
class SignedDownloadURL:
    """Absolute URL for downloading without credentials."""
    signed_url: str


@dataclass
class FileMetadata:
    media_type: Optional[str] = None
