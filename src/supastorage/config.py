"""Client configuration for the storage SDK."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict

DEFAULT_STORAGE_ENDPOINT = "storage/v1"
DEFAULT_TIMEOUT = 20.0


@dataclass(frozen=True)
class ClientConfig:
    """Immutable connection settings shared by every handle of a client."""

    base_url: str
    api_key: str = field(repr=False)
    storage_endpoint: str = DEFAULT_STORAGE_ENDPOINT

    # Timeouts (in seconds)
    request_timeout: float = DEFAULT_TIMEOUT

    # Connection pool
    max_connections: int = 100
    max_keepalive_connections: int = 100

    # Upload streaming
    chunk_size: int = 64 * 1024

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url is required")
        if not self.api_key:
            raise ValueError("api_key is required")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "storage_endpoint", self.storage_endpoint.strip("/"))

    @property
    def storage_url(self) -> str:
        """Root URL every storage route is resolved against."""
        return f"{self.base_url}/{self.storage_endpoint}"

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Create configuration from environment variables."""
        base_url = os.getenv("SUPABASE_URL", "")
        api_key = os.getenv("SUPABASE_KEY", "")
        if not base_url or not api_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")

        kwargs: Dict[str, Any] = {}
        if endpoint := os.getenv("SUPABASE_STORAGE_ENDPOINT"):
            kwargs["storage_endpoint"] = endpoint
        if timeout := os.getenv("SUPABASE_STORAGE_TIMEOUT"):
            kwargs["request_timeout"] = float(timeout)

        return cls(base_url=base_url, api_key=api_key, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, without the API key."""
        return {
            "base_url": self.base_url,
            "storage_endpoint": self.storage_endpoint,
            "request_timeout": self.request_timeout,
            "max_connections": self.max_connections,
            "max_keepalive_connections": self.max_keepalive_connections,
            "chunk_size": self.chunk_size,
        }
