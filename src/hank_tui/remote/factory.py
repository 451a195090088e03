"""Factory for creating remote store backends."""

from typing import Any

from .base import RemoteStore


def create_remote_store(
    backend: str = "http",
    **kwargs: Any
) -> RemoteStore:
    """Create a remote store backend.

    Args:
        backend: Backend type ("http" or "memory")
        **kwargs: Backend-specific configuration

    Returns:
        RemoteStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "http":
        from .http import HttpRemoteStore
        return HttpRemoteStore(**kwargs)

    elif backend == "memory":
        from .in_memory import InMemoryRemoteStore
        return InMemoryRemoteStore(**kwargs)

    raise ValueError(
        f"Unsupported remote store backend: {backend}. "
        f"Supported backends: http, memory"
    )
