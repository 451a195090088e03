"""Factory for creating transcript history backends."""

from typing import Any

from .base import HistoryStore


def create_history_store(
    backend: str = "json",
    **kwargs: Any
) -> HistoryStore:
    """Create a history backend.

    Args:
        backend: Backend type ("json" or "memory")
        **kwargs: Backend-specific configuration

    Returns:
        HistoryStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "json":
        from .json_file import JsonHistoryStore
        return JsonHistoryStore(**kwargs)

    elif backend == "memory":
        from .in_memory import InMemoryHistoryStore
        return InMemoryHistoryStore(**kwargs)

    raise ValueError(
        f"Unsupported history backend: {backend}. "
        f"Supported backends: json, memory"
    )
