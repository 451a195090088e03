"""Remote chat store clients for hank-tui.

Provides the polling and posting side of the chat protocol.
"""

from .base import RemoteStore
from .factory import create_remote_store

__all__ = [
    "RemoteStore",
    "create_remote_store",
]
