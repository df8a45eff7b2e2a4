from .http import HttpSyncClient, map_http_error
from .memory import InMemorySyncBackend, demo_backend

__all__ = ["HttpSyncClient", "InMemorySyncBackend", "demo_backend", "map_http_error"]
