"""
Remote module - Backend API access and remote-backed stores.
"""

from creator_canvas.remote.client import ApiClient
from creator_canvas.remote.fashion import FashionStore


__all__ = [
    "ApiClient",
    "FashionStore",
]
