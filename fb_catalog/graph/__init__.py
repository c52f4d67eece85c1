"""
Graph API transport and batch request encoding.
"""

from .batch import ItemMethod, ItemRequest, RelativeRequest, serialize_batch
from .http_client import GraphAPIClient

__all__ = ["GraphAPIClient", "ItemMethod", "ItemRequest", "RelativeRequest", "serialize_batch"]
