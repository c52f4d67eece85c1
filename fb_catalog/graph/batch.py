"""
Batch sub-requests for the Graph API.

The Graph API accepts several logical operations in one HTTP POST, encoded
as a JSON array in a form parameter. Two conventions exist:

- ``/{catalog_id}/products_batch`` takes a ``requests`` array of item
  operations keyed by retailer id (``ItemRequest``).
- The API root takes a ``batch`` array of arbitrary relative calls
  (``RelativeRequest``).

A 200 OK on the batch call can still hold per-item failures; the raw batch
response is returned to the caller untouched.
"""

import json
import random
import string
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Union
from urllib.parse import quote

EMPTY_SET_FILTER = {"retailer_product_group_id": {"is_any": []}}

_BASE36 = string.digits + string.ascii_lowercase
_COMPACT = (",", ":")
# Characters encodeURIComponent leaves unescaped besides alphanumerics and -_.~
_URI_COMPONENT_SAFE = "!*'()"


class ItemMethod(str, Enum):
    """Operations accepted by the products_batch endpoint."""

    CREATE = "POST"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ItemRequest:
    """One entry of a ``products_batch`` ``requests`` array."""

    method: ItemMethod
    retailer_id: str
    data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"method": self.method.value, "retailer_id": self.retailer_id}
        if self.data is not None:
            entry["data"] = self.data
        return entry


@dataclass(frozen=True)
class RelativeRequest:
    """One entry of a root ``batch`` array."""

    method: str
    relative_url: str
    body: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"method": self.method, "relative_url": self.relative_url}
        if self.body is not None:
            entry["body"] = self.body
        return entry


BatchRequest = Union[ItemRequest, RelativeRequest]


def serialize_batch(requests: Sequence[BatchRequest]) -> str:
    """Encode sub-requests as the JSON array string the Graph API expects."""
    return json.dumps([request.to_dict() for request in requests], separators=_COMPACT)


def generate_retailer_id(now_ms: Optional[int] = None) -> str:
    """
    Generate a client-side retailer id: ``prod_<epoch ms>_<9 base36 chars>``.

    Collision-resistant, not globally unique.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"prod_{now_ms}_{suffix}"


@dataclass
class RetailerIdFactory:
    """Hands out retailer ids, never repeating one within the same factory."""

    issued: set = field(default_factory=set)

    def __call__(self) -> str:
        retailer_id = generate_retailer_id()
        while retailer_id in self.issued:
            retailer_id = generate_retailer_id()
        self.issued.add(retailer_id)
        return retailer_id


def create_item(retailer_id: str, data: Dict[str, Any]) -> ItemRequest:
    return ItemRequest(method=ItemMethod.CREATE, retailer_id=retailer_id, data=data)


def delete_item(retailer_id: str) -> ItemRequest:
    return ItemRequest(method=ItemMethod.DELETE, retailer_id=retailer_id)


def delete_object(object_id: str) -> RelativeRequest:
    """Root batch DELETE of a Graph object addressed by its id."""
    return RelativeRequest(method="DELETE", relative_url=object_id)


def create_empty_product_set(catalog_id: str, name: str) -> RelativeRequest:
    """Root batch POST creating a product set whose filter matches no products."""
    set_filter = json.dumps(EMPTY_SET_FILTER, separators=_COMPACT)
    body = f"name={quote(name, safe=_URI_COMPONENT_SAFE)}&filter={quote(set_filter, safe=_URI_COMPONENT_SAFE)}"
    return RelativeRequest(method="POST", relative_url=f"{catalog_id}/product_sets", body=body)
