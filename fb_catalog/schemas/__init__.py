"""
Pydantic schemas for Graph API catalog data.
"""

from .graph_schemas import (
    AuthResponse,
    LoginStatus,
    LoginStatusResponse,
    NewProduct,
    NewProductSet,
    ProductId,
    ProductImage,
    ProductSetUpdate,
    RetailerId,
)

__all__ = [
    "AuthResponse",
    "LoginStatus",
    "LoginStatusResponse",
    "NewProduct",
    "NewProductSet",
    "ProductId",
    "ProductImage",
    "ProductSetUpdate",
    "RetailerId",
]
