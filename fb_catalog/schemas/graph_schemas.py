"""
Modelos Pydantic para datos de la Graph API de catálogos.

Este módulo define los schemas de entrada de las operaciones de catálogo
(productos, product sets) y la respuesta del SDK de login.
"""

from decimal import Decimal
from enum import Enum
from typing import List, NewType, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Id asignado por Facebook al producto (catalog item id)
ProductId = NewType("ProductId", str)
# Clave de idempotencia elegida por el comercio al crear el producto
RetailerId = NewType("RetailerId", str)


class LoginStatus(str, Enum):
    """Estados de sesión que reporta el SDK."""

    CONNECTED = "connected"
    NOT_AUTHORIZED = "not_authorized"
    UNKNOWN = "unknown"


class AuthResponse(BaseModel):
    """Datos de autenticación entregados por el SDK cuando hay sesión."""

    model_config = ConfigDict(extra="allow")

    accessToken: str
    userID: str
    expiresIn: Optional[int] = None
    signedRequest: Optional[str] = None
    graphDomain: Optional[str] = None
    data_access_expiration_time: Optional[int] = None


class LoginStatusResponse(BaseModel):
    """Respuesta de getLoginStatus / login."""

    model_config = ConfigDict(extra="allow")

    status: LoginStatus = LoginStatus.UNKNOWN
    authResponse: Optional[AuthResponse] = None

    @property
    def is_connected(self) -> bool:
        return self.status == LoginStatus.CONNECTED and self.authResponse is not None

    @property
    def access_token(self) -> Optional[str]:
        return self.authResponse.accessToken if self.authResponse else None


class ProductImage(BaseModel):
    """Referencia a la imagen de un producto."""

    url: str


class NewProduct(BaseModel):
    """Producto a crear; el id lo asigna Facebook."""

    name: str
    description: str = ""
    brand: str = ""
    link: str
    price: Decimal = Field(ge=0)
    currency: str = Field(min_length=3, max_length=3)
    image: ProductImage

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, v):
        """Convierte floats vía str para no arrastrar ruido binario."""
        if isinstance(v, float):
            return Decimal(str(v))
        return v


class NewProductSet(BaseModel):
    """Product set a crear, inicialmente vacío."""

    name: str


class ProductSetUpdate(BaseModel):
    """Cambios solicitados sobre un product set."""

    name: Optional[str] = None
    product_ids: Optional[List[str]] = None
