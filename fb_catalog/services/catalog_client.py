"""
Catalog management client.

Single entry point for the application: login SDK session operations plus
every catalog, product and product set operation against the Graph API.
Each data operation takes the user's access token explicitly; nothing is
cached between calls.
"""

import asyncio
import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from fb_catalog.core.config import get_settings
from fb_catalog.domain.value_objects import Money
from fb_catalog.graph.batch import (
    RetailerIdFactory,
    create_empty_product_set,
    create_item,
    delete_item,
    delete_object,
    serialize_batch,
)
from fb_catalog.graph.http_client import GraphAPIClient, HttpMethod
from fb_catalog.schemas.graph_schemas import (
    LoginStatusResponse,
    NewProduct,
    NewProductSet,
    ProductId,
    ProductSetUpdate,
    RetailerId,
)
from fb_catalog.sdk.session import LoginSdk, SdkSession
from fb_catalog.utils.error_handler import SdkException, ValidationException, log_error

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = "id,name,description,brand,url,price,currency,image_url"
PRODUCT_SET_FIELDS = "id,name,products_count"


class MembershipUpdateMode(str, Enum):
    """How update_product_set rewrites set membership."""

    # Clear every current member, then add the target list
    REPLACE = "replace"
    # Remove only stale members and add only missing ones
    DIFF = "diff"


class CatalogClient:
    """
    Facebook catalog client.

    Session operations delegate to the login SDK; everything else goes
    through ``api_call``. Batch operations return the raw batch response:
    a successful batch call can still contain per-item failures.
    """

    def __init__(self, sdk: Optional[LoginSdk] = None, graph: Optional[GraphAPIClient] = None):
        """
        Initialize the catalog client.

        Args:
            sdk: Vendor login SDK object; only needed for session operations
            graph: Graph API transport; a new one is created when omitted
        """
        self.settings = get_settings()
        self.session = SdkSession(sdk) if sdk is not None else None
        self.graph = graph or GraphAPIClient()

    async def __aenter__(self) -> "CatalogClient":
        await self.graph.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        await self.graph.close()

    # =============================================================================
    # SESSION OPERATIONS - Delegate to the login SDK
    # =============================================================================

    def _require_session(self) -> SdkSession:
        if self.session is None:
            raise SdkException("No Facebook SDK was provided to this client")
        return self.session

    async def initialize_sdk(self, app_id: Optional[str] = None) -> None:
        await self._require_session().initialize_sdk(app_id)

    def on_sdk_loaded(self) -> None:
        """Host hook to call once the SDK asset has loaded."""
        self._require_session().on_sdk_loaded()

    async def get_login_status(self) -> LoginStatusResponse:
        return await self._require_session().get_login_status()

    async def login(self) -> LoginStatusResponse:
        return await self._require_session().login()

    async def logout(self) -> None:
        await self._require_session().logout()

    # =============================================================================
    # REQUEST OPERATION
    # =============================================================================

    async def api_call(
        self, path: str, method: HttpMethod, token: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        return await self.graph.api_call(path, method, token, params or {})

    # =============================================================================
    # READ OPERATIONS
    # =============================================================================

    async def list_businesses(self, user_id: str, token: str) -> List[Dict[str, Any]]:
        """Businesses the user has access to, as returned by the Graph API."""
        response = await self.api_call(f"/{user_id}/businesses", "GET", token)
        return response["data"]

    async def list_catalogs(self, business_id: str, token: str) -> List[Dict[str, Any]]:
        """Product catalogs owned by a business, as returned by the Graph API."""
        response = await self.api_call(f"/{business_id}/owned_product_catalogs", "GET", token)
        return response["data"]

    async def list_products(self, catalog_id: str, token: str) -> List[Dict[str, Any]]:
        """
        First page of a catalog's products.

        Pagination cursors are not followed: catalogs larger than
        GRAPH_PRODUCTS_PAGE_LIMIT come back truncated. Each item keeps the
        Graph fields and gains ``link`` (copy of ``url``) and ``image``
        (``{"url": image_url}``).

        Args:
            catalog_id: Product catalog id
            token: User access token

        Returns:
            List of product dictionaries
        """
        response = await self.api_call(
            f"/{catalog_id}/products",
            "GET",
            token,
            {"fields": PRODUCT_FIELDS, "limit": self.settings.GRAPH_PRODUCTS_PAGE_LIMIT},
        )
        products = response["data"]

        if response.get("paging", {}).get("next"):
            logger.warning(
                f"Catalog {catalog_id} has more than {len(products)} products; only the first page is returned"
            )

        return [
            {**product, "link": product.get("url"), "image": {"url": product.get("image_url")}}
            for product in products
        ]

    # =============================================================================
    # PRODUCT MUTATIONS
    # =============================================================================

    async def add_products(
        self, catalog_id: str, token: str, products: Sequence[Union[NewProduct, Dict[str, Any]]]
    ) -> Any:
        """
        Create products through the catalog's products_batch endpoint.

        Every product gets a fresh client-side retailer id and its price is
        sent in integer minor units.

        Args:
            catalog_id: Product catalog id
            token: User access token
            products: Products to create (id is assigned by Facebook)

        Returns:
            Raw batch response
        """
        next_retailer_id = RetailerIdFactory()
        requests = []

        for raw_product in products:
            product = NewProduct.model_validate(raw_product)
            price = Money(amount=product.price, currency=product.currency)
            requests.append(
                create_item(
                    next_retailer_id(),
                    {
                        "name": product.name,
                        "description": product.description,
                        "brand": product.brand,
                        "url": product.link,
                        "image_url": product.image.url,
                        "price": price.to_minor_units(),
                        "currency": product.currency,
                    },
                )
            )

        logger.info(f"Adding {len(requests)} products to catalog {catalog_id}")
        return await self.api_call(
            f"/{catalog_id}/products_batch", "POST", token, {"requests": serialize_batch(requests)}
        )

    async def delete_products(self, catalog_id: str, token: str, product_ids: Sequence[ProductId]) -> Any:
        """
        Delete products by their Facebook product id through the root batch endpoint.

        These are the ids Facebook assigned, not retailer ids; use
        ``delete_products_by_retailer_id`` for merchant ids. An empty list
        makes no request and returns an empty list.
        """
        if not product_ids:
            logger.debug(f"No products to delete from catalog {catalog_id}")
            return []

        batch = [delete_object(product_id) for product_id in product_ids]
        logger.info(f"Deleting {len(batch)} products from catalog {catalog_id}")
        return await self.api_call("", "POST", token, {"batch": serialize_batch(batch)})

    async def delete_products_by_retailer_id(
        self, catalog_id: str, token: str, retailer_ids: Sequence[RetailerId]
    ) -> Any:
        """
        Delete products by retailer id through the catalog's products_batch endpoint.

        An empty list makes no request and returns an empty list.
        """
        if not retailer_ids:
            logger.debug(f"No retailer ids to delete from catalog {catalog_id}")
            return []

        requests = [delete_item(retailer_id) for retailer_id in retailer_ids]
        logger.info(f"Deleting {len(requests)} products by retailer id from catalog {catalog_id}")
        return await self.api_call(
            f"/{catalog_id}/products_batch", "POST", token, {"requests": serialize_batch(requests)}
        )

    # =============================================================================
    # PRODUCT SET OPERATIONS
    # =============================================================================

    async def _get_set_product_ids(self, set_id: str, token: str) -> List[str]:
        response = await self.api_call(f"/{set_id}/products", "GET", token, {"fields": "id"})
        return [product["id"] for product in response["data"]]

    async def list_product_sets(self, catalog_id: str, token: str) -> List[Dict[str, Any]]:
        """
        Product sets of a catalog with their member product ids.

        The set list does not carry membership, so one extra request per set
        is issued; those run concurrently and all must succeed.

        Args:
            catalog_id: Product catalog id
            token: User access token

        Returns:
            List of ``{"id", "name", "product_ids", "count"}`` dictionaries
        """
        response = await self.api_call(f"/{catalog_id}/product_sets", "GET", token, {"fields": PRODUCT_SET_FIELDS})
        product_sets = response["data"]

        try:
            memberships = await asyncio.gather(
                *(self._get_set_product_ids(product_set["id"], token) for product_set in product_sets)
            )
        except Exception as e:
            log_error(e, "list_product_sets", {"catalog_id": catalog_id, "set_count": len(product_sets)})
            raise

        return [
            {
                "id": product_set["id"],
                "name": product_set.get("name"),
                "product_ids": product_ids,
                "count": product_set.get("products_count"),
            }
            for product_set, product_ids in zip(product_sets, memberships)
        ]

    async def create_product_sets(
        self, catalog_id: str, token: str, sets: Sequence[Union[NewProductSet, Dict[str, Any]]]
    ) -> Any:
        """
        Create empty product sets (filter matching no products) in one root batch call.

        Returns:
            Raw batch response
        """
        batch = [create_empty_product_set(catalog_id, NewProductSet.model_validate(s).name) for s in sets]
        logger.info(f"Creating {len(batch)} product sets in catalog {catalog_id}")
        return await self.api_call("", "POST", token, {"batch": serialize_batch(batch)})

    async def delete_product_sets(self, catalog_id: str, token: str, set_ids: Sequence[str]) -> Any:
        """
        Delete product sets through the root batch endpoint.

        An empty list makes no request and returns an empty list.
        """
        if not set_ids:
            logger.debug(f"No product sets to delete from catalog {catalog_id}")
            return []

        batch = [delete_object(set_id) for set_id in set_ids]
        logger.info(f"Deleting {len(batch)} product sets from catalog {catalog_id}")
        return await self.api_call("", "POST", token, {"batch": serialize_batch(batch)})

    async def update_product_set(
        self,
        catalog_id: str,
        token: str,
        set_id: str,
        updates: Union[ProductSetUpdate, Dict[str, Any]],
        mode: MembershipUpdateMode = MembershipUpdateMode.REPLACE,
    ) -> Dict[str, Any]:
        """
        Rewrite the membership of a product set.

        Only ``product_ids`` updates are supported. The update is not atomic:
        in REPLACE mode a failure after the removal step leaves the set
        empty. In DIFF mode only the delta is sent, so calling again after a
        failure converges on the target membership.

        Args:
            catalog_id: Product catalog id the set belongs to
            token: User access token
            set_id: Product set id
            updates: Requested changes; must include product_ids
            mode: REPLACE (clear then fill) or DIFF (send only the delta)

        Returns:
            The set's id and name merged with the new product_ids

        Raises:
            ValidationException: If updates has no product_ids
            GraphAPIException: If any request fails
        """
        updates = ProductSetUpdate.model_validate(updates)
        if updates.product_ids is None:
            raise ValidationException("Only product_ids updates are supported.", field="product_ids")

        target_ids = list(updates.product_ids)

        try:
            current_ids = await self._get_set_product_ids(set_id, token)

            if mode == MembershipUpdateMode.DIFF:
                target_set = set(target_ids)
                current_set = set(current_ids)
                to_remove = [product_id for product_id in current_ids if product_id not in target_set]
                to_add = [product_id for product_id in target_ids if product_id not in current_set]
            else:
                to_remove = current_ids
                to_add = target_ids

            if to_remove:
                await self.api_call(f"/{set_id}/products", "DELETE", token, {"product_ids": _json_ids(to_remove)})

            if to_add:
                await self.api_call(f"/{set_id}/products", "POST", token, {"product_ids": _json_ids(to_add)})

            updated_set = await self.api_call(f"/{set_id}", "GET", token, {"fields": "id,name"})

        except Exception as e:
            log_error(e, "update_product_set", {"catalog_id": catalog_id, "set_id": set_id, "mode": mode.value})
            raise

        logger.info(
            f"Product set {set_id} updated ({mode.value}): -{len(to_remove)} +{len(to_add)} products"
        )
        return {**updated_set, "product_ids": target_ids}


def _json_ids(ids: List[str]) -> str:
    return json.dumps(ids, separators=(",", ":"))
