"""Tests unitarios para la codificación de sub-requests batch de la Graph API."""

import json
import re
from unittest.mock import patch

from fb_catalog.graph.batch import (
    ItemMethod,
    ItemRequest,
    RelativeRequest,
    RetailerIdFactory,
    create_empty_product_set,
    create_item,
    delete_item,
    delete_object,
    generate_retailer_id,
    serialize_batch,
)

RETAILER_ID_PATTERN = re.compile(r"^prod_\d+_[0-9a-z]{9}$")


class TestItemRequests:
    """Tests para las operaciones del endpoint products_batch."""

    def test_create_item_serializes_method_retailer_id_and_data(self):
        """Debe serializar POST con retailer_id y data."""
        request = create_item("prod_1_abc", {"name": "Shirt", "price": 1999})

        assert request.to_dict() == {
            "method": "POST",
            "retailer_id": "prod_1_abc",
            "data": {"name": "Shirt", "price": 1999},
        }

    def test_delete_item_has_no_data(self):
        """Un DELETE por retailer_id no debe incluir data."""
        request = delete_item("sku-42")

        assert request.method is ItemMethod.DELETE
        assert request.to_dict() == {"method": "DELETE", "retailer_id": "sku-42"}


class TestRelativeRequests:
    """Tests para las sub-requests del batch en la raíz de la API."""

    def test_delete_object_uses_id_as_relative_url(self):
        """Debe apuntar el DELETE al id del objeto."""
        assert delete_object("123456").to_dict() == {"method": "DELETE", "relative_url": "123456"}

    def test_create_empty_product_set_body(self):
        """Debe crear el set con un filtro que no coincide con ningún producto."""
        request = create_empty_product_set("cat_1", "Summer Sale")

        assert request.method == "POST"
        assert request.relative_url == "cat_1/product_sets"
        assert request.body == (
            "name=Summer%20Sale"
            "&filter=%7B%22retailer_product_group_id%22%3A%7B%22is_any%22%3A%5B%5D%7D%7D"
        )

    def test_create_empty_product_set_escapes_ampersand_in_name(self):
        """Un '&' en el nombre no debe romper el body form-encoded."""
        request = create_empty_product_set("cat_1", "Shoes & Bags")

        assert request.body.startswith("name=Shoes%20%26%20Bags&filter=")


class TestSerializeBatch:
    """Tests para serialize_batch."""

    def test_serializes_mixed_requests_as_json_array(self):
        """Debe producir un arreglo JSON en el orden recibido."""
        requests = [
            RelativeRequest(method="DELETE", relative_url="1"),
            ItemRequest(method=ItemMethod.DELETE, retailer_id="r1"),
        ]

        decoded = json.loads(serialize_batch(requests))

        assert decoded == [
            {"method": "DELETE", "relative_url": "1"},
            {"method": "DELETE", "retailer_id": "r1"},
        ]

    def test_empty_batch_is_empty_array(self):
        assert serialize_batch([]) == "[]"


class TestRetailerIds:
    """Tests para la generación de retailer ids."""

    def test_format_uses_timestamp_and_base36_suffix(self):
        """Debe tener el formato prod_<ms>_<9 caracteres base36>."""
        retailer_id = generate_retailer_id(now_ms=1700000000000)

        assert retailer_id.startswith("prod_1700000000000_")
        assert RETAILER_ID_PATTERN.match(retailer_id)

    def test_factory_never_repeats_within_a_call(self):
        """La fábrica debe reintentar si el generador repite un id."""
        factory = RetailerIdFactory()

        with patch(
            "fb_catalog.graph.batch.generate_retailer_id",
            side_effect=["prod_1_aaaaaaaaa", "prod_1_aaaaaaaaa", "prod_1_bbbbbbbbb"],
        ):
            first = factory()
            second = factory()

        assert first == "prod_1_aaaaaaaaa"
        assert second == "prod_1_bbbbbbbbb"
