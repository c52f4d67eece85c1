"""Tests unitarios para el CLI fb-catalog."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from fb_catalog.cli import format_table, run
from fb_catalog.utils.error_handler import GraphAPIException


def patched_client(**operations):
    client = MagicMock()
    for name, result in operations.items():
        setattr(client, name, AsyncMock(**result))
    client_cls = MagicMock()
    client_cls.return_value.__aenter__.return_value = client
    return client_cls, client


class TestRun:
    """Tests para el comando principal."""

    @pytest.mark.asyncio
    async def test_products_as_json(self, capsys):
        client_cls, client = patched_client(list_products={"return_value": [{"id": "p1", "name": "Shirt"}]})

        with patch("fb_catalog.cli.CatalogClient", client_cls), patch("fb_catalog.cli.setup_logging"):
            code = await run(["products", "c1", "--token", "tok", "--format", "json"])

        assert code == 0
        client.list_products.assert_awaited_once_with("c1", "tok")
        assert json.loads(capsys.readouterr().out) == [{"id": "p1", "name": "Shirt"}]

    @pytest.mark.asyncio
    async def test_missing_token_exits_with_usage_error(self, monkeypatch):
        monkeypatch.delenv("FACEBOOK_ACCESS_TOKEN", raising=False)

        with patch("fb_catalog.cli.setup_logging"):
            code = await run(["businesses", "u1"])

        assert code == 2

    @pytest.mark.asyncio
    async def test_graph_error_returns_failure_code(self, monkeypatch):
        monkeypatch.setenv("FACEBOOK_ACCESS_TOKEN", "tok")
        client_cls, _ = patched_client(
            list_catalogs={"side_effect": GraphAPIException("Invalid OAuth access token.")}
        )

        with patch("fb_catalog.cli.CatalogClient", client_cls), patch("fb_catalog.cli.setup_logging"):
            code = await run(["catalogs", "b1"])

        assert code == 1


class TestFormatTable:
    """Tests para format_table."""

    def test_empty_results(self):
        assert format_table([], ["id"]) == "No results found."

    def test_rows_follow_column_order(self):
        table = format_table([{"id": "c1", "name": "Main"}], ["id", "name"])

        lines = table.splitlines()
        assert lines[0].split(" | ")[0].strip() == "id"
        assert lines[2].split(" | ")[1].strip() == "Main"
