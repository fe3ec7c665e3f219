"""Dashboard pages rendered headless with a mocked API client."""

from unittest.mock import MagicMock

import pytest
from streamlit.testing.v1 import AppTest

from inventory_engine.connectors.api_client import InventoryApiClient


def _warehouses_app():
    from inventory_engine.dashboard.warehouses_page import render_warehouses_page

    render_warehouses_page()


def _purchases_app():
    from inventory_engine.dashboard.purchases_page import render_purchases_page

    render_purchases_page()


@pytest.fixture
def client(warehouses, products, purchase_record):
    mock = MagicMock(spec=InventoryApiClient)
    mock.list_warehouses.return_value = warehouses
    mock.list_products.return_value = products
    mock.list_suppliers.return_value = []
    second = dict(purchase_record, _id="b8", purchaseNumber="PO-0008")
    mock.list_purchases.return_value = [purchase_record, second]
    return mock


def _run(script, client):
    at = AppTest.from_function(script, default_timeout=30)
    at.session_state["api_client"] = client
    return at.run()


def _document_labels(at):
    return [e.proto.label for e in at.get("download_button") if e.proto.label.startswith("Download invoice")]


class TestWarehousesPage:

    def test_products_loaded_once_for_all_warehouses(self, client):
        at = _run(_warehouses_app, client)
        assert not at.exception
        assert client.list_warehouses.call_count == 1
        assert client.list_products.call_count == 1


class TestPurchaseDocuments:

    def test_download_follows_selected_purchase(self, client):
        at = _run(_purchases_app, client)
        assert not at.exception

        at.button(key="doc_generate").click().run()
        assert len(_document_labels(at)) == 1
        assert "PO-0007" in _document_labels(at)[0]

        at.selectbox(key="doc_purchase").set_value("PO-0008").run()
        assert _document_labels(at) == []

        at.selectbox(key="doc_purchase").set_value("PO-0007").run()
        assert "PO-0007" in _document_labels(at)[0]

    def test_format_change_hides_other_format(self, client):
        at = _run(_purchases_app, client)
        at.button(key="doc_generate").click().run()
        at.selectbox(key="doc_fmt").set_value("xlsx").run()
        assert _document_labels(at) == []
