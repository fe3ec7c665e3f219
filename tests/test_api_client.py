"""InventoryApiClient against a mocked requests session."""

from unittest.mock import MagicMock

import pytest
import requests

from inventory_engine.connectors.api_client import ApiClientError, InventoryApiClient


def _response(status=200, body=None, reason="OK", raw=None):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.reason = reason
    if raw is not None:
        response.content = raw
        response.json.side_effect = ValueError("not json")
    elif body is None:
        response.content = b""
        response.json.side_effect = ValueError("empty")
    else:
        response.content = b"{...}"
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    return InventoryApiClient(base_url="http://api.test/api/", token="tok", timeout=5, session=session)


class TestTransport:
    """Request building and error mapping."""

    def test_sends_bearer_token_and_timeout(self, client, session):
        session.request.return_value = _response(body=[])
        client.list_products()
        method, url = session.request.call_args.args
        kwargs = session.request.call_args.kwargs
        assert method == "GET"
        assert url == "http://api.test/api/products"
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        assert kwargs["timeout"] == 5

    def test_backend_error_message(self, client, session):
        session.request.return_value = _response(400, {"error": "Insufficient stock"}, reason="Bad Request")
        with pytest.raises(ApiClientError) as exc:
            client.create_sale({"items": []})
        assert exc.value.status == 400
        assert exc.value.message == "Insufficient stock"
        assert str(exc.value) == "[400] Insufficient stock"

    def test_falls_back_to_reason(self, client, session):
        session.request.return_value = _response(502, raw=b"<html>", reason="Bad Gateway")
        with pytest.raises(ApiClientError) as exc:
            client.list_sales()
        assert exc.value.message == "Bad Gateway"

    def test_transport_error(self, client, session):
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(ApiClientError) as exc:
            client.list_warehouses()
        assert exc.value.status is None

    def test_invalid_json(self, client, session):
        session.request.return_value = _response(200, raw=b"oops")
        with pytest.raises(ApiClientError):
            client.dashboard_summary()

    def test_unparseable_collection(self, client, session):
        session.request.return_value = _response(body={"unexpected": True})
        with pytest.raises(ApiClientError):
            client.list_purchases()


class TestEndpoints:
    """Paths, bodies and response unwrapping."""

    def test_sales_wrapped_and_limited(self, client, session):
        session.request.return_value = _response(body={"salesOrders": [{"_id": "s1"}]})
        assert client.list_sales() == [{"_id": "s1"}]
        assert session.request.call_args.kwargs["params"] == {"limit": 1000}

    def test_add_stock_body(self, client, session):
        session.request.return_value = _response(body={"success": True})
        client.add_stock("w1", "p1", "7", ["damaged"])
        method, url = session.request.call_args.args
        assert (method, url) == ("POST", "http://api.test/api/warehouses/w1/add-stock")
        assert session.request.call_args.kwargs["json"] == {"productId": "p1", "quantity": 7, "tags": ["damaged"]}

    def test_sale_status_patch(self, client, session):
        session.request.return_value = _response(body={"_id": "s1", "status": "dispatch"})
        client.update_sale_status("s1", {"status": "dispatch"})
        method, url = session.request.call_args.args
        assert (method, url) == ("PATCH", "http://api.test/api/sales/s1/status")

    def test_delete_with_empty_body(self, client, session):
        session.request.return_value = _response(204, reason="No Content")
        assert client.delete_warehouse("w1") is None

    def test_generate_sku(self, client, session):
        session.request.return_value = _response(body={"sku": "WID-001"})
        assert client.generate_sku("  Widget ") == "WID-001"
        assert session.request.call_args.kwargs["json"] == {"productName": "Widget"}

    def test_generate_sku_without_sku(self, client, session):
        session.request.return_value = _response(body={})
        with pytest.raises(ApiClientError):
            client.generate_sku("Widget")

    def test_expected_returns_with_stats(self, client, session):
        session.request.return_value = _response(body={
            "expectedReturns": [{"_id": "r1"}],
            "stats": {"total": 1, "pending": 1},
        })
        result = client.list_expected_returns("pending")
        assert result == {"items": [{"_id": "r1"}], "stats": {"total": 1, "pending": 1}}
        assert session.request.call_args.kwargs["params"] == {"status": "pending"}

    def test_expected_returns_all_sends_no_filter(self, client, session):
        session.request.return_value = _response(body={"expectedReturns": []})
        client.list_expected_returns("all")
        assert session.request.call_args.kwargs["params"] is None

    def test_report_data_unwrapped(self, client, session):
        session.request.return_value = _response(body={"success": True, "data": {"sales": 3}})
        assert client.weekly_sales() == {"sales": 3}

    def test_report_date_range(self, client, session):
        session.request.return_value = _response(body={"suppliers": []})
        client.supplier_performance("2024-01-01", None)
        assert session.request.call_args.kwargs["params"] == {"startDate": "2024-01-01"}

    def test_stock_levels(self, client, session):
        session.request.return_value = _response(body=[{"warehouseId": "w1", "products": []}])
        assert client.stock_levels("p1") == [{"warehouseId": "w1", "products": []}]
        assert session.request.call_args.kwargs["params"] == {"productId": "p1"}

    def test_single_records_unwrapped(self, client, session):
        session.request.return_value = _response(body={"product": {"_id": "p1", "name": "Widget"}})
        assert client.get_product("p1") == {"_id": "p1", "name": "Widget"}
        session.request.return_value = _response(body={"_id": "w1", "name": "Main"})
        assert client.get_warehouse("w1") == {"_id": "w1", "name": "Main"}
        assert session.request.call_args.args == ("GET", "http://api.test/api/warehouses/w1")

    def test_update_product(self, client, session):
        session.request.return_value = _response(body={"_id": "p1", "sellingPrice": 250})
        client.update_product("p1", {"sellingPrice": 250})
        assert session.request.call_args.args == ("PUT", "http://api.test/api/products/p1")
        assert session.request.call_args.kwargs["json"] == {"sellingPrice": 250}
