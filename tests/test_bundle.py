"""Concurrent report bundle fetch over httpx.MockTransport."""

import httpx

from inventory_engine.connectors.bundle import fetch_report_bundle


def _transport(routes, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        path = request.url.path.removeprefix("/api")
        status, body = routes.get(path, (404, {"error": "not found"}))
        return httpx.Response(status, json=body)
    return httpx.MockTransport(handler)


class TestFetchReportBundle:

    def test_all_shapes_normalized(self):
        transport = _transport({
            "/sales": (200, {"salesOrders": [{"_id": "s1"}]}),
            "/products": (200, {"products": [{"_id": "p1"}]}),
            "/warehouses": (200, [{"_id": "w1"}]),
            "/purchases": (200, {"data": [{"_id": "b1"}]}),
        })
        bundle = fetch_report_bundle("http://api.test/api", token="t", transport=transport)
        assert bundle.ok
        assert bundle.sales == [{"_id": "s1"}]
        assert bundle.products == [{"_id": "p1"}]
        assert bundle.warehouses == [{"_id": "w1"}]
        assert bundle.purchases == [{"_id": "b1"}]

    def test_failed_collection_becomes_empty(self):
        transport = _transport({
            "/sales": (500, {"error": "boom"}),
            "/products": (200, {"products": [{"_id": "p1"}]}),
            "/warehouses": (200, {"unexpected": 1}),
            "/purchases": (200, []),
        })
        bundle = fetch_report_bundle("http://api.test/api", transport=transport)
        assert not bundle.ok
        assert bundle.sales == []
        assert bundle.warehouses == []
        assert bundle.products == [{"_id": "p1"}]
        assert sorted(e.split(":")[0] for e in bundle.errors) == ["sales", "warehouses"]

    def test_sends_token(self):
        seen = []
        routes = {p: (200, []) for p in ("/sales", "/products", "/warehouses", "/purchases")}
        fetch_report_bundle("http://api.test/api", token="secret", transport=_transport(routes, seen))
        assert len(seen) == 4
        assert all(r.headers["Authorization"] == "Bearer secret" for r in seen)
