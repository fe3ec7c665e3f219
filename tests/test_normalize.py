"""normalize_collection: every response shape, one result type."""

from inventory_engine.connectors.normalize import Ok, ParseError, keys_for, normalize_collection


class TestNormalizeCollection:

    def test_bare_list(self):
        assert normalize_collection([{"_id": "a"}], keys_for("products")) == Ok([{"_id": "a"}])

    def test_entity_key(self):
        payload = {"products": [{"_id": "a"}], "total": 1}
        assert normalize_collection(payload, keys_for("products")) == Ok([{"_id": "a"}])

    def test_sales_orders_key(self):
        payload = {"salesOrders": [{"_id": "s1"}], "pagination": {}}
        assert normalize_collection(payload, keys_for("sales")).items == [{"_id": "s1"}]

    def test_data_key(self):
        payload = {"success": True, "data": [{"_id": "w1"}]}
        assert normalize_collection(payload, keys_for("warehouses")).items == [{"_id": "w1"}]

    def test_entity_key_wins_over_data(self):
        payload = {"data": [{"_id": "x"}], "products": [{"_id": "y"}]}
        assert normalize_collection(payload, keys_for("products")).items == [{"_id": "y"}]

    def test_null_is_empty(self):
        assert normalize_collection(None) == Ok([])

    def test_object_without_list(self):
        result = normalize_collection({"products": None, "message": "ok"}, keys_for("products"))
        assert isinstance(result, ParseError)
        assert "products" in result.reason

    def test_scalar_payload(self):
        result = normalize_collection("<html>", keys_for("products"))
        assert isinstance(result, ParseError)
        assert result.payload_type == "str"

    def test_unknown_collection_defaults_to_data(self):
        assert keys_for("nope") == ("data",)

    def test_result_is_a_copy(self):
        source = [{"_id": "a"}]
        result = normalize_collection(source)
        result.items.append({"_id": "b"})
        assert len(source) == 1
