"""Shared fixtures: small, realistic API payloads."""

from datetime import datetime, timezone

import pytest


NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def sales():
    return [
        {
            "_id": "s1", "orderNumber": "SO-0001", "status": "delivered",
            "totalAmount": 1000, "createdAt": "2024-05-15T08:00:00Z",
            "warehouseId": "w1",
            "items": [
                {"productId": {"_id": "p1", "name": "Widget", "sku": "WID-1"},
                 "variantName": "Red", "quantity": 4, "unitPrice": 200},
                {"productId": "p2", "productName": "Gadget", "quantity": 1, "unitPrice": 200},
            ],
        },
        {
            "_id": "s2", "orderNumber": "SO-0002", "status": "cancelled",
            "totalAmount": 500, "createdAt": "2024-05-15T09:00:00Z",
            "warehouseId": {"_id": "w1", "name": "Main"},
            "items": [{"productId": "p2", "quantity": 10, "unitPrice": 50}],
        },
        {
            "_id": "s3", "orderNumber": "SO-0003", "status": "returned",
            "totalAmount": 300, "createdAt": "2024-05-14T10:00:00Z",
            "warehouseId": "w2",
            "items": [{"productId": "p2", "quantity": 3, "unitPrice": 100}],
        },
        {
            "_id": "s4", "orderNumber": "SO-0004", "status": "pending",
            "totalAmount": 250, "createdAt": "2024-05-13T23:30:00Z",
            "warehouseId": "w2",
            "items": [{"productId": {"_id": "p1", "name": "Widget"}, "quantity": 1, "unitPrice": 250}],
        },
    ]


@pytest.fixture
def purchases():
    return [
        {"_id": "b1", "purchaseNumber": "PO-0001", "paymentStatus": "paid", "totalAmount": 400},
        {"_id": "b2", "purchaseNumber": "PO-0002", "paymentStatus": "pending", "totalAmount": 900},
    ]


@pytest.fixture
def warehouses():
    return [
        {
            "_id": "w1", "name": "Main", "capacity": 100,
            "currentStock": [
                {"productId": {"_id": "p1", "name": "Widget"}, "quantity": 50, "reservedQuantity": 45},
                {"productId": {"_id": "p2", "name": "Gadget"}, "quantity": 42, "reservedQuantity": 0},
            ],
        },
        {
            "_id": "w2", "name": "Overflow", "capacity": 0,
            "currentStock": [
                {"productId": {"_id": "p3", "name": "Doohickey"}, "quantity": 2, "reservedQuantity": 2},
            ],
        },
    ]


@pytest.fixture
def products():
    return [
        {"_id": "p1", "name": "Widget", "sku": "WID-1", "category": "Tools", "sellingPrice": 200,
         "warehouses": [{"name": "Main", "stock": 3}, {"name": "Overflow", "stock": 1}]},
        {"_id": "p2", "name": "Gadget", "sku": "GAD-2", "category": "Toys", "sellingPrice": 50,
         "warehouses": [{"name": "Main", "stock": 42}]},
        {"_id": "p3", "name": "Doohickey", "sku": "DOO-3", "category": "Tools", "sellingPrice": 900,
         "warehouses": []},
    ]


@pytest.fixture
def purchase_record():
    return {
        "_id": "b7",
        "purchaseNumber": "PO-0007",
        "supplierId": {
            "_id": "sup1", "name": "Acme Supplies & Co", "phone": "555-0100",
            "email": "orders@acme.test", "address": {"street": "1 Main St", "city": "Lahore"},
        },
        "items": [
            {"productId": {"_id": "p1", "name": "Widget", "sku": "WID-1"},
             "quantity": 10, "unitPrice": 25, "totalPrice": 250},
            {"productId": {"_id": "p2", "name": "Gadget", "sku": "GAD-2"},
             "quantity": 2, "unitPrice": 75, "totalPrice": 150},
        ],
        "totalAmount": 400,
        "taxAmount": 40,
        "discountAmount": 10,
        "finalAmount": 430,
        "paymentMethod": "bank_transfer",
        "paymentStatus": "paid",
        "paymentDate": "2024-05-10T00:00:00Z",
        "purchaseDate": "2024-05-01T00:00:00Z",
        "notes": "Deliver to back door",
    }
