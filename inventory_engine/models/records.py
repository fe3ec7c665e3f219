"""
Pydantic schemas for API records.

The backend speaks camelCase JSON with Mongo-style `_id` keys; every schema
accepts those aliases and also the snake_case field names. Unknown fields
are kept (extra="allow") so a record survives a round-trip untouched.

Reference fields such as `productId` or `supplierId` arrive either as a bare
id string or as the populated object, both shapes are accepted.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _zero_if_none(v: Any) -> Any:
    return 0 if v is None or v == "" else v


# Amounts and quantities: null / "" from the API count as zero
Amount = Annotated[float, BeforeValidator(_zero_if_none)]


class ApiRecord(BaseModel):
    """Base schema for every API record"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = Field(None, alias="_id")


class NamedRef(ApiRecord):
    """Populated reference carrying at least a display name"""

    name: Optional[str] = None


class ProductRef(NamedRef):
    sku: Optional[str] = None


def _ref_id(ref: Union[ApiRecord, str, None]) -> Optional[str]:
    if isinstance(ref, ApiRecord):
        return ref.id
    return ref


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------

class LineItem(BaseModel):
    """One product line on a sales order, purchase or return"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    product: Union[ProductRef, str, None] = Field(None, alias="productId")
    product_name: Optional[str] = Field(None, alias="productName")
    variant_name: Optional[str] = Field(None, alias="variantName")
    quantity: Amount = 0
    unit_price: Amount = Field(0, alias="unitPrice")
    total_price: Optional[float] = Field(None, alias="totalPrice")

    @property
    def product_id(self) -> Optional[str]:
        return _ref_id(self.product)

    @property
    def display_name(self) -> str:
        name = None
        if isinstance(self.product, ProductRef):
            name = self.product.name
        name = name or self.product_name or "Unknown Product"
        if self.variant_name:
            return f"{name} - {self.variant_name}"
        return name

    @property
    def sku(self) -> str:
        if isinstance(self.product, ProductRef) and self.product.sku:
            return self.product.sku
        return "N/A"

    @property
    def line_total(self) -> float:
        """Stored totalPrice when present, else quantity x unitPrice."""
        if self.total_price is not None:
            return float(self.total_price)
        return float(self.quantity) * float(self.unit_price)


class ReturnItem(LineItem):
    condition: Optional[str] = None
    reason: Optional[str] = None


# ---------------------------------------------------------------------------
# Parties
# ---------------------------------------------------------------------------

class Supplier(NamedRef):
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Union[str, Dict[str, Any], None] = None

    @property
    def address_text(self) -> str:
        if isinstance(self.address, dict):
            parts = [str(v) for v in self.address.values() if v]
            return ", ".join(parts) if parts else "No Address"
        return str(self.address) if self.address else "No Address"


class CustomerInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

class OrderRecord(ApiRecord):
    """Fields shared by sales orders and purchases"""

    items: List[LineItem] = Field(default_factory=list)
    total_amount: Amount = Field(0, alias="totalAmount")
    tax_amount: Amount = Field(0, alias="taxAmount")
    discount_amount: Amount = Field(0, alias="discountAmount")
    final_amount: Optional[float] = Field(None, alias="finalAmount")
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    notes: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")


class SalesOrder(OrderRecord):
    order_number: Optional[str] = Field(None, alias="orderNumber")
    customer_info: CustomerInfo = Field(default_factory=CustomerInfo, alias="customerInfo")
    delivery_address: Union[str, Dict[str, Any], None] = Field(None, alias="deliveryAddress")
    status: str = "pending"
    warehouse: Union[NamedRef, str, None] = Field(None, alias="warehouseId")
    payment_status: Optional[str] = Field(None, alias="paymentStatus")
    payment_date: Optional[datetime] = Field(None, alias="paymentDate")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @property
    def warehouse_id(self) -> Optional[str]:
        return _ref_id(self.warehouse)


class Purchase(OrderRecord):
    purchase_number: Optional[str] = Field(None, alias="purchaseNumber")
    supplier: Union[Supplier, str, None] = Field(None, alias="supplierId")
    payment_status: str = Field("pending", alias="paymentStatus")
    payment_date: Optional[datetime] = Field(None, alias="paymentDate")
    purchase_date: Optional[datetime] = Field(None, alias="purchaseDate")


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------

class StockEntry(BaseModel):
    """One product's stock line inside a warehouse"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    product: Union[ProductRef, str, None] = Field(None, alias="productId")
    quantity: Amount = 0
    reserved_quantity: Amount = Field(0, alias="reservedQuantity")
    tags: List[str] = Field(default_factory=list)

    @property
    def product_name(self) -> str:
        if isinstance(self.product, ProductRef) and self.product.name:
            return self.product.name
        return "Unknown"

    @property
    def available(self) -> float:
        return self.quantity - self.reserved_quantity


class Warehouse(NamedRef):
    location: Union[str, Dict[str, Any], None] = None
    capacity: Amount = 0
    current_stock: List[StockEntry] = Field(default_factory=list, alias="currentStock")
    total_stock: Optional[float] = Field(None, alias="totalStock")
    capacity_usage: Optional[float] = Field(None, alias="capacityUsage")
    available_capacity: Optional[float] = Field(None, alias="availableCapacity")

    @property
    def stock_total(self) -> float:
        """Backend-reported total when present, else the sum of stock lines."""
        if self.total_stock is not None:
            return float(self.total_stock)
        return float(sum(entry.quantity for entry in self.current_stock))


class WarehouseStock(BaseModel):
    """Per-warehouse stock summary embedded in a product"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: Optional[str] = None
    stock: Amount = 0


class Product(ApiRecord):
    name: str = ""
    sku: str = ""
    category: Optional[str] = None
    unit: Optional[str] = None
    cost_price: Optional[float] = Field(None, alias="costPrice")
    selling_price: Amount = Field(0, alias="sellingPrice")
    current_stock: Optional[float] = Field(None, alias="currentStock")
    low_stock_threshold: Amount = Field(5, alias="lowStockThreshold")
    warehouses: List[WarehouseStock] = Field(default_factory=list)
    timeline: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def overall_stock(self) -> float:
        """Sum of per-warehouse stock, falling back to currentStock."""
        if self.warehouses:
            return float(sum(w.stock for w in self.warehouses))
        return float(self.current_stock or 0)


# ---------------------------------------------------------------------------
# Returns
# ---------------------------------------------------------------------------

class ExpectedReturn(ApiRecord):
    order_number: Optional[str] = Field(None, alias="orderNumber")
    sales_order: Union[ApiRecord, str, None] = Field(None, alias="salesOrderId")
    customer_name: Optional[str] = Field(None, alias="customerName")
    customer_email: Optional[str] = Field(None, alias="customerEmail")
    items: List[ReturnItem] = Field(default_factory=list)
    status: str = "pending"
    return_reason: Optional[str] = Field(None, alias="returnReason")
    expected_return_date: Optional[datetime] = Field(None, alias="expectedReturnDate")
    actual_return_date: Optional[datetime] = Field(None, alias="actualReturnDate")
