"""Inventario: productos, almacenes, stocks y expediciones entrantes.

Nota:
- Las líneas de expedición usan `quantity_sent`/`quantity_received` en
  snake_case en el backend; esos campos llevan alias explícito.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from core.domain.common import ApiModel, ListFilters, RelatedRef


class StockReason(str, Enum):
    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"
    ADJUSTMENT = "ADJUSTMENT"
    TRANSFER = "TRANSFER"
    RESERVATION = "RESERVATION"
    CANCEL_RESERVATION = "CANCEL_RESERVATION"


class ExpeditionStatus(str, Enum):
    EXPEDITED = "expedited"
    PREPARED = "prepared"
    POINTED = "pointed"
    RECEIVED = "received"
    CANCELLED = "cancelled"


class TransportMode(str, Enum):
    AIR = "air"
    SEA = "sea"
    ROAD = "road"
    RAIL = "rail"
    COURIER = "courier"


class Product(ApiModel):
    id: str
    tenant_id: str | None = None
    name: str
    description: str | None = None
    base_price: float = 0.0
    has_variants: bool = False
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    variants: list["ProductVariant"] = Field(default_factory=list)
    stocks: list["Stock"] = Field(default_factory=list)


class ProductVariant(ApiModel):
    id: str
    product_id: str
    tenant_id: str | None = None
    sku: str
    name: str
    additional_price: float = 0.0
    attributes: dict[str, Any] = Field(default_factory=dict)
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CreateProductRequest(ApiModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    base_price: float = Field(..., ge=0)
    has_variants: bool = False
    image_url: str | None = None


class UpdateProductRequest(ApiModel):
    name: str | None = None
    description: str | None = None
    base_price: float | None = Field(default=None, ge=0)
    has_variants: bool | None = None
    image_url: str | None = None


class CreateVariantRequest(ApiModel):
    product_id: str
    sku: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    additional_price: float = 0.0
    attributes: dict[str, Any] = Field(default_factory=dict)
    image_url: str | None = None


class ProductFilters(ListFilters):
    include_variants: bool | None = None
    include_stocks: bool | None = None


class Warehouse(ApiModel):
    id: str
    tenant_id: str | None = None
    name: str
    location: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    stocks: list["Stock"] = Field(default_factory=list)


class Stock(ApiModel):
    id: str
    tenant_id: str | None = None
    warehouse_id: str
    product_id: str | None = None
    variant_id: str | None = None
    quantity: int = 0
    reserved: int = 0
    defective: int = 0
    updated_at: datetime | None = None
    warehouse: RelatedRef | None = None
    product: RelatedRef | None = None
    variant: RelatedRef | None = None

    @property
    def available(self) -> int:
        return max(self.quantity - self.reserved, 0)


class StockHistory(ApiModel):
    id: str
    stock_id: str
    change: int
    previous_quantity: int = 0
    new_quantity: int = 0
    reason: str
    reference: str | None = None
    created_at: datetime | None = None


class WarehouseStats(ApiModel):
    total_stock_items: int = 0
    total_quantity: int = 0
    total_reserved: int = 0
    available_quantity: int = 0
    unique_products: int = 0
    unique_variants: int = 0
    low_stock_items_count: int = 0
    out_of_stock_items_count: int = 0


class WarehouseWithStats(ApiModel):
    warehouse: Warehouse
    stats: WarehouseStats = Field(default_factory=WarehouseStats)


class WarehouseStockSummary(ApiModel):
    warehouse: Warehouse
    summary: dict[str, Any] = Field(default_factory=dict)

    @property
    def total_quantity(self) -> int:
        return int((self.summary.get("_sum") or {}).get("quantity") or 0)

    @property
    def total_reserved(self) -> int:
        return int((self.summary.get("_sum") or {}).get("reserved") or 0)


class CreateWarehouseRequest(ApiModel):
    name: str = Field(..., min_length=1)
    tenant_id: str | None = None
    location: str | None = None


class UpdateWarehouseRequest(ApiModel):
    name: str | None = None
    location: str | None = None


class WarehouseFilters(ListFilters):
    include_stocks: bool | None = None


class StockMovementRequest(ApiModel):
    warehouse_id: str
    quantity: int = Field(..., gt=0)
    reason: StockReason
    product_id: str | None = None
    variant_id: str | None = None
    reference: str | None = None
    notes: str | None = None


class StockTransferRequest(ApiModel):
    from_warehouse_id: str
    to_warehouse_id: str
    quantity: int = Field(..., gt=0)
    product_id: str | None = None
    variant_id: str | None = None
    reference: str | None = None
    notes: str | None = None


class CapacityReport(ApiModel):
    total_capacity: float | None = None
    used_capacity: float | None = None
    utilization_rate: float | None = None
    details: Any = None


# --------------------------------------------------------------------------- #
# Expeditions (entradas de stock de sellers)
# --------------------------------------------------------------------------- #


class ExpeditionItem(ApiModel):
    id: str
    expedition_id: str | None = None
    product_id: str
    variant_id: str | None = None
    product_name: str | None = None
    variant_name: str | None = None
    quantity_sent: int = Field(default=0, alias="quantity_sent")
    quantity_received: int = Field(default=0, alias="quantity_received")
    quantity_defective: int = Field(default=0, alias="quantity_defective")
    notes: str | None = None


class Expedition(ApiModel):
    id: str
    user_id: str | None = None
    tenant_id: str | None = None
    warehouse_id: str
    seller_id: str
    seller_snapshot: Any = None
    status: str = ExpeditionStatus.EXPEDITED.value
    arrival_date: datetime | None = None
    transport_mode: str | None = None
    tracking_number: str | None = None
    number_of_packages: int = 0
    weight: float | None = None
    items: list[ExpeditionItem] = Field(default_factory=list)
    received_by: str | None = None
    received_at: datetime | None = None
    general_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    warehouse: RelatedRef | None = None
    seller: RelatedRef | None = None


class ExpeditionItemInput(ApiModel):
    product_id: str
    quantity_sent: int = Field(..., gt=0, alias="quantity_sent")
    variant_id: str | None = None
    product_name: str | None = None
    variant_name: str | None = None
    batch_number: str | None = None


class CreateExpeditionRequest(ApiModel):
    warehouse_id: str
    seller_id: str
    seller_snapshot: Any = None
    arrival_date: str
    transport_mode: TransportMode
    number_of_packages: int = Field(..., ge=1)
    tracking_number: str | None = None
    weight: float | None = Field(default=None, ge=0)
    general_notes: str | None = None
    items: list[ExpeditionItemInput] | None = None


class UpdateExpeditionRequest(ApiModel):
    warehouse_id: str | None = None
    arrival_date: str | None = None
    transport_mode: TransportMode | None = None
    tracking_number: str | None = None
    number_of_packages: int | None = Field(default=None, ge=1)
    weight: float | None = Field(default=None, ge=0)
    status: ExpeditionStatus | None = None
    general_notes: str | None = None


class ReceiveItem(ApiModel):
    item_id: str
    quantity_received: int = Field(..., ge=0, alias="quantity_received")
    quantity_defective: int = Field(default=0, ge=0, alias="quantity_defective")
    notes: str | None = None


class ReceiveExpeditionRequest(ApiModel):
    items: list[ReceiveItem] = Field(..., min_length=1)
    received_by: str
    received_at: str | None = None
    general_notes: str | None = None


class Discrepancy(ApiModel):
    item_id: str
    expected_quantity: int
    actual_quantity: int
    difference: int


class ReceiveExpeditionResult(ApiModel):
    success: bool = False
    expedition: Expedition | None = None
    stock_updates: list[dict[str, Any]] = Field(default_factory=list)
    discrepancies: list[Discrepancy] = Field(default_factory=list)


class ExpeditionFilters(ListFilters):
    status: str | None = None
    warehouse_id: str | None = None
    seller_id: str | None = None
    start_date: str | None = None
    end_date: str | None = None


class ExpeditionHistory(ApiModel):
    id: str
    action: str | None = None
    status: str | None = None
    comment: str | None = None
    created_at: datetime | None = None
    performed_by: str | None = None


Product.model_rebuild()
Warehouse.model_rebuild()
