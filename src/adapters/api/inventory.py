"""Clientes de inventario: productos, almacenes, stocks y expediciones.

Productos, almacenes y stocks comparten el servicio `products`; las
expediciones tienen servicio propio.
"""

from __future__ import annotations

from typing import Any, Literal

from adapters.api.base import Filters, ResourceClient
from core.domain.common import Page
from core.domain.inventory import (
    CapacityReport,
    CreateExpeditionRequest,
    CreateProductRequest,
    CreateVariantRequest,
    CreateWarehouseRequest,
    Expedition,
    ExpeditionFilters,
    ExpeditionHistory,
    ExpeditionStatus,
    Product,
    ProductFilters,
    ProductVariant,
    ReceiveExpeditionRequest,
    ReceiveExpeditionResult,
    Stock,
    StockHistory,
    StockMovementRequest,
    StockTransferRequest,
    UpdateExpeditionRequest,
    UpdateProductRequest,
    UpdateWarehouseRequest,
    Warehouse,
    WarehouseFilters,
    WarehouseStockSummary,
    WarehouseWithStats,
)


class ProductsApiClient(ResourceClient):
    service = "products"

    async def list(self, filters: ProductFilters | None = None) -> Page[Product]:
        return await self._page("/api/products", Product, filters)

    async def search(self, query: str, filters: ProductFilters | None = None) -> Page[Product]:
        filters = (filters or ProductFilters()).model_copy(update={"search": query})
        return await self.list(filters)

    async def with_variants(self, filters: ProductFilters | None = None) -> Page[Product]:
        return await self._page("/api/products/with-variants", Product, filters)

    async def get(self, product_id: str, *, include_variants: bool | None = None, include_stocks: bool | None = None) -> Product:
        params = {"includeVariants": include_variants, "includeStocks": include_stocks}
        return await self._get(f"/api/products/{product_id}", Product, params=params)

    async def create(self, request: CreateProductRequest) -> Product:
        return await self._post("/api/products", request, Product)

    async def update(self, product_id: str, request: UpdateProductRequest) -> Product:
        return await self._patch(f"/api/products/{product_id}", request, Product)

    async def delete(self, product_id: str) -> None:
        await self._delete(f"/api/products/{product_id}")

    # -- variantes -----------------------------------------------------------

    async def variants(self, filters: Filters = None) -> Page[ProductVariant]:
        return await self._page("/api/product-variants", ProductVariant, filters)

    async def variant(self, variant_id: str) -> ProductVariant:
        return await self._get(f"/api/product-variants/{variant_id}", ProductVariant)

    async def variants_by_product(self, product_id: str, filters: Filters = None) -> Page[ProductVariant]:
        return await self._page(f"/api/product-variants/by-product/{product_id}", ProductVariant, filters)

    async def variant_by_sku(self, sku: str) -> ProductVariant:
        return await self._get(f"/api/product-variants/by-sku/{sku}", ProductVariant)

    async def create_variant(self, request: CreateVariantRequest) -> ProductVariant:
        return await self._post("/api/product-variants", request, ProductVariant)

    async def update_variant(self, variant_id: str, changes: dict[str, Any]) -> ProductVariant:
        return await self._patch(f"/api/product-variants/{variant_id}", changes, ProductVariant)

    async def delete_variant(self, variant_id: str) -> None:
        await self._delete(f"/api/product-variants/{variant_id}")


class StocksApiClient(ResourceClient):
    service = "products"

    async def list(self, filters: Filters = None) -> Page[Stock]:
        return await self._page("/api/stocks", Stock, filters)

    async def get(self, stock_id: str) -> Stock:
        return await self._get(f"/api/stocks/{stock_id}", Stock)

    async def create(self, body: dict[str, Any]) -> Stock:
        return await self._post("/api/stocks", body, Stock)

    async def update(self, stock_id: str, changes: dict[str, Any]) -> Stock:
        return await self._patch(f"/api/stocks/{stock_id}", changes, Stock)

    async def delete(self, stock_id: str) -> None:
        await self._delete(f"/api/stocks/{stock_id}")

    async def by_warehouse(self, warehouse_id: str, filters: Filters = None) -> Page[Stock]:
        return await self._page(f"/api/stocks/by-warehouse/{warehouse_id}", Stock, filters)

    async def by_product(self, product_id: str, filters: Filters = None) -> Page[Stock]:
        return await self._page(f"/api/stocks/by-product/{product_id}", Stock, filters)

    async def by_variant(self, variant_id: str, filters: Filters = None) -> Page[Stock]:
        return await self._page(f"/api/stocks/by-variant/{variant_id}", Stock, filters)

    async def low_stock(self, threshold: int | None = None) -> Page[Stock]:
        return await self._page("/api/stocks/low-stock", Stock, {"threshold": threshold})

    async def adjust(self, stock_id: str, quantity: int, reason: str, reference: str | None = None) -> Stock:
        body = {"quantity": quantity, "reason": reason, "reference": reference}
        return await self._post(f"/api/stocks/{stock_id}/adjust", body, Stock)

    async def reserve(self, stock_id: str, quantity: int, reference: str | None = None) -> Stock:
        return await self._post(f"/api/stocks/{stock_id}/reserve", {"quantity": quantity, "reference": reference}, Stock)

    async def release_reservation(self, stock_id: str, quantity: int, reference: str | None = None) -> Stock:
        return await self._post(
            f"/api/stocks/{stock_id}/release-reservation", {"quantity": quantity, "reference": reference}, Stock
        )

    async def history(self, stock_id: str, filters: Filters = None) -> Page[StockHistory]:
        return await self._page(f"/api/stocks/{stock_id}/history", StockHistory, filters)

    async def mark_defective(self, stock_id: str, quantity: int, reason: str) -> Stock:
        return await self._post(f"/api/stocks/{stock_id}/mark-defective", {"quantity": quantity, "reason": reason}, Stock)

    async def repair_defective(self, stock_id: str, quantity: int, reason: str) -> Stock:
        return await self._post(f"/api/stocks/{stock_id}/repair-defective", {"quantity": quantity, "reason": reason}, Stock)

    async def dispose_defective(self, stock_id: str, quantity: int, reason: str) -> Stock:
        return await self._post(f"/api/stocks/{stock_id}/dispose-defective", {"quantity": quantity, "reason": reason}, Stock)

    async def defective(self, filters: Filters = None) -> Page[Stock]:
        return await self._page("/api/stocks/defective", Stock, filters)


class WarehousesApiClient(ResourceClient):
    service = "products"

    async def list(self, filters: WarehouseFilters | None = None) -> Page[Warehouse]:
        return await self._page("/api/warehouses", Warehouse, filters)

    async def get(self, warehouse_id: str, *, include_stocks: bool | None = None) -> Warehouse:
        return await self._get(f"/api/warehouses/{warehouse_id}", Warehouse, params={"includeStocks": include_stocks})

    async def with_stats(self, warehouse_id: str) -> WarehouseWithStats:
        return await self._get(f"/api/warehouses/{warehouse_id}/stats", WarehouseWithStats)

    async def create(self, request: CreateWarehouseRequest) -> Warehouse:
        return await self._post("/api/warehouses", request, Warehouse)

    async def update(self, warehouse_id: str, request: UpdateWarehouseRequest) -> Warehouse:
        return await self._patch(f"/api/warehouses/{warehouse_id}", request, Warehouse)

    async def delete(self, warehouse_id: str) -> None:
        await self._delete(f"/api/warehouses/{warehouse_id}")

    async def stocks(self, warehouse_id: str, filters: Filters = None) -> Page[Stock]:
        return await self._page(f"/api/warehouses/{warehouse_id}/stocks", Stock, filters)

    async def stock_summary(self, warehouse_id: str) -> WarehouseStockSummary:
        return await self._get(f"/api/warehouses/{warehouse_id}/stock-summary", WarehouseStockSummary)

    async def stock_summaries(self) -> list[WarehouseStockSummary]:
        return await self._list("/api/warehouses/stock-summaries", WarehouseStockSummary)

    async def record_movement(self, warehouse_id: str, request: StockMovementRequest) -> Stock:
        return await self._post(f"/api/warehouses/{warehouse_id}/stock-movements", request, Stock)

    async def transfer(self, request: StockTransferRequest) -> dict[str, Any]:
        return await self._post("/api/warehouses/stock-transfers", request)

    async def stock_history(self, warehouse_id: str, filters: Filters = None) -> Page[StockHistory]:
        return await self._page(f"/api/warehouses/{warehouse_id}/stock-history", StockHistory, filters)

    async def by_location(self, location: str) -> list[Warehouse]:
        return await self._list("/api/warehouses/by-location", Warehouse, params={"location": location})

    async def low_stock(self, threshold: int = 10) -> list[Stock]:
        return await self._list("/api/warehouses/low-stock", Stock, params={"threshold": threshold})

    async def capacity_report(self, warehouse_id: str) -> CapacityReport:
        return await self._get(f"/api/warehouses/{warehouse_id}/capacity-report", CapacityReport)

    async def adjust_stock(self, warehouse_id: str, stock_id: str, new_quantity: int, reason: str | None = None) -> Stock:
        body = {"quantity": new_quantity, "reason": reason or "ADJUSTMENT"}
        return await self._patch(f"/api/warehouses/{warehouse_id}/stocks/{stock_id}/adjust", body, Stock)

    async def reserve_stock(
        self, warehouse_id: str, stock_id: str, quantity: int, reference: str | None = None
    ) -> Stock:
        body = {"quantity": quantity, "reference": reference}
        return await self._patch(f"/api/warehouses/{warehouse_id}/stocks/{stock_id}/reserve", body, Stock)

    async def release_stock(
        self, warehouse_id: str, stock_id: str, quantity: int, reference: str | None = None
    ) -> Stock:
        body = {"quantity": quantity, "reference": reference}
        return await self._patch(f"/api/warehouses/{warehouse_id}/stocks/{stock_id}/release", body, Stock)

    async def bulk_update_stocks(self, warehouse_id: str, updates: list[dict[str, Any]]) -> list[Stock]:
        data = await self._patch(f"/api/warehouses/{warehouse_id}/stocks/bulk-update", {"updates": updates})
        return [Stock.model_validate(s) for s in data or []]

    async def export(self, warehouse_id: str, export_format: Literal["csv", "xlsx"] = "csv") -> bytes:
        return await self._bytes(f"/api/warehouses/{warehouse_id}/export", params={"format": export_format})

    async def import_file(self, warehouse_id: str, filename: str, content: bytes) -> dict[str, Any]:
        return await self._post(f"/api/warehouses/{warehouse_id}/import", files={"file": (filename, content)})


class ExpeditionsApiClient(ResourceClient):
    service = "expeditions"

    async def create(self, request: CreateExpeditionRequest) -> Expedition:
        return await self._post("/api/expeditions", request, Expedition)

    async def validate(self, request: CreateExpeditionRequest) -> dict[str, Any]:
        return await self._post("/api/expeditions/validate", request)

    async def list(self, filters: ExpeditionFilters | None = None) -> Page[Expedition]:
        return await self._page("/api/expeditions", Expedition, filters)

    async def get(self, expedition_id: str) -> Expedition:
        return await self._get(f"/api/expeditions/{expedition_id}", Expedition)

    async def update(self, expedition_id: str, request: UpdateExpeditionRequest) -> Expedition:
        return await self._put(f"/api/expeditions/{expedition_id}", request, Expedition)

    async def delete(self, expedition_id: str) -> None:
        await self._delete(f"/api/expeditions/{expedition_id}")

    async def bulk_status(self, ids: list[str], status: ExpeditionStatus | str, comment: str | None = None) -> dict[str, Any]:
        value = status.value if isinstance(status, ExpeditionStatus) else status
        return await self._post(
            "/api/expeditions/bulk-status", {"expeditionIds": ids, "status": value, "comment": comment}
        )

    async def receive(self, expedition_id: str, request: ReceiveExpeditionRequest) -> ReceiveExpeditionResult:
        return await self._post(f"/api/expeditions/{expedition_id}/receive", request, ReceiveExpeditionResult)

    async def validate_receive(self, expedition_id: str, request: ReceiveExpeditionRequest) -> dict[str, Any]:
        return await self._post(f"/api/expeditions/{expedition_id}/receive/validate", request)

    async def cancel(self, expedition_id: str, reason: str, *, notify_parties: bool = False) -> dict[str, Any]:
        body = {"reason": reason, "notifyParties": notify_parties}
        return await self._post(f"/api/expeditions/{expedition_id}/cancel", body)

    async def clone(self, expedition_id: str, changes: dict[str, Any] | None = None) -> dict[str, Any]:
        return await self._post(f"/api/expeditions/{expedition_id}/clone", changes or {})

    async def history(self, expedition_id: str) -> list[ExpeditionHistory]:
        data = await self._get(f"/api/expeditions/{expedition_id}/history")
        entries = data.get("history", []) if isinstance(data, dict) else data
        return [ExpeditionHistory.model_validate(e) for e in entries or []]

    async def add_items(self, expedition_id: str, items: list[dict[str, Any]]) -> dict[str, Any]:
        return await self._post(f"/api/expeditions/{expedition_id}/items", {"items": items})

    async def update_item(self, expedition_id: str, item_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(f"/api/expeditions/{expedition_id}/items/{item_id}", changes)

    async def remove_item(self, expedition_id: str, item_id: str) -> Expedition:
        data = await self._delete(f"/api/expeditions/{expedition_id}/items/{item_id}")
        return Expedition.model_validate(data["expedition"] if isinstance(data, dict) and "expedition" in data else data)

    async def report_discrepancy(self, expedition_id: str, report: dict[str, Any]) -> dict[str, Any]:
        return await self._post(f"/api/expeditions/{expedition_id}/discrepancy", report)

    async def receipt(self, expedition_id: str, params: Filters = None) -> dict[str, Any]:
        return await self._get(f"/api/expeditions/{expedition_id}/receipt", params=params)

    async def analytics(self, params: Filters = None) -> dict[str, Any]:
        return await self._get("/api/expeditions/analytics", params=params)

    async def dashboard(self) -> dict[str, Any]:
        return await self._get("/api/expeditions/dashboard")

    async def export(self, params: Filters = None) -> dict[str, Any]:
        return await self._get("/api/expeditions/export", params=params)

    async def search(self, criteria: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/api/expeditions/search", criteria)

    async def import_file(self, filename: str, content: bytes, *, validate_only: bool = False) -> dict[str, Any]:
        return await self._post(
            "/api/expeditions/import",
            {"validateOnly": "true" if validate_only else "false"},
            files={"file": (filename, content)},
        )

    async def by_warehouse(self, warehouse_id: str, params: Filters = None) -> dict[str, Any]:
        return await self._get(f"/api/warehouses/{warehouse_id}/expeditions", params=params)

    async def by_seller(self, seller_id: str, params: Filters = None) -> dict[str, Any]:
        return await self._get(f"/api/sellers/{seller_id}/expeditions", params=params)

    async def available_products(self, params: Filters = None) -> dict[str, Any]:
        return await self._get("/api/expeditions/available-products", params=params)
