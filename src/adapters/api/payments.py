"""Cliente de facturación (servicio `payments`).

Nota:
- Los bons livreurs/zones no tienen endpoint: ver `core.services.bons`.
"""

from __future__ import annotations

from typing import Any, Literal

from adapters.api.base import ResourceClient
from core.domain.common import BulkOperationResult, ExportResult, Page
from core.domain.payments import (
    CreateFactureRequest,
    Facture,
    FactureFilters,
    FactureStatistics,
    FactureStatus,
    UpdateFactureRequest,
)


class FacturesApiClient(ResourceClient):
    service = "payments"

    async def create(self, request: CreateFactureRequest) -> Facture:
        return await self._post("/api/payments", request, Facture)

    async def list(self, filters: FactureFilters | None = None) -> Page[Facture]:
        return await self._page("/api/payments", Facture, filters)

    async def my_factures(self, filters: FactureFilters | None = None) -> Page[Facture]:
        return await self._page("/api/payments/my-factures", Facture, filters)

    async def get(self, facture_id: str) -> Facture:
        return await self._get(f"/api/payments/{facture_id}", Facture)

    async def update(self, facture_id: str, request: UpdateFactureRequest) -> Facture:
        return await self._patch(f"/api/payments/{facture_id}", request, Facture)

    async def delete(self, facture_id: str) -> None:
        await self._delete(f"/api/payments/{facture_id}")

    async def change_status(self, facture_id: str, status: FactureStatus | str) -> Facture:
        value = status.value if isinstance(status, FactureStatus) else status
        return await self._patch(f"/api/payments/{facture_id}/status", {"status": value}, Facture)

    async def bulk_delete(self, ids: list[str]) -> BulkOperationResult:
        return await self._post("/api/payments/bulk-delete", {"ids": ids}, BulkOperationResult)

    async def bulk_status(self, ids: list[str], status: FactureStatus | str) -> BulkOperationResult:
        value = status.value if isinstance(status, FactureStatus) else status
        return await self._post("/api/payments/bulk-status", {"ids": ids, "status": value}, BulkOperationResult)

    async def statistics(self) -> FactureStatistics:
        return await self._get("/api/payments/statistics", FactureStatistics)

    async def export(
        self, filters: FactureFilters | None = None, export_format: Literal["excel", "pdf"] = "excel"
    ) -> ExportResult:
        payload = {"filters": filters.to_params() if filters else {}, "format": export_format}
        return await self._post("/api/payments/export", payload, ExportResult)

    async def send(self, facture_id: str, email: str) -> Any:
        return await self._post(f"/api/payments/{facture_id}/send", {"email": email})

    async def duplicate(self, facture_id: str) -> Facture:
        return await self._post(f"/api/payments/{facture_id}/duplicate", model=Facture)

    async def print(self, facture_id: str) -> ExportResult:
        return await self._get(f"/api/payments/{facture_id}/print", ExportResult)
