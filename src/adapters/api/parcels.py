"""Clientes del servicio de colis: colis, estados, bordereaux y zonas."""

from __future__ import annotations

from typing import Any

from adapters.api.base import ResourceClient, parse_as
from core.domain.common import BulkActionResult, BulkOperationResult, ExportResult, ImportResult, Page
from core.domain.parcels import (
    AddParcelsToSlipRequest,
    AvailableParcel,
    BulkParcelAction,
    BulkParcelActionRequest,
    BulkSlipActionRequest,
    ChangeParcelStatusRequest,
    CreateDeliverySlipRequest,
    CreateParcelRequest,
    CreateParcelStatusRequest,
    CreateShippingSlipRequest,
    CreateZoneRequest,
    DeliveryAttemptRequest,
    DeliverySlip,
    DeliverySlipFilters,
    DeliverySlipStatistics,
    OptionStats,
    Parcel,
    ParcelFilters,
    ParcelStatistics,
    ParcelStatus,
    ParcelStatusFilters,
    ParcelStatusHistory,
    ParcelTrackingInfo,
    ParcelValidation,
    ProcessScanResult,
    ReceiveSlipRequest,
    RemoveParcelsFromSlipRequest,
    ScanParcelResult,
    ScanResult,
    ShippingCost,
    ShippingSlip,
    ShippingSlipFilters,
    ShippingSlipStats,
    UpdateDeliverySlipRequest,
    UpdateParcelRequest,
    UpdateParcelStatusRequest,
    UpdateShippingSlipRequest,
    UpdateZoneRequest,
    Zone,
    ZoneCity,
    ZoneFilters,
    ZoneStatistics,
)


class ParcelsApiClient(ResourceClient):
    service = "parcels"

    async def create(self, request: CreateParcelRequest) -> Parcel:
        return await self._post("/api/parcels", request, Parcel)

    async def list(self, filters: ParcelFilters | None = None) -> Page[Parcel]:
        return await self._page("/api/parcels", Parcel, filters)

    async def get(self, parcel_id: str) -> Parcel:
        return await self._get(f"/api/parcels/{parcel_id}", Parcel)

    async def update(self, parcel_id: str, request: UpdateParcelRequest) -> Parcel:
        return await self._patch(f"/api/parcels/{parcel_id}", request, Parcel)

    async def delete(self, parcel_id: str) -> None:
        await self._delete(f"/api/parcels/{parcel_id}")

    async def change_status(self, parcel_id: str, request: ChangeParcelStatusRequest) -> Parcel:
        return await self._patch(f"/api/parcels/{parcel_id}/status", request, Parcel)

    async def update_payment_status(self, parcel_id: str, payment_status: str, comment: str | None = None) -> Parcel:
        return await self._patch(
            f"/api/parcels/{parcel_id}/payment-status",
            {"paymentStatus": payment_status, "comment": comment},
            Parcel,
        )

    async def record_delivery_attempt(self, parcel_id: str, request: DeliveryAttemptRequest) -> Parcel:
        return await self._post(f"/api/parcels/{parcel_id}/delivery-attempt", request, Parcel)

    async def my_parcels(self, filters: ParcelFilters | None = None) -> Page[Parcel]:
        return await self._page("/api/parcels/my-parcels", Parcel, filters)

    async def pickup_ready(self, filters: ParcelFilters | None = None) -> Page[Parcel]:
        return await self._page("/api/parcels/pickup-ready", Parcel, filters)

    async def by_status(self, status_code: str, filters: ParcelFilters | None = None) -> Page[Parcel]:
        return await self._page(f"/api/parcels/by-status/{status_code}", Parcel, filters)

    async def search_by_phone(self, phone: str, filters: ParcelFilters | None = None) -> Page[Parcel]:
        return await self._page(f"/api/parcels/search/{phone}", Parcel, filters)

    async def history(self, parcel_id: str) -> list[ParcelStatusHistory]:
        return await self._list(f"/api/parcels/{parcel_id}/history", ParcelStatusHistory)

    async def tracking(self, parcel_id: str) -> ParcelTrackingInfo:
        return await self._get(f"/api/parcels/{parcel_id}/tracking", ParcelTrackingInfo)

    async def bulk_action(self, request: BulkParcelActionRequest) -> BulkActionResult:
        return await self._post("/api/parcels/bulk-action", request, BulkActionResult)

    async def bulk_change_status(
        self, parcel_ids: list[str], status_code: str, comment: str | None = None
    ) -> BulkActionResult:
        request = BulkParcelActionRequest(
            parcel_ids=parcel_ids,
            action=BulkParcelAction.CHANGE_STATUS.value,
            status_code=status_code,
            comment=comment,
        )
        return await self.bulk_action(request)

    async def bulk_delete(self, parcel_ids: list[str]) -> BulkActionResult:
        request = BulkParcelActionRequest(parcel_ids=parcel_ids, action=BulkParcelAction.DELETE.value)
        return await self.bulk_action(request)

    async def statistics(self) -> ParcelStatistics:
        return await self._get("/api/parcels/statistics", ParcelStatistics)

    async def duplicate(self, parcel_id: str, overrides: dict[str, Any] | None = None) -> Parcel:
        return await self._post(f"/api/parcels/{parcel_id}/duplicate", overrides or {}, Parcel)

    async def shipping_cost(self, pickup_city_id: str, destination_city_id: str) -> ShippingCost:
        # La tarifa vive en el servicio de configuración.
        data = await self._client.get(
            "/api/tariffs/calculate",
            params={"pickupCityId": pickup_city_id, "destinationCityId": destination_city_id},
            service="settings",
        )
        return parse_as(ShippingCost, data)

    async def validate(self, request: CreateParcelRequest) -> ParcelValidation:
        return await self._post("/api/parcels/validate", request, ParcelValidation)

    async def export(self, filters: ParcelFilters | None = None) -> ExportResult:
        return await self._post("/api/parcels/export", {"filters": filters.to_params() if filters else None}, ExportResult)

    async def export_labels(self, parcel_ids: list[str]) -> ExportResult:
        return await self._post("/api/parcels/export-labels", {"parcelIds": parcel_ids}, ExportResult)

    async def scan(self, code: str) -> ScanResult:
        return await self._post("/api/parcels/scan", {"code": code}, ScanResult)

    async def process_scan(
        self, codes: list[str], operation: str, metadata: dict[str, Any] | None = None
    ) -> ProcessScanResult:
        return await self._post(
            "/api/parcels/process-scan",
            {"codes": codes, "operation": operation, "metadata": metadata},
            ProcessScanResult,
        )


class ParcelStatusesApiClient(ResourceClient):
    service = "parcels"

    async def list(self, filters: ParcelStatusFilters | None = None) -> Page[ParcelStatus]:
        return await self._page("/api/parcel-statuses", ParcelStatus, filters)

    async def get(self, status_id: str) -> ParcelStatus:
        return await self._get(f"/api/parcel-statuses/{status_id}", ParcelStatus)

    async def create(self, request: CreateParcelStatusRequest) -> ParcelStatus:
        return await self._post("/api/parcel-statuses", request, ParcelStatus)

    async def update(self, status_id: str, request: UpdateParcelStatusRequest) -> ParcelStatus:
        return await self._patch(f"/api/parcel-statuses/{status_id}", request, ParcelStatus)

    async def delete(self, status_id: str) -> None:
        await self._delete(f"/api/parcel-statuses/{status_id}")

    async def toggle(self, status_id: str) -> ParcelStatus:
        return await self._patch(f"/api/parcel-statuses/{status_id}/toggle-status", model=ParcelStatus)

    async def active(self) -> list[ParcelStatus]:
        page = await self._page("/api/parcel-statuses", ParcelStatus, {"status": True})
        return page.items

    async def stats(self) -> OptionStats:
        return await self._get("/api/parcel-statuses/stats", OptionStats)

    async def bulk_delete(self, ids: list[str]) -> BulkActionResult:
        return await self._post("/api/parcel-statuses/bulk-delete", {"ids": ids}, BulkActionResult)

    async def bulk_toggle(self, ids: list[str]) -> BulkActionResult:
        return await self._post("/api/parcel-statuses/bulk-toggle", {"ids": ids}, BulkActionResult)

    async def export(self, filters: ParcelStatusFilters | None = None) -> ExportResult:
        payload = {"filters": filters.to_params() if filters else None}
        return await self._post("/api/parcel-statuses/export", payload, ExportResult)

    async def bulk_import(self, statuses: list[CreateParcelStatusRequest]) -> ImportResult:
        data = await self._client.post(
            "/api/parcel-statuses/bulk-import",
            [s.to_payload() for s in statuses],
            service=self.service,
        )
        return parse_as(ImportResult, data)


class ShippingSlipsApiClient(ResourceClient):
    service = "parcels"

    async def create(self, request: CreateShippingSlipRequest) -> ShippingSlip:
        return await self._post("/api/shipping-slips", request, ShippingSlip)

    async def list(self, filters: ShippingSlipFilters | None = None) -> Page[ShippingSlip]:
        return await self._page("/api/shipping-slips", ShippingSlip, filters)

    async def get(self, slip_id: str) -> ShippingSlip:
        return await self._get(f"/api/shipping-slips/{slip_id}", ShippingSlip)

    async def update(self, slip_id: str, request: UpdateShippingSlipRequest) -> ShippingSlip:
        return await self._patch(f"/api/shipping-slips/{slip_id}", request, ShippingSlip)

    async def delete(self, slip_id: str) -> None:
        await self._delete(f"/api/shipping-slips/{slip_id}")

    async def add_parcels(self, slip_id: str, request: AddParcelsToSlipRequest) -> ShippingSlip:
        return await self._post(f"/api/shipping-slips/{slip_id}/add-parcels", request, ShippingSlip)

    async def remove_parcels(self, slip_id: str, request: RemoveParcelsFromSlipRequest) -> ShippingSlip:
        return await self._post(f"/api/shipping-slips/{slip_id}/remove-parcels", request, ShippingSlip)

    async def available_parcels(
        self, destination_zone_id: str | None = None, search: str | None = None
    ) -> list[AvailableParcel]:
        return await self._list(
            "/api/shipping-slips/available-parcels",
            AvailableParcel,
            params={"destinationZoneId": destination_zone_id, "search": search},
        )

    async def scan(self, slip_id: str, parcel_code: str) -> ScanParcelResult:
        return await self._post(f"/api/shipping-slips/{slip_id}/scan-parcel", {"parcelCode": parcel_code}, ScanParcelResult)

    async def scan_bulk(self, slip_id: str, parcel_codes: list[str]) -> Any:
        return await self._post(f"/api/shipping-slips/{slip_id}/scan-bulk", {"parcelCodes": parcel_codes})

    async def ship(self, slip_id: str) -> ShippingSlip:
        return await self._post(f"/api/shipping-slips/{slip_id}/ship", model=ShippingSlip)

    async def receive(self, slip_id: str) -> ShippingSlip:
        return await self._post(f"/api/shipping-slips/{slip_id}/receive", model=ShippingSlip)

    async def cancel(self, slip_id: str) -> ShippingSlip:
        return await self._post(f"/api/shipping-slips/{slip_id}/cancel", model=ShippingSlip)

    async def stats(self) -> ShippingSlipStats:
        return await self._get("/api/shipping-slips/stats", ShippingSlipStats)

    async def pdf(self, slip_id: str) -> bytes:
        return await self._bytes(f"/api/shipping-slips/{slip_id}/pdf")


class DeliverySlipsApiClient(ResourceClient):
    service = "parcels"

    async def create(self, request: CreateDeliverySlipRequest) -> DeliverySlip:
        return await self._post("/api/delivery-slips", request, DeliverySlip)

    async def list(self, filters: DeliverySlipFilters | None = None) -> Page[DeliverySlip]:
        return await self._page("/api/delivery-slips", DeliverySlip, filters)

    async def get(self, slip_id: str) -> DeliverySlip:
        return await self._get(f"/api/delivery-slips/{slip_id}", DeliverySlip)

    async def update(self, slip_id: str, request: UpdateDeliverySlipRequest) -> DeliverySlip:
        return await self._patch(f"/api/delivery-slips/{slip_id}", request, DeliverySlip)

    async def delete(self, slip_id: str) -> None:
        await self._delete(f"/api/delivery-slips/{slip_id}")

    async def add_parcels(self, slip_id: str, request: AddParcelsToSlipRequest) -> DeliverySlip:
        return await self._post(f"/api/delivery-slips/{slip_id}/add-parcels", request, DeliverySlip)

    async def remove_parcels(self, slip_id: str, request: RemoveParcelsFromSlipRequest) -> DeliverySlip:
        return await self._post(f"/api/delivery-slips/{slip_id}/remove-parcels", request, DeliverySlip)

    async def available_parcels(self, city_id: str | None = None) -> list[AvailableParcel]:
        return await self._list("/api/delivery-slips/available-parcels", AvailableParcel, params={"cityId": city_id})

    async def receive(self, slip_id: str, request: ReceiveSlipRequest | None = None) -> DeliverySlip:
        return await self._post(f"/api/delivery-slips/{slip_id}/receive", request or ReceiveSlipRequest(), DeliverySlip)

    async def scan(self, slip_id: str, parcel_code: str) -> ScanParcelResult:
        return await self._post(f"/api/delivery-slips/{slip_id}/scan/{parcel_code}", model=ScanParcelResult)

    async def bulk_action(self, request: BulkSlipActionRequest) -> BulkActionResult:
        return await self._post("/api/delivery-slips/bulk-action", request, BulkActionResult)

    async def stats(self) -> DeliverySlipStatistics:
        return await self._get("/api/delivery-slips/statistics", DeliverySlipStatistics)

    async def export(self, filters: DeliverySlipFilters | None = None) -> bytes:
        return await self._bytes(
            "/api/delivery-slips/export",
            method="POST",
            body=filters.to_params() if filters else {},
        )

    async def pdf(self, slip_id: str) -> bytes:
        return await self._bytes(f"/api/delivery-slips/{slip_id}/pdf")

    async def labels(self, slip_id: str) -> bytes:
        return await self._bytes(f"/api/delivery-slips/{slip_id}/labels")

    async def barcode(self, slip_id: str) -> Any:
        return await self._get(f"/api/delivery-slips/{slip_id}/barcode")


class ZonesApiClient(ResourceClient):
    service = "parcels"

    async def create(self, request: CreateZoneRequest) -> Zone:
        return await self._post("/api/zones", request, Zone)

    async def list(self, filters: ZoneFilters | None = None) -> Page[Zone]:
        return await self._page("/api/zones", Zone, filters)

    async def active(self) -> list[Zone]:
        return await self._list("/api/zones/active", Zone)

    async def get(self, zone_id: str) -> Zone:
        return await self._get(f"/api/zones/{zone_id}", Zone)

    async def update(self, zone_id: str, request: UpdateZoneRequest) -> Zone:
        return await self._patch(f"/api/zones/{zone_id}", request, Zone)

    async def delete(self, zone_id: str) -> None:
        await self._delete(f"/api/zones/{zone_id}")

    async def toggle(self, zone_id: str) -> Zone:
        return await self._patch(f"/api/zones/{zone_id}/toggle-status", model=Zone)

    async def cities(self, zone_id: str) -> list[ZoneCity]:
        return await self._list(f"/api/zones/{zone_id}/cities", ZoneCity)

    async def add_cities(self, zone_id: str, city_ids: list[str]) -> Zone:
        return await self._patch(f"/api/zones/{zone_id}/cities/add", {"cityIds": city_ids}, Zone)

    async def remove_cities(self, zone_id: str, city_ids: list[str]) -> Zone:
        return await self._patch(f"/api/zones/{zone_id}/cities/remove", {"cityIds": city_ids}, Zone)

    async def bulk_delete(self, zone_ids: list[str]) -> BulkOperationResult:
        return await self._post("/api/zones/bulk/delete", {"zoneIds": zone_ids}, BulkOperationResult)

    async def bulk_toggle(self, zone_ids: list[str]) -> BulkOperationResult:
        return await self._patch("/api/zones/bulk/toggle-status", {"zoneIds": zone_ids}, BulkOperationResult)

    async def statistics(self) -> ZoneStatistics:
        return await self._get("/api/zones/statistics", ZoneStatistics)

    async def export(self, filters: ZoneFilters | None = None) -> ExportResult:
        filters = filters or ZoneFilters()
        return await self._post(
            "/api/zones/export",
            {
                "page": filters.page or 1,
                "limit": filters.limit or 1000,
                "search": filters.search or "",
                "status": filters.status,
            },
            ExportResult,
        )
