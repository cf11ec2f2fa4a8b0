"""Colis, bordereaux (expédition / livraison), zones y reclamaciones.

Los estados de colis son configurables por tenant (`ParcelStatus`), así que
`Parcel.parcel_status_code` es un `str` libre; los diccionarios de labels y
colores cubren solo los códigos por defecto.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from core.domain.common import ApiModel, ListFilters, RelatedRef


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    INVOICED = "INVOICED"


class ShippingSlipStatus(str, Enum):
    PENDING = "PENDING"
    SHIPPED = "SHIPPED"
    RECEIVED = "RECEIVED"
    CANCELLED = "CANCELLED"


class DeliverySlipStatus(str, Enum):
    PENDING = "PENDING"
    RECEIVED = "RECEIVED"
    CANCELLED = "CANCELLED"


class BulkParcelAction(str, Enum):
    CHANGE_STATUS = "CHANGE_STATUS"
    DELETE = "DELETE"


PARCEL_STATUS_LABELS: dict[str, str] = {
    "NEW_PACKAGE": "Nouveau Colis",
    "RECEIVED": "Reçu",
    "COLLECTED": "Ramassé",
    "DISPATCHED": "Expédié",
    "PUT_IN_DISTRIBUTION": "Mis en distribution",
    "OUT_FOR_DELIVERY": "En cours de livraison",
    "DELIVERED": "Livré",
    "RETURNED": "Retourné",
    "REFUSED": "Refusé",
    "CANCELLED": "Annulé",
}

PARCEL_STATUS_COLORS: dict[str, str] = {
    "NEW_PACKAGE": "#3B82F6",
    "RECEIVED": "#10B981",
    "COLLECTED": "#8B5CF6",
    "DISPATCHED": "#F59E0B",
    "PUT_IN_DISTRIBUTION": "#06B6D4",
    "OUT_FOR_DELIVERY": "#F97316",
    "DELIVERED": "#22C55E",
    "RETURNED": "#EF4444",
    "REFUSED": "#DC2626",
    "CANCELLED": "#6B7280",
}

PAYMENT_STATUS_LABELS: dict[str, str] = {
    PaymentStatus.PENDING.value: "En attente",
    PaymentStatus.PAID.value: "Payé",
    PaymentStatus.INVOICED.value: "Facturé",
}


def parcel_status_label(code: str | None) -> str:
    if not code:
        return "-"
    return PARCEL_STATUS_LABELS.get(code, code.replace("_", " ").title())


# --------------------------------------------------------------------------- #
# Parcels
# --------------------------------------------------------------------------- #


class ParcelStatusHistory(ApiModel):
    id: str | None = None
    parcel_id: str | None = None
    parcel_status_id: str | None = None
    status_code: str
    status_name: str | None = None
    comment: str | None = None
    changed_by: str | None = None
    changed_at: datetime | None = None
    parcel_status: RelatedRef | None = None


class Parcel(ApiModel):
    id: str
    tenant_id: str | None = None
    user_id: str | None = None
    code: str
    recipient_name: str
    recipient_phone: str
    recipient_address: str | None = None
    alternative_phone: str | None = None
    pickup_city_id: str | None = None
    destination_city_id: str | None = None
    tracking_code: str | None = None
    product_name: str | None = None
    quantity: int | None = None
    price: float = 0.0
    comment: str | None = None
    cannot_open: bool = False
    can_replace: bool = False
    is_stock: bool = False
    parcel_status_id: str | None = None
    parcel_status_code: str | None = None
    payment_status: str = PaymentStatus.PENDING.value
    delivery_price: float = 0.0
    return_price: float = 0.0
    refusal_price: float = 0.0
    delivery_delay: int = 0
    tariff_id: str | None = None
    delivery_attempts: int = 0
    last_attempt_date: datetime | None = None
    delivered_at: datetime | None = None
    delivered_by: str | None = None
    returned_at: datetime | None = None
    return_reason: str | None = None
    refused_at: datetime | None = None
    refusal_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None

    pickup_city: RelatedRef | None = None
    destination_city: RelatedRef | None = None
    parcel_status: RelatedRef | None = None
    status_history: list[ParcelStatusHistory] = Field(default_factory=list)

    @property
    def status_label(self) -> str:
        if self.parcel_status and self.parcel_status.name:
            return self.parcel_status.name
        return parcel_status_label(self.parcel_status_code)


class CreateParcelRequest(ApiModel):
    recipient_name: str = Field(..., min_length=1)
    recipient_phone: str = Field(..., min_length=6)
    recipient_address: str = Field(..., min_length=1)
    pickup_city_id: str
    destination_city_id: str
    price: float = Field(..., ge=0)
    alternative_phone: str | None = None
    tracking_code: str | None = None
    product_name: str | None = None
    quantity: int | None = Field(default=None, ge=1)
    comment: str | None = None
    cannot_open: bool | None = None
    can_replace: bool | None = None
    is_stock: bool | None = None


class UpdateParcelRequest(ApiModel):
    recipient_name: str | None = None
    recipient_phone: str | None = None
    recipient_address: str | None = None
    alternative_phone: str | None = None
    destination_city_id: str | None = None
    tracking_code: str | None = None
    product_name: str | None = None
    quantity: int | None = Field(default=None, ge=1)
    price: float | None = Field(default=None, ge=0)
    comment: str | None = None
    cannot_open: bool | None = None
    can_replace: bool | None = None
    is_stock: bool | None = None


class ParcelFilters(ListFilters):
    status_code: str | None = None
    payment_status: str | None = None
    pickup_city_id: str | None = None
    destination_city_id: str | None = None
    customer_phone: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    user_id: str | None = None


class ChangeParcelStatusRequest(ApiModel):
    status_code: str = Field(..., min_length=1)
    comment: str | None = None


class DeliveryAttemptRequest(ApiModel):
    success: bool
    reason: str | None = None
    next_attempt: str | None = None


class BulkParcelActionRequest(ApiModel):
    parcel_ids: list[str] = Field(..., min_length=1)
    action: str
    status_code: str | None = None
    comment: str | None = None


class CityCount(ApiModel):
    city_name: str
    parcel_count: int = 0
    percentage: float = 0.0


class MonthlyTrend(ApiModel):
    month: str
    parcels: int = 0
    revenue: float = 0.0


class ParcelStatistics(ApiModel):
    total_parcels: int = 0
    parcels_by_status: dict[str, int] = Field(default_factory=dict)
    parcels_by_payment_status: dict[str, int] = Field(default_factory=dict)
    total_revenue: float = 0.0
    average_parcel_value: float = 0.0
    delivery_success_rate: float = 0.0
    average_delivery_time: float = 0.0
    top_destination_cities: list[CityCount] = Field(default_factory=list)
    monthly_trend: list[MonthlyTrend] = Field(default_factory=list)


class TrackingEvent(ApiModel):
    status_code: str
    status_name: str | None = None
    changed_at: datetime | None = None
    comment: str | None = None


class ParcelTrackingInfo(ApiModel):
    code: str
    status: str
    status_name: str | None = None
    status_color: str | None = None
    recipient_name: str | None = None
    destination_city: str | None = None
    delivered_at: datetime | None = None
    delivery_delay: int = 0
    history: list[TrackingEvent] = Field(default_factory=list)


class ShippingCost(ApiModel):
    delivery_price: float = 0.0
    return_price: float = 0.0
    refusal_price: float = 0.0
    delivery_delay: int = 0
    tariff_id: str | None = None


class ParcelValidation(ApiModel):
    is_valid: bool = False
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    estimated_cost: ShippingCost | None = None


class ScanResult(ApiModel):
    parcel: Parcel | None = None
    scan_valid: bool = False
    allowed_actions: list[str] = Field(default_factory=list)


class ProcessScanItem(ApiModel):
    code: str
    success: bool
    error: str | None = None
    parcel: Parcel | None = None


class ProcessScanResult(ApiModel):
    processed: int = 0
    failed: int = 0
    results: list[ProcessScanItem] = Field(default_factory=list)


# --------------------------------------------------------------------------- #
# Parcel statuses (opción configurable por tenant)
# --------------------------------------------------------------------------- #


class ParcelStatus(ApiModel):
    id: str
    tenant_id: str | None = None
    code: str
    name: str
    color: str = "#6B7280"
    is_locked: bool = False
    status: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CreateParcelStatusRequest(ApiModel):
    code: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    color: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$")
    is_locked: bool | None = None
    status: bool | None = None


class UpdateParcelStatusRequest(ApiModel):
    code: str | None = None
    name: str | None = None
    color: str | None = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")
    status: bool | None = None


class ParcelStatusFilters(ListFilters):
    code: str | None = None
    status: bool | None = None
    is_locked: bool | None = None


class OptionStats(ApiModel):
    total: int = 0
    active: int = 0
    inactive: int = 0
    locked: int | None = None


# --------------------------------------------------------------------------- #
# Slips
# --------------------------------------------------------------------------- #


class AvailableParcel(ApiModel):
    id: str
    code: str
    recipient_name: str
    recipient_phone: str | None = None
    price: float = 0.0
    parcel_status_code: str | None = None
    created_at: datetime | None = None
    pickup_city: RelatedRef | None = None
    destination_city: RelatedRef | None = None


class SlipParcel(ApiModel):
    id: str
    code: str
    recipient_name: str | None = None
    recipient_phone: str | None = None
    # RelatedRef en bordereaux d'expédition, nombre plano en los de livraison
    destination_city: RelatedRef | str | None = None
    price: float = 0.0
    parcel_status_code: str | None = None
    status_code: str | None = None
    status_name: str | None = None


class SlipItem(ApiModel):
    parcel_id: str
    shipping_slip_id: str | None = None
    delivery_slip_id: str | None = None
    scanned: bool = False
    scanned_at: datetime | None = None
    scanned_by: str | None = None
    parcel: SlipParcel | None = None


class ShippingSlip(ApiModel):
    id: str
    tenant_id: str | None = None
    reference: str
    destination_zone_id: str | None = None
    status: str = ShippingSlipStatus.PENDING.value
    shipped_at: datetime | None = None
    shipped_by: str | None = None
    received_at: datetime | None = None
    received_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    destination_zone: RelatedRef | None = None
    items: list[SlipItem] = Field(default_factory=list)
    counts: dict[str, float] | None = Field(default=None, alias="_count")


class CreateShippingSlipRequest(ApiModel):
    destination_zone_id: str
    parcel_ids: list[str] | None = None


class UpdateShippingSlipRequest(ApiModel):
    destination_zone_id: str | None = None
    status: ShippingSlipStatus | None = None
    parcel_ids: list[str] | None = None


class ShippingSlipFilters(ListFilters):
    destination_zone_id: str | None = None
    status: str | None = None
    date_from: str | None = None
    date_to: str | None = None


class ShippingSlipStats(ApiModel):
    total: int = 0
    pending: int = 0
    in_transit: int = 0
    completed: int = 0
    cancelled: int = 0
    packages_shipped_this_month: int = 0
    average_packages_per_slip: float = 0.0
    top_destination_zones: list[dict[str, Any]] = Field(default_factory=list)


class SlipSummary(ApiModel):
    total_parcels: int = 0
    scanned_parcels: int = 0
    unscanned_parcels: int = 0
    total_value: float = 0.0


class DeliverySlip(ApiModel):
    id: str
    tenant_id: str | None = None
    user_id: str | None = None
    reference: str
    city_id: str | None = None
    status: str = DeliverySlipStatus.PENDING.value
    received_at: datetime | None = None
    received_by: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    city: RelatedRef | None = None
    creator: RelatedRef | None = None
    items: list[SlipItem] = Field(default_factory=list)
    summary: SlipSummary = Field(default_factory=SlipSummary)


class CreateDeliverySlipRequest(ApiModel):
    city_id: str | None = None
    parcel_ids: list[str] | None = None
    notes: str | None = None
    auto_receive: bool | None = None


class UpdateDeliverySlipRequest(ApiModel):
    city_id: str | None = None
    notes: str | None = None
    status: DeliverySlipStatus | None = None


class DeliverySlipFilters(ListFilters):
    status: str | None = None
    city_id: str | None = None
    user_id: str | None = None
    start_date: str | None = None
    end_date: str | None = None


class AddParcelsToSlipRequest(ApiModel):
    parcel_ids: list[str] = Field(..., min_length=1)
    comment: str | None = None
    mark_as_scanned: bool | None = None


class RemoveParcelsFromSlipRequest(ApiModel):
    parcel_ids: list[str] = Field(..., min_length=1)
    reason: str | None = None


class ReceiveSlipRequest(ApiModel):
    notes: str | None = None
    parcel_ids: list[str] | None = None
    force_receive: bool | None = None


class BulkSlipActionRequest(ApiModel):
    slip_ids: list[str] = Field(..., min_length=1)
    action: str
    comment: str | None = None


class DeliverySlipStatistics(ApiModel):
    total_slips: int = 0
    pending_slips: int = 0
    received_slips: int = 0
    cancelled_slips: int = 0
    total_parcels_in_slips: int = 0
    total_value_in_slips: float = 0.0
    average_parcels_per_slip: float = 0.0
    recent_activity: list[dict[str, Any]] = Field(default_factory=list)
    top_cities: list[dict[str, Any]] = Field(default_factory=list)


class ScanParcelResult(ApiModel):
    success: bool = False
    message: str | None = None
    error: str | None = None
    parcel_details: SlipParcel | None = None


# --------------------------------------------------------------------------- #
# Zones
# --------------------------------------------------------------------------- #


class ZoneCity(ApiModel):
    id: str
    name: str
    ref: str | None = None
    zone: str | None = None
    pickup_city: bool | None = None
    status: bool | None = None


class Zone(ApiModel):
    id: str
    tenant_id: str | None = None
    name: str
    status: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    cities: list[ZoneCity] = Field(default_factory=list)
    counts: dict[str, int] | None = Field(default=None, alias="_count")

    @property
    def city_count(self) -> int:
        if self.counts and "cities" in self.counts:
            return self.counts["cities"]
        return len(self.cities)


class CreateZoneRequest(ApiModel):
    name: str = Field(..., min_length=1)
    city_ids: list[str] = Field(default_factory=list)
    status: bool | None = None


class UpdateZoneRequest(ApiModel):
    name: str | None = None
    city_ids: list[str] | None = None
    status: bool | None = None


class ZoneFilters(ListFilters):
    status: bool | None = None


class ZoneStatistics(ApiModel):
    total: int = 0
    active: int = 0
    inactive: int = 0
    total_cities: int = 0
    average_cities_per_zone: float = 0.0
    zones_with_no_cities: int = 0
    largest_zone: dict[str, Any] | None = None
    smallest_zone: dict[str, Any] | None = None


# --------------------------------------------------------------------------- #
# Claims
# --------------------------------------------------------------------------- #


class ClaimType(str, Enum):
    DAMAGED = "DAMAGED"
    LOST = "LOST"
    DELAYED = "DELAYED"
    WRONG_ADDRESS = "WRONG_ADDRESS"
    CUSTOMER_COMPLAINT = "CUSTOMER_COMPLAINT"
    OTHER = "OTHER"


class ClaimStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"
    ESCALATED = "ESCALATED"


class ClaimPriority(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"


class Claim(ApiModel):
    id: str
    type: str
    description: str
    status: str = ClaimStatus.OPEN.value
    priority: str = ClaimPriority.NORMAL.value
    resolution: str | None = None
    parcel_id: str
    filed_by: str | None = None
    assigned_to: str | None = None
    tenant_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    resolved_at: datetime | None = None
