"""Facturas y bons (documentos de liquidación del flujo de pago a livreurs).

Nota:
- Los bons no tienen endpoint propio en el backend; estos modelos alimentan las
  agregaciones de `core.services.bons`.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from core.domain.common import ApiModel, ListFilters


class FactureStatus(str, Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


FACTURE_STATUS_LABELS: dict[str, str] = {
    FactureStatus.DRAFT.value: "Brouillon",
    FactureStatus.SENT.value: "Envoyée",
    FactureStatus.PAID.value: "Payée",
    FactureStatus.OVERDUE.value: "En retard",
    FactureStatus.CANCELLED.value: "Annulée",
}

FACTURE_STATUS_COLORS: dict[str, str] = {
    FactureStatus.DRAFT.value: "#6B7280",
    FactureStatus.SENT.value: "#3B82F6",
    FactureStatus.PAID.value: "#22C55E",
    FactureStatus.OVERDUE.value: "#EF4444",
    FactureStatus.CANCELLED.value: "#DC2626",
}


class FactureItem(ApiModel):
    id: str | None = None
    description: str = Field(..., min_length=1)
    quantity: float = Field(default=1, gt=0)
    unit_price: float = Field(default=0.0, ge=0)
    total_price: float | None = None
    tax_rate: float = Field(default=0.0, ge=0)
    tax_amount: float | None = None

    def computed_total(self) -> float:
        if self.total_price is not None:
            return self.total_price
        return round(self.quantity * self.unit_price, 2)

    def computed_tax(self) -> float:
        if self.tax_amount is not None:
            return self.tax_amount
        return round(self.computed_total() * self.tax_rate / 100, 2)


class Facture(ApiModel):
    id: str
    reference: str
    client_id: str | None = None
    client_name: str | None = None
    client_code: str | None = None
    client_email: str | None = None
    client_phone: str | None = None
    total_amount: float = 0.0
    tax_amount: float = 0.0
    discount_amount: float = 0.0
    net_amount: float = 0.0
    status: str = FactureStatus.DRAFT.value
    due_date: datetime | None = None
    created_date: datetime | None = None
    payment_date: datetime | None = None
    payment_method: str | None = None
    notes: str | None = None
    items: list[FactureItem] = Field(default_factory=list)
    colis_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def status_label(self) -> str:
        return FACTURE_STATUS_LABELS.get(self.status, self.status)


class CreateFactureRequest(ApiModel):
    client_id: str
    items: list[FactureItem] = Field(..., min_length=1)
    due_date: str
    notes: str | None = None
    discount_amount: float | None = Field(default=None, ge=0)


class UpdateFactureRequest(ApiModel):
    status: FactureStatus | None = None
    due_date: str | None = None
    notes: str | None = None
    items: list[FactureItem] | None = None


class FactureFilters(ListFilters):
    status: str | None = None
    client_id: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    min_amount: float | None = None
    max_amount: float | None = None


class FactureStatistics(ApiModel):
    total_factures: int = 0
    total_amount: float = 0.0
    paid_amount: float = 0.0
    pending_amount: float = 0.0
    overdue_amount: float = 0.0
    factures_by_status: dict[str, int] = Field(default_factory=dict)
    monthly_revenue: list[dict[str, float | str]] = Field(default_factory=list)
    top_clients: list[dict[str, float | str]] = Field(default_factory=list)


# --------------------------------------------------------------------------- #
# Bons
# --------------------------------------------------------------------------- #


class BonStatus(str, Enum):
    PENDING = "PENDING"
    VALIDATED = "VALIDATED"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class BonLivreur(ApiModel):
    """Bon de paiement de un livreur (entregas de una tournée)."""

    id: str
    reference: str
    created_date: datetime | None = None
    status_change_date: datetime | None = None
    zone: str
    livreur: str
    livreur_id: str | None = None
    zone_id: str | None = None
    status: str = BonStatus.PENDING.value
    colis_count: int = Field(default=0, ge=0)
    delivered_count: int = Field(default=0, ge=0)
    returned_count: int = Field(default=0, ge=0)
    refused_count: int = Field(default=0, ge=0)
    total_amount: float = 0.0
    livre_amount: float = 0.0
    retour_amount: float = 0.0
    refuse_amount: float = 0.0


class BonZone(ApiModel):
    id: str
    reference: str
    created_date: datetime | None = None
    status_change_date: datetime | None = None
    zone: str
    status: str = BonStatus.PENDING.value
    colis_count: int = 0
    livreur_count: int = 0
    total: float = 0.0


class LivreurSummary(ApiModel):
    id: str
    name: str
    code: str | None = None
    phone: str | None = None
    zone: str
    zone_id: str | None = None
    orders_delivered: int = 0
    orders_returned: int = 0
    orders_refused: int = 0
    total_amount: float = 0.0


class ZoneSummary(ApiModel):
    id: str
    zone: str
    orders_delivered: int = 0
    orders_returned: int = 0
    orders_refused: int = 0
    livreur_count: int = 0
    total_amount: float = 0.0
    success_rate: float = 0.0


class SummaryStatistics(ApiModel):
    total_delivered: int = 0
    total_returned: int = 0
    total_refused: int = 0
    total_livreurs: int = 0
    total_amount: float = 0.0
