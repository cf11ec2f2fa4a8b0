"""Agregados de bons livreurs y bons zones.

Por qué aquí:
- El backend no expone resúmenes de bons; las pantallas de resumen se
  calculan en cliente a partir de los `BonLivreur`.

Reglas:
- Un livreur se identifica por `livreur_id` (o su nombre si falta).
- La tasa de éxito es el porcentaje de entregados sobre
  entregados + devueltos + rechazados, redondeado a un decimal; 0 sin pedidos.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from core.domain.payments import BonLivreur, BonZone, LivreurSummary, SummaryStatistics, ZoneSummary


def success_rate(delivered: int, returned: int, refused: int) -> float:
    total = delivered + returned + refused
    if total == 0:
        return 0.0
    return round(delivered / total * 100, 1)


def summarize_livreurs(bons: Iterable[BonLivreur]) -> list[LivreurSummary]:
    """Un `LivreurSummary` por livreur, en orden de primera aparición."""

    summaries: dict[str, LivreurSummary] = {}
    for bon in bons:
        key = bon.livreur_id or bon.livreur
        current = summaries.get(key)
        if current is None:
            current = LivreurSummary(
                id=key,
                name=bon.livreur,
                zone=bon.zone,
                zone_id=bon.zone_id,
            )
        summaries[key] = current.model_copy(
            update={
                "orders_delivered": current.orders_delivered + bon.delivered_count,
                "orders_returned": current.orders_returned + bon.returned_count,
                "orders_refused": current.orders_refused + bon.refused_count,
                "total_amount": round(current.total_amount + bon.total_amount, 2),
            }
        )
    return list(summaries.values())


def summarize_zones(bons: Iterable[BonLivreur]) -> list[ZoneSummary]:
    totals: dict[str, dict[str, float]] = {}
    livreurs: dict[str, set[str]] = {}
    for bon in bons:
        row = totals.setdefault(bon.zone, {"delivered": 0, "returned": 0, "refused": 0, "amount": 0.0})
        row["delivered"] += bon.delivered_count
        row["returned"] += bon.returned_count
        row["refused"] += bon.refused_count
        row["amount"] += bon.total_amount
        livreurs.setdefault(bon.zone, set()).add(bon.livreur_id or bon.livreur)

    summaries: list[ZoneSummary] = []
    for zone, row in totals.items():
        delivered, returned, refused = int(row["delivered"]), int(row["returned"]), int(row["refused"])
        summaries.append(
            ZoneSummary(
                id=zone,
                zone=zone,
                orders_delivered=delivered,
                orders_returned=returned,
                orders_refused=refused,
                livreur_count=len(livreurs[zone]),
                total_amount=round(row["amount"], 2),
                success_rate=success_rate(delivered, returned, refused),
            )
        )
    return summaries


def summary_statistics(rows: Sequence[LivreurSummary] | Sequence[ZoneSummary]) -> SummaryStatistics:
    """Totales de la cabecera de las pantallas de resumen."""

    livreur_total = 0
    for row in rows:
        livreur_total += row.livreur_count if isinstance(row, ZoneSummary) else 1
    return SummaryStatistics(
        total_delivered=sum(r.orders_delivered for r in rows),
        total_returned=sum(r.orders_returned for r in rows),
        total_refused=sum(r.orders_refused for r in rows),
        total_livreurs=livreur_total,
        total_amount=round(sum(r.total_amount for r in rows), 2),
    )


def _matches(bon: BonLivreur | BonZone, status: str | None, zone: str | None, search: str | None) -> bool:
    if status and bon.status.casefold() != status.casefold():
        return False
    if zone and bon.zone.casefold() != zone.casefold():
        return False
    if search:
        needle = search.casefold()
        haystack = [bon.reference, bon.zone]
        if isinstance(bon, BonLivreur):
            haystack.append(bon.livreur)
        if not any(needle in value.casefold() for value in haystack):
            return False
    return True


def filter_bons(
    bons: Iterable[BonLivreur | BonZone],
    status: str | None = None,
    zone: str | None = None,
    search: str | None = None,
) -> list[BonLivreur | BonZone]:
    return [bon for bon in bons if _matches(bon, status, zone, search)]
