from __future__ import annotations

from core.domain.payments import BonLivreur, BonZone
from core.services.bons import filter_bons, success_rate, summarize_livreurs, summarize_zones, summary_statistics


def _bon(ref: str, livreur: str, zone: str, delivered: int, returned: int, refused: int, amount: float, **extra):
    return BonLivreur(
        id=ref,
        reference=ref,
        livreur=livreur,
        livreur_id=extra.pop("livreur_id", livreur.lower()),
        zone=zone,
        delivered_count=delivered,
        returned_count=returned,
        refused_count=refused,
        total_amount=amount,
        **extra,
    )


BONS = [
    _bon("BL-1", "Karim", "Casablanca", 8, 1, 1, 400.0),
    _bon("BL-2", "Karim", "Casablanca", 2, 0, 0, 100.5, status="PAID"),
    _bon("BL-3", "Yasmine", "Rabat", 3, 2, 0, 150.0),
    _bon("BL-4", "Omar", "Casablanca", 0, 0, 0, 0.0),
]


def test_success_rate_is_a_percentage():
    assert success_rate(8, 1, 1) == 80.0
    assert success_rate(1, 2, 0) == 33.3
    assert success_rate(0, 0, 0) == 0.0


def test_summarize_livreurs_accumulates_per_courier():
    rows = summarize_livreurs(BONS)

    assert [r.name for r in rows] == ["Karim", "Yasmine", "Omar"]
    karim = rows[0]
    assert (karim.orders_delivered, karim.orders_returned, karim.orders_refused) == (10, 1, 1)
    assert karim.total_amount == 500.5


def test_summarize_zones_counts_distinct_couriers():
    rows = {r.zone: r for r in summarize_zones(BONS)}

    assert rows["Casablanca"].livreur_count == 2
    assert rows["Casablanca"].orders_delivered == 10
    assert rows["Casablanca"].success_rate == round(10 / 12 * 100, 1)
    assert rows["Rabat"].success_rate == 60.0


def test_summary_statistics_for_both_views():
    by_livreur = summary_statistics(summarize_livreurs(BONS))
    by_zone = summary_statistics(summarize_zones(BONS))

    assert by_livreur.total_livreurs == 3
    assert by_zone.total_livreurs == 3
    assert by_livreur.total_delivered == by_zone.total_delivered == 13
    assert by_livreur.total_amount == 650.5


def test_filter_bons():
    zone_bon = BonZone(id="BZ-1", reference="BZ-1", zone="Rabat", status="VALIDATED")
    pool = [*BONS, zone_bon]

    assert [b.reference for b in filter_bons(pool, "paid")] == ["BL-2"]
    assert [b.reference for b in filter_bons(pool, zone="rabat")] == ["BL-3", "BZ-1"]
    assert [b.reference for b in filter_bons(pool, search="yas")] == ["BL-3"]
    assert filter_bons(pool) == pool


def test_summarize_livreurs_keeps_zone_id():
    rows = summarize_livreurs([_bon("BL-9", "Ines", "Tanger", 1, 0, 0, 20.0, zone_id="zone-tng")])

    assert rows[0].zone_id == "zone-tng"
