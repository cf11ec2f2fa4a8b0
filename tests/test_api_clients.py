from __future__ import annotations

import pytest

from adapters.api import (
    FacturesApiClient,
    HealthApiClient,
    OptionsApiClient,
    ParcelsApiClient,
    PickupCitiesApiClient,
    WarehousesApiClient,
    ZonesApiClient,
)
from adapters.api.backoffice import Backoffice
from adapters.api.base import ResourceClient
from adapters.api.settings import GeneralSettingsApiClient
from core.domain.parcels import ParcelFilters
from core.domain.payments import FactureStatus
from core.errors import UnexpectedResponseError

from conftest import make_session, ok, request_json

PARCEL = {
    "id": "p1",
    "code": "COL-001",
    "recipientName": "Sara",
    "recipientPhone": "0600000000",
    "price": 35,
}


async def test_parcels_list_sends_camel_case_filters(client, backend):
    backend.add(
        "GET",
        "/api/parcels",
        ok([PARCEL], pagination={"page": 2, "limit": 10, "total": 11, "totalPages": 2, "hasNext": False, "hasPrev": True}),
    )

    page = await ParcelsApiClient(client).list(ParcelFilters(status_code="NEW", search="sara", page=2, limit=10))

    params = dict(backend.requests[0].url.params)
    assert params == {"statusCode": "NEW", "search": "sara", "page": "2", "limit": "10"}
    assert page.items[0].recipient_name == "Sara"
    assert page.pagination.has_prev


async def test_zone_cities_are_patched(client, backend):
    backend.add("PATCH", "/api/zones/z1/cities/add", ok({"id": "z1", "name": "North"}))

    zone = await ZonesApiClient(client).add_cities("z1", ["c1", "c2"])

    assert zone.name == "North"
    assert request_json(backend.requests[0]) == {"cityIds": ["c1", "c2"]}


async def test_facture_change_status_accepts_enum(client, backend):
    backend.add("PATCH", "/api/payments/f1/status", ok({"id": "f1", "reference": "FAC-1", "status": "PAID"}))

    facture = await FacturesApiClient(client).change_status("f1", FactureStatus.PAID)

    assert facture.status == "PAID"
    assert request_json(backend.requests[0]) == {"status": "PAID"}


async def test_option_resources_use_kind_paths(client, backend):
    backend.add("GET", "/api/options/parcel-statuses/active", ok([{"id": "s1", "code": "NEW", "name": "New"}]))

    statuses = await OptionsApiClient(client).parcel_statuses.active()

    assert [s.code for s in statuses] == ["NEW"]


async def test_upload_logo_is_multipart(client, backend, tmp_path):
    logo = tmp_path / "logo.png"
    logo.write_bytes(b"\x89PNG")
    backend.add("POST", "/api/general-settings/upload-logo", ok({"logoUrl": "https://cdn.test/logo.png"}))

    result = await GeneralSettingsApiClient(client).upload_logo(logo)

    sent = backend.requests[0]
    assert sent.headers["Content-Type"].startswith("multipart/form-data")
    assert b"logo.png" in sent.content
    assert result.url == "https://cdn.test/logo.png"
    assert result.filename == "logo.png"


async def test_warehouse_adjust_stock_defaults_reason(client, backend):
    backend.add("PATCH", "/api/warehouses/w1/stocks/s1/adjust", ok({"id": "s1", "warehouseId": "w1", "quantity": 7}))

    stock = await WarehousesApiClient(client).adjust_stock("w1", "s1", 7)

    assert stock.quantity == 7
    assert request_json(backend.requests[0]) == {"quantity": 7, "reason": "ADJUSTMENT"}


async def test_health_probe_is_anonymous(client, store, backend):
    store.save(make_session())
    backend.add("GET", "/api/health/ready", ok({"status": "ready"}))

    assert await HealthApiClient(client).ready() == {"status": "ready"}
    assert "Authorization" not in backend.requests[0].headers


async def test_pickup_cities_bulk_delete_sends_body_with_delete(client, backend):
    backend.add("DELETE", "/api/pickup-cities/bulk-delete", ok({"successful": 2}))

    result = await PickupCitiesApiClient(client).bulk_delete(["a", "b"])

    assert result.successful == 2
    assert request_json(backend.requests[0]) == {"ids": ["a", "b"]}


async def test_list_rejects_unexpected_object(client, backend):
    class Probe(ResourceClient):
        service = "parcels"

    backend.add("GET", "/api/zones/active", ok({"count": 3}))

    with pytest.raises(UnexpectedResponseError):
        await Probe(client)._list("/api/zones/active", dict)


async def test_invalid_payload_is_unexpected_response(client, backend):
    backend.add("GET", "/api/parcels/p1", ok({"id": "p1"}))

    with pytest.raises(UnexpectedResponseError):
        await ParcelsApiClient(client).get("p1")


async def test_backoffice_wires_clients_to_one_transport(settings, store, backend):
    backend.add("GET", "/api/parcels/p1", ok(PARCEL))

    async with Backoffice.from_settings(settings, token_store=store, transport=backend.transport) as bo:
        parcel = await bo.parcels.get("p1")
        assert bo.session.store is store
        assert bo.options.parcel_statuses.kind == "parcel-statuses"
        assert bo.factures.service == "payments"
        assert bo.expeditions.service == "expeditions"

    assert parcel.code == "COL-001"
