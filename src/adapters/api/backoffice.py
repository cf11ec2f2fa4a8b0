"""Fachada del back-office: un `ApiClient`, la sesión y todos los recursos.

Uso típico:

    async with Backoffice.from_settings(settings) as bo:
        await bo.session.login(email, password)
        page = await bo.parcels.list()
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

import httpx

from adapters.api import (
    AuthApiClient,
    CitiesApiClient,
    DeliverySlipsApiClient,
    EmailSettingsApiClient,
    ExpeditionsApiClient,
    FacturesApiClient,
    GeneralSettingsApiClient,
    HealthApiClient,
    OptionsApiClient,
    ParcelsApiClient,
    ParcelStatusesApiClient,
    PickupCitiesApiClient,
    ProductsApiClient,
    RolesApiClient,
    ShippingSlipsApiClient,
    SmsSettingsApiClient,
    StocksApiClient,
    TariffsApiClient,
    TenantsApiClient,
    UsersApiClient,
    WarehousesApiClient,
    ZonesApiClient,
)
from adapters.http_client import ApiClient
from adapters.token_store import FileTokenStore
from core.config import AppSettings
from core.interfaces.token_store import TokenStore
from core.services.session import SessionManager


class Backoffice:
    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self.session = SessionManager(client)

        self.auth = AuthApiClient(client)
        self.health = HealthApiClient(client)
        self.users = UsersApiClient(client)
        self.roles = RolesApiClient(client)
        self.tenants = TenantsApiClient(client)

        self.parcels = ParcelsApiClient(client)
        self.parcel_statuses = ParcelStatusesApiClient(client)
        self.shipping_slips = ShippingSlipsApiClient(client)
        self.delivery_slips = DeliverySlipsApiClient(client)
        self.zones = ZonesApiClient(client)

        self.cities = CitiesApiClient(client)
        self.pickup_cities = PickupCitiesApiClient(client)
        self.tariffs = TariffsApiClient(client)
        self.sms = SmsSettingsApiClient(client)
        self.email = EmailSettingsApiClient(client)
        self.options = OptionsApiClient(client)
        self.general_settings = GeneralSettingsApiClient(client)

        self.factures = FacturesApiClient(client)

        self.products = ProductsApiClient(client)
        self.stocks = StocksApiClient(client)
        self.warehouses = WarehousesApiClient(client)
        self.expeditions = ExpeditionsApiClient(client)

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        *,
        token_store: TokenStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        on_session_expired: Callable[[], Awaitable[None] | None] | None = None,
    ) -> "Backoffice":
        """Construye la fachada; por defecto la sesión vive en `settings.session_file`."""

        settings = settings or AppSettings()
        store = token_store if token_store is not None else FileTokenStore(settings.session_file)
        client = ApiClient(
            settings,
            token_store=store,
            transport=transport,
            on_session_expired=on_session_expired,
        )
        return cls(client)

    async def __aenter__(self) -> "Backoffice":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()
