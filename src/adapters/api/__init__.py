"""Clientes por recurso del backend.

Cada clase envuelve un `ApiClient` compartido y expone un método por endpoint.
"""

from adapters.api.identity import (
	AuthApiClient,
	HealthApiClient,
	RolesApiClient,
	TenantsApiClient,
	UsersApiClient,
)
from adapters.api.inventory import (
	ExpeditionsApiClient,
	ProductsApiClient,
	StocksApiClient,
	WarehousesApiClient,
)
from adapters.api.parcels import (
	DeliverySlipsApiClient,
	ParcelsApiClient,
	ParcelStatusesApiClient,
	ShippingSlipsApiClient,
	ZonesApiClient,
)
from adapters.api.payments import FacturesApiClient
from adapters.api.settings import (
	CitiesApiClient,
	EmailSettingsApiClient,
	GeneralSettingsApiClient,
	OptionsApiClient,
	PickupCitiesApiClient,
	SmsSettingsApiClient,
	TariffsApiClient,
)

__all__ = [
	"AuthApiClient",
	"CitiesApiClient",
	"DeliverySlipsApiClient",
	"EmailSettingsApiClient",
	"ExpeditionsApiClient",
	"FacturesApiClient",
	"GeneralSettingsApiClient",
	"HealthApiClient",
	"OptionsApiClient",
	"ParcelsApiClient",
	"ParcelStatusesApiClient",
	"PickupCitiesApiClient",
	"ProductsApiClient",
	"RolesApiClient",
	"ShippingSlipsApiClient",
	"SmsSettingsApiClient",
	"StocksApiClient",
	"TariffsApiClient",
	"TenantsApiClient",
	"UsersApiClient",
	"WarehousesApiClient",
	"ZonesApiClient",
]
