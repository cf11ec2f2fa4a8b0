"""Clientes del servicio de configuración.

Ciudades, ciudades de recogida, tarifas, SMS, email, opciones (estados de
colis, tipos de cliente, bancos) y ajustes generales de marca.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from adapters.api.base import ResourceClient, parse_as
from core.domain.common import BulkActionResult, BulkOperationResult, ExportResult, ImportResult, Page
from core.domain.parcels import OptionStats, ParcelStatus
from core.domain.settings import (
    Bank,
    CategoryPlaceholders,
    City,
    CityFilters,
    CityZoneStats,
    ClientType,
    CreateCityRequest,
    CreateEmailTemplateRequest,
    CreatePickupCityRequest,
    CreateSmsTemplateRequest,
    CreateTariffRequest,
    EmailPreview,
    EmailSettings,
    EmailStats,
    EmailTemplate,
    EmailTemplateFilters,
    GeneralSettings,
    MissingTariff,
    OptionFilters,
    PickupCity,
    PickupCityFilters,
    RechargeBalanceRequest,
    SendEmailResponse,
    SendTemplatedEmailRequest,
    SmsRechargeHistory,
    SmsSettings,
    SmsTemplate,
    SmsTemplateFilters,
    SmsUsageStats,
    Tariff,
    TariffCalculation,
    TariffFilters,
    TemplateStats,
    TemplateValidation,
    TestEmailRequest,
    UpdateCityRequest,
    UpdateEmailSettingsRequest,
    UpdateEmailTemplateRequest,
    UpdateGeneralSettingsRequest,
    UpdatePickupCityRequest,
    UpdateSmsSettingsRequest,
    UpdateSmsTemplateRequest,
    UpdateTariffRequest,
    UploadResult,
)

O = TypeVar("O", bound=BaseModel)


def _upload(path: Path, field: str) -> dict[str, Any]:
    return {field: (path.name, path.read_bytes())}


class CitiesApiClient(ResourceClient):
    service = "settings"

    async def create(self, request: CreateCityRequest) -> City:
        return await self._post("/api/cities", request, City)

    async def list(self, filters: CityFilters | None = None) -> Page[City]:
        return await self._page("/api/cities", City, filters)

    async def pickup(self) -> list[City]:
        return await self._list("/api/cities/pickup", City)

    async def zone_stats(self) -> list[CityZoneStats]:
        return await self._list("/api/cities/zones/stats", CityZoneStats)

    async def get(self, city_id: str) -> City:
        return await self._get(f"/api/cities/{city_id}", City)

    async def update(self, city_id: str, request: UpdateCityRequest) -> City:
        return await self._patch(f"/api/cities/{city_id}", request, City)

    async def delete(self, city_id: str) -> None:
        await self._delete(f"/api/cities/{city_id}")

    async def toggle(self, city_id: str) -> City:
        return await self._patch(f"/api/cities/{city_id}/toggle-status", model=City)

    async def bulk_delete(self, city_ids: list[str]) -> BulkOperationResult:
        return await self._post("/api/cities/bulk-delete", {"cityIds": city_ids}, BulkOperationResult)

    async def bulk_update_status(self, city_ids: list[str], status: bool) -> BulkOperationResult:
        return await self._post(
            "/api/cities/bulk-update-status", {"cityIds": city_ids, "status": status}, BulkOperationResult
        )

    async def export(self, filters: CityFilters | None = None) -> ExportResult:
        return await self._post("/api/cities/export", {"filters": filters.to_params() if filters else None}, ExportResult)

    async def import_file(self, path: Path) -> ImportResult:
        return await self._post("/api/cities/import", files=_upload(path, "file"), model=ImportResult)

    async def stats(self) -> dict[str, Any]:
        return await self._get("/api/cities/stats")

    async def search(self, query: str, limit: int = 10) -> list[City]:
        return await self._list("/api/cities/search", City, params={"q": query, "limit": limit})

    async def validate_ref(self, ref: str, exclude_id: str | None = None) -> dict[str, Any]:
        return await self._get("/api/cities/validate-ref", params={"ref": ref, "excludeId": exclude_id})

    async def by_zone(self, zone: str) -> list[City]:
        return await self._list(f"/api/cities/by-zone/{zone}", City)

    async def zones(self) -> list[str]:
        return await self._get("/api/cities/zones", list[str])


class PickupCitiesApiClient(ResourceClient):
    service = "settings"

    async def create(self, request: CreatePickupCityRequest) -> PickupCity:
        return await self._post("/api/pickup-cities", request, PickupCity)

    async def list(self, filters: PickupCityFilters | None = None) -> Page[PickupCity]:
        return await self._page("/api/pickup-cities", PickupCity, filters)

    async def active(self) -> list[PickupCity]:
        return await self._list("/api/pickup-cities/active", PickupCity)

    async def get(self, city_id: str) -> PickupCity:
        return await self._get(f"/api/pickup-cities/{city_id}", PickupCity)

    async def update(self, city_id: str, request: UpdatePickupCityRequest) -> PickupCity:
        return await self._patch(f"/api/pickup-cities/{city_id}", request, PickupCity)

    async def delete(self, city_id: str) -> None:
        await self._delete(f"/api/pickup-cities/{city_id}")

    async def toggle(self, city_id: str) -> PickupCity:
        return await self._patch(f"/api/pickup-cities/{city_id}/toggle-status", model=PickupCity)

    async def bulk_create(self, cities: list[CreatePickupCityRequest]) -> BulkOperationResult:
        payload = {"pickupCities": [c.to_payload() for c in cities]}
        return await self._post("/api/pickup-cities/bulk-create", payload, BulkOperationResult)

    async def bulk_delete(self, ids: list[str]) -> BulkOperationResult:
        data = await self._delete("/api/pickup-cities/bulk-delete", body={"ids": ids})
        return parse_as(BulkOperationResult, data or {})

    async def bulk_toggle(self, ids: list[str], status: bool) -> BulkOperationResult:
        return await self._patch(
            "/api/pickup-cities/bulk-toggle-status", {"ids": ids, "status": status}, BulkOperationResult
        )

    async def statistics(self) -> dict[str, Any]:
        return await self._get("/api/pickup-cities/statistics")

    async def export(self, filters: PickupCityFilters | None = None) -> ExportResult:
        payload = {"filters": filters.to_params() if filters else None}
        return await self._post("/api/pickup-cities/export", payload, ExportResult)


class TariffsApiClient(ResourceClient):
    service = "settings"

    async def create(self, request: CreateTariffRequest) -> Tariff:
        return await self._post("/api/tariffs", request, Tariff)

    async def list(self, filters: TariffFilters | None = None) -> Page[Tariff]:
        return await self._page("/api/tariffs", Tariff, filters)

    async def get(self, tariff_id: str) -> Tariff:
        return await self._get(f"/api/tariffs/{tariff_id}", Tariff)

    async def update(self, tariff_id: str, request: UpdateTariffRequest) -> Tariff:
        return await self._patch(f"/api/tariffs/{tariff_id}", request, Tariff)

    async def delete(self, tariff_id: str) -> None:
        await self._delete(f"/api/tariffs/{tariff_id}")

    async def bulk_import(self, tariffs: list[CreateTariffRequest]) -> BulkActionResult:
        payload = {"tariffs": [t.to_payload() for t in tariffs]}
        return await self._post("/api/tariffs/bulk-import", payload, BulkActionResult)

    async def export(self, filters: TariffFilters | None = None) -> ExportResult:
        return await self._post("/api/tariffs/export", {"filters": filters.to_params() if filters else None}, ExportResult)

    async def calculate(self, pickup_city_id: str, destination_city_id: str) -> TariffCalculation:
        return await self._get(
            "/api/tariffs/calculate",
            TariffCalculation,
            params={"pickupCityId": pickup_city_id, "destinationCityId": destination_city_id},
        )

    async def stats(self) -> dict[str, Any]:
        return await self._get("/api/tariffs/stats")

    async def missing(
        self, pickup_city_id: str | None = None, destination_city_id: str | None = None
    ) -> list[MissingTariff]:
        data = await self._get(
            "/api/tariffs/missing",
            params={"pickupCityId": pickup_city_id, "destinationCityId": destination_city_id},
        )
        pairs = data.get("missingPairs", []) if isinstance(data, dict) else data
        return parse_as(list[MissingTariff], pairs or [])

    async def validate_route(
        self, pickup_city_id: str, destination_city_id: str, exclude_id: str | None = None
    ) -> dict[str, Any]:
        return await self._get(
            "/api/tariffs/validate-route",
            params={
                "pickupCityId": pickup_city_id,
                "destinationCityId": destination_city_id,
                "excludeId": exclude_id,
            },
        )

    async def duplicate(self, tariff_id: str, pickup_city_id: str, destination_city_id: str) -> Tariff:
        return await self._post(
            f"/api/tariffs/{tariff_id}/duplicate",
            {"pickupCityId": pickup_city_id, "destinationCityId": destination_city_id},
            Tariff,
        )

    async def create_template(self, name: str, tariffs: list[CreateTariffRequest]) -> dict[str, Any]:
        return await self._post("/api/tariffs/templates", {"name": name, "tariffs": [t.to_payload() for t in tariffs]})

    async def templates(self) -> list[dict[str, Any]]:
        return await self._get("/api/tariffs/templates")

    async def apply_template(self, template_id: str, overwrite_existing: bool = False) -> BulkActionResult:
        return await self._post(
            f"/api/tariffs/templates/{template_id}/apply",
            {"overwriteExisting": overwrite_existing},
            BulkActionResult,
        )


class SmsSettingsApiClient(ResourceClient):
    service = "settings"

    async def get(self) -> SmsSettings:
        return await self._get("/api/sms-settings", SmsSettings)

    async def update(self, request: UpdateSmsSettingsRequest) -> SmsSettings:
        return await self._patch("/api/sms-settings", request, SmsSettings)

    async def test(self) -> dict[str, Any]:
        return await self._post("/api/sms-settings/test", {})

    async def recharge(self, request: RechargeBalanceRequest) -> SmsSettings:
        return await self._post("/api/sms-settings/recharge", request, SmsSettings)

    async def usage_stats(self) -> SmsUsageStats:
        return await self._get("/api/sms-settings/usage-stats", SmsUsageStats)

    async def recharge_history(self, page: int | None = None, limit: int | None = None) -> Page[SmsRechargeHistory]:
        return await self._page(
            "/api/sms-settings/recharge-history", SmsRechargeHistory, {"page": page, "limit": limit}
        )

    async def balance(self) -> dict[str, Any]:
        return await self._get("/api/sms-settings/balance")

    async def templates(self, filters: SmsTemplateFilters | None = None) -> Page[SmsTemplate]:
        return await self._page("/api/sms-settings/templates", SmsTemplate, filters)

    async def active_templates(self) -> list[SmsTemplate]:
        return await self._list("/api/sms-settings/templates/active", SmsTemplate)

    async def get_template(self, template_id: str) -> SmsTemplate:
        return await self._get(f"/api/sms-settings/templates/{template_id}", SmsTemplate)

    async def create_template(self, request: CreateSmsTemplateRequest) -> SmsTemplate:
        return await self._post("/api/sms-settings/templates", request, SmsTemplate)

    async def update_template(self, template_id: str, request: UpdateSmsTemplateRequest) -> SmsTemplate:
        return await self._patch(f"/api/sms-settings/templates/{template_id}", request, SmsTemplate)

    async def delete_template(self, template_id: str) -> None:
        await self._delete(f"/api/sms-settings/templates/{template_id}")

    async def toggle_template(self, template_id: str) -> SmsTemplate:
        return await self._patch(f"/api/sms-settings/templates/{template_id}/toggle-status", model=SmsTemplate)

    async def duplicate_template(self, template_id: str, name: str) -> SmsTemplate:
        return await self._post(f"/api/sms-settings/templates/{template_id}/duplicate", {"name": name}, SmsTemplate)

    async def preview_template(self, template_id: str, sample_data: dict[str, str]) -> str:
        data = await self._post(f"/api/sms-settings/templates/{template_id}/preview", {"sampleData": sample_data})
        return data.get("preview", "") if isinstance(data, dict) else str(data or "")

    async def placeholders(self) -> dict[str, Any]:
        return await self._get("/api/sms-settings/placeholders")

    async def send_test(
        self,
        phone_number: str,
        *,
        template_id: str | None = None,
        custom_message: str | None = None,
        sample_data: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        return await self._post(
            "/api/sms-settings/send-test",
            {
                "phoneNumber": phone_number,
                "templateId": template_id,
                "customMessage": custom_message,
                "sampleData": sample_data,
            },
        )

    async def bulk_create_templates(self, templates: list[CreateSmsTemplateRequest]) -> dict[str, Any]:
        return await self._post(
            "/api/sms-settings/templates/bulk-create", {"templates": [t.to_payload() for t in templates]}
        )

    async def bulk_status(self, template_ids: list[str], status: bool) -> dict[str, Any]:
        return await self._patch(
            "/api/sms-settings/templates/bulk-status", {"templateIds": template_ids, "status": status}
        )

    async def bulk_delete_templates(self, template_ids: list[str]) -> dict[str, Any]:
        return await self._delete("/api/sms-settings/templates/bulk-delete", body={"templateIds": template_ids})

    async def export_templates(self, filters: SmsTemplateFilters | None = None) -> ExportResult:
        payload = {"filters": filters.to_params() if filters else None}
        return await self._post("/api/sms-settings/templates/export", payload, ExportResult)

    async def import_templates(self, path: Path) -> dict[str, Any]:
        return await self._post("/api/sms-settings/templates/import", files=_upload(path, "file"))


class EmailSettingsApiClient(ResourceClient):
    service = "settings"

    async def get(self) -> EmailSettings:
        return await self._get("/api/email-settings", EmailSettings)

    async def update(self, request: UpdateEmailSettingsRequest) -> EmailSettings:
        return await self._patch("/api/email-settings", request, EmailSettings)

    async def test_connection(self) -> dict[str, Any]:
        return await self._post("/api/email-settings/test-connection")

    async def send_test(self, request: TestEmailRequest) -> dict[str, Any]:
        return await self._post("/api/email-settings/send-test", request)

    async def stats(self) -> EmailStats:
        return await self._get("/api/email-settings/stats", EmailStats)

    async def templates(self, filters: EmailTemplateFilters | None = None) -> Page[EmailTemplate]:
        return await self._page("/api/email-settings/templates", EmailTemplate, filters)

    async def templates_by_category(self, category: str) -> list[EmailTemplate]:
        return await self._list(f"/api/email-settings/templates/category/{category}", EmailTemplate)

    async def get_template(self, template_id: str) -> EmailTemplate:
        return await self._get(f"/api/email-settings/templates/{template_id}", EmailTemplate)

    async def create_template(self, request: CreateEmailTemplateRequest) -> EmailTemplate:
        return await self._post("/api/email-settings/templates", request, EmailTemplate)

    async def update_template(self, template_id: str, request: UpdateEmailTemplateRequest) -> EmailTemplate:
        return await self._patch(f"/api/email-settings/templates/{template_id}", request, EmailTemplate)

    async def delete_template(self, template_id: str) -> None:
        await self._delete(f"/api/email-settings/templates/{template_id}")

    async def toggle_template(self, template_id: str) -> EmailTemplate:
        return await self._patch(f"/api/email-settings/templates/{template_id}/toggle-status", model=EmailTemplate)

    async def duplicate_template(self, template_id: str, name: str | None = None) -> EmailTemplate:
        return await self._post(f"/api/email-settings/templates/{template_id}/duplicate", {"name": name}, EmailTemplate)

    async def preview_template(self, template_id: str, values: dict[str, str] | None = None) -> EmailPreview:
        return await self._post(
            f"/api/email-settings/templates/{template_id}/preview", {"placeholderValues": values}, EmailPreview
        )

    async def send_templated(self, template_id: str, request: SendTemplatedEmailRequest) -> SendEmailResponse:
        return await self._post(f"/api/email-settings/templates/{template_id}/send", request, SendEmailResponse)

    async def bulk_update_templates(self, template_ids: list[str], updates: dict[str, Any]) -> BulkOperationResult:
        return await self._patch(
            "/api/email-settings/templates/bulk",
            {"templateIds": template_ids, "updates": updates},
            BulkOperationResult,
        )

    async def bulk_delete_templates(self, template_ids: list[str]) -> BulkOperationResult:
        data = await self._delete("/api/email-settings/templates/bulk", body={"templateIds": template_ids})
        return parse_as(BulkOperationResult, data or {})

    async def export_templates(self, template_ids: list[str] | None = None) -> dict[str, Any]:
        return await self._post("/api/email-settings/templates/export", {"templateIds": template_ids})

    async def import_templates(self, templates: list[CreateEmailTemplateRequest]) -> ImportResult:
        payload = {"templates": [t.to_payload() for t in templates]}
        return await self._post("/api/email-settings/templates/import", payload, ImportResult)

    async def category_placeholders(self, category: str) -> CategoryPlaceholders:
        return await self._get(f"/api/email-settings/placeholders/{category}", CategoryPlaceholders)

    async def validate_template(
        self,
        subject: str,
        html_content: str,
        text_content: str | None = None,
        placeholders: list[str] | None = None,
    ) -> TemplateValidation:
        return await self._post(
            "/api/email-settings/templates/validate",
            {
                "subject": subject,
                "htmlContent": html_content,
                "textContent": text_content,
                "placeholders": placeholders,
            },
            TemplateValidation,
        )

    async def template_stats(
        self, template_id: str, date_from: str | None = None, date_to: str | None = None
    ) -> TemplateStats:
        params = {"from": date_from, "to": date_to} if date_from and date_to else None
        return await self._get(f"/api/email-settings/templates/{template_id}/stats", TemplateStats, params=params)


class OptionResource(ResourceClient, Generic[O]):
    """CRUD de una lista de opciones bajo `/api/options/<kind>`."""

    service = "settings"

    def __init__(self, client: Any, kind: str, model: type[O]) -> None:
        super().__init__(client)
        self.kind = kind
        self.model = model
        self._base = f"/api/options/{kind}"

    async def list(self, filters: OptionFilters | None = None) -> Page[O]:
        return await self._page(self._base, self.model, filters)

    async def get(self, option_id: str) -> O:
        return await self._get(f"{self._base}/{option_id}", self.model)

    async def create(self, request: BaseModel) -> O:
        return await self._post(self._base, request, self.model)

    async def update(self, option_id: str, request: BaseModel) -> O:
        return await self._patch(f"{self._base}/{option_id}", request, self.model)

    async def delete(self, option_id: str) -> None:
        await self._delete(f"{self._base}/{option_id}")

    async def toggle(self, option_id: str) -> O:
        return await self._patch(f"{self._base}/{option_id}/toggle-status", model=self.model)

    async def active(self) -> list[O]:
        return await self._list(f"{self._base}/active", self.model)

    async def bulk_delete(self, ids: list[str]) -> BulkActionResult:
        return await self._post(f"{self._base}/bulk-delete", {"ids": ids}, BulkActionResult)

    async def bulk_toggle(self, ids: list[str]) -> BulkActionResult:
        return await self._post(f"{self._base}/bulk-toggle", {"ids": ids}, BulkActionResult)

    async def export(self, filters: OptionFilters | None = None) -> ExportResult:
        return await self._post(f"{self._base}/export", {"filters": filters.to_params() if filters else None}, ExportResult)

    async def bulk_import(self, items: list[BaseModel]) -> BulkActionResult:
        data = await self._client.post(
            f"{self._base}/bulk-import",
            [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in items],
            service=self.service,
        )
        return parse_as(BulkActionResult, data)


class OptionsApiClient(ResourceClient):
    """Opciones configurables por tenant (`/api/options/*`).

    Los create/update aceptan `CreateParcelStatusRequest`/`UpdateParcelStatusRequest`,
    `CreateClientTypeRequest`/`UpdateClientTypeRequest` y
    `CreateBankRequest`/`UpdateBankRequest` respectivamente.
    """

    service = "settings"

    def __init__(self, client: Any) -> None:
        super().__init__(client)
        self.parcel_statuses: OptionResource[ParcelStatus] = OptionResource(client, "parcel-statuses", ParcelStatus)
        self.client_types: OptionResource[ClientType] = OptionResource(client, "client-types", ClientType)
        self.banks: OptionResource[Bank] = OptionResource(client, "banks", Bank)

    async def stats(self) -> OptionStats:
        return await self._get("/api/options/stats", OptionStats)


class GeneralSettingsApiClient(ResourceClient):
    service = "settings"

    async def get(self) -> GeneralSettings:
        return await self._get("/api/general-settings", GeneralSettings)

    async def create(self, request: UpdateGeneralSettingsRequest) -> GeneralSettings:
        return await self._post("/api/general-settings", request, GeneralSettings)

    async def update(self, request: UpdateGeneralSettingsRequest) -> GeneralSettings:
        return await self._patch("/api/general-settings", request, GeneralSettings)

    async def delete(self) -> None:
        await self._delete("/api/general-settings")

    async def _upload_asset(self, path: Path, field: str) -> UploadResult:
        data = await self._post(f"/api/general-settings/upload-{field}", files=_upload(path, field))
        data = data if isinstance(data, dict) else {}
        url = data.get(f"{field}Url") or data.get("url")
        return UploadResult(url=url or "", filename=data.get("filename") or path.name)

    async def upload_logo(self, path: Path) -> UploadResult:
        return await self._upload_asset(path, "logo")

    async def upload_favicon(self, path: Path) -> UploadResult:
        return await self._upload_asset(path, "favicon")

    async def preview(self) -> dict[str, Any]:
        return await self._get("/api/general-settings/preview")

    async def reset_branding(self) -> GeneralSettings:
        return await self._post("/api/general-settings/reset-branding", model=GeneralSettings)
