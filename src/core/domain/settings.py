"""DTOs de configuración del tenant: ciudades, tarifas, SMS, email, opciones."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from core.domain.common import ApiModel, ListFilters, RelatedRef

# --------------------------------------------------------------------------- #
# Cities / pickup cities / tariffs
# --------------------------------------------------------------------------- #


class City(ApiModel):
    id: str
    tenant_id: str | None = None
    ref: str
    name: str
    zone: str | None = None
    pickup_city: bool = False
    status: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    counts: dict[str, int] | None = Field(default=None, alias="_count")


class CreateCityRequest(ApiModel):
    ref: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    zone: str = Field(..., min_length=1)
    pickup_city: bool = False
    status: bool | None = None


class UpdateCityRequest(ApiModel):
    ref: str | None = None
    name: str | None = None
    zone: str | None = None
    pickup_city: bool | None = None
    status: bool | None = None


class CityFilters(ListFilters):
    ref: str | None = None
    zone: str | None = None
    pickup_city: bool | None = None
    status: bool | None = None


class CityZoneStats(ApiModel):
    zone: str
    count: int = 0


class PickupCity(ApiModel):
    id: str
    tenant_id: str | None = None
    ref: str
    name: str
    status: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    counts: dict[str, int] | None = Field(default=None, alias="_count")


class CreatePickupCityRequest(ApiModel):
    ref: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    status: bool | None = None


class UpdatePickupCityRequest(ApiModel):
    ref: str | None = None
    name: str | None = None
    status: bool | None = None


class PickupCityFilters(ListFilters):
    ref: str | None = None
    status: bool | None = None


class Tariff(ApiModel):
    id: str
    tenant_id: str | None = None
    pickup_city_id: str
    destination_city_id: str
    delivery_price: float = 0.0
    return_price: float = 0.0
    refusal_price: float = 0.0
    delivery_delay: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    pickup_city: RelatedRef | None = None
    destination_city: RelatedRef | None = None


class CreateTariffRequest(ApiModel):
    pickup_city_id: str
    destination_city_id: str
    delivery_price: float = Field(..., ge=0)
    return_price: float = Field(..., ge=0)
    refusal_price: float = Field(..., ge=0)
    delivery_delay: int = Field(..., ge=0)


class UpdateTariffRequest(ApiModel):
    pickup_city_id: str | None = None
    destination_city_id: str | None = None
    delivery_price: float | None = Field(default=None, ge=0)
    return_price: float | None = Field(default=None, ge=0)
    refusal_price: float | None = Field(default=None, ge=0)
    delivery_delay: int | None = Field(default=None, ge=0)


class TariffFilters(ListFilters):
    pickup_city_id: str | None = None
    destination_city_id: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    max_delay: int | None = None


class TariffCalculation(ApiModel):
    delivery_price: float = 0.0
    return_price: float = 0.0
    refusal_price: float = 0.0
    delivery_delay: int = 0
    pickup_city: str | None = None
    destination_city: str | None = None


class MissingTariff(ApiModel):
    pickup_city: RelatedRef
    destination_city: RelatedRef


# --------------------------------------------------------------------------- #
# SMS
# --------------------------------------------------------------------------- #


class SmsSettings(ApiModel):
    id: str | None = None
    tenant_id: str | None = None
    enabled: bool = False
    sender_name: str | None = None
    phone_prefix: str | None = None
    api_key: str | None = None
    balance: float = 0.0
    low_balance_alert: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_low_balance(self) -> bool:
        return self.balance <= self.low_balance_alert


class UpdateSmsSettingsRequest(ApiModel):
    enabled: bool | None = None
    sender_name: str | None = Field(default=None, max_length=11)
    phone_prefix: str | None = None
    api_key: str | None = None
    low_balance_alert: float | None = Field(default=None, ge=0)


class SmsTemplate(ApiModel):
    id: str
    tenant_id: str | None = None
    name: str
    content: str
    placeholders: list[str] = Field(default_factory=list)
    status: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CreateSmsTemplateRequest(ApiModel):
    name: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=1000)
    placeholders: list[str] = Field(default_factory=list)


class UpdateSmsTemplateRequest(ApiModel):
    name: str | None = None
    content: str | None = Field(default=None, max_length=1000)
    placeholders: list[str] | None = None
    status: bool | None = None


class SmsTemplateFilters(ListFilters):
    status: bool | None = None


class RechargeBalanceRequest(ApiModel):
    amount: float = Field(..., gt=0)
    reference: str | None = None


class SmsUsageStats(ApiModel):
    total_sent: int = 0
    this_month: int = 0
    last_month: int = 0
    success_rate: float = 0.0
    average_cost: float = 0.0


class SmsRechargeHistory(ApiModel):
    id: str
    amount: float
    reference: str | None = None
    previous_balance: float = 0.0
    new_balance: float = 0.0
    created_at: datetime | None = None
    created_by: RelatedRef | None = None


class SmsPreview(ApiModel):
    content: str
    character_count: int = 0
    sms_count: int = 0


# --------------------------------------------------------------------------- #
# Email
# --------------------------------------------------------------------------- #


class EmailTemplateCategory(str, Enum):
    INVOICE = "INVOICE"
    VERIFICATION = "VERIFICATION"
    PARCEL_NOTIFICATION = "PARCEL_NOTIFICATION"
    PAYMENT_REMINDER = "PAYMENT_REMINDER"
    WELCOME = "WELCOME"
    MARKETING = "MARKETING"
    PASSWORD_RESET = "PASSWORD_RESET"
    ACCOUNT_UPDATE = "ACCOUNT_UPDATE"
    PARCEL = "PARCEL"
    CUSTOMER = "CUSTOMER"
    NOTIFICATION = "NOTIFICATION"
    SYSTEM = "SYSTEM"


class EmailSettings(ApiModel):
    id: str | None = None
    enabled: bool = False
    from_name: str | None = None
    from_email: str | None = None
    smtp_host: str | None = None
    smtp_port: int | None = None
    smtp_user: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UpdateEmailSettingsRequest(ApiModel):
    enabled: bool | None = None
    from_name: str | None = None
    from_email: str | None = None
    smtp_host: str | None = None
    smtp_port: int | None = Field(default=None, ge=1, le=65535)
    smtp_user: str | None = None
    smtp_pass: str | None = None


class EmailTemplate(ApiModel):
    id: str
    category: str
    name: str
    subject: str
    html_content: str
    text_content: str | None = None
    placeholders: list[str] = Field(default_factory=list)
    enabled: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CreateEmailTemplateRequest(ApiModel):
    category: EmailTemplateCategory
    name: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    html_content: str = Field(..., min_length=1)
    text_content: str | None = None
    placeholders: list[str] | None = None


class UpdateEmailTemplateRequest(ApiModel):
    name: str | None = None
    subject: str | None = None
    html_content: str | None = None
    text_content: str | None = None
    placeholders: list[str] | None = None
    enabled: bool | None = None


class EmailTemplateFilters(ListFilters):
    category: str | None = None
    enabled: bool | None = None


class TestEmailRequest(ApiModel):
    to: str = Field(..., min_length=3)
    subject: str | None = None
    content: str | None = None


class EmailStats(ApiModel):
    total_templates: int = 0
    active_templates: int = 0
    templates_by_category: dict[str, int] = Field(default_factory=dict)
    last_configured: datetime | None = None
    emails_sent_this_month: int | None = None
    delivery_rate: float | None = None


class EmailPreview(ApiModel):
    subject: str
    html_content: str
    text_content: str | None = None


class SendTemplatedEmailRequest(ApiModel):
    to: str | list[str]
    placeholder_values: dict[str, str] | None = None


class SendEmailResponse(ApiModel):
    success: bool = False
    message_id: str | None = None


class TemplateValidation(ApiModel):
    valid: bool = False
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    used_placeholders: list[str] = Field(default_factory=list)
    unused_placeholders: list[str] = Field(default_factory=list)


class CategoryPlaceholders(ApiModel):
    placeholders: list[str] = Field(default_factory=list)
    descriptions: dict[str, str] = Field(default_factory=dict)


class TemplateStats(ApiModel):
    template_id: str
    sent_count: int = 0
    delivery_rate: float = 0.0
    last_used: datetime | None = None
    usage_by_date: list[dict[str, Any]] = Field(default_factory=list)


# --------------------------------------------------------------------------- #
# Options: banks / client types
# --------------------------------------------------------------------------- #


class Bank(ApiModel):
    id: str
    tenant_id: str | None = None
    name: str
    code: str
    status: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CreateBankRequest(ApiModel):
    name: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)
    status: bool | None = None


class UpdateBankRequest(ApiModel):
    name: str | None = None
    code: str | None = None
    status: bool | None = None


class ClientType(ApiModel):
    id: str
    tenant_id: str | None = None
    name: str
    status: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CreateClientTypeRequest(ApiModel):
    name: str = Field(..., min_length=1)
    status: bool | None = None


class UpdateClientTypeRequest(ApiModel):
    name: str | None = None
    status: bool | None = None


class OptionFilters(ListFilters):
    status: bool | None = None


# --------------------------------------------------------------------------- #
# General settings (branding)
# --------------------------------------------------------------------------- #


class SettingsLinks(ApiModel):
    terms_of_service: str | None = None
    privacy_policy: str | None = None
    support: str | None = None
    help: str | None = None


class SettingsSocials(ApiModel):
    facebook: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    linkedin: str | None = None
    youtube: str | None = None


class GeneralSettings(ApiModel):
    id: str | None = None
    tenant_id: str | None = None
    logo: str | None = None
    favicon: str | None = None
    company_name: str
    website: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    currency_symbol: str = "MAD"
    sidebar_color: str | None = None
    links: SettingsLinks = Field(default_factory=SettingsLinks)
    socials: SettingsSocials = Field(default_factory=SettingsSocials)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UpdateGeneralSettingsRequest(ApiModel):
    company_name: str | None = None
    website: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    currency_symbol: str | None = None
    sidebar_color: str | None = None
    links: SettingsLinks | None = None
    socials: SettingsSocials | None = None
    logo: str | None = None
    favicon: str | None = None


class UploadResult(ApiModel):
    url: str
    filename: str | None = None
