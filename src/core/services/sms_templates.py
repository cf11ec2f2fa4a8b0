"""Ayudas para plantillas SMS: placeholders, previsualización y validación.

Nota:
- Un placeholder es cualquier `{...}` del contenido; solo los de
  `SMS_PLACEHOLDERS` tienen valor de ejemplo.
- Un SMS son 160 caracteres; el contenido admite como mucho 1000.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Mapping

SMS_SEGMENT_LENGTH = 160
MAX_CONTENT_LENGTH = 1000
MAX_NAME_LENGTH = 100

_PLACEHOLDER_RE = re.compile(r"\{[^}]+\}")

SMS_PLACEHOLDERS: tuple[str, ...] = (
    "{CLIENT_NAME}",
    "{TRACKING_NUMBER}",
    "{COMPANY_NAME}",
    "{DELIVERY_DATE}",
    "{PICKUP_DATE}",
    "{DRIVER_NAME}",
    "{DRIVER_PHONE}",
    "{STATUS}",
    "{ADDRESS}",
    "{AMOUNT}",
    "{REFERENCE}",
)

PLACEHOLDER_CATEGORIES: dict[str, tuple[str, ...]] = {
    "Customer": ("{CLIENT_NAME}", "{ADDRESS}"),
    "Parcel": ("{TRACKING_NUMBER}", "{REFERENCE}", "{AMOUNT}"),
    "Delivery": ("{DELIVERY_DATE}", "{PICKUP_DATE}", "{STATUS}"),
    "Driver": ("{DRIVER_NAME}", "{DRIVER_PHONE}"),
    "Company": ("{COMPANY_NAME}",),
}

SAMPLE_VALUES: dict[str, str] = {
    "{CLIENT_NAME}": "John Doe",
    "{TRACKING_NUMBER}": "PKG123456789",
    "{COMPANY_NAME}": "Your Company",
    "{DELIVERY_DATE}": "Today",
    "{PICKUP_DATE}": "Tomorrow",
    "{DRIVER_NAME}": "Alex Driver",
    "{DRIVER_PHONE}": "+1234567890",
    "{STATUS}": "In Transit",
    "{ADDRESS}": "123 Main St, City",
    "{AMOUNT}": "$25.50",
    "{REFERENCE}": "REF001",
}


@dataclass(frozen=True)
class TemplateExample:
    name: str
    content: str

    @property
    def placeholders(self) -> list[str]:
        return extract_placeholders(self.content)


TEMPLATE_EXAMPLES: tuple[TemplateExample, ...] = (
    TemplateExample(
        "Parcel Confirmation",
        "Hello {CLIENT_NAME}, your parcel {TRACKING_NUMBER} has been confirmed. Track it at {COMPANY_NAME}.",
    ),
    TemplateExample(
        "Out for Delivery",
        "Your package {TRACKING_NUMBER} is out for delivery. Expected delivery today. - {COMPANY_NAME}",
    ),
    TemplateExample(
        "Delivery Confirmation",
        "Package {TRACKING_NUMBER} delivered successfully to {ADDRESS}. Thank you for choosing {COMPANY_NAME}!",
    ),
    TemplateExample(
        "Pickup Scheduled",
        "Pickup scheduled for {PICKUP_DATE}. Driver: {DRIVER_NAME} ({DRIVER_PHONE}). Ref: {TRACKING_NUMBER}",
    ),
)


def extract_placeholders(content: str) -> list[str]:
    """Placeholders únicos en orden de aparición."""

    return list(dict.fromkeys(_PLACEHOLDER_RE.findall(content or "")))


def render_preview(content: str, values: Mapping[str, str] | None = None) -> str:
    values = SAMPLE_VALUES if values is None else values

    def _sub(match: re.Match[str]) -> str:
        token = match.group(0)
        return values.get(token, token)

    return _PLACEHOLDER_RE.sub(_sub, content or "")


def segment_count(text: str) -> int:
    if not text:
        return 0
    return math.ceil(len(text) / SMS_SEGMENT_LENGTH)


def validate_template(name: str, content: str) -> list[str]:
    """Problemas de una plantilla; lista vacía si es válida."""

    problems: list[str] = []
    if not (name or "").strip():
        problems.append("Template name is required")
    elif len(name) > MAX_NAME_LENGTH:
        problems.append("Name too long")
    if not (content or "").strip():
        problems.append("Template content is required")
    elif len(content) > MAX_CONTENT_LENGTH:
        problems.append("Content too long")

    unknown = [p for p in extract_placeholders(content) if p not in SMS_PLACEHOLDERS]
    if unknown:
        problems.append(f"Unknown placeholders: {', '.join(unknown)}")
    return problems
