"""Modelos base y estructuras compartidas (Pydantic v2).

Por qué un `ApiModel` común:
- El backend habla camelCase; en Python usamos snake_case. El alias generator
  hace la traducción en ambos sentidos sin repetir `alias=` en cada campo.
- `extra="ignore"`: el backend añade campos con frecuencia y no queremos romper.

Nota:
- Estos modelos describen *qué* devuelve el backend, no *cómo* se obtiene.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

T = TypeVar("T")


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self) -> dict[str, Any]:
        """Cuerpo JSON listo para enviar (camelCase, sin campos vacíos)."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Pagination(ApiModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    total_pages: int = Field(default=1, ge=0)
    has_next: bool = False
    has_prev: bool = False

    @classmethod
    def single_page(cls, count: int) -> "Pagination":
        """Paginación implícita para listas devueltas sin metadatos."""

        return cls(page=1, limit=count, total=count, total_pages=1, has_next=False, has_prev=False)


class Page(BaseModel, Generic[T]):
    """Una página de resultados normalizada (independiente de la forma del backend)."""

    items: list[T] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)

    def __len__(self) -> int:
        return len(self.items)


class ListFilters(ApiModel):
    """Filtros comunes de listado; las subclases añaden los suyos."""

    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1, le=1000)
    search: str | None = None
    sort_by: str | None = None
    sort_order: str | None = Field(default=None, pattern="^(asc|desc)$")

    def to_params(self) -> dict[str, Any]:
        """Query params (camelCase); booleanos como 'true'/'false'."""

        params: dict[str, Any] = {}
        for key, value in self.model_dump(mode="json", by_alias=True, exclude_none=True).items():
            if isinstance(value, bool):
                params[key] = "true" if value else "false"
            elif isinstance(value, list):
                params[key] = ",".join(str(v) for v in value)
            else:
                params[key] = value
        return params


class RelatedRef(ApiModel):
    """Referencia embebida (ciudad, zona, estado) tal como la devuelve el backend."""

    id: str | None = None
    name: str | None = None
    ref: str | None = None
    code: str | None = None
    color: str | None = None
    email: str | None = None


class BulkActionResult(ApiModel):
    success: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)


class BulkOperationResult(ApiModel):
    successful: int = 0
    updated: int | None = None
    deleted: int | None = None
    failed: list[str] = Field(default_factory=list)


class ImportResult(ApiModel):
    imported: int = 0
    skipped: int = 0
    success: int | None = None
    failed: int | None = None
    errors: list[str] = Field(default_factory=list)


class ExportResult(ApiModel):
    """Respuesta de un export: URL de descarga o contenido inline."""

    url: str | None = None
    download_url: str | None = None
    filename: str | None = None
    content: Any = None
    exported_at: str | None = None
