"""Base común de los clientes por recurso.

Cada subclase fija su `service` (para resolver la base URL) y expone un método
por endpoint. Aquí solo vive la fontanería: serializar cuerpos/filtros y
validar las respuestas contra los modelos del dominio.
"""

from __future__ import annotations

from typing import Any, Mapping, TypeVar, get_origin

from pydantic import BaseModel, TypeAdapter, ValidationError

from adapters.http_client import ApiClient
from core.domain.common import ApiModel, ListFilters, Page
from core.errors import UnexpectedResponseError

M = TypeVar("M", bound=BaseModel)

Body = ApiModel | Mapping[str, Any] | None
Filters = ListFilters | Mapping[str, Any] | None


def to_body(body: Body) -> Any:
    if body is None:
        return None
    if isinstance(body, ApiModel):
        return body.to_payload()
    return {k: v for k, v in body.items() if v is not None}


def to_params(filters: Filters) -> dict[str, Any] | None:
    if filters is None:
        return None
    if isinstance(filters, ListFilters):
        return filters.to_params() or None
    params: dict[str, Any] = {}
    for key, value in filters.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            value = ",".join(str(v) for v in value)
        params[key] = value
    return params or None


def parse_as(model: Any, data: Any) -> Any:
    """Valida `data` contra `model` (clase pydantic o tipo genérico)."""

    try:
        if get_origin(model) is None and isinstance(model, type) and issubclass(model, BaseModel):
            return model.model_validate(data)
        return TypeAdapter(model).validate_python(data)
    except ValidationError as exc:
        raise UnexpectedResponseError(f"Invalid response for {model!r}", details=exc.errors()) from exc


class ResourceClient:
    service: str | None = None

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def _get(self, path: str, model: Any = None, *, params: Filters = None) -> Any:
        data = await self._client.get(path, params=to_params(params), service=self.service)
        return parse_as(model, data) if model is not None else data

    async def _list(self, path: str, model: type[M], *, params: Filters = None) -> list[M]:
        """GET de una lista sin paginación (también acepta `{data: [...]}`)."""

        data = await self._client.get(path, params=to_params(params), service=self.service)
        if isinstance(data, dict):
            nested = next((data[k] for k in ("items", "results") if isinstance(data.get(k), list)), None)
            if nested is None:
                raise UnexpectedResponseError(f"Expected a list from {path}", details=data)
            data = nested
        return parse_as(list[model], data or [])

    async def _page(self, path: str, model: type[M], filters: Filters = None) -> Page[M]:
        return await self._client.get_paginated(path, params=to_params(filters), model=model, service=self.service)

    async def _post(
        self,
        path: str,
        body: Body = None,
        model: Any = None,
        *,
        files: Any = None,
        params: Filters = None,
        authenticated: bool = True,
    ) -> Any:
        data = await self._client.post(
            path,
            to_body(body) if files is None else None,
            params=to_params(params),
            files=files,
            data=to_body(body) if files is not None else None,
            service=self.service,
            authenticated=authenticated,
        )
        return parse_as(model, data) if model is not None else data

    async def _put(self, path: str, body: Body = None, model: Any = None) -> Any:
        data = await self._client.put(path, to_body(body), service=self.service)
        return parse_as(model, data) if model is not None else data

    async def _patch(self, path: str, body: Body = None, model: Any = None) -> Any:
        data = await self._client.patch(path, to_body(body) if body is not None else {}, service=self.service)
        return parse_as(model, data) if model is not None else data

    async def _delete(self, path: str, *, body: Body = None, params: Filters = None) -> Any:
        return await self._client.delete(path, json=to_body(body), params=to_params(params), service=self.service)

    async def _bytes(self, path: str, *, params: Filters = None, method: str = "GET", body: Body = None) -> bytes:
        return await self._client.get_bytes(
            path, params=to_params(params), method=method, json=to_body(body), service=self.service
        )
