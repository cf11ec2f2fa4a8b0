"""Exportación JSON de resultados de la API.

Por qué JSON:
- Permite encadenar la CLI con otras herramientas (jq, hojas de cálculo, BI).
- Formato estable: claves ordenadas, indentación fija, UTF-8.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return value


def export_json(payload: Any, output_path: Path) -> Path:
    """Escribe `payload` (modelos pydantic, listas o dicts) como JSON UTF-8."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(_jsonable(payload), ensure_ascii=False, indent=2, sort_keys=True, default=str) + "\n",
        encoding="utf-8",
    )
    return output_path
