"""Lectura de JWT sin verificar firma.

El cliente no tiene la clave del backend: solo necesita `exp` para decidir
cuándo refrescar y los claims de identidad para pintar la sesión. La
autorización real la sigue haciendo el backend.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import jwt


def decode_claims(token: str) -> dict[str, Any]:
    """Claims del token, o `{}` si no es un JWT legible."""

    if not token:
        return {}
    try:
        claims = jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
    except jwt.PyJWTError:
        return {}
    return claims if isinstance(claims, dict) else {}


def token_expiry(token: str) -> datetime | None:
    exp = decode_claims(token).get("exp")
    if not isinstance(exp, (int, float)):
        return None
    return datetime.fromtimestamp(exp, tz=timezone.utc)
