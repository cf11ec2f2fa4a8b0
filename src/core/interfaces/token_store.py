"""Contrato de almacenamiento de sesión.

Por qué Protocol:
- El cliente HTTP necesita leer/escribir tokens, pero no le importa dónde
  viven (memoria en tests, fichero en la CLI).
- Duck typing estructural: cualquier objeto con estos tres métodos sirve.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.identity import Session


@runtime_checkable
class TokenStore(Protocol):
    """Contrato mínimo para persistir la sesión autenticada.

    Reglas de diseño:
    - `load` devuelve `None` si no hay sesión (nunca lanza por "vacío").
    - `save` sustituye la sesión completa.
    - `clear` es idempotente.
    """

    def load(self) -> Session | None:
        ...

    def save(self, session: Session) -> None:
        ...

    def clear(self) -> None:
        ...
