"""Implementaciones de `TokenStore`.

- `MemoryTokenStore`: sesión en memoria del proceso (tests, scripts).
- `FileTokenStore`: sesión en JSON bajo el directorio de configuración del
  usuario; el fichero se crea con permisos 0600.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from core.domain.identity import Session

logger = logging.getLogger(__name__)


class MemoryTokenStore:
    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    def load(self) -> Session | None:
        return self._session

    def save(self, session: Session) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class FileTokenStore:
    """Persistencia de la sesión en disco.

    Un fichero corrupto o con un esquema antiguo se trata como "sin sesión"
    (se registra un warning); el usuario solo tiene que volver a hacer login.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Session | None:
        if not self.path.exists():
            return None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return Session.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return None

    def save(self, session: Session) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = session.model_dump(mode="json", by_alias=True, exclude_none=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
