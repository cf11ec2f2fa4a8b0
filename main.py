"""Arranque de colisdesk desde un checkout, sin instalar el paquete.

Uso:
- `python main.py login ops@example.com --tenant acme`
- `python -m main parcels list --status NEW`

Nota:
- Los paquetes viven bajo `src/`; aquí se añade esa ruta a `sys.path` antes
  de importar la CLI. Con `pip install -e .` basta el script `colisdesk`.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"


def main() -> None:
    if str(SRC_DIR) not in sys.path:
        sys.path.insert(0, str(SRC_DIR))

    # Consolas Windows en cp1252: los paneles Rich llevan acentos.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
