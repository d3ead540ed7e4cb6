"""Entry point de desarrollo (sin instalar el paquete).

Permite ejecutar la CLI con:
- `python main.py discover ghcr.io/org/app@sha256:...`

El código vive en `src/` (layout tipo "src"); sin `pip install -e .` Python no
encuentra `cli`, `core` ni `adapters`.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    src = Path(__file__).resolve().parent / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    # Windows terminals (cp1252) choke on the rich table glyphs.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
