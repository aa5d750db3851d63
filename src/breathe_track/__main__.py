"""Punto de entrada del reporte por línea de comandos."""

from __future__ import annotations

from breathe_track.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
