"""Servicios del Core: el protocolo de discovery y sus piezas.

Sin efectos secundarios de presentación (prints, progress bars); la CLI solo
orquesta y presenta.
"""
