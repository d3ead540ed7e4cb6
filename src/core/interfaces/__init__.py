"""Contratos (Protocol) de los colaboradores del discovery.

- El Core depende de estas abstracciones; `adapters/` aporta las implementaciones.
- Los tests sustituyen cualquiera de ellas por un fake sin tocar el Core.
"""
