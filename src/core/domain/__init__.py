"""Modelos y entidades del dominio.

- Estructuras estrictas (Pydantic v2 / dataclasses congeladas).
- El dominio no conoce httpx, la CLI ni la configuración: solo registries,
  hosts, referencias y referrers.
"""
