"""Adaptadores concretos: httpx, hosts desde configuración, exportación JSON."""
