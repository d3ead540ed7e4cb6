"""Core: dominio, contratos y el protocolo de discovery (sin I/O concreto)."""
