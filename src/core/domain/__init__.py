"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras y estrictas (Pydantic v2).
- El dominio no conoce HTTP ni CLI: solo conceptos del back-office
  (tenants, colis, bordereaux, factures, bons, inventario).
"""
