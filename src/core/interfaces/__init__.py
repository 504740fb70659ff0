"""Contratos (Protocol) del Core.

Por qué:
- `Endpoint`/`Service` describen operaciones remotas sin depender de httpx.
- Cualquier modelo que cumpla el contrato se puede ejecutar con el cliente.
"""
