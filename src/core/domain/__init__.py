"""Modelos del dominio Home Assistant.

Por qué:
- Estructuras de datos puras (Pydantic v2): estados, entidades y llamadas a
  servicios.
- El dominio no conoce el transporte HTTP ni la CLI.
"""
