"""Modelos y códigos del dominio Cinebot.

Por qué:
- Aquí viven las estructuras de datos puras (Pydantic v2) y los enums.
- El dominio no conoce HTTP ni CLI: solo conceptos de taquilla.
"""
