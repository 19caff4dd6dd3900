"""Domain models and errors.

Why:
- Pure, strict data structures (Pydantic v2 / dataclasses) live here.
- The domain knows nothing about httpx, the CLI or settings: only service concepts.
"""
