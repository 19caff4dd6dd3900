"""Core interfaces/abstractions.

Why:
- Defines the contracts (Protocol) concrete adapters implement.
- Inverts dependencies: the retry engine depends on an abstraction, not on httpx clients.
"""
