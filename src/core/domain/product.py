"""Copyleaks product lines.

Scans, credits and usages are scoped to a product: the education and the
businesses APIs share the same endpoints under a different path segment.
"""

from __future__ import annotations

from enum import Enum


class Product(str, Enum):
    """Product segment used in API paths (`/v3/{product}/...`)."""

    EDUCATION = "education"
    BUSINESSES = "businesses"

    @classmethod
    def default(cls) -> "Product":
        """Return the product used when the caller does not pick one."""

        return cls.EDUCATION

    def label(self) -> str:
        """Human readable label for tables and logging."""

        return "Education" if self is Product.EDUCATION else "Businesses"
