"""
Domain errors raised by the service layer.

Routers never see ORM lookups that return None; services raise one of
these instead and ``catalog.main`` maps them onto HTTP responses.
"""
from __future__ import annotations


class CatalogError(Exception):
    """Base class for every error raised by the catalog services."""


class NotFoundError(CatalogError):
    """A lookup by primary key matched no live record."""

    def __init__(self, resource: str, identifier: int | str) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier!r} not found")

    @property
    def detail(self) -> str:
        return f"{self.resource} not found"


class MalformedCategoryError(CatalogError, ValueError):
    """A stored category value could not be decoded into a tag list."""

    def __init__(self, raw: object, reason: str = "") -> None:
        self.raw = raw
        message = f"malformed category value {raw!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
