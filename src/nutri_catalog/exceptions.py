"""Exceptions for the nutri_catalog package."""

class CatalogSourceError(Exception):
    """Raised when a catalog table cannot be read from its source."""
    pass
