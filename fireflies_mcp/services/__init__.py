"""Upstream service clients."""

from .fireflies import FirefliesAPIError, FirefliesClient

__all__ = ["FirefliesAPIError", "FirefliesClient"]
