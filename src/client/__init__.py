"""Typed HTTP client for the Linkshelf API."""
from client.links_client import ApiError, ApiSession, LinksClient, UnauthorizedError

__all__ = ["ApiError", "ApiSession", "LinksClient", "UnauthorizedError"]
