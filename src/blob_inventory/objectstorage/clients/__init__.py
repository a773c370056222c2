"""Listing endpoint clients and credentials."""

from .credentials import BearerToken, acquire_token
from .listing_client import ListingClient, RawResponse, build_listing_url

__all__ = [
    "BearerToken",
    "ListingClient",
    "RawResponse",
    "acquire_token",
    "build_listing_url",
]
