"""Collaborator clients package."""

from tour_pricing.clients.rate_lookup import InMemoryRateLookup, RateLookup

__all__ = ["InMemoryRateLookup", "RateLookup"]
