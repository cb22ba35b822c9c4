"""
In-memory response cache shared by every proxied endpoint.
"""

from .ttl import TTLCache, fetch_through

__all__ = ['TTLCache', 'fetch_through']
