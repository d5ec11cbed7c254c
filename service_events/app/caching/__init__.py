"""
Events service caching package.

Holds the short-lived, process-local response cache that fronts the events
proxy. The cache is owned by the service instance, never a module global.
"""

from .response_cache import ResponseCache

__all__ = ["ResponseCache"]
