"""
Domain package for the events service: query validation for the events
proxy and the subscription workflows.
"""

from .event_query import EventSearchQuery, reshape_events
from .subscriptions import SubscriptionService

__all__ = ["EventSearchQuery", "reshape_events", "SubscriptionService"]
