"""
Adapters package for the events service.

Wraps the service's external collaborators:

- TicketmasterClient: the upstream events search API (httpx)
- MongoSubscriberStore / InMemorySubscriberStore: subscriber persistence
- ConfirmationMailer: the SMTP mail relay

Adapters map collaborator failures onto shared errors and keep no state
beyond their connections.
"""

from .ticketmaster_client import TicketmasterClient
from .subscriber_store import (
    InMemorySubscriberStore,
    MongoSubscriberStore,
    SubscriberStoreProtocol,
    build_store,
)
from .mailer import ConfirmationMailer

__all__ = [
    "TicketmasterClient",
    "InMemorySubscriberStore",
    "MongoSubscriberStore",
    "SubscriberStoreProtocol",
    "build_store",
    "ConfirmationMailer",
]
