"""
Subscriber persistence for the events service.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol, Tuple

from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from shared.logging import get_logger
from shared.errors import PersistenceError
from ..models import Subscriber


class SubscriberStoreProtocol(Protocol):
    async def start(self) -> None:
        ...

    async def stop(self) -> None:
        ...

    async def ping(self) -> bool:
        ...

    async def upsert_subscription(
        self,
        *,
        name: str,
        email: str,
        event_id: str,
        subscribe: Optional[bool] = None,
    ) -> Tuple[Subscriber, bool]:
        ...

    async def unsubscribe(self, email: str) -> Optional[Subscriber]:
        ...


def _merge_subscription(
    existing: Optional[Subscriber],
    *,
    name: str,
    email: str,
    event_id: str,
    subscribe: Optional[bool],
    now: datetime,
) -> Subscriber:
    """Apply a subscription request to the current document (None when new)."""
    if existing is None:
        return Subscriber(
            name=name,
            email=email,
            events=[event_id],
            subscribed=subscribe is not False,
            createdAt=now,
        )

    events = list(existing.events)
    if event_id not in events:
        events.append(event_id)
    return existing.model_copy(update={
        "name": name,
        "events": events,
        "subscribed": existing.subscribed if subscribe is None else subscribe,
    })


class MongoSubscriberStore:
    """MongoDB-backed subscriber store.

    A subscription is one atomic ``find_one_and_update`` with ``upsert=True``:
    ``$set`` overwrites the name (and the subscribed flag when given),
    ``$addToSet`` appends the event id without duplicates and
    ``$setOnInsert`` fills the creation-only fields. Concurrent requests for
    one email therefore resolve last-writer-wins on name/subscribed while
    event additions are never lost. The unique index on ``email`` backs the
    one-subscriber-per-email invariant.
    """

    def __init__(self, uri: str, database: str = "sydney_events", collection: str = "subscribers"):
        self.uri = uri
        self.database_name = database
        self.collection_name = collection
        self.logger = get_logger("events.subscriber_store")
        self._client: Optional[AsyncMongoClient] = None
        self._collection = None

    async def start(self) -> None:
        """Connect and ensure the unique email index.

        A store that cannot be reached is logged, not fatal; requests that
        touch it will fail with PersistenceError until it recovers.
        """
        self._client = AsyncMongoClient(self.uri, tz_aware=True)
        self._collection = self._client[self.database_name][self.collection_name]
        try:
            await self._collection.create_index("email", unique=True)
            self.logger.info("Connected to MongoDB", database=self.database_name)
        except PyMongoError as exc:
            self.logger.error("MongoDB connection error", error=str(exc))

    async def stop(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._collection = None
            self.logger.info("MongoDB client closed")

    async def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as exc:
            self.logger.warning("MongoDB ping failed", error=str(exc))
            return False

    def _require_collection(self):
        if self._collection is None:
            raise PersistenceError(details="Subscriber store not started")
        return self._collection

    async def upsert_subscription(
        self,
        *,
        name: str,
        email: str,
        event_id: str,
        subscribe: Optional[bool] = None,
    ) -> Tuple[Subscriber, bool]:
        """Create or update the subscriber for email; return (subscriber, created)."""
        collection = self._require_collection()
        now = datetime.now(timezone.utc)

        set_fields: Dict[str, Any] = {"name": name}
        on_insert: Dict[str, Any] = {"categories": [], "createdAt": now}
        if subscribe is None:
            on_insert["subscribed"] = True
        else:
            set_fields["subscribed"] = subscribe

        try:
            before = await collection.find_one_and_update(
                {"email": email},
                {
                    "$set": set_fields,
                    "$addToSet": {"events": event_id},
                    "$setOnInsert": on_insert,
                },
                upsert=True,
                return_document=ReturnDocument.BEFORE,
            )
        except PyMongoError as exc:
            self.logger.error("Subscriber upsert failed", email=email, error=str(exc))
            raise PersistenceError()

        existing = Subscriber.model_validate(before) if before else None
        subscriber = _merge_subscription(
            existing, name=name, email=email, event_id=event_id, subscribe=subscribe, now=now
        )
        return subscriber, existing is None

    async def unsubscribe(self, email: str) -> Optional[Subscriber]:
        """Clear the subscribed flag; None when no subscriber has this email."""
        collection = self._require_collection()
        try:
            after = await collection.find_one_and_update(
                {"email": email},
                {"$set": {"subscribed": False}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            self.logger.error("Unsubscribe failed", email=email, error=str(exc))
            raise PersistenceError()
        return Subscriber.model_validate(after) if after else None


class InMemorySubscriberStore:
    """Simple in-memory subscriber storage (no MongoDB)."""

    def __init__(self) -> None:
        self.subscribers: Dict[str, Subscriber] = {}

    async def start(self) -> None:
        return None

    async def stop(self) -> None:
        return None

    async def ping(self) -> bool:
        return True

    async def upsert_subscription(
        self,
        *,
        name: str,
        email: str,
        event_id: str,
        subscribe: Optional[bool] = None,
    ) -> Tuple[Subscriber, bool]:
        existing = self.subscribers.get(email)
        subscriber = _merge_subscription(
            existing,
            name=name,
            email=email,
            event_id=event_id,
            subscribe=subscribe,
            now=datetime.now(timezone.utc),
        )
        self.subscribers[email] = subscriber
        return subscriber, existing is None

    async def unsubscribe(self, email: str) -> Optional[Subscriber]:
        existing = self.subscribers.get(email)
        if existing is None:
            return None
        updated = existing.model_copy(update={"subscribed": False})
        self.subscribers[email] = updated
        return updated


def build_store(mongodb_uri: Optional[str], database: str) -> SubscriberStoreProtocol:
    """Pick the MongoDB store when a URI is configured, else the in-memory one."""
    if mongodb_uri:
        return MongoSubscriberStore(mongodb_uri, database)
    get_logger("events.subscriber_store").warning(
        "MONGODB_URI not set; subscribers are kept in memory only"
    )
    return InMemorySubscriberStore()
