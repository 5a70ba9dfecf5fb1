"""Subscription registry mapping view keys to callbacks."""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Any, Callable, Optional

from . import keys
from .keys import ViewKey

logger = logging.getLogger(__name__)

Callback = Callable[[Any], None]
Projector = Callable[[ViewKey], Any]


class Subscription:
    """Handle returned by :meth:`SubscriptionRegistry.subscribe`.

    Calling the handle, or :meth:`unsubscribe`, removes exactly this
    callback. Repeated calls are harmless.
    """

    def __init__(self, registry: "SubscriptionRegistry", key: ViewKey, token: int) -> None:
        self._registry = registry
        self.key = key
        self._token = token
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._active = False
            self._registry._remove(self.key, self._token)

    __call__ = unsubscribe


class SubscriptionRegistry:
    """Buckets of callbacks keyed by value-equal view keys.

    Every delivery (replay on subscribe or a later invalidation) happens
    under one reentrant lock, so a callback never sees an older projection
    after a newer one and may itself subscribe or trigger mutations.
    """

    def __init__(self, projector: Projector) -> None:
        self._projector = projector
        self._buckets: dict[ViewKey, dict[int, Callback]] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.RLock()

    def subscribe(self, key: ViewKey, callback: Callback) -> Subscription:
        keys.validate(key)
        with self._lock:
            token = next(self._tokens)
            self._buckets.setdefault(key, {})[token] = callback
            subscription = Subscription(self, key, token)
            self._deliver(key, callback, self._projector(key))
        return subscription

    def invalidate(self, key: ViewKey) -> int:
        """Recompute ``key`` and notify its callbacks; returns how many ran."""

        with self._lock:
            bucket = self._buckets.get(key)
            if not bucket:
                return 0
            value = self._projector(key)
            callbacks = list(bucket.values())
            for callback in callbacks:
                self._deliver(key, callback, value)
            return len(callbacks)

    def invalidate_family(self, kind: str) -> int:
        with self._lock:
            matching = [key for key in self._buckets if key.kind == kind]
            return sum(self.invalidate(key) for key in matching)

    def invalidate_all(self) -> int:
        with self._lock:
            return sum(self.invalidate(key) for key in list(self._buckets))

    def active_keys(self) -> list[ViewKey]:
        with self._lock:
            return list(self._buckets)

    def subscriber_count(self, key: Optional[ViewKey] = None) -> int:
        with self._lock:
            if key is not None:
                return len(self._buckets.get(key, {}))
            return sum(len(bucket) for bucket in self._buckets.values())

    def clear(self) -> None:
        with self._lock:
            self._buckets.clear()

    def _remove(self, key: ViewKey, token: int) -> None:
        with self._lock:
            bucket = self._buckets.get(key)
            if bucket is None:
                return
            bucket.pop(token, None)
            if not bucket:
                del self._buckets[key]

    def _deliver(self, key: ViewKey, callback: Callback, value: Any) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception("subscriber callback for %s failed", key)
