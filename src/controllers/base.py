from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Awaitable, Callable, Generic, Hashable, List, Optional, Set, TypeVar

from gateway.base import GatewayError
from utils.logger import get_logger

_logger = get_logger(__name__)

T = TypeVar("T")

Confirm = Callable[[str], Awaitable[bool]]


class LoadState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class RemoteCollection(Generic[T]):
    """
    One screen's view of a remote table: load-on-demand, last known-good
    items, a load error, and per-row "updating" markers.

    Every load takes a generation number. A result that is no longer the
    latest, or that lands after close(), is dropped.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[List[T]]],
        key: Callable[[T], Hashable] = lambda item: item.id,
        name: str = "items",
    ) -> None:
        self._fetch = fetch
        self._key = key
        self.name = name

        self.items: List[T] = []
        self.loading: bool = False
        self.error: Optional[str] = None
        self.updating: Set[Hashable] = set()

        self._loaded_once = False
        self._generation = 0
        self._closed = False

    @property
    def state(self) -> LoadState:
        if self.loading:
            return LoadState.LOADING
        if self.error is not None:
            return LoadState.ERROR
        if self._loaded_once:
            return LoadState.READY
        return LoadState.IDLE

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    async def load(self, fetch: Optional[Callable[[], Awaitable[List[T]]]] = None) -> bool:
        """
        Replace items with a fresh fetch. Returns True if this call's result
        was committed. ``fetch`` overrides the collection's own fetch for
        this call only.
        """
        self._generation += 1
        generation = self._generation
        self.loading = True
        try:
            items = await (fetch or self._fetch)()
        except GatewayError as exc:
            if self._is_stale(generation):
                return False
            _logger.error(f"Loading {self.name} failed: {exc.message}")
            self.error = exc.message
            return False
        finally:
            if generation == self._generation:
                self.loading = False

        if self._is_stale(generation):
            _logger.debug(f"Dropping stale {self.name} result #{generation}")
            return False
        self.items = list(items)
        self.error = None
        self._loaded_once = True
        return True

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation

    def find(self, key: Hashable) -> Optional[T]:
        for item in self.items:
            if self._key(item) == key:
                return item
        return None

    def patch(self, key: Hashable, **changes) -> Optional[T]:
        """Replace one item in place with some fields changed."""
        if self._closed:
            return None
        for idx, item in enumerate(self.items):
            if self._key(item) == key:
                self.items[idx] = dataclasses.replace(item, **changes)
                return self.items[idx]
        return None

    def is_updating(self, key: Hashable) -> bool:
        return key in self.updating

    async def mutate(self, key: Hashable, action: Callable[[], Awaitable[None]]) -> bool:
        """
        Run a remote write for one row while marking it as updating.
        Returns False if the gateway rejected it.
        """
        self.updating.add(key)
        try:
            await action()
        except GatewayError as exc:
            _logger.error(f"Updating {self.name} {key} failed: {exc.message}")
            return False
        finally:
            self.updating.discard(key)
        return True
