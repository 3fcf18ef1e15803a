"""Transfer status tracking.

Each ``TransferStatusProvider`` tracks transaction keys for one bridge
service and pushes updates to its subscribed receivers. Receivers always get
the prefixed key (``key_prefix + key``) so several providers can share one
receiver without colliding.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Set, Tuple

from cachetools import TTLCache

from .models import (
    BridgeTransferStatus,
    GetTransferStatusParams,
    TransferFailureReason,
    TransferStatus,
)

logger = logging.getLogger(__name__)

FAILURE_REASON_DISPLAY = {
    TransferFailureReason.INSUFFICIENT_FEE: "Insufficient fee",
}


def display_reason_for(reason: Optional[TransferFailureReason]) -> Optional[str]:
    if reason is None:
        return None
    return FAILURE_REASON_DISPLAY.get(reason, reason.value)


def encode_status_key(params: GetTransferStatusParams) -> str:
    """Serialize transfer status params into a tracking key."""
    return params.model_dump_json(by_alias=True)


def decode_status_key(key: str) -> GetTransferStatusParams:
    return GetTransferStatusParams.model_validate_json(key)


class TransferStatusReceiver(Protocol):
    """Destination for status updates of tracked transactions."""

    def receive_new_tx_status(
        self,
        prefixed_key: str,
        status: TransferStatus,
        display_reason: Optional[str] = None,
    ) -> None: ...


class TransferStatusProvider(ABC):
    """Plugin that tracks many transactions against one remote source."""

    key_prefix: str
    source_display_name: Optional[str] = None

    FINISHED_KEY_TTL = 3600.0  # seconds a terminal key is remembered

    def __init__(self) -> None:
        if not getattr(self, "key_prefix", None):
            raise TypeError(f"{type(self).__name__} must define key_prefix")
        self._receivers: List[TransferStatusReceiver] = []
        self._tracked: Set[str] = set()
        self._finished: TTLCache[str, TransferStatus] = TTLCache(
            maxsize=10000, ttl=self.FINISHED_KEY_TTL
        )
        self._untracked: TTLCache[str, bool] = TTLCache(
            maxsize=10000, ttl=self.FINISHED_KEY_TTL
        )

    def subscribe(self, receiver: TransferStatusReceiver) -> Callable[[], None]:
        """Register ``receiver`` and return a callable that unsubscribes it."""
        self._receivers.append(receiver)

        def unsubscribe() -> None:
            if receiver in self._receivers:
                self._receivers.remove(receiver)

        return unsubscribe

    def prefixed_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def is_tracking(self, key: str) -> bool:
        return key in self._tracked

    def mark_tracked(self, key: str) -> None:
        """Record ``key`` as tracked, forgetting any earlier terminal or untrack marker."""
        self._finished.pop(key, None)
        self._untracked.pop(key, None)
        self._tracked.add(key)

    @abstractmethod
    def track_tx_status(self, key: str) -> None:
        """Begin tracking ``key`` (e.g. a tx hash). Updates arrive via receivers."""

    @abstractmethod
    def make_explorer_url(self, key: str) -> str:
        """Build the explorer link for ``key`` without any I/O."""

    def untrack(self, key: str) -> None:
        """Stop tracking ``key``; no further updates are delivered for it."""
        self._tracked.discard(key)
        self._untracked[key] = True

    def publish(
        self,
        key: str,
        status: TransferStatus,
        display_reason: Optional[str] = None,
    ) -> bool:
        """Deliver an update for ``key`` to every receiver.

        Returns False when the update was dropped because ``key`` already
        reached a terminal status or was untracked.
        """
        if key in self._untracked:
            logger.debug(
                "Dropping %s update for untracked %s%s", status.value, self.key_prefix, key
            )
            return False
        finished = self._finished.get(key)
        if finished is not None:
            logger.warning(
                "Dropping %s update for %s%s after terminal status %s",
                status.value,
                self.key_prefix,
                key,
                finished.value,
            )
            return False
        if status.is_terminal:
            self._finished[key] = status
            self._tracked.discard(key)

        prefixed = self.prefixed_key(key)
        for receiver in list(self._receivers):
            try:
                receiver.receive_new_tx_status(prefixed, status, display_reason)
            except Exception:
                logger.exception("Status receiver failed for %s", prefixed)
        return True


class PollingTransferStatusProvider(TransferStatusProvider):
    """Tracks each key in its own task that polls ``fetch_status``.

    ``pending`` is published when tracking starts and afterwards only changes
    are published. A failed poll publishes ``connection-error`` and polling
    continues with exponential backoff until a status is read again.
    """

    def __init__(
        self,
        poll_interval_s: float = 10.0,
        max_tracking_s: Optional[float] = 86400.0,
        max_backoff_s: float = 300.0,
    ) -> None:
        super().__init__()
        if poll_interval_s < 0:
            raise ValueError("poll_interval_s cannot be negative")
        self.poll_interval_s = poll_interval_s
        self.max_tracking_s = max_tracking_s
        self.max_backoff_s = max(max_backoff_s, poll_interval_s)
        self._tasks: Dict[str, asyncio.Task] = {}

    @abstractmethod
    async def fetch_status(self, key: str) -> BridgeTransferStatus:
        """Read the current status of ``key`` from the remote source."""

    def track_tx_status(self, key: str) -> None:
        if key in self._tasks:
            return
        self.mark_tracked(key)
        task = asyncio.get_running_loop().create_task(self._poll(key))
        self._tasks[key] = task

        def _forget(done: asyncio.Task) -> None:
            if self._tasks.get(key) is done:
                del self._tasks[key]

        task.add_done_callback(_forget)

    async def _poll(self, key: str) -> None:
        loop = asyncio.get_running_loop()
        deadline = (
            loop.time() + self.max_tracking_s if self.max_tracking_s is not None else None
        )
        last = TransferStatus.PENDING
        self.publish(key, last)
        delay = self.poll_interval_s

        while self.is_tracking(key):
            if deadline is not None and loop.time() >= deadline:
                logger.info("Giving up on %s after %ss", self.prefixed_key(key), self.max_tracking_s)
                super().untrack(key)
                return
            await asyncio.sleep(delay)

            display_reason = None
            try:
                result = await self.fetch_status(key)
            except Exception as exc:
                logger.debug("Status poll for %s failed: %s", self.prefixed_key(key), exc)
                status = TransferStatus.CONNECTION_ERROR
                delay = min(max(delay * 2, self.poll_interval_s), self.max_backoff_s)
            else:
                status = result.status
                display_reason = display_reason_for(result.reason)
                delay = self.poll_interval_s

            if not self.is_tracking(key):
                return
            if status != last:
                self.publish(key, status, display_reason)
                last = status
            if status.is_terminal:
                return

    def untrack(self, key: str) -> None:
        super().untrack(key)
        task = self._tasks.pop(key, None)
        if task is not None:
            task.cancel()

    async def wait_idle(self) -> None:
        """Wait until every tracked key has finished."""
        while True:
            running = [task for task in self._tasks.values() if not task.done()]
            if not running:
                return
            await asyncio.gather(*running, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel all tracking tasks."""
        tasks = list(self._tasks.values())
        for key in list(self._tasks):
            super().untrack(key)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()


class TransferStatusRouter:
    """Routes prefixed keys to the provider owning the prefix."""

    def __init__(self, providers: Iterable[TransferStatusProvider]) -> None:
        self._providers: Dict[str, TransferStatusProvider] = {}
        for provider in providers:
            prefix = provider.key_prefix
            for existing in self._providers:
                if existing.startswith(prefix) or prefix.startswith(existing):
                    raise ValueError(
                        f"Key prefix '{prefix}' is ambiguous with '{existing}'"
                    )
            self._providers[prefix] = provider

    @property
    def providers(self) -> List[TransferStatusProvider]:
        return list(self._providers.values())

    def subscribe(self, receiver: TransferStatusReceiver) -> Callable[[], None]:
        """Subscribe ``receiver`` to every provider."""
        unsubscribers = [provider.subscribe(receiver) for provider in self._providers.values()]

        def unsubscribe() -> None:
            for unsubscribe_one in unsubscribers:
                unsubscribe_one()

        return unsubscribe

    def resolve(self, prefixed_key: str) -> Tuple[TransferStatusProvider, str]:
        for prefix, provider in self._providers.items():
            if prefixed_key.startswith(prefix):
                return provider, prefixed_key[len(prefix):]
        raise KeyError(f"No status provider owns key '{prefixed_key}'")

    def track(self, prefixed_key: str) -> None:
        provider, key = self.resolve(prefixed_key)
        provider.track_tx_status(key)

    def untrack(self, prefixed_key: str) -> None:
        provider, key = self.resolve(prefixed_key)
        provider.untrack(key)

    def explorer_url(self, prefixed_key: str) -> str:
        provider, key = self.resolve(prefixed_key)
        return provider.make_explorer_url(key)

    async def aclose(self) -> None:
        for provider in self._providers.values():
            if isinstance(provider, PollingTransferStatusProvider):
                await provider.aclose()
