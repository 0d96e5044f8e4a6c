"""Bookkeeping for submitted transactions until they settle."""

import asyncio
import logging
from typing import Callable, Optional, Protocol

from amm_swap.core.assets import ExchangeRequest, RequestKind, normalize_id
from amm_swap.errors import DuplicateRequest, SettlementNotFound

logger = logging.getLogger(__name__)


class SettlementSource(Protocol):
    """What the tracker needs from the gateway."""

    async def await_settlement(self, tx_id: str) -> Optional[int]:
        ...


SettledCallback = Callable[[ExchangeRequest, Optional[int], Optional[BaseException]], None]


class PendingExchangeTracker:
    """Keeps one entry per in-flight transaction and drops it when it settles.

    An entry is added by begin() and removed exactly once when the
    gateway's await resolves, whatever the outcome: mined, reverted, not
    found, or failed. The tracker does not interpret the receipt status
    and does not stop callers from submitting more transactions; len()
    is exposed so callers can gate their own actions on it.

    All mutations happen between awaits on the event loop thread, so the
    pending mapping never needs a lock.
    """

    def __init__(self, source: SettlementSource, on_settled: Optional[SettledCallback] = None):
        """
        Args:
            source: Usually the ExchangeGateway
            on_settled: Called as (request, status, error) after an entry is removed
        """
        self._source = source
        self._on_settled = on_settled
        self._pending: dict[str, ExchangeRequest] = {}
        self._tasks: set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, tx_id: object) -> bool:
        return tx_id in self._pending

    def pending(self) -> tuple[ExchangeRequest, ...]:
        """Snapshot of the in-flight requests."""
        return tuple(self._pending.values())

    def is_pending(
        self, kind: Optional[RequestKind] = None, asset_id: Optional[str] = None
    ) -> bool:
        """True if any in-flight request matches kind and/or subject asset."""
        asset_id = normalize_id(asset_id) if asset_id else None
        return any(
            (kind is None or request.kind is kind)
            and (asset_id is None or request.subject_asset == asset_id)
            for request in self._pending.values()
        )

    def begin(self, request: ExchangeRequest) -> "asyncio.Task[int]":
        """Register request and start awaiting its settlement.

        Must be called with a running event loop. The returned task
        resolves to the receipt status (success or revert alike), raises
        SettlementNotFound if the ledger has no such transaction, or
        re-raises whatever the gateway raised.

        Raises:
            DuplicateRequest: request.id is already pending
        """
        if request.id in self._pending:
            raise DuplicateRequest(request.id)

        task = asyncio.get_running_loop().create_task(self._await(request))
        self._pending[request.id] = request
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        logger.debug("tracking %s %s (%d pending)", request.kind.value, request.id, len(self._pending))
        return task

    async def settle(self, request: ExchangeRequest) -> int:
        """begin() and wait for the result."""
        return await self.begin(request)

    async def _await(self, request: ExchangeRequest) -> int:
        try:
            status = await self._source.await_settlement(request.id)
        except BaseException as e:
            self._remove(request, None, e)
            raise

        if status is None:
            error = SettlementNotFound(request.id)
            self._remove(request, None, error)
            raise error

        self._remove(request, status, None)
        return status

    def _task_done(self, task: "asyncio.Task[int]") -> None:
        self._tasks.discard(task)
        # Outcomes were already reported through logging and on_settled
        if not task.cancelled():
            task.exception()

    def _remove(
        self, request: ExchangeRequest, status: Optional[int], error: Optional[BaseException]
    ) -> None:
        if self._pending.pop(request.id, None) is None:
            return
        if error is None:
            logger.info("%s %s settled with status %s", request.kind.value, request.id, status)
        else:
            logger.info("%s %s resolved with error: %r", request.kind.value, request.id, error)
        if self._on_settled is not None:
            self._on_settled(request, status, error)
