"""
Board session: one view's board, kept in sync with the backend.

The session owns the current BoardState. It takes its collaborators as
arguments instead of reaching for the network itself:

    feed()                        → iterable of orders (dicts or Order) or Cards
    remote_move(card_id, status)  → success, or raise / return False on failure

A move is applied locally first (card_moved fires with the optimistic
state), then confirmed remotely. If confirmation fails or times out the
card snaps back to where it was and move_failed fires exactly once.

At most one move per card may be in flight; moves of different cards run
concurrently and never undo each other.
"""
import asyncio
import inspect
import logging
from typing import Any, Callable, FrozenSet, Iterable, List, Mapping, Optional, Set

from .board import advance_card, initialize, move_card, rollback
from .config import BoardConfig
from .errors import MoveInFlight, RemoteMoveFailed
from .events import BOARD_LOADED, CARD_MOVED, MOVE_CONFIRMED, MOVE_FAILED, BoardEvents
from .schema import BoardState, Card, Order, OrderStatus, active_orders, card_from_order

logger = logging.getLogger(__name__)


def _is_async(fn: Callable) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None)
    )


async def _call_remote(remote_move: Callable, card_id: str, new_status: OrderStatus) -> Any:
    if _is_async(remote_move):
        result = await remote_move(card_id, new_status)
    else:
        result = await asyncio.to_thread(remote_move, card_id, new_status)
    if inspect.isawaitable(result):
        result = await result
    return result


async def confirm_move(
    remote_move: Callable,
    card_id: str,
    new_status: OrderStatus,
    timeout: Optional[float] = None,
) -> None:
    """
    Run the remote status update and wait for its outcome.

    Sync callables run in a worker thread so the event loop never blocks.
    An awaitable returned by a sync callable (e.g. a lambda wrapping a
    coroutine function) is awaited under the same timeout.

    Raises:
        RemoteMoveFailed: the call raised, returned False, or timed out.
    """
    try:
        result = await asyncio.wait_for(_call_remote(remote_move, card_id, new_status), timeout=timeout)
    except RemoteMoveFailed:
        raise
    except asyncio.TimeoutError as e:
        raise RemoteMoveFailed(card_id, new_status.value, f"timed out after {timeout}s") from e
    except Exception as e:
        raise RemoteMoveFailed(card_id, new_status.value, str(e) or type(e).__name__) from e

    if result is False:
        raise RemoteMoveFailed(card_id, new_status.value, "rejected by backend")


def _to_cards(records: Iterable[Any]) -> List[Card]:
    """Convert feed records to cards, skipping cancelled and unparseable records."""
    cards = []
    for record in records:
        if isinstance(record, Card):
            cards.append(record)
            continue
        if isinstance(record, Mapping):
            try:
                record = Order.from_dict(record)
            except (KeyError, TypeError, ValueError) as e:
                logger.debug(f"Skipping feed record {record.get('order_id')!r}: {e}")
                continue
        cards.extend(card_from_order(order) for order in active_orders([record]))
    return cards


class BoardSession:
    """Holds one board, applies optimistic moves and reconciles them."""

    def __init__(
        self,
        feed: Callable[[], Iterable[Any]],
        remote_move: Callable,
        config: Optional[BoardConfig] = None,
        events: Optional[BoardEvents] = None,
    ):
        self.feed = feed
        self.remote_move = remote_move
        self.config = config or BoardConfig()
        self.events = events or BoardEvents()
        self._state = BoardState()
        self._pending: Set[str] = set()

    # ──────────────────────────────────────────
    # State
    # ──────────────────────────────────────────

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def pending(self) -> FrozenSet[str]:
        """Card ids whose move is awaiting confirmation (drag disabled)."""
        return frozenset(self._pending)

    def is_pending(self, card_id: str) -> bool:
        return card_id in self._pending

    def load(self) -> BoardState:
        """Rebuild the board from the order feed."""
        self._state = initialize(_to_cards(self.feed()))
        counts = ", ".join(f"{s.value}={n}" for s, n in self._state.counts().items())
        logger.info(f"Board loaded: {counts}")
        self.events.emit(BOARD_LOADED, state=self._state)
        return self._state

    def refresh(self) -> BoardState:
        return self.load()

    # ──────────────────────────────────────────
    # Moves
    # ──────────────────────────────────────────

    async def move(
        self,
        card_id: str,
        source_status: Any,
        dest_status: Any,
        dest_index: int,
    ) -> BoardState:
        """
        Handle a drag-end: move locally, confirm remotely, roll back on failure.

        Returns the settled state. A move onto the card's own position
        returns immediately without calling the backend.

        Raises:
            MoveInFlight: the card's previous move has not resolved yet.
            InvalidMove: unknown card or column; nothing changes.
            RemoteMoveFailed: the backend rejected the move; already rolled back.
        """
        if card_id in self._pending:
            raise MoveInFlight(card_id)
        new_state, snapshot = move_card(self._state, card_id, source_status, dest_status, dest_index)
        if new_state is snapshot:
            return self._state
        return await self._reconcile(card_id, new_state, snapshot)

    async def advance(self, card_id: str) -> BoardState:
        """Move a card one column forward (the order card's status button)."""
        if card_id in self._pending:
            raise MoveInFlight(card_id)
        new_state, snapshot = advance_card(self._state, card_id)
        return await self._reconcile(card_id, new_state, snapshot)

    async def _reconcile(self, card_id: str, optimistic: BoardState, snapshot: BoardState) -> BoardState:
        status, _ = optimistic.find(card_id)
        self._state = optimistic
        self._pending.add(card_id)
        self.events.emit(CARD_MOVED, card_id=card_id, state=optimistic)

        try:
            await confirm_move(self.remote_move, card_id, status, timeout=self.config.move_timeout)
        except RemoteMoveFailed as e:
            self._pending.discard(card_id)
            self._state = rollback(self._state, optimistic, snapshot, card_id)
            logger.warning(f"Rolled back card {card_id}: {e}")
            self.events.emit(MOVE_FAILED, card_id=card_id, error=e, state=self._state)
            raise
        except asyncio.CancelledError:
            self._pending.discard(card_id)
            self._state = rollback(self._state, optimistic, snapshot, card_id)
            logger.warning(f"Move of card {card_id} cancelled, rolled back")
            raise

        self._pending.discard(card_id)
        logger.info(f"Card {card_id} moved to {status.value}")
        self.events.emit(MOVE_CONFIRMED, card_id=card_id, status=status)
        return self._state
