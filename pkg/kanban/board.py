"""
Board reconciler: partition orders into columns and apply moves.

Every function here is pure. A move returns the optimistic new state
together with the snapshot it was applied to, so the caller can restore
the snapshot if the backend rejects the move:

    new_state, snapshot = move_card(state, "42", "pending", "processing", 0)
    render(new_state)
    ...remote call fails...
    render(rollback(current, new_state, snapshot, "42"))
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .errors import InvalidMove
from .schema import BOARD_STATUSES, BoardState, Card, OrderStatus, board_status

logger = logging.getLogger(__name__)

StatusLike = Union[str, OrderStatus]

# One-click "advance" path; delivered is terminal
_NEXT_STATUS: Dict[OrderStatus, OrderStatus] = {
    OrderStatus.PENDING: OrderStatus.PROCESSING,
    OrderStatus.PROCESSING: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
}


def _column_key(status: StatusLike, role: str) -> OrderStatus:
    key = board_status(status)
    if key is None:
        raise InvalidMove(f"Unknown {role} column: {status!r}")
    return key


def _index_of(cards: List[Card], card_id: str) -> Optional[int]:
    for index, card in enumerate(cards):
        if card.card_id == card_id:
            return index
    return None


def initialize(cards: Iterable[Card]) -> BoardState:
    """
    Build a board from a flat card sequence.

    Cards are grouped by status in input order. Cards whose status has no
    column (e.g. cancelled) are dropped. A card id seen twice raises
    InvalidMove.
    """
    columns: Dict[OrderStatus, List[Card]] = {s: [] for s in BOARD_STATUSES}
    seen = set()
    for card in cards:
        status = board_status(card.status)
        if status is None:
            continue
        if card.card_id in seen:
            raise InvalidMove(f"Duplicate card id in feed: {card.card_id}")
        seen.add(card.card_id)
        if card.status is not status:
            card = card.with_status(status)
        columns[status].append(card)
    return BoardState(columns)


def move_card(
    state: BoardState,
    card_id: str,
    source_status: StatusLike,
    dest_status: StatusLike,
    dest_index: int,
) -> Tuple[BoardState, BoardState]:
    """
    Move a card between (or within) columns.

    Returns (new_state, snapshot) where snapshot is the state the move was
    applied to. dest_index is clamped to the destination column after the
    card has been removed from its source. Moving a card onto its own
    position returns (state, state).

    Raises:
        InvalidMove: unknown column, or card not in the source column.
    """
    source = _column_key(source_status, "source")
    dest = _column_key(dest_status, "destination")

    source_cards = list(state[source])
    index = _index_of(source_cards, card_id)
    if index is None:
        raise InvalidMove(f"Card {card_id} is not in column {source.value}")

    card = source_cards.pop(index)
    dest_cards = source_cards if dest is source else list(state[dest])
    position = max(0, min(int(dest_index), len(dest_cards)))

    if dest is source and position == index:
        logger.debug(f"Move of card {card_id} is a no-op ({source.value}[{index}])")
        return state, state

    dest_cards.insert(position, card.with_status(dest))
    new_state = state.replace({source: source_cards, dest: dest_cards})
    return new_state, state


def rollback(
    current: BoardState,
    optimistic: BoardState,
    snapshot: BoardState,
    card_id: str,
) -> BoardState:
    """
    Undo a failed move.

    If nothing has changed since the move was applied, the snapshot is
    returned as-is. Otherwise only the failed card goes back to its
    snapshot column and index, leaving later moves of other cards intact.
    """
    if current == optimistic:
        return snapshot

    original = snapshot.find(card_id)
    located = current.find(card_id)
    if original is None or located is None:
        return current

    orig_status, orig_index = original
    cur_status, cur_index = located

    cur_cards = list(current[cur_status])
    cur_cards.pop(cur_index)
    dest_cards = cur_cards if cur_status is orig_status else list(current[orig_status])
    position = max(0, min(orig_index, len(dest_cards)))
    dest_cards.insert(position, snapshot[orig_status][orig_index])
    return current.replace({cur_status: cur_cards, orig_status: dest_cards})


def next_status(status: StatusLike) -> Optional[OrderStatus]:
    """Status a card advances to, or None when it cannot advance."""
    key = board_status(status)
    return _NEXT_STATUS.get(key) if key else None


def advance_card(state: BoardState, card_id: str) -> Tuple[BoardState, BoardState]:
    """Move a card to the end of the next column (pending → processing → …)."""
    located = state.find(card_id)
    if located is None:
        raise InvalidMove(f"Card {card_id} is not on the board")
    status, _ = located
    target = next_status(status)
    if target is None:
        raise InvalidMove(f"Card {card_id} is already {status.value}")
    return move_card(state, card_id, status, target, len(state[target]))
