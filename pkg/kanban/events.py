"""
Board event bridge: notifies the UI layer about board changes.

Event types (keyword arguments in parentheses):
  board_loaded    (state)                  feed loaded or refreshed
  card_moved      (card_id, state)         optimistic state, before the remote call
  move_confirmed  (card_id, status)        backend accepted the move
  move_failed     (card_id, error, state)  rolled back; show the error once
"""
import logging
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

BOARD_LOADED = "board_loaded"
CARD_MOVED = "card_moved"
MOVE_CONFIRMED = "move_confirmed"
MOVE_FAILED = "move_failed"

EVENT_TYPES = (BOARD_LOADED, CARD_MOVED, MOVE_CONFIRMED, MOVE_FAILED)


class BoardEvents:
    """Routes board notifications to subscribed callbacks."""

    def __init__(self):
        self.subscribers: Dict[str, List[Callable]] = {}  # event_type -> callbacks

    def subscribe(self, event_type: str, callback: Callable) -> None:
        """Register a callback for an event type."""
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Invalid event_type: {event_type}")
        self.subscribers.setdefault(event_type, []).append(callback)

    def unsubscribe(self, event_type: str, callback: Callable) -> None:
        callbacks = self.subscribers.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event_type: str, **kwargs) -> None:
        """Emit an event to all subscribers. A failing callback does not stop the rest."""
        for callback in list(self.subscribers.get(event_type, [])):
            try:
                callback(**kwargs)
            except Exception as e:
                logger.warning(f"Error in {event_type} callback: {e}")
