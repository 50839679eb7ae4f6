"""
Order board errors.

Local errors (InvalidMove and friends) are raised before any state
changes. Remote errors are rolled back by the session and surfaced once.
"""
from typing import Optional


class BoardError(Exception):
    """Base class for all order board errors."""
    pass


class ConfigError(BoardError):
    """Raised when configuration is invalid or incomplete."""
    pass


class InvalidMove(BoardError):
    """Raised when a move names an unknown card or column."""
    pass


class MoveInFlight(InvalidMove):
    """Raised when a card is moved while its previous move is still pending."""

    def __init__(self, card_id: str):
        super().__init__(f"Card {card_id} already has a move in flight")
        self.card_id = card_id


class RemoteMoveFailed(BoardError):
    """Raised when the remote status update did not succeed."""

    def __init__(self, card_id: str, status: str, reason: Optional[str] = None):
        message = f"Failed to move card {card_id} to {status}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.card_id = card_id
        self.status = status
        self.reason = reason


class FeedError(BoardError):
    """Raised when the order feed cannot be fetched."""
    pass
