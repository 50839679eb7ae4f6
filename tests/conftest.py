"""Shared test fixtures for order board tests."""

import sys
from pathlib import Path

import pytest

# Ensure the project root (pkg/) is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from pkg.kanban.schema import Card, OrderStatus


@pytest.fixture
def make_card():
    """Build a card with a small payload naming it."""
    def _make(card_id, status="pending"):
        return Card(card_id=str(card_id), status=OrderStatus(status), payload={"order_number": f"#{card_id}"})
    return _make


@pytest.fixture
def scenario_cards(make_card):
    """Orders 1 and 2 pending, order 3 shipped."""
    return [make_card(1, "pending"), make_card(2, "pending"), make_card(3, "shipped")]
