#!/usr/bin/env python3
"""
Quick verification that the order board works end-to-end.

Runs a small board against in-memory collaborators: loads a feed, makes a
move the backend accepts, then one it rejects and checks the rollback.
"""
import asyncio
import logging
import sys

from pkg.kanban.errors import RemoteMoveFailed
from pkg.kanban.events import MOVE_FAILED
from pkg.kanban.schema import BOARD_STATUSES, COLUMN_TITLES, OrderStatus
from pkg.kanban.session import BoardSession

ORDERS = [
    {"order_id": "1", "order_number": "1001", "customer_name": "Ana Cruz", "status": "pending", "total_amount": 15400.0},
    {"order_id": "2", "order_number": "1002", "customer_name": "Ben Reyes", "status": "pending", "total_amount": 8200.0},
    {"order_id": "3", "order_number": "1003", "customer_name": "Cara Lim", "status": "shipped", "total_amount": 23990.0},
    {"order_id": "4", "order_number": "1004", "customer_name": "Dan Sy", "status": "cancelled", "total_amount": 500.0},
]


class FakeBackend:
    """Accepts moves unless the card id is listed in reject."""

    def __init__(self, reject=()):
        self.reject = set(reject)
        self.calls = []

    async def __call__(self, card_id, status):
        self.calls.append((card_id, status))
        await asyncio.sleep(0)
        if card_id in self.reject:
            raise ConnectionError("backend unavailable")
        return True


def show(state):
    for status in BOARD_STATUSES:
        ids = ", ".join(card.card_id for card in state[status]) or "-"
        print(f"   {COLUMN_TITLES[status]:<11} {ids}")


async def run() -> bool:
    backend = FakeBackend(reject={"1"})
    session = BoardSession(feed=lambda: ORDERS, remote_move=backend)
    errors = []
    session.events.subscribe(MOVE_FAILED, lambda card_id, error, state: errors.append(error))

    print("\n[1/3] Loading board from feed...")
    initial = session.load()
    show(initial)

    print("\n[2/3] Moving order 2 pending → processing (backend accepts)...")
    await session.move("2", "pending", "processing", 0)
    show(session.state)
    if [c.card_id for c in session.state[OrderStatus.PROCESSING]] != ["2"]:
        print("❌ Move was not applied")
        return False
    print("✅ Move confirmed")

    print("\n[3/3] Moving order 1 pending → delivered (backend rejects)...")
    before = session.state
    try:
        await session.move("1", "pending", "delivered", 0)
    except RemoteMoveFailed as e:
        print(f"   error: {e}")
    show(session.state)
    if session.state != before or len(errors) != 1:
        print("❌ Rollback failed")
        return False
    print("✅ Rolled back to snapshot, one error reported")
    return True


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [order-board] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    print("=" * 60)
    print("Order Board Verification")
    print("=" * 60)
    ok = asyncio.run(run())
    print("\n" + "=" * 60)
    print("✅ All checks passed" if ok else "❌ Verification failed")
    print("=" * 60)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
