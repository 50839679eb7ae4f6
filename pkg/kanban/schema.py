"""
Order board schema: statuses, cards, board state and the order payload.

Board columns:
  Pending → Processing → Shipped → Delivered

Cancelled orders exist in the order model but never reach the board.
Cards and board states are immutable values; every board operation
returns a new state.
"""
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Iterable, Iterator, Mapping, Tuple, Union


class OrderStatus(Enum):
    """Order lifecycle statuses as stored by the backend."""
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"      # Never shown on the board

    @classmethod
    def from_str(cls, value: Union[str, "OrderStatus"]) -> "OrderStatus":
        """Parse a status value. Raises ValueError for unknown statuses."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class PaymentStatus(Enum):
    PAID = "paid"
    PENDING = "pending"
    FAILED = "failed"


# Display order of the board columns
BOARD_STATUSES: Tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)

COLUMN_TITLES: Dict[OrderStatus, str] = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.PROCESSING: "Processing",
    OrderStatus.SHIPPED: "Shipped",
    OrderStatus.DELIVERED: "Delivered",
}


def board_status(value: Union[str, OrderStatus, None]) -> Optional[OrderStatus]:
    """Return the board column for a status value, or None if it has no column."""
    try:
        status = OrderStatus.from_str(value)
    except ValueError:
        return None
    return status if status in BOARD_STATUSES else None


@dataclass(frozen=True)
class Card:
    """One order as seen by the board. The payload is carried, never inspected."""
    card_id: str
    status: OrderStatus
    payload: Any = None

    def with_status(self, status: OrderStatus) -> "Card":
        return Card(card_id=self.card_id, status=status, payload=self.payload)

    def to_dict(self) -> Dict[str, Any]:
        payload = self.payload.to_dict() if hasattr(self.payload, "to_dict") else self.payload
        return {"card_id": self.card_id, "status": self.status.value, "payload": payload}


class BoardState(Mapping):
    """
    Status → ordered column of cards, for exactly the four board statuses.

    Read-only mapping keyed by OrderStatus. Equality is by value: two
    states are equal when every column holds equal cards in equal order.
    """

    __slots__ = ("_columns",)

    def __init__(self, columns: Optional[Mapping[OrderStatus, Iterable[Card]]] = None):
        columns = columns or {}
        self._columns: Dict[OrderStatus, Tuple[Card, ...]] = {
            status: tuple(columns.get(status, ())) for status in BOARD_STATUSES
        }

    # ── Mapping protocol ──

    def __getitem__(self, status: Union[str, OrderStatus]) -> Tuple[Card, ...]:
        key = board_status(status)
        if key is None:
            raise KeyError(status)
        return self._columns[key]

    def __iter__(self) -> Iterator[OrderStatus]:
        return iter(BOARD_STATUSES)

    def __len__(self) -> int:
        return len(BOARD_STATUSES)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoardState):
            return NotImplemented
        return self._columns == other._columns

    def __repr__(self) -> str:
        cols = ", ".join(
            f"{s.value}=[{', '.join(c.card_id for c in self._columns[s])}]"
            for s in BOARD_STATUSES
        )
        return f"BoardState({cols})"

    # ── Queries ──

    def column(self, status: Union[str, OrderStatus]) -> Tuple[Card, ...]:
        return self[status]

    def cards(self) -> List[Card]:
        """All cards, column by column in display order."""
        return [card for s in BOARD_STATUSES for card in self._columns[s]]

    def find(self, card_id: str) -> Optional[Tuple[OrderStatus, int]]:
        """Locate a card: (status, index) or None."""
        for status in BOARD_STATUSES:
            for index, card in enumerate(self._columns[status]):
                if card.card_id == card_id:
                    return status, index
        return None

    def counts(self) -> Dict[OrderStatus, int]:
        """Cards per column (the column header badges)."""
        return {s: len(self._columns[s]) for s in BOARD_STATUSES}

    def replace(self, updates: Mapping[OrderStatus, Iterable[Card]]) -> "BoardState":
        """New state with the given columns swapped in."""
        columns: Dict[OrderStatus, Iterable[Card]] = dict(self._columns)
        columns.update(updates)
        return BoardState(columns)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {s.value: [c.to_dict() for c in self._columns[s]] for s in BOARD_STATUSES}


# ── Order payload ────────────────────────────────────────────────────────────


@dataclass
class OrderItem:
    product_id: str
    name: str
    quantity: int = 1
    unit_price: float = 0.0
    image_url: Optional[str] = None

    @property
    def subtotal(self) -> float:
        return self.quantity * self.unit_price

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "image_url": self.image_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderItem":
        return cls(
            product_id=str(data.get("product_id", "")),
            name=data.get("name", ""),
            quantity=int(data.get("quantity") or 1),
            unit_price=float(data.get("unit_price") or 0.0),
            image_url=data.get("image_url"),
        )


@dataclass
class DeliveryInfo:
    """Delivery service attached to an order."""
    name: str
    estimated_days: str = ""
    price: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "estimated_days": self.estimated_days, "price": self.price}


@dataclass
class Order:
    """Order record as returned by the order feed."""

    # Identifiers
    order_id: str
    order_number: str = ""

    # Customer
    customer_name: str = ""
    customer_phone: str = ""
    customer_email: Optional[str] = None
    customer_address: str = ""

    # Order
    order_date: str = ""
    status: OrderStatus = OrderStatus.PENDING
    total_amount: float = 0.0
    items: List[OrderItem] = field(default_factory=list)
    delivery_service: Optional[DeliveryInfo] = None

    # Payment
    payment_method: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    notes: Optional[str] = None

    @property
    def item_count(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_id": self.order_id,
            "order_number": self.order_number,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "customer_email": self.customer_email,
            "customer_address": self.customer_address,
            "order_date": self.order_date,
            "status": self.status.value,
            "total_amount": self.total_amount,
            "items": [i.to_dict() for i in self.items],
            "delivery_service": self.delivery_service.to_dict() if self.delivery_service else None,
            "payment_method": self.payment_method,
            "payment_status": self.payment_status.value if self.payment_status else None,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        """Deserialize from a feed record. Missing or unknown statuses raise ValueError."""
        delivery = data.get("delivery_service")
        payment_status = None
        if data.get("payment_status"):
            try:
                payment_status = PaymentStatus(data["payment_status"])
            except ValueError:
                payment_status = None

        return cls(
            order_id=str(data["order_id"]),
            order_number=str(data.get("order_number", "")),
            customer_name=data.get("customer_name", ""),
            customer_phone=data.get("customer_phone", ""),
            customer_email=data.get("customer_email"),
            customer_address=data.get("customer_address", ""),
            order_date=data.get("order_date", ""),
            status=OrderStatus.from_str(data.get("status") or ""),
            total_amount=float(data.get("total_amount") or 0.0),
            items=[OrderItem.from_dict(i) for i in data.get("items") or []],
            delivery_service=DeliveryInfo(
                name=delivery.get("name", ""),
                estimated_days=delivery.get("estimated_days", ""),
                price=float(delivery.get("price") or 0.0),
            ) if delivery else None,
            payment_method=data.get("payment_method"),
            payment_status=payment_status,
            notes=data.get("notes"),
        )


def active_orders(orders: Iterable[Order]) -> List[Order]:
    """Drop cancelled orders; they are tracked elsewhere, not on the board."""
    return [o for o in orders if o.status != OrderStatus.CANCELLED]


def card_from_order(order: Order) -> Card:
    """Wrap an order as a board card keyed by its order_id."""
    return Card(card_id=order.order_id, status=order.status, payload=order)
