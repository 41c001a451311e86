"""
Cart Domain Model

A cart is a mapping from item key (product + optional size/color variant)
to a line carrying the quantity and a display snapshot of the product.

The storefront keeps the guest cart in the browser under the ``ts_cart``
key using the JSON layout produced by ``Cart.dumps``; signed-in users also
have a server copy in ``cart_items`` which is reconciled with ``Cart.merge``
(last write wins per key).
"""
import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

STORAGE_KEY = "ts_cart"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def item_key(product_id: str, size: Optional[str] = None, color: Optional[str] = None) -> str:
    """
    Build the cart key for a product/variant

    item_key("p1") -> "p1"
    item_key("p1", "M", "red") -> "p1:M:red"
    """
    if not size and not color:
        return str(product_id)
    return f"{product_id}:{size or ''}:{color or ''}"


class CartLine(BaseModel):
    """
    One entry of the cart

    Serialized with the browser field names (id, qty) so the stored
    ``ts_cart`` payload can be posted back unchanged.
    """
    product_id: str = Field(..., alias="id")
    name: str = ""
    price: Decimal = Field(Decimal("0"), ge=0)
    quantity: int = Field(1, alias="qty", ge=1)
    image: Optional[str] = None
    category: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def key(self) -> str:
        return item_key(self.product_id, self.size, self.color)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json", by_alias=True)
        data['key'] = self.key
        data['price'] = float(self.price)
        data['subtotal'] = float(self.subtotal)
        return data


class Cart:
    """
    In-memory cart: key -> CartLine

    No ordering guarantees beyond insertion order of keys.
    """

    def __init__(self, lines: Optional[Iterable[CartLine]] = None):
        self._lines: Dict[str, CartLine] = {}
        for line in lines or []:
            self.add(line)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, line: CartLine) -> CartLine:
        """Add a line; an existing key gets its quantity increased"""
        existing = self._lines.get(line.key)
        if existing is None:
            stored = line.model_copy()
        else:
            stored = existing.model_copy(update={
                'quantity': existing.quantity + line.quantity,
                'updated_at': max(existing.updated_at, line.updated_at),
            })
        self._lines[stored.key] = stored
        return stored

    def remove(self, key: str) -> Optional[CartLine]:
        """Remove a key; returns the removed line or None if it was absent"""
        return self._lines.pop(key, None)

    def set_quantity(self, key: str, quantity: int, at: Optional[datetime] = None) -> Optional[CartLine]:
        """
        Set the quantity of an existing key

        quantity <= 0 removes the line. Unknown keys are ignored.
        """
        if key not in self._lines:
            return None
        if quantity <= 0:
            self.remove(key)
            return None
        line = self._lines[key].model_copy(update={
            'quantity': quantity,
            'updated_at': at or utcnow(),
        })
        self._lines[key] = line
        return line

    def merge(self, other: "Cart") -> "Cart":
        """
        Reconcile with another cart (last write wins)

        Keys only present on one side are kept. For keys on both sides the
        line with the newer updated_at wins; ties go to ``other``.
        """
        for key, theirs in other._lines.items():
            ours = self._lines.get(key)
            if ours is None or theirs.updated_at >= ours.updated_at:
                self._lines[key] = theirs.model_copy()
        return self

    def clear(self) -> None:
        self._lines.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[CartLine]:
        return self._lines.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._lines

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self._lines.values()), Decimal("0"))

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def to_dict(self) -> dict:
        return {
            "items": [line.to_dict() for line in self._lines.values()],
            "total": float(self.total),
            "item_count": self.item_count,
        }

    # ------------------------------------------------------------------
    # Browser storage format
    # ------------------------------------------------------------------

    def dumps(self) -> str:
        return json.dumps([line.to_dict() for line in self._lines.values()])

    @classmethod
    def loads(cls, raw: Optional[str]) -> "Cart":
        """
        Parse a stored ``ts_cart`` payload

        Unreadable payloads give an empty cart; invalid entries are skipped.
        """
        if not raw:
            return cls()
        try:
            entries = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable {STORAGE_KEY} payload: {e}")
            return cls()
        if not isinstance(entries, list):
            logger.warning(f"Discarding {STORAGE_KEY} payload that is not a list")
            return cls()

        lines = []
        for entry in entries:
            try:
                lines.append(CartLine.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping invalid cart entry {entry!r}: {e.error_count()} error(s)")
        return cls(lines)
