"""
Cart store.

The cart owns an ordered list of (book snapshot, quantity) pairs plus two
cached totals. Totals are recomputed from the items on every mutation and are
never set on their own. Every mutation is followed by a best-effort write to
the attached persistence.

Rehydration runs in two phases: ``CartPersistence.load`` deserializes or
yields nothing, then ``cleanup`` drops entries that cannot be resolved to a
book.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Iterable, Optional

if TYPE_CHECKING:
    from .storage import CartPersistence

logger = logging.getLogger(__name__)


def resolve_book_id(book: Any) -> Optional[str]:
    """Book identity: the catalog ``_id``, falling back to ``id``"""
    if not isinstance(book, dict):
        return None
    book_id = book.get("_id") or book.get("id")
    if isinstance(book_id, str) and book_id.strip():
        return book_id
    return None


def _is_price(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0


@dataclass
class CartItem:
    """A book snapshot and how many copies are wanted"""
    book: Any
    quantity: int

    @property
    def book_id(self) -> Optional[str]:
        return resolve_book_id(self.book)

    @property
    def unit_price(self) -> float:
        return float(self.book["price"])

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    def is_valid(self) -> bool:
        """Resolvable identity, positive integer quantity and a usable price"""
        return (
            self.book_id is not None
            and isinstance(self.quantity, int)
            and not isinstance(self.quantity, bool)
            and self.quantity >= 1
            and _is_price(self.book.get("price"))
        )

    def to_dict(self) -> dict:
        return {"book": self.book, "quantity": self.quantity}


@dataclass
class CartState:
    """Cart contents with cached totals"""
    items: list[CartItem] = field(default_factory=list)
    total_items: int = 0
    total_price: float = 0.0


def calculate_totals(items: Iterable[CartItem]) -> tuple[int, float]:
    """Sum quantities and line totals"""
    items = list(items)
    total_items = sum(item.quantity for item in items)
    total_price = sum(item.line_total for item in items)
    return total_items, total_price


class CartStore:
    """
    Session-owned shopping cart.

    Usage:
        cart = CartStore(CartPersistence(JSONFileStorage(path)))
        cart.rehydrate()
        cart.add_item(book, 2)
    """

    def __init__(self, persistence: Optional["CartPersistence"] = None):
        self.persistence = persistence
        self.state = CartState()

    # ==================== Read access ====================

    @property
    def items(self) -> list[CartItem]:
        return list(self.state.items)

    @property
    def total_items(self) -> int:
        return self.state.total_items

    @property
    def total_price(self) -> float:
        return self.state.total_price

    def get_item(self, book_id: str) -> Optional[CartItem]:
        """Cart entry for a book, if present"""
        return next((item for item in self.state.items if item.book_id == book_id), None)

    def contains(self, book_id: str) -> bool:
        """Check if a book is in the cart"""
        return self.get_item(book_id) is not None

    def is_empty(self) -> bool:
        return not self.state.items

    def summary(self) -> dict:
        """Counts and total for badges and headers"""
        return {
            "item_count": self.state.total_items,
            "total_price": self.state.total_price,
            "unique_items": len(self.state.items),
        }

    def formatted_total(self, currency: str = "₹") -> str:
        return f"{currency}{self.state.total_price:.2f}"

    # ==================== Mutations ====================

    def _commit(self, items: list[CartItem]) -> None:
        """Replace the contents, recompute totals and persist"""
        total_items, total_price = calculate_totals(items)
        self.state = CartState(items=items, total_items=total_items, total_price=total_price)
        self._persist()

    def _persist(self) -> None:
        if self.persistence is not None:
            self.persistence.save(self.state.items)

    def add_item(self, book: dict, quantity: int = 1) -> None:
        """Add copies of a book, merging with an existing entry"""
        book_id = resolve_book_id(book)
        if not book_id:
            logger.error(f"Cannot add book to cart: no valid ID ({book!r})")
            return
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            logger.error(f"Cannot add book {book_id} to cart: invalid quantity {quantity!r}")
            return
        if not _is_price(book.get("price")):
            logger.error(f"Cannot add book {book_id} to cart: invalid price {book.get('price')!r}")
            return

        existing = self.get_item(book_id)
        if existing:
            items = [
                replace(item, quantity=item.quantity + quantity) if item.book_id == book_id else item
                for item in self.state.items
            ]
            logger.info(f"Cart update: {book_id} quantity {existing.quantity} -> {existing.quantity + quantity}")
        else:
            items = [*self.state.items, CartItem(book=book, quantity=quantity)]
            logger.info(f"Cart add: {book_id} x{quantity} ({book.get('title', 'untitled')})")

        self._commit(items)

    def add_items(self, entries: Iterable[tuple[dict, int]]) -> None:
        """Add several (book, quantity) pairs in order"""
        for book, quantity in entries:
            self.add_item(book, quantity)

    def remove_item(self, book_id: str) -> None:
        """Remove a book's entry"""
        removed = self.get_item(book_id)
        if not removed:
            logger.warning(f"Attempted to remove item not in cart: {book_id}")
            return

        self._commit([item for item in self.state.items if item.book_id != book_id])
        logger.info(f"Cart remove: {book_id} (quantity {removed.quantity})")

    def update_quantity(self, book_id: str, quantity: int) -> None:
        """Set an absolute quantity; zero or less removes the entry"""
        if not isinstance(quantity, int) or isinstance(quantity, bool):
            logger.error(f"Cannot update {book_id} in cart: invalid quantity {quantity!r}")
            return

        if quantity <= 0:
            self.remove_item(book_id)
            return

        if not self.contains(book_id):
            logger.warning(f"Attempted to update item not in cart: {book_id}")
            return

        self._commit([
            replace(item, quantity=quantity) if item.book_id == book_id else item
            for item in self.state.items
        ])
        logger.info(f"Cart update: {book_id} quantity -> {quantity}")

    def clear(self) -> None:
        """Empty the cart"""
        removed, total = len(self.state.items), self.state.total_price
        self._commit([])
        logger.info(f"Cart cleared: {removed} items, {total:.2f} total")

    # ==================== Rehydration ====================

    def cleanup(self) -> int:
        """
        Drop entries that no longer describe a purchasable book and fold
        repeated entries for the same book into the first one.

        Returns:
            Number of entries removed. A second run always returns 0.
        """
        items = self.state.items
        merged: dict[str, CartItem] = {}
        for item in items:
            if not item.is_valid():
                continue
            first = merged.get(item.book_id)
            merged[item.book_id] = (
                replace(first, quantity=first.quantity + item.quantity) if first else item
            )
        valid = list(merged.values())
        removed = len(items) - len(valid)
        if removed:
            self._commit(valid)
            logger.info(
                f"Cleaned up corrupted cart items: original={len(items)} "
                f"valid={len(valid)} removed={removed}"
            )
        return removed

    def rehydrate(self) -> None:
        """Restore the persisted cart, then repair it"""
        loaded = self.persistence.load() if self.persistence is not None else []
        self.state = CartState(items=loaded)
        if not self.cleanup():
            total_items, total_price = calculate_totals(loaded)
            self.state = CartState(items=loaded, total_items=total_items, total_price=total_price)
        logger.debug(f"Cart rehydrated with {len(self.state.items)} items")
