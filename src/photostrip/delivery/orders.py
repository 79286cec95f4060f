"""
Module: photostrip.delivery.orders

Purpose:
    Local order history. A submitted strip gets a short numeric order id
    the customer reads out at the counter; the merchant later lists,
    exports or clears orders.

    Layout on disk:
        <root>/orders.json        index, newest first
        <root>/order-<id>.jpg     one image per order

Key Classes:
    - Order: One submitted strip
    - OrderStore: Submit / list / export / clear

Dependencies:
    - portalocker (via .locking): Index locking

Used By:
    - photostrip.cli: render --order-dir, orders subcommand
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from photostrip.errors import OrderNotFoundError, PhotoStripError
from photostrip.output import RenderedStrip

from .files import write_bytes_atomic
from .locking import locked_read_json, locked_update_json

logger = logging.getLogger(__name__)

INDEX_FILENAME = "orders.json"
INDEX_VERSION = 1
ORDER_ID_MIN = 1000
ORDER_ID_MAX = 9999


def _empty_index() -> Dict[str, Any]:
    return {"version": INDEX_VERSION, "orders": []}


@dataclass(frozen=True)
class Order:
    """
    A submitted strip.

    Attributes:
        id: Four-digit order number
        timestamp_ms: Submission time (ms since epoch)
        filename: Image file name inside the store root
        width: Strip width
        height: Strip height
    """

    id: str
    timestamp_ms: int
    filename: str
    width: int
    height: int

    @property
    def created_at(self) -> datetime:
        """Local submission time."""
        return datetime.fromtimestamp(self.timestamp_ms / 1000)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp_ms,
            "filename": self.filename,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        return cls(
            id=str(data["id"]),
            timestamp_ms=int(data["timestamp"]),
            filename=str(data["filename"]),
            width=int(data.get("width", 0)),
            height=int(data.get("height", 0)),
        )


class OrderStore:
    """
    Order history in a directory.

    Example:
        >>> store = OrderStore(Path("orders"))
        >>> order = store.submit(strip)
        >>> store.get(order.id).filename
        'order-4821.jpg'
    """

    def __init__(self, root: Path, *, rng: Optional[random.Random] = None) -> None:
        """
        Initialize store.

        Args:
            root: Directory holding the index and images (created on submit)
            rng: Random source for order ids
        """
        self.root = Path(root)
        self._rng = rng or random.Random()

    @property
    def index_path(self) -> Path:
        return self.root / INDEX_FILENAME

    def submit(self, strip: RenderedStrip) -> Order:
        """
        Store a strip as a new order.

        Raises:
            PhotoStripError: If every order id is taken
        """

        def add(index: Dict[str, Any]) -> Order:
            orders = index.setdefault("orders", [])
            taken = {str(o.get("id")) for o in orders}
            if len(taken) >= ORDER_ID_MAX - ORDER_ID_MIN + 1:
                raise PhotoStripError("Order history is full; clear it first")

            order_id = str(self._rng.randint(ORDER_ID_MIN, ORDER_ID_MAX))
            while order_id in taken:
                order_id = str(self._rng.randint(ORDER_ID_MIN, ORDER_ID_MAX))

            order = Order(
                id=order_id,
                timestamp_ms=int(time.time() * 1000),
                filename=f"order-{order_id}.jpg",
                width=strip.width,
                height=strip.height,
            )
            write_bytes_atomic(strip.data, self.root / order.filename)
            orders.insert(0, order.to_dict())
            return order

        order = locked_update_json(self.index_path, add, default=_empty_index)
        logger.info(f"Submitted order #{order.id}")
        return order

    def list_orders(self) -> List[Order]:
        """All orders, newest first."""
        index = locked_read_json(self.index_path, default=_empty_index)
        orders: List[Order] = []
        for record in index.get("orders", []):
            try:
                orders.append(Order.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed order record {record!r}: {e}")
        return orders

    def get(self, order_id: str) -> Order:
        for order in self.list_orders():
            if order.id == str(order_id):
                return order
        raise OrderNotFoundError(f"No order #{order_id}")

    def read_image(self, order_id: str) -> bytes:
        """Encoded JPEG bytes of an order."""
        order = self.get(order_id)
        path = self.root / order.filename
        if not path.exists():
            raise OrderNotFoundError(f"Image for order #{order_id} is missing: {path}")
        return path.read_bytes()

    def export(self, order_id: str, dest: Path) -> Path:
        """
        Copy an order's image out of the store.

        Args:
            order_id: Order number
            dest: Target file, or an existing directory

        Returns:
            Path written
        """
        data = self.read_image(order_id)
        dest = Path(dest)
        if dest.is_dir():
            dest = dest / f"order-{order_id}.jpg"
        write_bytes_atomic(data, dest)
        logger.info(f"Exported order #{order_id} to {dest}")
        return dest

    def clear(self) -> int:
        """
        Delete every order and its image.

        Returns:
            Number of orders removed
        """
        if not self.index_path.exists():
            return 0

        def wipe(index: Dict[str, Any]) -> int:
            orders = index.get("orders", [])
            for record in orders:
                filename = record.get("filename") if isinstance(record, dict) else None
                if filename:
                    (self.root / filename).unlink(missing_ok=True)
            index.clear()
            index.update(_empty_index())
            return len(orders)

        removed = locked_update_json(self.index_path, wipe, default=_empty_index)
        logger.info(f"Cleared {removed} order(s)")
        return removed
