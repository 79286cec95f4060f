"""
Module: photostrip.delivery

Purpose:
    Where finished strips go: a file on disk or the local order history.

Key Functions:
    - save_strip(): Atomic JPEG write
    - default_filename(): Timestamped download name

Key Classes:
    - OrderStore: Order history
    - Order: One submitted strip
"""

from .files import save_strip, default_filename, write_bytes_atomic
from .orders import Order, OrderStore

__all__ = [
    "save_strip",
    "default_filename",
    "write_bytes_atomic",
    "Order",
    "OrderStore",
]
