from .order_repository import OrderRepository
from .ticket_repository import TicketRepository

__all__ = [
    "OrderRepository",
    "TicketRepository",
]
