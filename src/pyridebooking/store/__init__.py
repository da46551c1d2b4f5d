"""Remote reservation stores."""

from .base import BaseReservationStore
from .sheets import Store

__all__ = ["BaseReservationStore", "Store"]
