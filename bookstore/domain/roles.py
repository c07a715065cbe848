# bookstore/domain/roles.py
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"

    @classmethod
    def from_claim(cls, value) -> "Role | None":
        """Role from a token claim, None when the claim is missing or unknown."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


# capability sets used by the routers
ANY_ROLE = frozenset({Role.ADMIN, Role.USER})
ADMIN_ONLY = frozenset({Role.ADMIN})


class OrderStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"


# statuses from which cancel_order is allowed
CANCELLABLE = frozenset({OrderStatus.PENDING.value, OrderStatus.APPROVED.value})


def can_cancel(status: str) -> bool:
    return status in CANCELLABLE
