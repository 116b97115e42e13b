"""Project-wide constant values."""
from __future__ import annotations

SELECTABLE_ROLES = frozenset({"user", "doctor", "clinic_owner"})

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled", "rejected")

# Chart colours for the admin order status breakdown.
ORDER_STATUS_COLORS = {
    "pending": "hsl(45, 93%, 47%)",
    "processing": "hsl(217, 91%, 60%)",
    "shipped": "hsl(263, 70%, 50%)",
    "delivered": "hsl(142, 71%, 45%)",
    "cancelled": "hsl(0, 84%, 60%)",
    "rejected": "hsl(0, 72%, 51%)",
}
DEFAULT_STATUS_COLOR = "hsl(var(--muted))"

__all__ = [
    "SELECTABLE_ROLES",
    "ORDER_STATUSES",
    "ORDER_STATUS_COLORS",
    "DEFAULT_STATUS_COLOR",
]
