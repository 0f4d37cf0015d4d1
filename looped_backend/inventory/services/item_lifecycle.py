"""
ITEM LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed sale-status transitions for items.

DESIGN PRINCIPLES:
- No database writes
- No ledger posting
- Single source of truth
"""

from inventory.models import Item
from inventory.services.exceptions import AlreadySoldError, AlreadyUnsoldError

# ============================================================
# STATE DEFINITIONS
# ============================================================

# unsold -> sold -> unsold is cyclic; there is no terminal state
ALLOWED_TRANSITIONS = {
    Item.STATUS_UNSOLD: {
        Item.STATUS_SOLD,
    },
    Item.STATUS_SOLD: {
        Item.STATUS_UNSOLD,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, item: Item, target_status: str):
    if can_transition(from_status=item.sold_status, to_status=target_status):
        return

    if target_status == Item.STATUS_SOLD:
        raise AlreadySoldError(f"Item {item.id} is already sold")

    raise AlreadyUnsoldError(f"Item {item.id} is not sold")
