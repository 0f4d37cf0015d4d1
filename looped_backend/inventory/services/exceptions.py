# inventory/services/exceptions.py

"""
INVENTORY DOMAIN ERRORS

Item state-machine violations. They share the LedgerError base so the
operation API and the HTTP layer handle them like every other business
rejection.
"""

from budget.services.exceptions import LedgerError


class ItemLifecycleError(LedgerError):
    code = "INVALID_ITEM_TRANSITION"


class AlreadySoldError(ItemLifecycleError):
    code = "ALREADY_SOLD"


class AlreadyUnsoldError(ItemLifecycleError):
    code = "ALREADY_UNSOLD"
