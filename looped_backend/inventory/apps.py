# inventory/apps.py

"""
INVENTORY APP CONFIG

Resale inventory module:
- Batches (purchased lots), Items, Operational costs
- Coordinates every money-affecting inventory event through the budget ledger
"""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "inventory"
    verbose_name = "Inventory"
