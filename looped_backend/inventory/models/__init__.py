# inventory/models/__init__.py

from .batch import Batch as Batch
from .item import Item as Item
from .operational_cost import OperationalCost as OperationalCost
from .soft_delete import SoftDeleteQuerySet as SoftDeleteQuerySet

__all__ = ["Batch", "Item", "OperationalCost", "SoftDeleteQuerySet"]
