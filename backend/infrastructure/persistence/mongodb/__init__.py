"""MongoDB repository implementations."""

from .allergy_repository import MongoAllergyRepository
from .base import MongoBaseRepository
from .client import create_mongo_client
from .meal_selection_repository import MongoMealSelectionRepository
from .order_repository import MongoOrderRepository
from .unit_of_work import MongoUnitOfWork

__all__ = [
    "MongoAllergyRepository",
    "MongoBaseRepository",
    "MongoMealSelectionRepository",
    "MongoOrderRepository",
    "MongoUnitOfWork",
    "create_mongo_client",
]
