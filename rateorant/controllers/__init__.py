# rateorant/controllers/__init__.py
from .dashboard import DashboardController
from .detail import RestaurantDetailController
from .form import RestaurantFormController
from .review import ReviewFormController

__all__ = [
    "DashboardController",
    "RestaurantDetailController",
    "RestaurantFormController",
    "ReviewFormController",
]
