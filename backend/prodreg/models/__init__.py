from .catalog import Category, Product, User, Location, Purpose
from .registrations import Registration

__all__ = [
    'Category', 'Product', 'User', 'Location', 'Purpose',
    'Registration',
]
