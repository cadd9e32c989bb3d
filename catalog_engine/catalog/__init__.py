"""
Catalog Module
Product store collaborators used by the query engine.
"""

from .base import CatalogLookup, ProductCatalog
from .memory import InMemoryCatalog
from .sql import SqlProductCatalog

__all__ = [
    "CatalogLookup",
    "ProductCatalog",
    "InMemoryCatalog",
    "SqlProductCatalog",
]
