"""
Service layer: collaborators the request handlers call into.
"""

from .product_store import InMemoryProductStore, ProductStore

__all__ = ["InMemoryProductStore", "ProductStore"]
