"""
Versioned storefront API
"""
from .router import api_router, create_router

__all__ = ["api_router", "create_router"]
