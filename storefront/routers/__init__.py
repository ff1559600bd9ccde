from .catalog_router import router as catalog_router
from .cart_router import router as cart_router
from .checkout_router import router as checkout_router
from .media_router import router as media_router

__all__ = ["catalog_router", "cart_router", "checkout_router", "media_router"]
