"""
Cart Router
"""

from fastapi import APIRouter, Depends, status

from storefront.dependencies import get_cart_service
from storefront.models.cart import AddToCartRequest, CartResponse
from storefront.services.cart_service import CartService

router = APIRouter()


@router.get("/{session_id}", response_model=CartResponse)
async def get_cart(session_id: str, service: CartService = Depends(get_cart_service)):
    return CartResponse.from_cart(await service.get_cart(session_id))


@router.post("/{session_id}/items", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
async def add_item(
    session_id: str,
    request: AddToCartRequest,
    service: CartService = Depends(get_cart_service),
):
    """Add a product as configured in the store; equal lines merge"""
    return CartResponse.from_cart(await service.add_item(session_id, request))


@router.delete("/{session_id}/items/{cart_id}", response_model=CartResponse)
async def remove_item(session_id: str, cart_id: str, service: CartService = Depends(get_cart_service)):
    return CartResponse.from_cart(await service.remove_item(session_id, cart_id))


@router.delete("/{session_id}", response_model=CartResponse)
async def clear_cart(session_id: str, service: CartService = Depends(get_cart_service)):
    return CartResponse.from_cart(await service.clear(session_id))
