"""
Checkout Router
"""

from fastapi import APIRouter, Depends

from storefront.dependencies import get_checkout_service
from storefront.models.order import CheckoutRequest, CheckoutResult
from storefront.services.checkout_service import CheckoutService

router = APIRouter()


@router.post("/{session_id}", response_model=CheckoutResult)
async def checkout(
    session_id: str,
    request: CheckoutRequest,
    service: CheckoutService = Depends(get_checkout_service),
):
    """
    Submit the session's cart as an order.

    A 502 response means the order was not generated and can be retried
    with the same cart.
    """
    return await service.submit(session_id, request.phone)
