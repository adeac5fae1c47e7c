"""
Session endpoints.

Lets the storefront frontend ask who the current visitor is.
"""

from fastapi import APIRouter, Depends

from shared.models import Identity
from ..middleware.auth import get_identity

router = APIRouter()


@router.get("", response_model=Identity)
async def get_session(
    identity: Identity = Depends(get_identity),
) -> Identity:
    """
    Get the identity behind the current request.

    Returns an anonymous identity instead of 401 when there is no session.
    """
    return identity
