"""
API Routes Package

This module consolidates all API routes for the PayPal dashboard.
"""

from fastapi import APIRouter

from . import auth
from . import credentials
from . import paypal
from . import transactions
from . import users

# Create main router
router = APIRouter()

# Include all route modules
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(credentials.router, prefix="/paypal", tags=["credentials"])
router.include_router(paypal.router, prefix="/paypal", tags=["paypal"])
router.include_router(transactions.router, prefix="/transaction", tags=["transactions"])
router.include_router(users.router, prefix="/user", tags=["users"])

# Export for use in main application
__all__ = ["router"]
