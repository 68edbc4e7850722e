"""Checkout domain - stock validation, deduction, payment proof and order placement"""

from .router import router

__all__ = ["router"]
