"""Appointment domain - booking lifecycle and service stock consumption"""

from .router import router

__all__ = ["router"]
