"""Appointment domain schemas"""

from enum import IntEnum
from typing import Any, Optional, Union

from pydantic import BaseModel


class AppointmentStatus(IntEnum):
    """
    Canonical status_id values.

    Older rows were completed with status 3; those are read as COMPLETED and
    should be migrated to 2 (see DESIGN.md).
    """

    UPCOMING = 1
    COMPLETED = 2
    LEGACY_COMPLETED = 3
    REJECTED = 4
    CANCELLED = 5

    @classmethod
    def from_id(cls, status_id: Any) -> Optional["AppointmentStatus"]:
        try:
            status = cls(int(status_id))
        except (TypeError, ValueError):
            return None
        return cls.COMPLETED if status == cls.LEGACY_COMPLETED else status


HISTORY_STATUSES = (AppointmentStatus.COMPLETED, AppointmentStatus.LEGACY_COMPLETED)

# reply_id values a rejection may carry; 3 also releases the booked slot
REJECTION_REPLIES = (1, 2, 3)
RELEASE_SLOT_REPLY = 3


class RejectRequest(BaseModel):
    reply_id: Optional[Union[int, str]] = None


class AppointmentSummary(BaseModel):
    appointment_id: int
    service_name: Optional[str] = None
    status: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    car_size: Optional[str] = None
    price: Optional[float] = None
    vehicleBrand: Optional[str] = None
    vehicleModel: Optional[str] = None
    vehicleColor: Optional[str] = None
    payment_method: Optional[str] = None
    paymentProof: Optional[str] = None
    created_at: Optional[str] = None
