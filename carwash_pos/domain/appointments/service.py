"""Appointment service - status transitions and completion with stock deduction"""

import logging
from typing import Any

from ...exceptions import (
    AppointmentNotFound,
    InvalidInput,
    InvalidSize,
    InvalidTransition,
    NotFound,
    POSError,
)
from ...supabase import SupabaseClient
from ..cart.schemas import CartLine, ItemType
from ..catalog.schemas import SizeTier
from ..checkout.stock import StockDeductor, StockValidator
from .repository import AppointmentRepository
from .schemas import (
    HISTORY_STATUSES,
    RELEASE_SLOT_REPLY,
    REJECTION_REPLIES,
    AppointmentStatus,
    AppointmentSummary,
)

logger = logging.getLogger(__name__)


def summarize(row: dict[str, Any]) -> AppointmentSummary:
    """Flatten the joined service/status/working-hour columns"""
    service = row.get("services") or {}
    status = row.get("status") or {}
    working_hours = row.get("working_hours") or {}
    return AppointmentSummary(
        appointment_id=row["appointment_id"],
        service_name=service.get("service_name"),
        status=status.get("status_name"),
        date=row.get("date"),
        time=working_hours.get("time"),
        car_size=row.get("car_size"),
        price=row.get("price"),
        vehicleBrand=row.get("vehicleBrand"),
        vehicleModel=row.get("vehicleModel"),
        vehicleColor=row.get("vehicleColor"),
        payment_method=row.get("paymentMethod"),
        paymentProof=row.get("paymentProof"),
        created_at=row.get("created_at"),
    )


class AppointmentService:
    """Service layer for the appointment lifecycle"""

    def __init__(self, db: SupabaseClient, inventory_db: SupabaseClient):
        self.db = db
        self.inventory_db = inventory_db
        self.repo = AppointmentRepository()

    async def list_upcoming(self) -> list[AppointmentSummary]:
        rows = await self.repo.list_by_status(self.db, [AppointmentStatus.UPCOMING])
        return [summarize(r) for r in rows]

    async def list_history(self) -> list[AppointmentSummary]:
        rows = await self.repo.list_by_status(self.db, HISTORY_STATUSES)
        return [summarize(r) for r in rows]

    async def _get(self, appointment_id: int) -> dict[str, Any]:
        appointment = await self.repo.get_appointment(self.db, appointment_id)
        if not appointment:
            raise AppointmentNotFound()
        return appointment

    async def _transition(
        self,
        appointment_id: int,
        values: dict[str, Any],
        expected: AppointmentStatus = AppointmentStatus.UPCOMING,
    ) -> list[dict[str, Any]]:
        updated = await self.repo.update_status(self.db, appointment_id, expected, values)
        if not updated:
            logger.warning(
                f"⚠️ Appointment {appointment_id} left '{expected.name.lower()}' during update"
            )
            raise InvalidTransition(f"Appointment is no longer {expected.name.lower()}")
        return updated

    async def _release(self, appointment_id: int) -> None:
        """Return a claimed appointment to upcoming after a failed deduction"""
        try:
            await self._transition(
                appointment_id,
                {"status_id": int(AppointmentStatus.UPCOMING)},
                expected=AppointmentStatus.COMPLETED,
            )
        except POSError as e:
            logger.error(
                f"❌ Appointment {appointment_id} is marked completed but its stock was not "
                f"deducted; release failed: {e.message}"
            )

    async def complete(self, appointment_id: int) -> dict[str, Any]:
        """
        Move an upcoming appointment to completed.

        The products linked to the appointment's service and car size are
        validated, then the appointment is claimed with a conditional update
        (upcoming -> completed) and only the caller that wins the claim deducts
        stock. A failed deduction puts the appointment back to upcoming.
        """
        logger.info(f"🟢 Completing appointment {appointment_id}")
        appointment = await self._get(appointment_id)

        if AppointmentStatus.from_id(appointment.get("status_id")) != AppointmentStatus.UPCOMING:
            raise InvalidTransition("Only upcoming appointments can be completed")

        time = await self.repo.get_working_hour(self.db, appointment.get("time_id"))
        if time is None:
            raise NotFound("Working hour not found")

        size = SizeTier.parse(appointment.get("car_size"))
        if size is None:
            raise InvalidSize("Invalid car size")

        service_name = (appointment.get("services") or {}).get("service_name")
        line = CartLine(
            id=appointment["service_id"],
            type=ItemType.SERVICE,
            name=service_name or f"service {appointment['service_id']}",
            price=0.0,
            quantity=1,
            size=size,
        )
        plan = await StockValidator(self.inventory_db, require_service_price=False).validate([line])

        await self._transition(appointment_id, {"status_id": int(AppointmentStatus.COMPLETED)})
        try:
            await StockDeductor(self.inventory_db).apply(plan)
        except Exception:
            logger.warning(f"⚠️ Stock deduction failed, releasing appointment {appointment_id}")
            await self._release(appointment_id)
            raise

        await self.repo.insert_history(
            self.db,
            {
                "appointment_id": appointment["appointment_id"],
                "date": appointment.get("date"),
                "time": time,
            },
        )

        logger.info(f"🎉 Appointment {appointment_id} completed and stock deducted")
        return {"message": "Appointment completed and stock deducted successfully"}

    async def cancel(self, appointment_id: int) -> dict[str, Any]:
        appointment = await self._get(appointment_id)
        status = AppointmentStatus.from_id(appointment.get("status_id"))
        if status == AppointmentStatus.CANCELLED:
            raise InvalidTransition("Appointment already cancelled")
        if status != AppointmentStatus.UPCOMING:
            raise InvalidTransition("Only upcoming appointments can be cancelled")

        cancelled = await self._transition(
            appointment_id,
            {"status_id": int(AppointmentStatus.CANCELLED), "date": None, "time_id": None},
        )
        logger.info(f"🚫 Appointment {appointment_id} cancelled")
        return {"message": "Appointment cancelled successfully", "cancelled": cancelled}

    async def reject(self, appointment_id: int, reply_id: Any) -> dict[str, Any]:
        try:
            reply = int(reply_id)
        except (TypeError, ValueError):
            reply = None
        if reply not in REJECTION_REPLIES:
            raise InvalidInput("Invalid reply_id. Allowed values are 1, 2, or 3.")

        appointment = await self._get(appointment_id)
        status = AppointmentStatus.from_id(appointment.get("status_id"))
        if status == AppointmentStatus.REJECTED:
            raise InvalidTransition("Appointment already rejected")
        if status != AppointmentStatus.UPCOMING:
            raise InvalidTransition("Only upcoming appointments can be rejected")

        values: dict[str, Any] = {"status_id": int(AppointmentStatus.REJECTED), "reply_id": reply}
        if reply == RELEASE_SLOT_REPLY:
            values["date"] = None
            values["time_id"] = None

        rejected = await self._transition(appointment_id, values)
        logger.info(f"⛔ Appointment {appointment_id} rejected (reply {reply})")
        return {"message": "Appointment rejected successfully", "rejected": rejected}
