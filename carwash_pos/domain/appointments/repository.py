"""Appointment repository - PostgREST operations on the appointments project"""

from typing import Any, Iterable, Optional

from ...supabase import SupabaseClient, eq, in_

APPOINTMENT_COLUMNS = (
    "appointment_id,service_id,car_size,status_id,date,time_id,reply_id,"
    "services:service_id(service_name)"
)
LISTING_COLUMNS = (
    "appointment_id,date,car_size,price,paymentMethod,created_at,paymentProof,"
    "vehicleBrand,vehicleModel,vehicleColor,"
    "services:service_id(service_name),status:status_id(status_name),working_hours:time_id(time)"
)


class AppointmentRepository:
    """Repository for appointments, working hours and appointment history"""

    @staticmethod
    async def get_appointment(db: SupabaseClient, appointment_id: int) -> Optional[dict[str, Any]]:
        rows = await db.select(
            "appointments",
            columns=APPOINTMENT_COLUMNS,
            filters={"appointment_id": eq(appointment_id)},
        )
        return rows[0] if rows else None

    @staticmethod
    async def list_by_status(db: SupabaseClient, statuses: Iterable[int]) -> list[dict[str, Any]]:
        return await db.select(
            "appointments",
            columns=LISTING_COLUMNS,
            filters={"status_id": in_(int(s) for s in statuses)},
            order="date.asc",
        )

    @staticmethod
    async def get_working_hour(db: SupabaseClient, time_id: Any) -> Optional[str]:
        if time_id is None:
            return None
        rows = await db.select("working_hours", columns="time", filters={"time_id": eq(time_id)})
        return rows[0]["time"] if rows else None

    @staticmethod
    async def update_status(
        db: SupabaseClient,
        appointment_id: int,
        expected_status: int,
        values: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """Update only while the appointment still has expected_status"""
        return await db.update(
            "appointments",
            values,
            filters={
                "appointment_id": eq(appointment_id),
                "status_id": eq(int(expected_status)),
            },
        )

    @staticmethod
    async def insert_history(db: SupabaseClient, row: dict[str, Any]) -> dict[str, Any]:
        rows = await db.insert("history_appointments", row)
        return rows[0] if rows else row
