"""Appointment router - listings and status transitions"""

from fastapi import APIRouter, Depends

from ...database import get_appointments_db, get_inventory_db
from ...supabase import SupabaseClient
from .schemas import RejectRequest
from .service import AppointmentService

router = APIRouter(tags=["Appointments"])


def get_appointment_service(
    db: SupabaseClient = Depends(get_appointments_db),
    inventory_db: SupabaseClient = Depends(get_inventory_db),
) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db, inventory_db)


@router.get("/getAllUpcomingAppointments")
async def get_upcoming_appointments(
    service: AppointmentService = Depends(get_appointment_service),
):
    appointments = await service.list_upcoming()
    return {"upcoming_appointments": [a.model_dump() for a in appointments]}


@router.get("/getAllHistoryAppointments")
async def get_history_appointments(
    service: AppointmentService = Depends(get_appointment_service),
):
    appointments = await service.list_history()
    return {"history_appointments": [a.model_dump() for a in appointments]}


@router.put("/updateAppointmentStatus/{appointment_id}")
async def complete_appointment(
    appointment_id: int, service: AppointmentService = Depends(get_appointment_service)
):
    """Complete an upcoming appointment and deduct the products it consumes"""
    return await service.complete(appointment_id)


@router.put("/approveAppointment/{appointment_id}")
async def approve_appointment(
    appointment_id: int, service: AppointmentService = Depends(get_appointment_service)
):
    """Same transition as /updateAppointmentStatus"""
    return await service.complete(appointment_id)


@router.put("/cancelAppointment/{appointment_id}")
async def cancel_appointment(
    appointment_id: int, service: AppointmentService = Depends(get_appointment_service)
):
    return await service.cancel(appointment_id)


@router.put("/rejectAppointment/{appointment_id}")
async def reject_appointment(
    appointment_id: int,
    data: RejectRequest,
    service: AppointmentService = Depends(get_appointment_service),
):
    return await service.reject(appointment_id, data.reply_id)
