from typing import Any

from fastapi import APIRouter, Body, Depends, Path, Query, status
from sqlalchemy.orm import Session

from booking.core.errors import FieldValidationError
from booking.database import get_db
from booking.schemas.appointment import (
    MAX_ID,
    MIN_ID,
    AppointmentResponse,
    CreateAppointmentRequest,
    UpdateAppointmentRequest,
    parse_day,
    validate_create_appointment,
    validate_update_appointment,
)
from booking.services.scheduling import AppointmentSchedulingService
from booking.services.sql_store import SqlAppointmentStore, SqlPartyDirectory

router = APIRouter(tags=['appointments'])


def get_scheduling_service(db: Session = Depends(get_db)) -> AppointmentSchedulingService:
    return AppointmentSchedulingService(SqlPartyDirectory(db), SqlAppointmentStore(db))


@router.get('', response_model=list[AppointmentResponse])
@router.get('/byDay', response_model=list[AppointmentResponse])
def find_all_by_day(
    day: str = Query(...),
    service: AppointmentSchedulingService = Depends(get_scheduling_service),
):
    appointments = service.find_all_by_day(parse_day(day))
    return [AppointmentResponse.from_record(appointment) for appointment in appointments]


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    payload: Any = Body(default=None),
    service: AppointmentSchedulingService = Depends(get_scheduling_service),
):
    errors = validate_create_appointment(payload)
    if errors:
        raise FieldValidationError(errors)

    data = CreateAppointmentRequest.model_validate(payload)
    appointment = service.create(data.model_dump())
    return AppointmentResponse.from_record(appointment)


@router.patch('/{appointment_id}', response_model=AppointmentResponse)
def update_appointment(
    appointment_id: int = Path(ge=MIN_ID, le=MAX_ID),
    payload: Any = Body(default=None),
    service: AppointmentSchedulingService = Depends(get_scheduling_service),
):
    errors = validate_update_appointment(payload)
    if errors:
        raise FieldValidationError(errors)

    data = UpdateAppointmentRequest.model_validate(payload)
    appointment = service.update(appointment_id, data.changes())
    return AppointmentResponse.from_record(appointment)


@router.delete('/{appointment_id}', response_model=AppointmentResponse)
def remove_appointment(
    appointment_id: int = Path(ge=MIN_ID, le=MAX_ID),
    service: AppointmentSchedulingService = Depends(get_scheduling_service),
):
    appointment = service.remove(appointment_id)
    return AppointmentResponse.from_record(appointment)
