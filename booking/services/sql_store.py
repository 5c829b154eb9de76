from datetime import datetime
from typing import Any, Mapping, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from booking.models.appointment import Appointment
from booking.models.buyer import Buyer
from booking.models.vendor import Vendor
from booking.services.ports import AppointmentRecord, AppointmentStore, PartyDirectory

APPOINTMENT_FIELDS = ('title', 'kind', 'location', 'link', 'host_id', 'buyer_id', 'start_time', 'end_time')


def to_record(appointment: Appointment) -> AppointmentRecord:
    return AppointmentRecord(
        id=appointment.id,
        title=appointment.title,
        kind=appointment.kind,
        location=appointment.location,
        link=appointment.link,
        host_id=appointment.host_id,
        buyer_id=appointment.buyer_id,
        start_time=appointment.start_time,
        end_time=appointment.end_time,
    )


class SqlPartyDirectory(PartyDirectory):
    def __init__(self, db: Session):
        self.db = db

    def vendor_exists(self, vendor_id: int, lock: bool = False) -> bool:
        query = self.db.query(Vendor.id).filter(Vendor.id == vendor_id)
        if lock:
            query = query.with_for_update()
        return query.first() is not None

    def buyer_exists(self, buyer_id: int, lock: bool = False) -> bool:
        query = self.db.query(Buyer.id).filter(Buyer.id == buyer_id)
        if lock:
            query = query.with_for_update()
        return query.first() is not None


class SqlAppointmentStore(AppointmentStore):
    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, appointment_id: int) -> Optional[AppointmentRecord]:
        appointment = self.db.get(Appointment, appointment_id)
        return to_record(appointment) if appointment else None

    def find_for_parties_between(
        self,
        host_id: int,
        buyer_id: int,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[int] = None,
    ) -> list[AppointmentRecord]:
        query = self.db.query(Appointment).filter(
            or_(Appointment.host_id == host_id, Appointment.buyer_id == buyer_id),
            Appointment.start_time < end_time,
            Appointment.end_time > start_time,
        )
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)

        return [to_record(appointment) for appointment in query.order_by(Appointment.start_time.asc()).all()]

    def find_starting_between(self, start_time: datetime, end_time: datetime) -> list[AppointmentRecord]:
        appointments = self.db.query(Appointment).filter(
            Appointment.start_time >= start_time,
            Appointment.start_time <= end_time,
        ).order_by(Appointment.start_time.asc(), Appointment.id.asc()).all()

        return [to_record(appointment) for appointment in appointments]

    def create(self, fields: Mapping[str, Any]) -> AppointmentRecord:
        appointment = Appointment(**{name: fields.get(name) for name in APPOINTMENT_FIELDS})
        try:
            self.db.add(appointment)
            self.db.commit()
            self.db.refresh(appointment)
        except SQLAlchemyError:
            self.db.rollback()
            raise

        return to_record(appointment)

    def update(self, appointment_id: int, changes: Mapping[str, Any]) -> AppointmentRecord:
        appointment = self.db.get(Appointment, appointment_id)
        try:
            for name, value in changes.items():
                if name in APPOINTMENT_FIELDS:
                    setattr(appointment, name, value)
            self.db.commit()
            self.db.refresh(appointment)
        except SQLAlchemyError:
            self.db.rollback()
            raise

        return to_record(appointment)

    def delete(self, appointment_id: int) -> None:
        appointment = self.db.get(Appointment, appointment_id)
        try:
            self.db.delete(appointment)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
