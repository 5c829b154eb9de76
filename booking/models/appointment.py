"""Appointment model definitions."""

import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, String

from booking.database import Base


class AppointmentKind(str, enum.Enum):
    PHYSICAL = "PHYSICAL"
    VIRTUAL = "VIRTUAL"


class Appointment(Base):
    """A time-boxed meeting between one vendor and one buyer."""
    __tablename__ = "appointments"
    __table_args__ = (
        Index("idx_appointments_start", "start_time"),
        Index("idx_appointments_host_start", "host_id", "start_time"),
        Index("idx_appointments_buyer_start", "buyer_id", "start_time"),
    )

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    kind = Column("type", Enum(AppointmentKind, name="appointment_type", native_enum=False), nullable=False)
    location = Column(String, nullable=True)
    link = Column(String, nullable=True)
    host_id = Column(Integer, ForeignKey("vendors.id"), nullable=False)
    buyer_id = Column(Integer, ForeignKey("buyers.id"), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
