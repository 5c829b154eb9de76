"""Vendor model definitions."""

from sqlalchemy import Column, Integer, String

from booking.database import Base


class Vendor(Base):
    """The host side of an appointment."""
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
